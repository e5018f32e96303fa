"""Isolated realms for plugin implementations.

Each plugin gets a PluginRealm: the universe its implementation names are
resolved against. A realm imports its plugin's code from the plugin's own
import roots, and delegates a fixed whitelist of shared contract names to its
parent realm so both sides see the same contract objects.

The realm that name lookups currently resolve against is a single
process-wide slot. It is only ever changed through realm_scope(), which
restores the previous realm on every exit path.
"""

import importlib
import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, Optional

from report_exec.errors import ImplementationNotFoundError

logger = logging.getLogger(__name__)


def split_name(name: str) -> tuple[str, str]:
    """Split 'module:attr' or 'module.attr' into (module, attr)."""
    if ":" in name:
        module_name, _, attr = name.partition(":")
    else:
        module_name, _, attr = name.rpartition(".")
    if not module_name or not attr:
        raise ValueError(f"Not a qualified implementation name: '{name}'")
    return module_name, attr


class PluginRealm:
    """An implementation-loading universe for one plugin."""

    def __init__(
        self,
        realm_id: str,
        parent: Optional["PluginRealm"] = None,
        imports: Iterable[str] = (),
        search_paths: Iterable[str] = (),
    ):
        self.realm_id = realm_id
        self.parent = parent
        self.imports = frozenset(imports)
        self.search_paths = tuple(search_paths)

    def load_class(self, name: str) -> Any:
        """Resolve an implementation name in this realm.

        Args:
            name: 'module:attr' or 'module.attr'

        Returns:
            The resolved object (normally a class)

        Raises:
            ImplementationNotFoundError: If the module or attribute cannot be loaded
        """
        if self.parent is not None and name in self.imports:
            return self.parent.load_class(name)

        try:
            module_name, attr = split_name(name)
        except ValueError as e:
            raise ImplementationNotFoundError(name, str(e)) from e

        try:
            with self._import_roots():
                module = importlib.import_module(module_name)
        except ImportError as e:
            missing = getattr(e, "name", None)
            raise ImplementationNotFoundError(
                name,
                f"Cannot load '{name}' in realm {self.realm_id}: {e}",
                missing_module=missing,
            ) from e

        try:
            return getattr(module, attr)
        except AttributeError as e:
            raise ImplementationNotFoundError(
                name, f"Module '{module_name}' has no attribute '{attr}' (realm {self.realm_id})"
            ) from e

    @contextmanager
    def _import_roots(self) -> Iterator[None]:
        added = [p for p in self.search_paths if p not in sys.path]
        sys.path[0:0] = added
        try:
            yield
        finally:
            for path in added:
                if path in sys.path:
                    sys.path.remove(path)

    def __repr__(self) -> str:
        return f"PluginRealm({self.realm_id!r})"


# The caller's own realm: plain imports from the running interpreter
HOST_REALM = PluginRealm("host")

_current_realm: PluginRealm = HOST_REALM


def get_current_realm() -> PluginRealm:
    """The realm name lookups currently resolve against."""
    return _current_realm


@contextmanager
def realm_scope(realm: PluginRealm) -> Iterator[PluginRealm]:
    """Make ``realm`` current for the duration of the block.

    The realm's import roots are importable inside the block, so plugin code
    may import lazily. The previous realm is restored on exit, whether the
    block returns or raises.
    """
    global _current_realm
    previous = _current_realm
    _current_realm = realm
    logger.debug(f"Entered realm {realm.realm_id} (from {previous.realm_id})")
    try:
        with realm._import_roots():
            yield realm
    finally:
        _current_realm = previous
