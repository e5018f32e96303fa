"""Generic configuration tree with structural deep merge.

Configuration arrives in a plugin-neutral form: nested mappings, lists and
scalars as read from YAML. It is converted into ConfigurationNode trees for
merging, following the xmltodict conventions so the conversion is lossless:

- "@name" keys are attributes of the enclosing node
- "#text" is the value of the enclosing node
- a list value yields repeated children sharing one name

Merging follows the plexus Xpp3Dom rules, including the "combine.self" and
"combine.children" attributes.
"""

from collections import Counter
from typing import Any, Optional

from pydantic import BaseModel, Field

ATTRIBUTE_PREFIX = "@"
TEXT_KEY = "#text"

COMBINE_SELF = "combine.self"
COMBINE_SELF_OVERRIDE = "override"
COMBINE_CHILDREN = "combine.children"
COMBINE_CHILDREN_APPEND = "append"


class ConfigurationNode(BaseModel):
    """One element of a configuration tree."""

    name: str = Field(..., description="Element name (parameter name at the top level)")
    value: Optional[Any] = Field(default=None, description="Scalar value, if any")
    attributes: dict[str, Any] = Field(default_factory=dict)
    children: list["ConfigurationNode"] = Field(default_factory=list)

    @classmethod
    def from_mapping(cls, name: str, data: Any) -> "ConfigurationNode":
        """Convert a plugin-neutral value into a configuration tree.

        Args:
            name: Name of the root node
            data: Mapping, scalar or None

        Returns:
            ConfigurationNode rooted at ``name``

        Raises:
            TypeError: If ``data`` is a list (lists only make sense as mapping values)
        """
        if data is None:
            return cls(name=name)
        if isinstance(data, (list, tuple)):
            raise TypeError(
                f"Cannot convert a list into configuration node '{name}'; "
                f"wrap it in a mapping"
            )
        if not isinstance(data, dict):
            return cls(name=name, value=data)

        node = cls(name=name)
        for key, item in data.items():
            key = str(key)
            if key == TEXT_KEY:
                node.value = item
            elif key.startswith(ATTRIBUTE_PREFIX):
                node.attributes[key[len(ATTRIBUTE_PREFIX):]] = item
            elif isinstance(item, (list, tuple)):
                for element in item:
                    node.children.append(cls.from_mapping(key, element))
            else:
                node.children.append(cls.from_mapping(key, item))
        return node

    def to_mapping(self) -> Any:
        """Inverse of from_mapping: the plugin-neutral value of this node."""
        if not self.attributes and not self.children:
            return self.value

        data: dict[str, Any] = {}
        for attr, attr_value in self.attributes.items():
            data[f"{ATTRIBUTE_PREFIX}{attr}"] = attr_value
        if self.value is not None:
            data[TEXT_KEY] = self.value
        data.update(self._children_mapping())
        return data

    def as_parameters(self) -> dict[str, Any]:
        """Top-level children as plain parameter values keyed by name."""
        return self._children_mapping()

    def _children_mapping(self) -> dict[str, Any]:
        counts = Counter(c.name for c in self.children)
        grouped: dict[str, Any] = {}
        for child in self.children:
            if counts[child.name] > 1:
                grouped.setdefault(child.name, []).append(child.to_mapping())
            else:
                grouped[child.name] = child.to_mapping()
        return grouped

    def get_child(self, name: str) -> Optional["ConfigurationNode"]:
        """First child with the given name."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def get_children(self, name: str) -> list["ConfigurationNode"]:
        """All children with the given name, in document order."""
        return [c for c in self.children if c.name == name]

    def __str__(self) -> str:
        return f"<{self.name}> {self.to_mapping()!r}"


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def merge_nodes(
    dominant: Optional[ConfigurationNode],
    recessive: Optional[ConfigurationNode],
) -> Optional[ConfigurationNode]:
    """Deep merge two trees; ``dominant`` wins wherever both define a position.

    Neither input is modified.

    Args:
        dominant: Higher-precedence tree
        recessive: Lower-precedence tree, only fills positions left unset

    Returns:
        A new merged tree, or None when both inputs are None
    """
    if dominant is None:
        return recessive.model_copy(deep=True) if recessive is not None else None
    merged = dominant.model_copy(deep=True)
    if recessive is not None:
        _merge_into(merged, recessive)
    return merged


def _merge_into(dominant: ConfigurationNode, recessive: ConfigurationNode) -> None:
    if dominant.attributes.get(COMBINE_SELF) == COMBINE_SELF_OVERRIDE:
        return

    if _is_empty(dominant.value) and not _is_empty(recessive.value):
        dominant.value = recessive.value

    for attr, attr_value in recessive.attributes.items():
        if _is_empty(dominant.attributes.get(attr)):
            dominant.attributes[attr] = attr_value

    if not recessive.children:
        return

    if dominant.attributes.get(COMBINE_CHILDREN) == COMBINE_CHILDREN_APPEND:
        dominant.children = [
            c.model_copy(deep=True) for c in recessive.children
        ] + dominant.children
        return

    # The i-th recessive child of a name merges into the i-th dominant child of that name
    common: dict[str, list[ConfigurationNode]] = {}
    for child in recessive.children:
        if child.name not in common:
            matches = dominant.get_children(child.name)
            if matches:
                common[child.name] = matches

    appended: list[ConfigurationNode] = []
    for child in recessive.children:
        matches = common.get(child.name)
        if matches is None:
            appended.append(child.model_copy(deep=True))
        elif matches:
            _merge_into(matches.pop(0), child)
    dominant.children.extend(appended)
