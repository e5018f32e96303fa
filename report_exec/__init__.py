"""report-exec - Report Plugin Execution Core.

Prepares report goals drawn from versioned build plugins for later rendering:
- Version resolution (reporting section, build plugins, plugin management, repository)
- Goal selection (explicit reports, report sets, or the full goal catalog)
- Three-level configuration merge (report set > plugin > goal defaults)
- Report capability filtering inside each plugin's isolated realm
- Forked lifecycle executions declared by report goals
"""

__version__ = "0.1.0"
