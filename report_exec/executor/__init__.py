"""Report execution preparation.

Architecture (bottom-up):
- goal_selector: expands report plugins into (goal, configuration) pairs
- capability: report capability checks inside plugin realms
- report_executor: top-level driver producing PreparedExecution lists
"""
