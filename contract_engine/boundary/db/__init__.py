"""
DynamoDB persistence layer.

Exports: TableRegistry, get_table_registry
"""

from contract_engine.boundary.db.registry import TableRegistry, get_table_registry

__all__ = ["TableRegistry", "get_table_registry"]
