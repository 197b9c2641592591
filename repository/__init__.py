"""
=====================================
Generated CRUD operations package.
=====================================

Modules:
    table_repository: TableRepository and the optional-lookup adapter
"""

__version__ = "0.1.0"
__all__ = ['TableRepository', 'optional_lookup']

from .table_repository import TableRepository, optional_lookup
