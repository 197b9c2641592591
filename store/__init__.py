"""
=================================
Relational store client package.
=================================

The boundary between generated operations and the database.

Modules:
    client: StoreClient contract, StoreError/RowNotFound, SQLAlchemy client
    engine: Engine creation and connectivity check
"""

__version__ = "0.1.0"
__all__ = [
    'StoreClient',
    'SQLAlchemyStoreClient',
    'StoreError',
    'RowNotFound',
    'create_store_engine',
    'verify_connection',
]

from .client import RowNotFound, SQLAlchemyStoreClient, StoreClient, StoreError
from .engine import create_store_engine, verify_connection
