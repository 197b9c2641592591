"""
========================================
Table schema models for crudgen.
========================================

The normalized schema descriptor consumed by the sql package, plus the two
ways of obtaining one: record-type discovery and JSON descriptor files.

Modules:
    table_schema: FieldSpec and TableSchema
    record: @table decorator, pk_field(), dataclass and SQLAlchemy introspection
    schema_loader: JSON descriptor files for the build-time generator

Example:
    >>> from models import FieldSpec, TableSchema
    >>>
    >>> schema = TableSchema.from_record('Dictionary', [
    ...     FieldSpec('guild_id', 'i64', is_primary_key=True),
    ...     FieldSpec('dict', 'String'),
    ... ])
    >>> schema.table_name
    'dictionary'
"""

__version__ = "0.1.0"
__all__ = [
    'FieldSpec',
    'TableSchema',
    'RecordDefinitionError',
    'pk_field',
    'table',
    'schema_of',
    'schema_from_dataclass',
    'schema_from_declarative',
    'SchemaLoadError',
    'load_schemas',
    'load_schema_dir',
]

from .table_schema import FieldSpec, TableSchema
from .record import (
    RecordDefinitionError,
    pk_field,
    schema_from_dataclass,
    schema_from_declarative,
    schema_of,
    table,
)
from .schema_loader import SchemaLoadError, load_schema_dir, load_schemas
