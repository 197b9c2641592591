"""
====================================================
SQL generation package for schema-driven CRUD.
====================================================

Turns a TableSchema into parameterized SQL templates and the exact order of
values bound to their placeholders. All functions are pure (no I/O, no
shared state).

The package follows a clear organization:
    - validator.py: Schema checks and generation-time errors
    - query_builder.py: Statement text (_builder suffix)
    - binder.py: Per-operation argument order and value extraction
    - plans.py: QueryPlan pairing text and binding order per operation

Architecture:
    - query_builder.py and binder.py both depend on validator.py only
    - plans.py composes query_builder.py and binder.py (not vice versa)

Example:
    >>> from models.table_schema import FieldSpec, TableSchema
    >>> from sql import generate
    >>>
    >>> schema = TableSchema('guild', [
    ...     FieldSpec('guild_id', is_primary_key=True),
    ...     FieldSpec('name'),
    ... ])
    >>> generate(schema)['get'].sql_text
    'SELECT * FROM guild WHERE guild_id = $1'
"""

__version__ = "0.1.0"
__all__ = [
    # Validation
    'validate', 'validate_all',
    'SchemaError', 'NoPrimaryKeyError', 'DuplicateTableError', 'NoUpdatableColumnsError',
    # Plans
    'QueryPlan', 'PlanBindingError', 'generate', 'generate_all', 'generate_cached',
    'OPERATIONS',
]

from .plans import (
    OPERATIONS,
    PlanBindingError,
    QueryPlan,
    generate,
    generate_all,
    generate_cached,
)
from .validator import (
    DuplicateTableError,
    NoPrimaryKeyError,
    NoUpdatableColumnsError,
    SchemaError,
    validate,
    validate_all,
)
