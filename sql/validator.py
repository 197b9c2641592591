"""
==========================
Schema validation.
==========================

Checks a TableSchema for well-formedness before any query is built.

The only structural requirement is at least one primary-key field; a table
without one cannot support point lookup, update or delete. Composite keys
(two or more primary-key fields) are valid and keep declaration order.
Duplicate field names and identifier syntax are the caller's responsibility.

Functions:
- validate: Validate one schema, raising on failure
- validate_all: Validate many schemas, collecting every failure;
  a repeated table name is reported as DuplicateTableError

Usage:
    from sql.validator import validate, validate_all, NoPrimaryKeyError

    try:
        validate(schema)
    except NoPrimaryKeyError as e:
        print(f"Cannot generate {e.table_name}: {e}")

    valid, errors = validate_all([guild_schema, broken_schema])
"""

import logging
from typing import Iterable, List, Tuple

from models.table_schema import TableSchema

logger = logging.getLogger(__name__)


class SchemaError(Exception):
    """Base class for generation-time schema errors.

    Attributes:
        table_name: Table the error refers to
    """

    def __init__(self, table_name: str, message: str):
        super().__init__(message)
        self.table_name = table_name


class NoPrimaryKeyError(SchemaError):
    """Raised when a schema declares no primary-key field."""

    def __init__(self, table_name: str):
        super().__init__(table_name, f"Table `{table_name}` has no primary key")


class DuplicateTableError(SchemaError):
    """Raised when two schemas target the same table."""

    def __init__(self, table_name: str):
        super().__init__(table_name, f"Table `{table_name}` is described more than once")


class NoUpdatableColumnsError(SchemaError):
    """Raised when an UPDATE is requested for a table whose fields are all primary-key fields."""

    def __init__(self, table_name: str):
        super().__init__(
            table_name,
            f"Table `{table_name}` has no non-primary-key columns to update"
        )


def validate(schema: TableSchema) -> TableSchema:
    """
    Validate a schema prior to generation.

    Args:
        schema: Schema to check

    Returns:
        The same schema, unchanged

    Raises:
        NoPrimaryKeyError: If no field is marked as primary key
    """
    if not schema.primary_key:
        logger.error(f"Schema validation failed: table `{schema.table_name}` has no primary key")
        raise NoPrimaryKeyError(schema.table_name)

    logger.debug(
        f"Schema `{schema.table_name}` valid: "
        f"{len(schema.primary_key)} key field(s), {len(schema.fields)} field(s)"
    )
    return schema


def validate_all(schemas: Iterable[TableSchema]) -> Tuple[List[TableSchema], List[SchemaError]]:
    """
    Validate several schemas in one pass.

    Every schema is checked; a failure does not stop validation of the rest.

    Args:
        schemas: Schemas to check

    Returns:
        Tuple of (valid schemas in input order, errors in input order)
    """
    valid: List[TableSchema] = []
    errors: List[SchemaError] = []
    seen = set()

    for schema in schemas:
        if schema.table_name in seen:
            logger.error(f"Table `{schema.table_name}` is described more than once; keeping the first")
            errors.append(DuplicateTableError(schema.table_name))
            continue
        seen.add(schema.table_name)
        try:
            valid.append(validate(schema))
        except SchemaError as e:
            errors.append(e)

    if errors:
        logger.warning(f"{len(errors)} of {len(valid) + len(errors)} schema(s) failed validation")

    return valid, errors
