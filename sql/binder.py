"""
===========================================
Parameter binding order.
===========================================

Maps a validated schema to the ordered list of field names whose runtime
values are bound for each operation. The i-th name binds placeholder $i
of the matching statement from sql.query_builder; a mismatch binds a
value to the wrong column without any visible failure.

Functions:
- get_argument_order: Primary-key fields (get / get_optional)
- create_argument_order: All fields, declaration order
- update_argument_order: Primary-key fields, then non-key fields
- delete_argument_order: Primary-key fields
- list_argument_order: No arguments
- bind_record: Read values from a record in argument order
- bind_key_values: Check caller-supplied primary-key values

Usage:
    from sql.binder import update_argument_order, bind_record

    order = update_argument_order(schema)   # ('guild_id', 'name', 'icon_url')
    args = bind_record(order, guild)        # (1, 'test', None)
"""

from collections.abc import Mapping
from typing import Any, Sequence, Tuple

from models.table_schema import TableSchema

from .validator import validate

ArgumentOrder = Tuple[str, ...]


def get_argument_order(schema: TableSchema) -> ArgumentOrder:
    """Primary-key field names in declaration order."""
    return tuple(f.name for f in validate(schema).primary_key)


def create_argument_order(schema: TableSchema) -> ArgumentOrder:
    """All field names in declaration order, matching the INSERT column list."""
    return validate(schema).field_names


def update_argument_order(schema: TableSchema) -> ArgumentOrder:
    """
    Binding order for UPDATE.

    Args:
        schema: Table schema

    Returns:
        Primary-key names (declaration order) followed by non-key names
        (declaration order)
    """
    schema = validate(schema)
    return (
        tuple(f.name for f in schema.primary_key)
        + tuple(f.name for f in schema.non_key_fields)
    )


def delete_argument_order(schema: TableSchema) -> ArgumentOrder:
    """Primary-key field names in declaration order."""
    return get_argument_order(schema)


def list_argument_order(schema: TableSchema) -> ArgumentOrder:
    validate(schema)
    return ()


def bind_record(argument_order: Sequence[str], record: Any) -> Tuple[Any, ...]:
    """
    Extract runtime values from a record in binding order.

    Args:
        argument_order: Field names from one of the *_argument_order functions
        record: Object exposing the fields as attributes, or a mapping

    Returns:
        Tuple of values, one per placeholder

    Raises:
        KeyError: If a mapping record lacks a field
        AttributeError: If an object record lacks a field
    """
    if isinstance(record, Mapping):
        return tuple(record[name] for name in argument_order)
    return tuple(getattr(record, name) for name in argument_order)


def bind_key_values(schema: TableSchema, values: Sequence[Any]) -> Tuple[Any, ...]:
    """
    Check primary-key values supplied positionally by a caller.

    Args:
        schema: Table schema
        values: One value per primary-key field, in declaration order

    Returns:
        The values as a tuple

    Raises:
        TypeError: If the number of values differs from the key size
    """
    key_names = get_argument_order(schema)
    if len(values) != len(key_names):
        raise TypeError(
            f"`{schema.table_name}` lookup takes {len(key_names)} key value(s) "
            f"({', '.join(key_names)}), got {len(values)}"
        )
    return tuple(values)
