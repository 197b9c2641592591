"""
============================
SQL Query Builder Utilities.
============================

Pure functions mapping a validated schema to SQL statement templates.
Builders never see runtime values: every value is a positional
placeholder ($1, $2, ...) bound later by the store client, in the order
produced by sql.binder.

Clause Builders:
- placeholder_builder: Comma-separated run of placeholders
- column_list_builder: Comma-separated column names
- where_predicate_builder: Primary-key equality predicate

Statement Builders:
- select_by_key_builder: SELECT * ... WHERE <pk predicate>
- insert_builder: INSERT ... VALUES (...) RETURNING *
- update_builder: UPDATE ... SET ... WHERE <pk predicate> RETURNING *
- delete_builder: DELETE FROM ... WHERE <pk predicate>
- select_all_builder: SELECT * FROM <table>

Placeholder numbering:
    Within one statement every bound position gets its own number and no
    number is reused across clauses. In UPDATE the primary key occupies
    $1..$k and the SET values $(k+1)..$(k+m), so the key is bound first.

Usage:
    from sql.query_builder import select_by_key_builder, update_builder

    select_by_key_builder(schema)
    # SELECT * FROM guild WHERE guild_id = $1

    update_builder(schema)
    # UPDATE guild SET (name, icon_url) = ($2, $3) WHERE guild_id = $1 RETURNING *
"""

from typing import Sequence

from models.table_schema import FieldSpec, TableSchema

from .validator import NoUpdatableColumnsError, validate


def placeholder_builder(start: int, count: int) -> str:
    """
    Build a comma-separated run of positional placeholders.

    Args:
        start: Number of the first placeholder (1-based)
        count: Number of placeholders

    Returns:
        e.g. placeholder_builder(2, 3) -> "$2, $3, $4"
    """
    return ", ".join(f"${i}" for i in range(start, start + count))


def column_list_builder(fields: Sequence[FieldSpec]) -> str:
    """Join field names in the given order."""
    return ", ".join(f.name for f in fields)


def where_predicate_builder(fields: Sequence[FieldSpec], start: int = 1) -> str:
    """
    Build the primary-key equality predicate.

    Args:
        fields: Primary-key fields in declaration order
        start: Number of the first placeholder

    Returns:
        "pk_1 = $start AND pk_2 = $start+1 ..." (no AND for a single key)
    """
    return " AND ".join(
        f"{f.name} = ${start + offset}" for offset, f in enumerate(fields)
    )


def select_by_key_builder(schema: TableSchema) -> str:
    """
    Build the point-lookup SELECT.

    Shared by get and get_optional.

    Args:
        schema: Table schema

    Returns:
        SELECT * FROM <table> WHERE <pk predicate>
    """
    schema = validate(schema)
    return f"SELECT * FROM {schema.table_name} WHERE {where_predicate_builder(schema.primary_key)}"


def insert_builder(schema: TableSchema) -> str:
    """
    Build the INSERT for all fields in declaration order.

    Args:
        schema: Table schema

    Returns:
        INSERT INTO <table> (<fields>) VALUES ($1, ..., $n) RETURNING *
    """
    schema = validate(schema)
    return (
        f"INSERT INTO {schema.table_name} ({column_list_builder(schema.fields)}) "
        f"VALUES ({placeholder_builder(1, len(schema.fields))}) RETURNING *"
    )


def set_clause_builder(fields: Sequence[FieldSpec], start: int) -> str:
    """
    Build the SET target/value pair of an UPDATE.

    A single column uses the scalar form; two or more use the row-value
    form. PostgreSQL rejects "SET (a) = ($2)".

    Args:
        fields: Columns to update, in declaration order
        start: Number of the first SET placeholder

    Returns:
        "col = $p" or "(c1, c2) = ($p, $p+1)"
    """
    if len(fields) == 1:
        return f"{fields[0].name} = ${start}"
    return f"({column_list_builder(fields)}) = ({placeholder_builder(start, len(fields))})"


def update_builder(schema: TableSchema) -> str:
    """
    Build the UPDATE of every non-key column, filtered by primary key.

    Args:
        schema: Table schema

    Returns:
        UPDATE <table> SET <set clause> WHERE <pk predicate> RETURNING *

    Raises:
        NoUpdatableColumnsError: If every field is a primary-key field
    """
    schema = validate(schema)
    key_fields = schema.primary_key
    set_fields = schema.non_key_fields

    if not set_fields:
        raise NoUpdatableColumnsError(schema.table_name)

    return (
        f"UPDATE {schema.table_name} "
        f"SET {set_clause_builder(set_fields, start=len(key_fields) + 1)} "
        f"WHERE {where_predicate_builder(key_fields)} RETURNING *"
    )


def delete_builder(schema: TableSchema) -> str:
    """
    Build the DELETE filtered by primary key.

    Args:
        schema: Table schema

    Returns:
        DELETE FROM <table> WHERE <pk predicate>
    """
    schema = validate(schema)
    return f"DELETE FROM {schema.table_name} WHERE {where_predicate_builder(schema.primary_key)}"


def select_all_builder(schema: TableSchema) -> str:
    """
    Build the unfiltered listing SELECT.

    Args:
        schema: Table schema

    Returns:
        SELECT * FROM <table>
    """
    schema = validate(schema)
    return f"SELECT * FROM {schema.table_name}"
