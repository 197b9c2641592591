"""
===========================================================
Record-type discovery.
===========================================================

Derives a TableSchema from a Python record type so the generator only ever
sees an explicit schema descriptor. Two kinds of record types are
supported:

    - Dataclasses, with primary-key fields marked by pk_field() and an
      optional table-name override given to the @table decorator
    - SQLAlchemy declarative models, read from their mapped columns

Column order is declaration order in both cases.

Example:
    >>> from dataclasses import dataclass
    >>> from typing import Optional
    >>> from models.record import pk_field, table
    >>>
    >>> @table(name='guild')
    ... @dataclass
    ... class Guild:
    ...     guild_id: int = pk_field()
    ...     name: str = ''
    ...     icon_url: Optional[str] = None
    >>>
    >>> Guild.__table_schema__.table_name
    'guild'
"""

import dataclasses
from typing import Any, Optional

from sqlalchemy import inspect as sa_inspect

from models.table_schema import FieldSpec, TableSchema
from sql.validator import validate

PK_METADATA_KEY = 'pk'
SCHEMA_ATTRIBUTE = '__table_schema__'


class RecordDefinitionError(Exception):
    """Raised when a record type cannot be turned into a schema."""
    pass


def pk_field(**kwargs: Any) -> Any:
    """
    Declare a dataclass field as part of the primary key.

    Accepts the same keyword arguments as dataclasses.field().
    """
    metadata = dict(kwargs.pop('metadata', None) or {})
    metadata[PK_METADATA_KEY] = True
    return dataclasses.field(metadata=metadata, **kwargs)


def schema_from_dataclass(cls: type, name: Optional[str] = None) -> TableSchema:
    """
    Build a schema from a dataclass.

    Args:
        cls: Dataclass type
        name: Optional table name; defaults to the class name lowercased

    Returns:
        TableSchema (not yet validated)

    Raises:
        RecordDefinitionError: If cls is not a dataclass or has no fields
    """
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise RecordDefinitionError(f"{cls!r} is not a dataclass")

    fields = [
        FieldSpec(f.name, f.type, bool(f.metadata.get(PK_METADATA_KEY, False)))
        for f in dataclasses.fields(cls)
    ]
    if not fields:
        raise RecordDefinitionError(f"Record `{cls.__name__}` declares no fields")

    return TableSchema.from_record(cls.__name__, fields, table_name=name)


def schema_from_declarative(model: type) -> TableSchema:
    """
    Build a schema from a SQLAlchemy declarative model.

    Attribute names must equal column names, since generated rows are
    mapped back with model(**row).

    Args:
        model: Mapped class

    Returns:
        TableSchema named after the model's __tablename__

    Raises:
        RecordDefinitionError: If the class is not mapped or renames a column
    """
    mapper = sa_inspect(model, raiseerr=False)
    if mapper is None or not hasattr(mapper, 'column_attrs'):
        raise RecordDefinitionError(f"{model!r} is not a SQLAlchemy mapped class")

    fields = []
    for attr in mapper.column_attrs:
        column = attr.columns[0]
        if attr.key != column.name:
            raise RecordDefinitionError(
                f"`{model.__name__}.{attr.key}` maps to column `{column.name}`; "
                f"attribute and column names must match"
            )
        fields.append(FieldSpec(column.name, column.type, bool(column.primary_key)))

    return TableSchema.from_record(model.__name__, fields, table_name=mapper.local_table.name)


def table(cls: Optional[type] = None, *, name: Optional[str] = None):
    """
    Class decorator attaching a validated schema to a record type.

    Usable bare (@table) or with a table name (@table(name='guild')).
    Classes that are not yet dataclasses are turned into one. The schema is
    validated at decoration time, so a table without a primary key fails
    when the class is defined.

    Raises:
        NoPrimaryKeyError: If no field is declared with pk_field()
    """
    def wrap(record_cls: type) -> type:
        if not dataclasses.is_dataclass(record_cls):
            record_cls = dataclasses.dataclass(record_cls)
        schema = validate(schema_from_dataclass(record_cls, name))
        setattr(record_cls, SCHEMA_ATTRIBUTE, schema)
        return record_cls

    if cls is None:
        return wrap
    return wrap(cls)


def schema_of(record_type: type) -> TableSchema:
    """
    Resolve the validated schema of a record type.

    Looks for a schema attached by @table, then falls back to dataclass or
    SQLAlchemy model introspection.

    Raises:
        RecordDefinitionError: If no schema can be derived
        NoPrimaryKeyError: If the derived schema has no primary key
    """
    attached = vars(record_type).get(SCHEMA_ATTRIBUTE) if isinstance(record_type, type) else None
    if attached is not None:
        return attached

    if isinstance(record_type, type) and dataclasses.is_dataclass(record_type):
        return validate(schema_from_dataclass(record_type))

    return validate(schema_from_declarative(record_type))
