"""
===========================================================
Normalized table schema model.
===========================================================

The schema descriptor is the sole input to query generation. It records
the table name, the ordered field list and which fields form the primary
key. Field order is declaration order and fixes column order in every
generated statement.

Models:
    FieldSpec: One column (name, opaque type token, primary-key flag)
    TableSchema: Table name plus ordered, non-empty tuple of FieldSpec

Example:
    >>> from models.table_schema import FieldSpec, TableSchema
    >>>
    >>> schema = TableSchema.from_record(
    ...     'Guild',
    ...     [
    ...         FieldSpec('guild_id', 'i64', is_primary_key=True),
    ...         FieldSpec('name', 'String'),
    ...         FieldSpec('icon_url', 'Option<String>'),
    ...     ],
    ... )
    >>> schema.table_name
    'guild'
    >>> [f.name for f in schema.primary_key]
    ['guild_id']
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Tuple


@dataclass(frozen=True)
class FieldSpec:
    """One column of a table.

    Attributes:
        name: Column identifier, used verbatim in generated SQL
        type: Opaque type token; carried through to generated output, never interpreted
        is_primary_key: True if the column is part of the primary key
    """

    name: str
    type: Any = field(default=None, compare=False)
    is_primary_key: bool = False


@dataclass(frozen=True)
class TableSchema:
    """Normalized description of a relational table.

    Instances are immutable and hashable, so generated plans can be cached
    keyed by the schema value.

    Attributes:
        table_name: Table name used in generated SQL
        fields: Ordered tuple of FieldSpec in declaration order
        record_name: Name of the record type the schema was derived from
    """

    table_name: str
    fields: Tuple[FieldSpec, ...]
    record_name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'fields', tuple(self.fields))
        if not self.fields:
            raise ValueError(f"Table `{self.table_name}` must declare at least one field")
        if not self.table_name:
            raise ValueError("Table name must not be empty")

    @classmethod
    def from_record(
        cls,
        record_name: str,
        fields: Iterable[FieldSpec],
        table_name: Optional[str] = None
    ) -> 'TableSchema':
        """Build a schema for a record type.

        The table name is resolved here, once: an explicit override wins,
        otherwise the record name lowercased.

        Args:
            record_name: Name of the record type (e.g. 'ServerPermission')
            fields: Field specs in declaration order
            table_name: Optional explicit table name

        Returns:
            TableSchema instance
        """
        return cls(
            table_name=table_name or record_name.lower(),
            fields=tuple(fields),
            record_name=record_name
        )

    @property
    def primary_key(self) -> Tuple[FieldSpec, ...]:
        """Primary-key fields in declaration order."""
        return tuple(f for f in self.fields if f.is_primary_key)

    @property
    def non_key_fields(self) -> Tuple[FieldSpec, ...]:
        """Non-primary-key fields in declaration order."""
        return tuple(f for f in self.fields if not f.is_primary_key)

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    @property
    def display_name(self) -> str:
        """Record name when known, otherwise the table name."""
        return self.record_name or self.table_name
