"""
==================================================
CRUD operations generated from a table schema.
==================================================

Binds the query plans of one record type to a store client, giving the
callable operations:

    get(*key)          -> record              (RowNotFound if absent)
    get_optional(*key) -> record or None
    create(record)     -> record as stored    (reflects column defaults)
    update(record)     -> record as stored
    delete(record)     -> None
    list()             -> list of records

Each call issues exactly one statement. Store errors propagate unchanged;
the only translation is get_optional turning RowNotFound into None.

Example:
    >>> from repository.table_repository import TableRepository
    >>>
    >>> guilds = TableRepository(Guild, store)
    >>> created = guilds.create(Guild(guild_id=1, name='test', icon_url=None))
    >>> guilds.get(1) == created
    True
    >>> guilds.get_optional(2) is None
    True
"""

import logging
from typing import Any, Callable, List, Optional, TypeVar

from models.record import schema_of
from models.table_schema import TableSchema
from sql.binder import bind_key_values, bind_record
from sql.plans import CREATE, DELETE, GET, GET_OPTIONAL, LIST, UPDATE, QueryPlan, generate_cached
from sql.validator import NoUpdatableColumnsError
from store.client import Row, RowNotFound, StoreClient

logger = logging.getLogger(__name__)

T = TypeVar('T')


def optional_lookup(fetch: Callable[[], T]) -> Optional[T]:
    """
    Run a single-row fetch, mapping RowNotFound to None.

    Any other StoreError, and any non-store exception, propagates unchanged.

    Args:
        fetch: Zero-argument callable performing the fetch

    Returns:
        The fetched value, or None when no row matched
    """
    try:
        return fetch()
    except RowNotFound:
        return None


class TableRepository:
    """Generated CRUD operations for one record type.

    Attributes:
        record_type: Class rows are mapped back into with record_type(**row)
        store: StoreClient executing the statements
        schema: Validated TableSchema of the record type
        plans: Query plans keyed by operation name

    Example:
        >>> repo = TableRepository(ServerPermission, store)
        >>> repo.get(42, 'admin')
        ServerPermission(guild_id=42, tag='admin', permission_bit=8)
    """

    def __init__(
        self,
        record_type: Any,
        store: StoreClient,
        schema: Optional[TableSchema] = None
    ):
        """
        Args:
            record_type: Record class (dataclass, @table class or SQLAlchemy model)
            store: Store client
            schema: Explicit schema; derived from record_type when omitted

        Raises:
            NoPrimaryKeyError: If the schema has no primary key
        """
        self.record_type = record_type
        self.store = store
        self.schema = schema if schema is not None else schema_of(record_type)
        self.plans = generate_cached(self.schema)

    def _plan(self, operation: str) -> QueryPlan:
        plan = self.plans.get(operation)
        if plan is None:
            raise NoUpdatableColumnsError(self.schema.table_name)
        return plan

    def _to_record(self, row: Row) -> Any:
        return self.record_type(**row)

    def get(self, *key_values: Any) -> Any:
        """
        Fetch one record by primary key.

        Args:
            *key_values: One value per primary-key field, in declaration order

        Raises:
            TypeError: If the number of key values is wrong
            RowNotFound: If no row matches
            StoreError: If the store fails
        """
        plan = self._plan(GET)
        args = bind_key_values(self.schema, key_values)
        return self._to_record(self.store.fetch_one(plan.sql_text, args))

    def get_optional(self, *key_values: Any) -> Optional[Any]:
        """
        Fetch one record by primary key, or None if absent.

        Raises:
            TypeError: If the number of key values is wrong
            StoreError: For any store failure other than RowNotFound
        """
        plan = self._plan(GET_OPTIONAL)
        args = bind_key_values(self.schema, key_values)
        row = optional_lookup(lambda: self.store.fetch_one(plan.sql_text, args))
        if row is None:
            logger.debug(f"No `{self.schema.table_name}` row for key {args}")
            return None
        return self._to_record(row)

    def create(self, record: Any) -> Any:
        """Insert a record and return the stored row as a record."""
        plan = self._plan(CREATE)
        row = self.store.fetch_one(plan.sql_text, bind_record(plan.argument_order, record))
        return self._to_record(row)

    def update(self, record: Any) -> Any:
        """
        Overwrite every non-key column of the row matching the record's key.

        Raises:
            NoUpdatableColumnsError: If every field is a primary-key field
            RowNotFound: If no row has the record's key
            StoreError: If the store fails
        """
        plan = self._plan(UPDATE)
        row = self.store.fetch_one(plan.sql_text, bind_record(plan.argument_order, record))
        return self._to_record(row)

    def delete(self, record: Any) -> None:
        """Delete the row matching the record's primary key."""
        plan = self._plan(DELETE)
        self.store.execute(plan.sql_text, bind_record(plan.argument_order, record))

    def list(self) -> List[Any]:
        """Fetch every row of the table."""
        plan = self._plan(LIST)
        return [self._to_record(row) for row in self.store.fetch_all(plan.sql_text, ())]
