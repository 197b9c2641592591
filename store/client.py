"""
==================================================
Store client contract and SQLAlchemy adapter.
==================================================

Generated operations talk to the database only through three primitives:

    execute(sql_text, args)    -> None
    fetch_one(sql_text, args)  -> row (dict), RowNotFound when no row matches
    fetch_all(sql_text, args)  -> list of rows (dicts)

Any client implementing StoreClient can back a TableRepository.
SQLAlchemyStoreClient is the provided implementation: it rewrites the
positional $n placeholders into SQLAlchemy named binds (:p1, :p2, ...),
runs each statement in its own transaction and wraps driver failures in
StoreError.

Example:
    >>> from store.client import SQLAlchemyStoreClient
    >>> from store.engine import create_store_engine
    >>>
    >>> client = SQLAlchemyStoreClient(create_store_engine())
    >>> client.fetch_one("SELECT * FROM guild WHERE guild_id = $1", (1,))
    {'guild_id': 1, 'name': 'test', 'icon_url': None}
"""

import logging
from typing import Any, Callable, Dict, List, Sequence, Tuple

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from sql.plans import PLACEHOLDER_PATTERN

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class StoreError(Exception):
    """Exception raised when the store fails to execute a statement."""
    pass


class RowNotFound(StoreError):
    """Raised by fetch_one when the statement matched no row."""
    pass


class StoreClient:
    """Interface consumed by generated operations.

    Subclasses execute one statement per call and report failures as
    StoreError (RowNotFound for an empty single-row fetch).
    """

    def execute(self, sql_text: str, args: Sequence[Any]) -> None:
        raise NotImplementedError

    def fetch_one(self, sql_text: str, args: Sequence[Any]) -> Row:
        raise NotImplementedError

    def fetch_all(self, sql_text: str, args: Sequence[Any]) -> List[Row]:
        raise NotImplementedError


def to_named_binds(sql_text: str, args: Sequence[Any]) -> Tuple[str, Dict[str, Any]]:
    """
    Rewrite $n placeholders as :pn named binds.

    Args:
        sql_text: Statement with positional placeholders
        args: Values; args[i] binds $(i+1)

    Returns:
        Tuple of (rewritten statement, bind parameters)

    Example:
        >>> to_named_binds("SELECT * FROM guild WHERE guild_id = $1", (7,))
        ('SELECT * FROM guild WHERE guild_id = :p1', {'p1': 7})
    """
    statement = PLACEHOLDER_PATTERN.sub(lambda m: f":p{m.group(1)}", sql_text)
    params = {f"p{position}": value for position, value in enumerate(args, start=1)}
    return statement, params


class SQLAlchemyStoreClient(StoreClient):
    """Store client backed by a SQLAlchemy engine.

    Attributes:
        engine: SQLAlchemy Engine; each call runs inside engine.begin()

    Example:
        >>> client = SQLAlchemyStoreClient(engine)
        >>> rows = client.fetch_all("SELECT * FROM guild", ())
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def _run(self, sql_text: str, args: Sequence[Any], consume: Callable[[Any], Any]) -> Any:
        statement, params = to_named_binds(sql_text, args)
        logger.debug(f"Executing: {sql_text} with {len(params)} argument(s)")

        try:
            with self.engine.begin() as conn:
                result = conn.execute(text(statement), params)
                return consume(result)
        except SQLAlchemyError as e:
            logger.error(f"Statement failed: {sql_text}: {e}")
            raise StoreError(f"Failed to execute `{sql_text}`: {e}") from e

    def execute(self, sql_text: str, args: Sequence[Any]) -> None:
        self._run(sql_text, args, lambda result: None)

    def fetch_one(self, sql_text: str, args: Sequence[Any]) -> Row:
        """
        Fetch the first row of a statement's result.

        Raises:
            RowNotFound: If the result is empty
            StoreError: If execution fails
        """
        def first_row(result):
            row = result.mappings().first()
            if row is None:
                raise RowNotFound(f"No row returned by `{sql_text}`")
            return dict(row)

        return self._run(sql_text, args, first_row)

    def fetch_all(self, sql_text: str, args: Sequence[Any]) -> List[Row]:
        return self._run(sql_text, args, lambda result: [dict(row) for row in result.mappings().all()])
