"""
===========================================
Query plan generation.
===========================================

Pairs each statement template with its binding order. generate() is a pure
function of the schema: it performs no I/O, holds no state and is safe to
call from any thread. Plans are immutable and may be cached indefinitely.

Operations:
    get, get_optional, create, update, delete, list

Every plan is checked on construction: its placeholders must be exactly
$1..$n, each used once, where n is the length of its argument order.

Usage:
    from sql.plans import generate

    plans = generate(schema)
    plans['update'].sql_text
    # UPDATE guild SET (name, icon_url) = ($2, $3) WHERE guild_id = $1 RETURNING *
    plans['update'].argument_order
    # ('guild_id', 'name', 'icon_url')
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Iterable, List, Tuple

from models.table_schema import TableSchema

from . import binder, query_builder
from .validator import NoUpdatableColumnsError, SchemaError, validate, validate_all

logger = logging.getLogger(__name__)

GET = 'get'
GET_OPTIONAL = 'get_optional'
CREATE = 'create'
UPDATE = 'update'
DELETE = 'delete'
LIST = 'list'

OPERATIONS = (GET, GET_OPTIONAL, CREATE, UPDATE, DELETE, LIST)

PLACEHOLDER_PATTERN = re.compile(r"(?<![\w$])\$(\d+)")


class PlanBindingError(Exception):
    """Raised when a statement's placeholders do not match its argument order."""
    pass


def placeholder_numbers(sql_text: str) -> List[int]:
    """Placeholder numbers in order of appearance."""
    return [int(n) for n in PLACEHOLDER_PATTERN.findall(sql_text)]


@dataclass(frozen=True)
class QueryPlan:
    """SQL text and the field names bound to its placeholders.

    Attributes:
        operation: Operation name (one of OPERATIONS)
        table_name: Table the statement targets
        sql_text: Statement with $n placeholders
        argument_order: Field names; the i-th binds $i
    """

    operation: str
    table_name: str
    sql_text: str
    argument_order: Tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(self, 'argument_order', tuple(self.argument_order))
        numbers = placeholder_numbers(self.sql_text)
        expected = list(range(1, len(self.argument_order) + 1))
        if sorted(numbers) != expected:
            raise PlanBindingError(
                f"{self.operation} plan for `{self.table_name}` binds "
                f"{len(self.argument_order)} argument(s) but uses placeholders "
                f"{numbers}: {self.sql_text}"
            )

    @property
    def placeholder_count(self) -> int:
        return len(placeholder_numbers(self.sql_text))


def generate(schema: TableSchema) -> Dict[str, QueryPlan]:
    """
    Generate the CRUD query plans for a schema.

    Args:
        schema: Table schema

    Returns:
        Dict keyed by operation name. 'update' is absent when every field
        is a primary-key field.

    Raises:
        NoPrimaryKeyError: If the schema has no primary key
    """
    schema = validate(schema)
    table = schema.table_name

    get_plan = QueryPlan(
        GET, table, query_builder.select_by_key_builder(schema), binder.get_argument_order(schema)
    )
    plans = {
        GET: get_plan,
        GET_OPTIONAL: QueryPlan(GET_OPTIONAL, table, get_plan.sql_text, get_plan.argument_order),
        CREATE: QueryPlan(
            CREATE, table, query_builder.insert_builder(schema), binder.create_argument_order(schema)
        ),
    }

    try:
        plans[UPDATE] = QueryPlan(
            UPDATE, table, query_builder.update_builder(schema), binder.update_argument_order(schema)
        )
    except NoUpdatableColumnsError as e:
        logger.warning(f"Skipping update plan: {e}")

    plans[DELETE] = QueryPlan(
        DELETE, table, query_builder.delete_builder(schema), binder.delete_argument_order(schema)
    )
    plans[LIST] = QueryPlan(
        LIST, table, query_builder.select_all_builder(schema), binder.list_argument_order(schema)
    )

    for plan in plans.values():
        logger.debug(f"{table}.{plan.operation}: {plan.sql_text} <- {list(plan.argument_order)}")

    return plans


@lru_cache(maxsize=None)
def generate_cached(schema: TableSchema) -> Dict[str, QueryPlan]:
    """
    Memoized generate().

    Callers must not mutate the returned dict.
    """
    return generate(schema)


def generate_all(
    schemas: Iterable[TableSchema]
) -> Tuple[Dict[str, Dict[str, QueryPlan]], List[SchemaError]]:
    """
    Generate plans for several schemas, reporting every schema error.

    Args:
        schemas: Schemas to generate

    Returns:
        Tuple of (plans keyed by table name, schema errors)
    """
    valid, errors = validate_all(schemas)
    plans = {schema.table_name: generate(schema) for schema in valid}
    logger.info(f"Generated plans for {len(plans)} table(s), {len(errors)} error(s)")
    return plans, errors
