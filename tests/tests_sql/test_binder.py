"""
========================================================
Comprehensive pytest suite for sql/binder.py
========================================================

Sections:
---------
1. Unit tests - argument order per operation
2. Unit tests - runtime value extraction
3. Edge case tests - arity checks, missing fields

How to Execute:
---------------
All tests:          pytest tests/tests_sql/test_binder.py -v
"""

from dataclasses import dataclass
from types import SimpleNamespace
from typing import Optional

import pytest

from models.table_schema import FieldSpec, TableSchema
from sql.binder import (
    bind_key_values,
    bind_record,
    create_argument_order,
    delete_argument_order,
    get_argument_order,
    list_argument_order,
    update_argument_order,
)
from sql.validator import NoPrimaryKeyError


@dataclass
class Guild:
    guild_id: int
    name: str
    icon_url: Optional[str] = None


# ==========================
# 1. UNIT TESTS - ORDERING
# ==========================

@pytest.mark.unit
def test_guild_argument_orders(guild_schema):
    assert get_argument_order(guild_schema) == ('guild_id',)
    assert create_argument_order(guild_schema) == ('guild_id', 'name', 'icon_url')
    assert update_argument_order(guild_schema) == ('guild_id', 'name', 'icon_url')
    assert delete_argument_order(guild_schema) == ('guild_id',)
    assert list_argument_order(guild_schema) == ()


@pytest.mark.unit
def test_composite_key_argument_orders(permission_schema):
    assert get_argument_order(permission_schema) == ('guild_id', 'tag')
    assert update_argument_order(permission_schema) == ('guild_id', 'tag', 'permission_bit')
    assert delete_argument_order(permission_schema) == ('guild_id', 'tag')


@pytest.mark.unit
def test_update_order_moves_keys_first():
    """Key fields first (declaration order), then the rest (declaration order)."""
    schema = TableSchema('note', (
        FieldSpec('body'),
        FieldSpec('note_id', is_primary_key=True),
        FieldSpec('title'),
        FieldSpec('revision', is_primary_key=True),
    ))

    assert update_argument_order(schema) == ('note_id', 'revision', 'body', 'title')
    assert create_argument_order(schema) == ('body', 'note_id', 'title', 'revision')


@pytest.mark.unit
def test_argument_lengths_match_field_counts(permission_schema):
    n = len(permission_schema.fields)
    k = len(permission_schema.primary_key)

    assert len(create_argument_order(permission_schema)) == n
    assert len(get_argument_order(permission_schema)) == k
    assert len(delete_argument_order(permission_schema)) == k
    assert len(update_argument_order(permission_schema)) == n
    assert len(list_argument_order(permission_schema)) == 0


# ============================
# 2. UNIT TESTS - EXTRACTION
# ============================

@pytest.mark.unit
def test_bind_record_from_dataclass(guild_schema):
    guild = Guild(guild_id=1, name='test', icon_url=None)

    assert bind_record(update_argument_order(guild_schema), guild) == (1, 'test', None)


@pytest.mark.unit
def test_bind_record_from_mapping(permission_schema):
    record = {'permission_bit': 8, 'tag': 'admin', 'guild_id': 42}

    assert bind_record(update_argument_order(permission_schema), record) == (42, 'admin', 8)


@pytest.mark.unit
def test_bind_record_from_plain_object(guild_schema):
    record = SimpleNamespace(guild_id=5, name='x', icon_url='http://icon')

    assert bind_record(delete_argument_order(guild_schema), record) == (5,)


@pytest.mark.unit
def test_bind_key_values_returns_tuple(permission_schema):
    assert bind_key_values(permission_schema, [42, 'admin']) == (42, 'admin')


# ====================
# 3. EDGE CASE TESTS
# ====================

@pytest.mark.edge_case
def test_bind_key_values_wrong_arity(permission_schema):
    with pytest.raises(TypeError, match="takes 2 key value"):
        bind_key_values(permission_schema, [42])


@pytest.mark.edge_case
def test_bind_record_missing_attribute(guild_schema):
    with pytest.raises(AttributeError):
        bind_record(create_argument_order(guild_schema), SimpleNamespace(guild_id=1))


@pytest.mark.edge_case
def test_bind_record_missing_key(guild_schema):
    with pytest.raises(KeyError):
        bind_record(create_argument_order(guild_schema), {'guild_id': 1})


@pytest.mark.edge_case
def test_orders_require_primary_key(keyless_schema):
    with pytest.raises(NoPrimaryKeyError):
        create_argument_order(keyless_schema)
    with pytest.raises(NoPrimaryKeyError):
        list_argument_order(keyless_schema)


@pytest.mark.edge_case
def test_key_only_update_order(key_only_schema):
    assert update_argument_order(key_only_schema) == ('guild_id', 'user_id')
