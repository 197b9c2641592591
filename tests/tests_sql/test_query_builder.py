"""
========================================================
Comprehensive pytest suite for sql/query_builder.py
========================================================

Sections:
---------
1. Unit tests - clause builders
2. Unit tests - statement builders (single key)
3. Unit tests - statement builders (composite key)
4. Edge case tests - SET clause forms, key-only and keyless tables

Test Coverage:
--------------
- placeholder_builder / column_list_builder / where_predicate_builder
- select_by_key_builder, insert_builder, update_builder,
  delete_builder, select_all_builder

How to Execute:
---------------
All tests:          pytest tests/tests_sql/test_query_builder.py -v
By category:        pytest tests/tests_sql/test_query_builder.py -m edge_case
"""

import pytest

from models.table_schema import FieldSpec, TableSchema
from sql.query_builder import (
    column_list_builder,
    delete_builder,
    insert_builder,
    placeholder_builder,
    select_all_builder,
    select_by_key_builder,
    set_clause_builder,
    update_builder,
    where_predicate_builder,
)
from sql.validator import NoPrimaryKeyError, NoUpdatableColumnsError

# ============================
# 1. UNIT TESTS - CLAUSES
# ============================

@pytest.mark.unit
def test_placeholder_builder_from_one():
    assert placeholder_builder(1, 3) == "$1, $2, $3"


@pytest.mark.unit
def test_placeholder_builder_offset_start():
    assert placeholder_builder(2, 2) == "$2, $3"


@pytest.mark.unit
def test_placeholder_builder_zero_count():
    assert placeholder_builder(1, 0) == ""


@pytest.mark.unit
def test_column_list_builder_keeps_order(guild_schema):
    assert column_list_builder(guild_schema.fields) == "guild_id, name, icon_url"


@pytest.mark.unit
def test_where_predicate_single_key(guild_schema):
    assert where_predicate_builder(guild_schema.primary_key) == "guild_id = $1"


@pytest.mark.unit
def test_where_predicate_composite_key(permission_schema):
    assert where_predicate_builder(permission_schema.primary_key) == "guild_id = $1 AND tag = $2"


@pytest.mark.unit
def test_where_predicate_custom_start(permission_schema):
    assert where_predicate_builder(permission_schema.primary_key, start=4) == "guild_id = $4 AND tag = $5"


# =========================================
# 2. UNIT TESTS - STATEMENTS (SINGLE KEY)
# =========================================

@pytest.mark.unit
def test_select_by_key_builder(guild_schema):
    assert select_by_key_builder(guild_schema) == "SELECT * FROM guild WHERE guild_id = $1"


@pytest.mark.unit
def test_insert_builder(guild_schema):
    assert insert_builder(guild_schema) == (
        "INSERT INTO guild (guild_id, name, icon_url) VALUES ($1, $2, $3) RETURNING *"
    )


@pytest.mark.unit
def test_update_builder_binds_key_first(guild_schema):
    """Key occupies $1; SET values continue at $2."""
    assert update_builder(guild_schema) == (
        "UPDATE guild SET (name, icon_url) = ($2, $3) WHERE guild_id = $1 RETURNING *"
    )


@pytest.mark.unit
def test_delete_builder(guild_schema):
    assert delete_builder(guild_schema) == "DELETE FROM guild WHERE guild_id = $1"


@pytest.mark.unit
def test_select_all_builder(guild_schema):
    assert select_all_builder(guild_schema) == "SELECT * FROM guild"


@pytest.mark.unit
def test_default_table_name_is_lowercased_record(dictionary_schema):
    assert select_all_builder(dictionary_schema) == "SELECT * FROM dictionary"
    assert update_builder(dictionary_schema) == (
        "UPDATE dictionary SET dict = $2 WHERE guild_id = $1 RETURNING *"
    )


# ============================================
# 3. UNIT TESTS - STATEMENTS (COMPOSITE KEY)
# ============================================

@pytest.mark.unit
def test_select_by_composite_key(permission_schema):
    assert select_by_key_builder(permission_schema) == (
        "SELECT * FROM server_permission WHERE guild_id = $1 AND tag = $2"
    )


@pytest.mark.unit
def test_insert_composite_key(permission_schema):
    assert insert_builder(permission_schema) == (
        "INSERT INTO server_permission (guild_id, tag, permission_bit) "
        "VALUES ($1, $2, $3) RETURNING *"
    )


@pytest.mark.unit
def test_update_composite_key_scalar_set(permission_schema):
    assert update_builder(permission_schema) == (
        "UPDATE server_permission SET permission_bit = $3 "
        "WHERE guild_id = $1 AND tag = $2 RETURNING *"
    )


@pytest.mark.unit
def test_delete_composite_key(permission_schema):
    assert delete_builder(permission_schema) == (
        "DELETE FROM server_permission WHERE guild_id = $1 AND tag = $2"
    )


# ====================
# 4. EDGE CASE TESTS
# ====================

@pytest.mark.edge_case
def test_set_clause_scalar_form_for_one_column():
    assert set_clause_builder([FieldSpec('name')], start=2) == "name = $2"


@pytest.mark.edge_case
def test_set_clause_row_value_form_for_many_columns():
    fields = [FieldSpec('a'), FieldSpec('b'), FieldSpec('c')]

    assert set_clause_builder(fields, start=3) == "(a, b, c) = ($3, $4, $5)"


@pytest.mark.edge_case
def test_update_key_not_first_in_declaration():
    """Key fields declared after mutable ones still bind first."""
    schema = TableSchema('note', (
        FieldSpec('body'),
        FieldSpec('note_id', is_primary_key=True),
        FieldSpec('title'),
    ))

    assert update_builder(schema) == (
        "UPDATE note SET (body, title) = ($2, $3) WHERE note_id = $1 RETURNING *"
    )
    assert insert_builder(schema) == (
        "INSERT INTO note (body, note_id, title) VALUES ($1, $2, $3) RETURNING *"
    )


@pytest.mark.edge_case
def test_update_builder_rejects_key_only_table(key_only_schema):
    with pytest.raises(NoUpdatableColumnsError):
        update_builder(key_only_schema)


@pytest.mark.edge_case
def test_key_only_table_other_statements(key_only_schema):
    assert select_by_key_builder(key_only_schema) == (
        "SELECT * FROM membership WHERE guild_id = $1 AND user_id = $2"
    )
    assert insert_builder(key_only_schema) == (
        "INSERT INTO membership (guild_id, user_id) VALUES ($1, $2) RETURNING *"
    )


@pytest.mark.edge_case
@pytest.mark.parametrize("builder", [
    select_by_key_builder,
    insert_builder,
    update_builder,
    delete_builder,
    select_all_builder,
])
def test_every_builder_validates(builder, keyless_schema):
    with pytest.raises(NoPrimaryKeyError):
        builder(keyless_schema)
