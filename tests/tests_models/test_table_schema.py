"""
========================================================
Comprehensive pytest suite for models/table_schema.py
========================================================

Sections:
---------
1. Unit tests - construction and derived properties
2. Edge case tests - empty schemas, opaque types, hashing

How to Execute:
---------------
All tests:          pytest tests/tests_models/test_table_schema.py -v
"""

import pytest

from models.table_schema import FieldSpec, TableSchema

# ===============
# 1. UNIT TESTS
# ===============

@pytest.mark.unit
def test_from_record_defaults_to_lowercased_record_name():
    schema = TableSchema.from_record('ServerPermission', [FieldSpec('id', is_primary_key=True)])

    assert schema.table_name == 'serverpermission'
    assert schema.record_name == 'ServerPermission'


@pytest.mark.unit
def test_from_record_explicit_name_takes_precedence():
    schema = TableSchema.from_record(
        'ServerPermission',
        [FieldSpec('id', is_primary_key=True)],
        table_name='server_permission'
    )

    assert schema.table_name == 'server_permission'


@pytest.mark.unit
def test_primary_key_in_declaration_order(permission_schema):
    assert [f.name for f in permission_schema.primary_key] == ['guild_id', 'tag']
    assert [f.name for f in permission_schema.non_key_fields] == ['permission_bit']


@pytest.mark.unit
def test_field_names(guild_schema):
    assert guild_schema.field_names == ('guild_id', 'name', 'icon_url')


@pytest.mark.unit
def test_display_name_prefers_record_name(guild_schema, key_only_schema):
    assert guild_schema.display_name == 'Guild'
    assert key_only_schema.display_name == 'membership'


@pytest.mark.unit
def test_fields_coerced_to_tuple():
    schema = TableSchema('t', [FieldSpec('id', is_primary_key=True)])

    assert isinstance(schema.fields, tuple)


# ====================
# 2. EDGE CASE TESTS
# ====================

@pytest.mark.edge_case
def test_empty_field_list_rejected():
    with pytest.raises(ValueError, match="at least one field"):
        TableSchema('empty', ())


@pytest.mark.edge_case
def test_empty_table_name_rejected():
    with pytest.raises(ValueError):
        TableSchema('', (FieldSpec('id', is_primary_key=True),))


@pytest.mark.edge_case
def test_schema_is_immutable(guild_schema):
    with pytest.raises(AttributeError):
        guild_schema.table_name = 'other'


@pytest.mark.edge_case
def test_type_token_is_opaque_for_equality():
    """Schemas differing only in type tokens generate the same SQL, so compare equal."""
    a = TableSchema('t', (FieldSpec('id', 'i64', is_primary_key=True),))
    b = TableSchema('t', (FieldSpec('id', int, is_primary_key=True),))

    assert a == b
    assert hash(a) == hash(b)


@pytest.mark.edge_case
def test_unhashable_type_token_keeps_schema_hashable():
    schema = TableSchema('t', (FieldSpec('id', ['not', 'hashable'], is_primary_key=True),))

    assert isinstance(hash(schema), int)
