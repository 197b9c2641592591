"""
Shared pytest configuration and fixtures for all tests.

Key fixtures:
- guild_schema: single-key table with two mutable columns
- permission_schema: composite-key table with one mutable column
- dictionary_schema: record-named table, table name left to default
- key_only_schema: every field is a primary-key field
- keyless_schema: no primary key (invalid)
"""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path to enable importing project modules
# This allows tests to import from 'core', 'models', 'sql', etc. without installation
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from models.table_schema import FieldSpec, TableSchema  # noqa: E402


def pytest_configure(config):
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: Unit tests - isolated function-level tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interactions")
    config.addinivalue_line("markers", "smoke: Smoke tests - basic functionality checks")
    config.addinivalue_line("markers", "edge_case: Edge case tests - boundary conditions")
    config.addinivalue_line("markers", "regression: Regression tests - previously fixed bugs")


@pytest.fixture
def guild_schema():
    return TableSchema.from_record(
        'Guild',
        [
            FieldSpec('guild_id', 'i64', is_primary_key=True),
            FieldSpec('name', 'String'),
            FieldSpec('icon_url', 'Option<String>'),
        ],
        table_name='guild'
    )


@pytest.fixture
def permission_schema():
    return TableSchema.from_record(
        'ServerPermission',
        [
            FieldSpec('guild_id', 'i64', is_primary_key=True),
            FieldSpec('tag', 'String', is_primary_key=True),
            FieldSpec('permission_bit', 'i64'),
        ],
        table_name='server_permission'
    )


@pytest.fixture
def dictionary_schema():
    return TableSchema.from_record(
        'Dictionary',
        [
            FieldSpec('guild_id', 'i64', is_primary_key=True),
            FieldSpec('dict', 'String'),
        ]
    )


@pytest.fixture
def key_only_schema():
    return TableSchema('membership', (
        FieldSpec('guild_id', is_primary_key=True),
        FieldSpec('user_id', is_primary_key=True),
    ))


@pytest.fixture
def keyless_schema():
    return TableSchema('audit_entry', (
        FieldSpec('message'),
        FieldSpec('created_at'),
    ))
