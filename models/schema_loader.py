"""
===========================================================
JSON schema descriptor loading.
===========================================================

Reads table descriptors for the build-time generator. A descriptor file
holds either a single table object or {"tables": [...]}:

    {"tables": [
        {"record": "Guild", "name": "guild",
         "fields": [{"name": "guild_id", "type": "i64", "pk": true},
                    {"name": "name", "type": "String"},
                    {"name": "icon_url", "type": "Option<String>"}]}
    ]}

"name" defaults to the lowercased "record"; "type" is optional and opaque;
"pk" defaults to false. Loading does not validate primary keys, so that
every schema error can be reported together by sql.validator.validate_all.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from models.table_schema import FieldSpec, TableSchema

logger = logging.getLogger(__name__)


class SchemaLoadError(Exception):
    """Exception raised when a descriptor file or entry is malformed."""
    pass


def parse_field(entry: Dict[str, Any]) -> FieldSpec:
    if not isinstance(entry, dict) or not entry.get('name'):
        raise SchemaLoadError(f"Field entry must be an object with a 'name': {entry!r}")
    return FieldSpec(
        name=entry['name'],
        type=entry.get('type'),
        is_primary_key=bool(entry.get('pk', False))
    )


def parse_schema(entry: Dict[str, Any]) -> TableSchema:
    """
    Build a TableSchema from one descriptor object.

    Args:
        entry: Dict with 'fields' and at least one of 'record' or 'name'

    Returns:
        TableSchema instance

    Raises:
        SchemaLoadError: If the entry is malformed
    """
    if not isinstance(entry, dict):
        raise SchemaLoadError(f"Table entry must be an object, got {type(entry).__name__}")

    record = entry.get('record')
    name = entry.get('name')
    if not record and not name:
        raise SchemaLoadError("Table entry needs a 'record' or a 'name'")

    raw_fields = entry.get('fields')
    if not isinstance(raw_fields, list) or not raw_fields:
        raise SchemaLoadError(f"Table `{name or record}` must list at least one field")

    fields = [parse_field(f) for f in raw_fields]

    if record:
        return TableSchema.from_record(record, fields, table_name=name)
    return TableSchema(table_name=name, fields=tuple(fields))


def parse_document(document: Any) -> List[TableSchema]:
    """Parse a decoded descriptor document (single table or {'tables': [...]})."""
    if isinstance(document, dict) and 'tables' in document:
        entries = document['tables']
        if not isinstance(entries, list):
            raise SchemaLoadError("'tables' must be a list")
    else:
        entries = [document]
    return [parse_schema(entry) for entry in entries]


def load_schemas(path: Union[str, Path]) -> List[TableSchema]:
    """
    Load every table descriptor from a JSON file.

    Args:
        path: Descriptor file path

    Returns:
        Schemas in file order

    Raises:
        SchemaLoadError: If the file is missing, not JSON, or malformed
    """
    path = Path(path)
    try:
        document = json.loads(path.read_text(encoding='utf-8'))
    except FileNotFoundError as e:
        raise SchemaLoadError(f"Schema file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise SchemaLoadError(f"Invalid JSON in {path}: {e}") from e

    schemas = parse_document(document)
    logger.info(f"Loaded {len(schemas)} table descriptor(s) from {path}")
    return schemas


def load_schema_dir(directory: Union[str, Path]) -> List[TableSchema]:
    """
    Load all *.json descriptor files in a directory, sorted by file name.

    Raises:
        SchemaLoadError: If the directory does not exist or a file is malformed
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise SchemaLoadError(f"Schema directory not found: {directory}")

    schemas: List[TableSchema] = []
    for path in sorted(directory.glob('*.json')):
        schemas.extend(load_schemas(path))
    return schemas
