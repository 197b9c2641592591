"""
=========================================================
Build-time CRUD SQL generator.
=========================================================

Command-line entry point that turns table descriptors into query plans and
writes them out for other build steps or for human review:

    - Loads JSON descriptors (models.schema_loader)
    - Validates every schema and reports every error in one pass
    - Generates get/get_optional/create/update/delete/list plans (sql.plans)
    - Renders them as annotated SQL, JSON, or an importable Python module

Usage:
    # Print annotated SQL for every table in schemas/
    python main.py

    # One descriptor file, one table, as a Python module
    python main.py --schema schemas/guild.json --table guild --format python \\
        --output generated/guild_queries.py

    # Emit the valid tables even when others fail validation
    python main.py --schema schemas/all.json --skip-invalid --format json

Example:
    >>> from main import CodeGenerator
    >>>
    >>> generator = CodeGenerator(schema_paths=['schemas/guild.json'])
    >>> plans = generator.generate()
    >>> print(generator.render(plans, 'sql'))
"""

import argparse
import json
import re
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from core.config import config
from core.logger import get_logger, setup_logging
from models.schema_loader import SchemaLoadError, load_schema_dir, load_schemas
from models.table_schema import TableSchema
from sql.plans import QueryPlan, generate_all
from sql.validator import SchemaError

logger = get_logger(__name__)

FORMATS = ('sql', 'json', 'python')

TablePlans = Dict[str, Dict[str, QueryPlan]]


class GenerationError(Exception):
    """Exception raised when generation cannot produce output."""
    pass


def constant_prefix(table_name: str) -> str:
    """Upper-case identifier prefix for a table's generated constants."""
    prefix = re.sub(r'\W', '_', table_name).upper()
    return f"_{prefix}" if prefix[:1].isdigit() else prefix


def render_sql(plans: TablePlans) -> str:
    """Render plans as a SQL file with one commented statement per operation."""
    blocks = []
    for table_name, table_plans in plans.items():
        for plan in table_plans.values():
            arguments = ', '.join(plan.argument_order) or 'no arguments'
            blocks.append(f"-- {table_name}.{plan.operation} ({arguments})\n{plan.sql_text};")
    return "\n\n".join(blocks) + "\n"


def render_json(plans: TablePlans, errors: Sequence[SchemaError] = ()) -> str:
    document = {
        'tables': {
            table_name: {
                plan.operation: {'sql': plan.sql_text, 'args': list(plan.argument_order)}
                for plan in table_plans.values()
            }
            for table_name, table_plans in plans.items()
        },
        'errors': [{'table': e.table_name, 'message': str(e)} for e in errors],
    }
    return json.dumps(document, indent=2) + "\n"


def render_python(plans: TablePlans) -> str:
    """
    Render plans as an importable Python module.

    Each operation becomes a <TABLE>_<OP>_SQL / <TABLE>_<OP>_ARGS constant
    pair, and PLANS maps table -> operation -> (sql, args).
    """
    lines = [
        '"""Generated CRUD statements. Do not edit; regenerate with main.py."""',
        '',
    ]
    registry = []

    for table_name, table_plans in plans.items():
        prefix = constant_prefix(table_name)
        entries = []
        for plan in table_plans.values():
            name = f"{prefix}_{plan.operation.upper()}"
            lines.append(f"{name}_SQL = {plan.sql_text!r}")
            lines.append(f"{name}_ARGS = {tuple(plan.argument_order)!r}")
            entries.append(f"        {plan.operation!r}: ({name}_SQL, {name}_ARGS),")
        lines.append('')
        registry.append(f"    {table_name!r}: {{")
        registry.extend(entries)
        registry.append("    },")

    lines.append("PLANS = {")
    lines.extend(registry)
    lines.append("}")
    return "\n".join(lines) + "\n"


class CodeGenerator:
    """
    Loads descriptors, validates them and renders query plans.

    Attributes:
        schema_paths: Descriptor files; the configured schema directory when empty
        tables: Optional table-name filter
        skip_invalid: Emit valid tables even if others fail validation
        errors: Schema errors from the last generate() call

    Example:
        >>> generator = CodeGenerator(schema_paths=['schemas/guild.json'], tables=['guild'])
        >>> plans = generator.generate()
        >>> generator.write(generator.render(plans, 'json'), 'generated/guild.json')
    """

    def __init__(
        self,
        schema_paths: Optional[Sequence[str]] = None,
        tables: Optional[Sequence[str]] = None,
        skip_invalid: bool = False
    ):
        self.schema_paths = [Path(p) for p in schema_paths or []]
        self.tables = set(tables or [])
        self.skip_invalid = skip_invalid
        self.errors: List[SchemaError] = []

    def load(self) -> List[TableSchema]:
        """
        Load and filter descriptors.

        Raises:
            GenerationError: If a descriptor is malformed or a requested table is missing
        """
        try:
            if self.schema_paths:
                schemas = [s for path in self.schema_paths for s in load_schemas(path)]
            else:
                logger.info(f"Reading descriptors from {config.schema_dir}")
                schemas = load_schema_dir(config.schema_dir)
        except SchemaLoadError as e:
            raise GenerationError(str(e)) from e

        if self.tables:
            schemas = [s for s in schemas if s.table_name in self.tables]
            missing = self.tables - {s.table_name for s in schemas}
            if missing:
                raise GenerationError(f"Unknown table(s): {', '.join(sorted(missing))}")

        if not schemas:
            raise GenerationError("No table descriptors found")

        return schemas

    def generate(self) -> TablePlans:
        """
        Generate plans for every loaded schema.

        Raises:
            GenerationError: If any schema is invalid and skip_invalid is False
        """
        plans, self.errors = generate_all(self.load())

        for error in self.errors:
            logger.error(f"❌ {error}")

        if self.errors and not self.skip_invalid:
            raise GenerationError(
                f"{len(self.errors)} schema error(s); no output written"
            )

        for table_name, table_plans in plans.items():
            logger.info(f"✅ {table_name}: {', '.join(table_plans)}")

        return plans

    def render(self, plans: TablePlans, output_format: str) -> str:
        if output_format == 'sql':
            return render_sql(plans)
        if output_format == 'json':
            return render_json(plans, self.errors)
        if output_format == 'python':
            return render_python(plans)
        raise GenerationError(f"Unknown output format: {output_format}")

    def write(self, content: str, output: Optional[str] = None) -> None:
        """Write rendered output to a file, or stdout when output is None."""
        if output is None:
            sys.stdout.write(content)
            return

        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding='utf-8')
        logger.info(f"Wrote {path}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Command-line interface for the generator.

    Exit Codes:
        0: Success
        1: Error (bad descriptor, schema error, unknown table)
        130: User interrupt (Ctrl+C)
    """
    parser = argparse.ArgumentParser(
        description="Generate CRUD SQL statements and binding order from table descriptors",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Every descriptor in the configured schema directory, as SQL
  python main.py

  # One file, one table, as an importable module
  python main.py --schema schemas/guild.json --table guild --format python --output generated/guild.py

  # Report all schema errors but still emit the valid tables
  python main.py --schema schemas/all.json --skip-invalid --format json
        """
    )

    parser.add_argument(
        '--schema',
        action='append',
        metavar='FILE',
        help='JSON descriptor file (repeatable; defaults to every *.json in CRUDGEN_SCHEMA_DIR)'
    )
    parser.add_argument(
        '--table',
        action='append',
        metavar='NAME',
        help='Only generate this table (repeatable)'
    )
    parser.add_argument(
        '--format',
        choices=FORMATS,
        default='sql',
        help='Output format'
    )
    parser.add_argument(
        '--output',
        metavar='FILE',
        help='Write output to FILE instead of stdout'
    )
    parser.add_argument(
        '--skip-invalid',
        action='store_true',
        help='Emit valid tables even if other schemas fail validation'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging (DEBUG level)'
    )

    args = parser.parse_args(argv)

    setup_logging(log_level='DEBUG' if args.verbose else config.log_level)

    try:
        generator = CodeGenerator(
            schema_paths=args.schema,
            tables=args.table,
            skip_invalid=args.skip_invalid
        )
        plans = generator.generate()
        generator.write(generator.render(plans, args.format), args.output)
        return 0

    except GenerationError as e:
        logger.error(f"❌ Generation failed: {e}")
        return 1
    except OSError as e:
        logger.error(f"❌ Could not write output: {e}", exc_info=True)
        return 1
    except KeyboardInterrupt:
        logger.warning("⚠️  Generation interrupted by user")
        return 130


if __name__ == '__main__':
    sys.exit(main())
