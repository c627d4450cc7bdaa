from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from dotenv import load_dotenv

from oneapp_schema.errors import SchemaError
from oneapp_schema.sql_schema import (
    ParseResult,
    SchemaDocument,
    export_document,
    parse_schema_with_diagnostics,
)

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ["tables", "json", "csv", "sql"]


def run(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    # Load environment variables first
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="oneapp-schema",
        description="OneApp schema tools - parse PostgreSQL CREATE TABLE DDL"
    )
    parser.add_argument("--log-level", default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Override configured log level")
    sub = parser.add_subparsers(dest="cmd", required=True)

    # Parse command
    parse = sub.add_parser("parse", help="Parse a schema file and print it")
    parse.add_argument("file", help="Path to SQL file, or - for stdin")
    parse.add_argument("--format", choices=OUTPUT_FORMATS, default="tables",
                       help="Output format (default: tables)")
    parse.add_argument("--dialect", default=None,
                       help="Transpile SQL output to this sqlglot dialect")

    # Check command
    check = sub.add_parser("check", help="Report statements and clauses the parser skipped")
    check.add_argument("file", help="Path to SQL file, or - for stdin")

    # Serve command
    serve = sub.add_parser("serve", help="Run the schema web service")
    serve.add_argument("--config", default=None, help="Path to YAML config file")
    serve.add_argument("--host", default=None, help="Bind address")
    serve.add_argument("--port", type=int, default=None, help="Listen port")

    args = parser.parse_args(argv)

    # Import config after load_dotenv to ensure env vars are loaded
    from oneapp_schema.config import load_service_config

    try:
        config = load_service_config(getattr(args, "config", None))
    except (FileNotFoundError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=getattr(logging, (args.log_level or config.logging.level).upper()),
        format=config.logging.format,
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )

    try:
        if args.cmd == "parse":
            result = parse_schema_with_diagnostics(_read_input(args.file))
            print(render(result.document, args.format, args.dialect), end="")
            return 0

        if args.cmd == "check":
            result = parse_schema_with_diagnostics(_read_input(args.file))
            print(format_diagnostics(result))
            return 1 if result.document.is_empty else 0

        if args.cmd == "serve":
            from oneapp_schema.web.app import run_server
            host = args.host or config.server.host
            port = args.port or config.server.port
            logger.info(f"Serving schema API on {host}:{port}")
            run_server(host=host, port=port, settings=config.to_settings())
            return 0

    except (OSError, UnicodeDecodeError, SchemaError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return 0


def render(document: SchemaDocument, fmt: str, dialect: str | None = None) -> str:
    """Render a parsed document for the terminal."""
    if fmt == "tables":
        return format_tables(document)
    output = export_document(document, fmt, dialect)
    return output if output.endswith("\n") else output + "\n"


def format_tables(document: SchemaDocument) -> str:
    """Human-readable listing with required/optional and description badges."""
    if document.is_empty:
        return "No tables found.\n"

    lines = []
    for table in document:
        lines.append(f"{table.name} ({len(table.fields)} fields)")
        width = max(len(f.name) for f in table.fields)
        for field in table.fields:
            badge = "required" if field.required else "optional"
            line = f"  {field.name.ljust(width)}  {field.type}  [{badge}]"
            if field.description:
                line += f"  {field.description}"
            lines.append(line)
        lines.append("")
    return "\n".join(lines)


def format_diagnostics(result: ParseResult) -> str:
    """One line per diagnostic plus a summary line."""
    lines = []
    for diag in result.diagnostics:
        location = f"line {diag.line}" if diag.line else "-"
        table = f" [{diag.table}]" if diag.table else ""
        text = f": {diag.text}" if diag.text else ""
        lines.append(f"{location}{table} {diag.kind.value} - {diag.message}{text}")
    lines.append(
        f"{len(result.document)} table(s), "
        f"{sum(len(t.fields) for t in result.document)} field(s), "
        f"{len(result.diagnostics)} diagnostic(s)"
    )
    return "\n".join(lines)


def _read_input(file: str) -> str:
    if file == "-":
        return sys.stdin.read()
    return Path(file).read_text(encoding="utf-8")


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
