#!/usr/bin/env python3
"""
Import customers from a spreadsheet without going through the API.

Runs the same pipeline as ``POST /api/customers/import`` against the
configured database and prints the per-row outcome.
"""

import asyncio
import mimetypes
import sys
from pathlib import Path
from uuid import UUID

# Add project root and backend app to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
sys.path.insert(0, str(project_root / "apps" / "backend"))

from dotenv import load_dotenv

load_dotenv()

from rich import box
from rich.console import Console
from rich.table import Table

from packages.core.customer_import import (
    ImportOptions,
    ImportPipelineError,
    ImportResult,
    UploadedFile,
    run_import,
)

from app.core.config import get_settings
from app.core.logging import setup_logging
from app.db.session import async_engine, session_scope
from app.services.customer_service import SqlAlchemyCustomerSink

console = Console()
settings = get_settings()


def print_result(result: ImportResult) -> None:
    """Render an import result."""
    console.print(
        f"[green]{result.success} imported[/green], "
        f"[red]{result.failed} failed[/red] of {result.total} rows"
    )
    if result.aborted:
        console.print(f"[yellow]Stopped early: {result.aborted}[/yellow]")

    if not result.errors:
        return

    table = Table(title="Row errors", box=box.SIMPLE)
    table.add_column("Row", justify="right", style="cyan")
    table.add_column("Error", style="red")
    for error in result.errors:
        table.add_row(str(error.row), error.error)
    console.print(table)


async def import_file(path: Path, created_by: UUID | None) -> int:
    """Import ``path`` and return a process exit code."""
    content_type, _ = mimetypes.guess_type(path.name)
    upload = UploadedFile(
        filename=path.name,
        content_type=content_type,
        data=path.read_bytes(),
    )
    options = ImportOptions(
        max_upload_bytes=settings.import_max_upload_bytes,
        max_rows=settings.import_max_rows,
        timeout_seconds=settings.import_timeout_seconds,
    )

    try:
        async with session_scope() as session:
            result = await run_import(
                upload,
                SqlAlchemyCustomerSink(session),
                created_by=created_by,
                options=options,
            )
    except ImportPipelineError as e:
        console.print(f"[red]Import failed:[/red] {e.message}")
        return 1
    finally:
        await async_engine.dispose()

    print_result(result)
    return 0 if result.failed == 0 else 2


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Import customers from a spreadsheet")
    parser.add_argument("file", type=Path, help="Path to a .xlsx, .xls or .csv file")
    parser.add_argument(
        "--created-by",
        type=UUID,
        default=None,
        help="User id recorded as the creator of imported customers",
    )
    args = parser.parse_args()

    setup_logging(level=settings.log_level, format_type=settings.log_format)
    sys.exit(asyncio.run(import_file(args.file, args.created_by)))
