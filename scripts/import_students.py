"""Bulk-import students from a CSV/XLSX file without going through the web API.

    python scripts/import_students.py students.csv --batch 2024 --section A
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "scholax"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from dotenv import load_dotenv

from scholax.common.logging_setup import configure_logging
from scholax.container import build_container
from scholax.main import load_settings


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Import students into ScholaX")
    parser.add_argument("file", type=Path)
    parser.add_argument("--batch", required=True)
    parser.add_argument("--section", required=True)
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = load_settings()
    configure_logging(level=settings.log_level, log_file=settings.log_file)

    container = build_container(settings=settings)
    container.conn.open()
    try:
        result = container.student_importer.import_file(
            filename=args.file.name,
            content=args.file.read_bytes(),
            batch=args.batch,
            section=args.section,
        )
    finally:
        container.conn.close()

    print(f"Created: {result.created_count}  Failed: {result.failed_count}")
    for message in result.errors:
        print(f"  {message}")
    return 0 if result.failed_count == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
