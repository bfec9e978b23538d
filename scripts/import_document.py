#!/usr/bin/env python3
"""
Import a league document (JSON export) into the store.

Usage:
    python scripts/import_document.py backup.json
    python scripts/import_document.py legacy_v2.json --progress-every 100

Matchday blocks that fail are reported and skipped; everything else is
imported. Re-running the import is safe: every write is an upsert or a
matchday replace.
"""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from hyenescores.services import BulkImporter, InvalidDocumentError, RecordPersister
from hyenescores.store import get_store


async def main():
    parser = argparse.ArgumentParser(description="Import a league document into the store")
    parser.add_argument("path", type=Path, help="JSON document to import")
    parser.add_argument("--progress-every", type=int, default=None, help="Log progress every N blocks")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    document = json.loads(args.path.read_text(encoding="utf-8"))

    store = get_store()
    if store is None:
        print("ERROR: store is not configured (SUPABASE_URL / SUPABASE_KEY)", file=sys.stderr)
        sys.exit(1)

    importer = BulkImporter(RecordPersister(store), progress_interval=args.progress_every)
    try:
        result = await importer.import_document(document)
    except InvalidDocumentError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        await store.aclose()

    print(f"{'='*60}")
    print(f"Blocks imported: {result.imported_count}/{result.total_blocks}")
    print(f"Errors: {result.error_count}")
    for error in result.errors:
        print(f"  {error}")
    sys.exit(0 if result.error_count == 0 else 2)


if __name__ == "__main__":
    asyncio.run(main())
