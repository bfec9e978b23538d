#!/usr/bin/env python3
"""
Export the full league document as JSON.

Usage:
    python scripts/export_document.py
    python scripts/export_document.py --output backup.json
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from hyenescores.services import DocumentAssembler
from hyenescores.store import get_store


async def main():
    parser = argparse.ArgumentParser(description="Export the league document as JSON")
    parser.add_argument("--output", "-o", type=Path, help="Output file (default: stdout)")
    args = parser.parse_args()

    store = get_store()
    if store is None:
        print("ERROR: store is not configured (SUPABASE_URL / SUPABASE_KEY)", file=sys.stderr)
        sys.exit(1)

    try:
        document = await DocumentAssembler(store).fetch_document()
    finally:
        await store.aclose()

    payload = json.dumps(document.to_json_dict(), ensure_ascii=False, indent=2)
    if args.output:
        args.output.write_text(payload, encoding="utf-8")
        entities = document.entities
        print(f"Exported to {args.output}")
        print(f"  managers: {len(entities.managers)}")
        print(f"  seasons:  {len(entities.seasons)}")
        print(f"  matchday blocks: {len(entities.matches)}")
        print(f"  champions: {sum(len(v) for v in document.palmares.values())}")
        print(f"  pantheon:  {len(document.pantheon)}")
        print(f"  penalties: {len(document.penalties)}")
    else:
        print(payload)


if __name__ == "__main__":
    asyncio.run(main())
