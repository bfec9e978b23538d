#!/usr/bin/env python3
"""
Rename a manager and propagate the new name to matches, champions,
pantheon and penalties.

Usage:
    python scripts/rename_manager.py <manager_id> "<old name>" "<new name>"

If some tables fail, run the same command again: only rows still carrying
the old name are touched.
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from hyenescores.services import IdentityRenamer, PartialRenameError, PersistenceError
from hyenescores.store import get_store


async def main():
    parser = argparse.ArgumentParser(description="Rename a manager everywhere")
    parser.add_argument("manager_id")
    parser.add_argument("old_name")
    parser.add_argument("new_name")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    store = get_store()
    if store is None:
        print("ERROR: store is not configured (SUPABASE_URL / SUPABASE_KEY)", file=sys.stderr)
        sys.exit(1)

    try:
        result = await IdentityRenamer(store).rename(args.manager_id, args.old_name, args.new_name)
    except PartialRenameError as e:
        print(f"PARTIAL: {e.message}")
        for target, message in e.failed.items():
            print(f"  {target}: {message}")
        print("Run the same command again to finish the rename.")
        sys.exit(2)
    except PersistenceError as e:
        print(f"ERROR: {e.message}", file=sys.stderr)
        sys.exit(1)
    finally:
        await store.aclose()

    print(f"Renamed {args.old_name!r} -> {args.new_name!r}")
    for target, count in result.updated_rows.items():
        print(f"  {target}: {count} rows")


if __name__ == "__main__":
    asyncio.run(main())
