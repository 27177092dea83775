#!/usr/bin/env python
"""Resolve EPREL codes and print the tire attributes the placement uses.

Usage:
    python scripts/lookup_tire.py 123456 654321
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tirestore.core.errors import CatalogLookupFailure
from tirestore.services.catalog import CatalogLookup


async def main(codes: list[str]) -> int:
    catalog = CatalogLookup()
    failures = 0
    try:
        for code in codes:
            try:
                tire = await catalog.resolve(code)
            except CatalogLookupFailure as e:
                print(f"{code}: {e.message}")
                failures += 1
                continue
            print(
                f"{code}: {tire.brand} {tire.model} "
                f"{tire.width * 10:.0f}/{tire.aspect_ratio} R{tire.diameter} "
                f"(width {tire.width} cm)"
            )
    finally:
        await catalog.close()
    return 1 if failures else 0


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)
    sys.exit(asyncio.run(main(sys.argv[1:])))
