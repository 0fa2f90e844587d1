# backend/app/scripts/validate_catalog.py

"""
Validate the Discovery catalogs (touchpoints, modules, industries).

Usage examples:

  # Validate the shipped catalogs in app/data
  cd backend
  python -m app.scripts.validate_catalog

  # Validate a candidate catalog directory before deploying it
  python -m app.scripts.validate_catalog --data-dir /tmp/catalog_v2

Exit codes: 0 clean, 1 data issues found, 2 catalog could not be loaded.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, List

from app.services.catalog import CatalogLoadError, load_catalog, validate_catalog


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Validate Discovery catalog JSON files.")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory containing touchpoints/modules/industries JSON (default: app/data)",
    )
    args = parser.parse_args(argv)

    try:
        catalog = load_catalog(args.data_dir)
    except CatalogLoadError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 2

    issues = validate_catalog(catalog)
    if not issues:
        print(
            f"✅ Catalog {catalog.version} OK: "
            f"{len(catalog.touchpoints())} touchpoints, {len(catalog.modules)} modules, "
            f"{len(catalog.industries)} industries"
        )
        return 0

    print(f"❌ Catalog {catalog.version} has {len(issues)} issue(s):", file=sys.stderr)
    for issue in issues:
        print(f"  [{issue.code}] {issue.message}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
