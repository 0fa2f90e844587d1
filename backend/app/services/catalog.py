"""
Catalog loading and validation.

The touchpoint, module and industry catalogs ship as versioned JSON files in
app/data/. They are loaded once per process and treated as immutable.
"""
import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Dict, Any

from pydantic import ValidationError

from app.core.config import settings
from app.schemas.catalog import Catalog

logger = logging.getLogger(__name__)

TOUCHPOINTS_FILE = "touchpoints_v1.json"
MODULES_FILE = "modules_v1.json"
INDUSTRIES_FILE = "industries_v1.json"


class CatalogLoadError(Exception):
    """Raised when a catalog file is missing, is not valid JSON, or fails schema validation."""
    pass


@dataclass(frozen=True)
class CatalogIssue:
    """A data error found in a catalog. Never raised, only reported."""
    code: str
    message: str


def _read_json(path: Path) -> Dict[str, Any]:
    try:
        with path.open(encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise CatalogLoadError(f"Catalog file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise CatalogLoadError(f"Catalog file {path} is not valid JSON: {e}") from e


def load_catalog(data_dir: Optional[Path] = None) -> Catalog:
    """
    Load and validate the catalogs from data_dir (defaults to settings.catalog_dir).

    Raises CatalogLoadError on a missing file, bad JSON or a schema violation.
    """
    data_dir = Path(data_dir) if data_dir else settings.catalog_dir

    touchpoints = _read_json(data_dir / TOUCHPOINTS_FILE)
    modules = _read_json(data_dir / MODULES_FILE)
    industries = _read_json(data_dir / INDUSTRIES_FILE)

    versions = {touchpoints.get("version"), modules.get("version"), industries.get("version")}
    if len(versions) != 1:
        logger.warning("Catalog files in %s disagree on version: %s", data_dir, sorted(map(str, versions)))

    try:
        catalog = Catalog(
            version=str(touchpoints.get("version", "unknown")),
            phases=touchpoints.get("phases", []),
            module_groups=modules.get("module_groups", []),
            modules=modules.get("modules", []),
            industries=industries.get("industries", []),
            generic_defaults=industries.get("generic_defaults", []),
        )
    except ValidationError as e:
        raise CatalogLoadError(f"Catalog in {data_dir} failed validation: {e}") from e

    logger.info(
        "Loaded catalog %s from %s: %d phases, %d touchpoints, %d modules, %d industries",
        catalog.version,
        data_dir,
        len(catalog.phases),
        len(catalog.touchpoints()),
        len(catalog.modules),
        len(catalog.industries),
    )
    return catalog


@lru_cache(maxsize=1)
def get_catalog() -> Catalog:
    """Process-wide catalog, loaded on first use."""
    return load_catalog()


def validate_catalog(catalog: Catalog) -> List[CatalogIssue]:
    """
    Check catalog data for errors the engine would otherwise silently skip.

    Returns an empty list for a clean catalog.
    """
    issues: List[CatalogIssue] = []

    def _duplicates(values: List[str]) -> List[str]:
        seen, dupes = set(), []
        for value in values:
            if value in seen and value not in dupes:
                dupes.append(value)
            seen.add(value)
        return dupes

    module_ids = {module.id for module in catalog.modules}
    group_ids = {group.id for group in catalog.module_groups}
    touchpoints = catalog.touchpoints()

    for dupe in _duplicates([phase.id for phase in catalog.phases]):
        issues.append(CatalogIssue("duplicate-phase", f"Phase id {dupe!r} is declared more than once"))
    for dupe in _duplicates([tp.id for tp in touchpoints]):
        issues.append(CatalogIssue("duplicate-touchpoint", f"Touchpoint id {dupe!r} is declared more than once"))
    sub_ids = [sub.id for tp in touchpoints for sub in tp.sub_touchpoints]
    for dupe in _duplicates(sub_ids):
        issues.append(CatalogIssue("duplicate-sub-touchpoint", f"Sub-touchpoint id {dupe!r} is declared more than once"))
    for dupe in _duplicates([module.id for module in catalog.modules]):
        issues.append(CatalogIssue("duplicate-module", f"Module id {dupe!r} is declared more than once"))
    for dupe in _duplicates([module.code for module in catalog.modules]):
        issues.append(CatalogIssue("duplicate-code", f"Module code {dupe!r} is used by more than one module"))

    for tp in touchpoints:
        if not tp.module_mapping:
            issues.append(CatalogIssue("empty-mapping", f"Touchpoint {tp.id!r} triggers no modules"))
        for module_id in tp.module_mapping:
            if module_id not in module_ids:
                issues.append(CatalogIssue(
                    "unknown-module",
                    f"Touchpoint {tp.id!r} maps to unknown module {module_id!r}",
                ))

    for module in catalog.modules:
        if module.group not in group_ids:
            issues.append(CatalogIssue(
                "unknown-group",
                f"Module {module.id!r} belongs to unknown group {module.group!r}",
            ))

    for industry in catalog.industries:
        for module_id in industry.default_modules:
            if module_id not in module_ids:
                issues.append(CatalogIssue(
                    "unknown-module",
                    f"Industry {industry.id!r} defaults to unknown module {module_id!r}",
                ))

    if not catalog.generic_defaults:
        issues.append(CatalogIssue("empty-generic-defaults", "Generic default starter list is empty"))
    for module_id in catalog.generic_defaults:
        if module_id not in module_ids:
            issues.append(CatalogIssue(
                "unknown-module",
                f"Generic defaults reference unknown module {module_id!r}",
            ))

    return issues
