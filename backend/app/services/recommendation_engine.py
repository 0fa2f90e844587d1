"""
Module recommendation engine.

Deterministic, rule-based recommendations with transparent reasons. Selected
touchpoints trigger modules through the catalog's module mapping; every
industry contributes a default starter set; modules sharing a group with either
are surfaced as optional padding.

Two modes:
- discovery-driven: at least one selected touchpoint triggered a module
- default-starter-set: nothing was triggered, so only the industry starters
  (and their group siblings) are shown
"""
from dataclasses import dataclass, field
from typing import List, Dict, Optional, Tuple
import logging

from app.core.config import Settings, settings as default_settings
from app.schemas.catalog import Catalog
from app.schemas.discovery import DiscoverySelection
from app.schemas.recommendation import (
    ConfidenceLevel,
    DefaultStarterReason,
    ModuleGroupView,
    PaddingReason,
    RecommendationMode,
    RecommendationResult,
    RecommendationWarning,
    RecommendedModule,
    TriggeredReason,
    WarningKind,
    WhySuggested,
)
from app.services.catalog import get_catalog

logger = logging.getLogger(__name__)

# Industry id treated as "no specific industry"
CATCH_ALL_INDUSTRY = "other"


@dataclass
class Candidate:
    """Touchpoints (and their labels) that triggered one module."""
    module_id: str
    touchpoint_ids: List[str] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)

    def add_touchpoint(self, touchpoint_id: str) -> None:
        if touchpoint_id not in self.touchpoint_ids:
            self.touchpoint_ids.append(touchpoint_id)

    def add_label(self, label: str) -> None:
        if label not in self.labels:
            self.labels.append(label)


def aggregate_candidates(selection: DiscoverySelection, catalog: Catalog) -> Dict[str, Candidate]:
    """
    Map each triggered module id to the touchpoints and labels that triggered it.

    Walks the catalog in declaration order rather than selection order so that
    reordered inputs produce identical output. A selected sub-touchpoint adds its
    own label after its parent's, and only when the parent is selected.
    """
    online_only = bool(selection.business_context and selection.business_context.is_online_only)
    candidates: Dict[str, Candidate] = {}

    for touchpoint in catalog.touchpoints():
        if touchpoint.id not in selection.selected_touchpoint_ids:
            continue
        if not touchpoint.module_mapping:
            continue

        labels = [touchpoint.display_label(online_only)]
        labels.extend(
            sub.label
            for sub in touchpoint.sub_touchpoints
            if sub.id in selection.selected_sub_touchpoint_ids
        )

        for module_id in touchpoint.module_mapping:
            if catalog.module(module_id) is None:
                logger.debug("Touchpoint %s maps to unknown module %s; skipping", touchpoint.id, module_id)
                continue
            candidate = candidates.setdefault(module_id, Candidate(module_id=module_id))
            candidate.add_touchpoint(touchpoint.id)
            for label in labels:
                candidate.add_label(label)

    return candidates


def default_starter_ids(industry_id: str, catalog: Catalog) -> Tuple[List[str], Optional[str]]:
    """
    Baseline modules for an industry, plus the industry's display name.

    Unknown industries, the catch-all and industries with no usable starters fall
    back to the generic list, in which case no industry name is returned.
    """
    industry = catalog.industry(industry_id) if industry_id != CATCH_ALL_INDUSTRY else None
    if industry is not None:
        module_ids = [m for m in industry.default_modules if catalog.module(m) is not None]
        if module_ids:
            return module_ids, industry.name

    module_ids = [m for m in catalog.generic_defaults if catalog.module(m) is not None]
    if not module_ids and catalog.modules:
        # Catalog data error; validate_catalog reports it. Keep the result non-empty.
        logger.warning("No usable default starter modules in catalog %s", catalog.version)
        module_ids = [catalog.modules[0].id]
    return module_ids, None


def _padding_candidates(classified: List[str], catalog: Catalog) -> Dict[str, List[str]]:
    """Unclassified group siblings of the classified modules, with the modules that pulled them in."""
    classified_set = set(classified)
    padding: Dict[str, List[str]] = {}

    for module_id in sorted(classified, key=catalog.module_index):
        module = catalog.module(module_id)
        for sibling in catalog.modules_in_group(module.group):
            if sibling.id in classified_set:
                continue
            related = padding.setdefault(sibling.id, [])
            if module_id not in related:
                related.append(module_id)

    return padding


def _to_recommended_module(module_id: str, reason: WhySuggested, catalog: Catalog) -> RecommendedModule:
    module = catalog.module(module_id)
    return RecommendedModule(
        module_id=module.id,
        module_code=module.code,
        module_name=module.name,
        group=module.group,
        estimated_time=module.estimated_time,
        why_suggested=reason,
    )


def _trigger_count(item: RecommendedModule) -> int:
    reason = item.why_suggested
    if isinstance(reason, TriggeredReason):
        return len(reason.triggering_touchpoint_ids)
    return 0


def order_modules(modules: List[RecommendedModule], catalog: Catalog) -> List[RecommendedModule]:
    """Sort by distinct triggering touchpoints (descending), then catalog order."""
    return sorted(
        modules,
        key=lambda item: (-_trigger_count(item), catalog.module_index(item.module_id)),
    )


def _confidence_level(mode: RecommendationMode, recommended: List[RecommendedModule]) -> ConfidenceLevel:
    """
    high: every recommended module was triggered by a selection.
    medium: discovery-driven, but default starters had to fill in.
    low: nothing was triggered.
    """
    if mode == RecommendationMode.DEFAULT_STARTER_SET:
        return ConfidenceLevel.LOW
    if min(_trigger_count(item) for item in recommended) >= 1:
        return ConfidenceLevel.HIGH
    return ConfidenceLevel.MEDIUM


def _build_reasoning(
    mode: RecommendationMode,
    selection: DiscoverySelection,
    catalog: Catalog,
    industry_name: Optional[str],
) -> str:
    if mode == RecommendationMode.DISCOVERY_DRIVEN:
        phase_labels = [
            phase.label.lower()
            for phase in catalog.phases
            if any(tp.id in selection.selected_touchpoint_ids for tp in phase.touchpoints)
        ]
        return (
            f"Based on what you shared, accessibility shows up most in areas related to "
            f"{', '.join(phase_labels)}. These modules help you focus on those areas first. "
            f"You can add or remove modules at any time."
        )

    for_industry = f" for {industry_name}" if industry_name else ""
    if not selection.selected_touchpoint_ids:
        return (
            f"Since you haven't selected any touchpoints, we've suggested common starting points"
            f"{for_industry}. You can adjust these based on what's most relevant to you."
        )
    return (
        f"None of your selections matched an assessment module, so we've suggested common starting points"
        f"{for_industry}. Feel free to choose what's most relevant."
    )


def generate_recommendations(
    selection: DiscoverySelection,
    catalog: Optional[Catalog] = None,
    settings: Optional[Settings] = None,
) -> RecommendationResult:
    """
    Turn a discovery selection into ranked, explained module recommendations.

    Algorithm:
    - Aggregate triggered modules from selected touchpoints (catalog order)
    - Inject the industry's default starters that were not triggered
    - Pad with unclassified group siblings of both
    - Precedence: triggered > default-starter > padding; one reason per module
    - recommended_modules = triggered + default-starter, also_relevant = padding
    - Each list ordered by trigger count (desc), then catalog order

    Pure: no I/O, no state between calls, never raises on unknown ids.
    """
    catalog = catalog or get_catalog()
    settings = settings or default_settings
    warnings: List[RecommendationWarning] = []

    if not selection.selected_touchpoint_ids:
        warnings.append(RecommendationWarning(
            kind=WarningKind.NO_SELECTION,
            message="No touchpoints were selected, so these are general starting points rather than tailored recommendations.",
        ))

    unknown_touchpoints = sorted(
        tp_id for tp_id in selection.selected_touchpoint_ids if catalog.touchpoint(tp_id) is None
    )
    if unknown_touchpoints:
        warnings.append(RecommendationWarning(
            kind=WarningKind.UNKNOWN_TOUCHPOINT,
            message=f"Some selections are no longer part of Discovery and were ignored: {', '.join(unknown_touchpoints)}.",
        ))

    # Triggered candidates
    reasons: Dict[str, WhySuggested] = {}
    for module_id, candidate in aggregate_candidates(selection, catalog).items():
        reasons[module_id] = TriggeredReason(
            triggering_touchpoint_ids=list(candidate.touchpoint_ids),
            triggering_question_texts=list(candidate.labels),
        )
    mode = RecommendationMode.DISCOVERY_DRIVEN if reasons else RecommendationMode.DEFAULT_STARTER_SET

    # Default starters (triggered wins)
    starter_ids, industry_name = default_starter_ids(selection.industry_id, catalog)
    for module_id in starter_ids:
        if module_id not in reasons:
            reasons[module_id] = DefaultStarterReason(industry_name=industry_name)

    # Padding (anything already classified wins)
    for module_id, related in _padding_candidates(list(reasons), catalog).items():
        reasons[module_id] = PaddingReason(related_module_ids=related)

    recommended: List[RecommendedModule] = []
    also_relevant: List[RecommendedModule] = []
    for module_id, reason in reasons.items():
        item = _to_recommended_module(module_id, reason, catalog)
        if isinstance(reason, PaddingReason):
            also_relevant.append(item)
        else:
            recommended.append(item)

    recommended = order_modules(recommended, catalog)
    also_relevant = order_modules(also_relevant, catalog)

    if len(recommended) >= settings.TOO_MANY_MODULES_THRESHOLD:
        warnings.append(RecommendationWarning(
            kind=WarningKind.TOO_MANY_MODULES,
            message=(
                f"Accessibility touches many parts of your business ({len(recommended)} modules). "
                f"Most organisations start with 5-6 priority modules and add more over time."
            ),
        ))

    logger.debug(
        "Recommendations: mode=%s industry=%s service_type=%s selected=%d recommended=%d also_relevant=%d warnings=%s",
        mode.value,
        selection.industry_id,
        selection.service_type_id,
        len(selection.selected_touchpoint_ids),
        len(recommended),
        len(also_relevant),
        [w.kind.value for w in warnings],
    )

    return RecommendationResult(
        mode=mode,
        recommended_modules=recommended,
        also_relevant=also_relevant,
        warnings=warnings,
        reasoning=_build_reasoning(mode, selection, catalog, industry_name),
        confidence_level=_confidence_level(mode, recommended),
    )


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================

def module_ids_to_codes(module_ids: List[str], catalog: Optional[Catalog] = None) -> List[str]:
    """Display codes for module ids; ids without a catalog entry pass through unchanged."""
    catalog = catalog or get_catalog()
    return [catalog.code_for(module_id) or module_id for module_id in module_ids]


def module_codes_to_ids(codes: List[str], catalog: Optional[Catalog] = None) -> List[str]:
    """Module ids for display codes; codes without a catalog entry pass through unchanged."""
    catalog = catalog or get_catalog()
    return [catalog.id_for_code(code) or code for code in codes]


def group_modules_by_group(
    modules: List[RecommendedModule],
    catalog: Optional[Catalog] = None,
) -> List[ModuleGroupView]:
    """
    Bucket modules by module group in group order, dropping empty groups.

    Modules whose group is missing from the catalog get trailing buckets
    (labelled with the raw group id, first-seen order) so nothing is dropped.
    """
    catalog = catalog or get_catalog()
    groups = [
        ModuleGroupView(
            group_id=group.id,
            label=group.label,
            modules=[m for m in modules if m.group == group.id],
        )
        for group in catalog.module_groups
    ]

    known_groups = {group.id for group in catalog.module_groups}
    unknown_groups: Dict[str, List[RecommendedModule]] = {}
    for module in modules:
        if module.group not in known_groups:
            unknown_groups.setdefault(module.group, []).append(module)
    for group_id, group_modules in unknown_groups.items():
        logger.warning(
            "Modules %s belong to unknown group %s; grouping them separately",
            [m.module_id for m in group_modules],
            group_id,
        )
        groups.append(ModuleGroupView(group_id=group_id, label=group_id, modules=group_modules))

    return [g for g in groups if g.modules]
