"""Recommend an assessment depth from the breadth of a discovery selection."""
from typing import Iterable, Optional
import logging

from app.core.config import settings
from app.schemas.catalog import Catalog
from app.schemas.discovery import DepthRecommendation, ReviewMode
from app.services.catalog import get_catalog

logger = logging.getLogger(__name__)


def calculate_depth_recommendation(
    selected_touchpoint_ids: Iterable[str],
    threshold: Optional[int] = None,
    catalog: Optional[Catalog] = None,
) -> DepthRecommendation:
    """
    Suggest pulse-check below the touchpoint threshold, deep-dive at or above it.

    Only distinct touchpoint ids known to the catalog count, matching what the
    recommendation engine acts on; sub-touchpoints refine a selection and
    never add to its breadth. The threshold defaults to
    settings.DEPTH_TOUCHPOINT_THRESHOLD.
    """
    catalog = catalog or get_catalog()
    threshold = threshold if threshold is not None else settings.DEPTH_TOUCHPOINT_THRESHOLD

    selected = set(selected_touchpoint_ids)
    touchpoint_ids = {tp_id for tp_id in selected if catalog.touchpoint(tp_id) is not None}
    if len(touchpoint_ids) != len(selected):
        logger.debug("Depth ignores unknown touchpoints: %s", sorted(selected - touchpoint_ids))
    touchpoint_count = len(touchpoint_ids)
    phase_ids = {
        phase.id
        for phase in (catalog.phase_for_touchpoint(tp_id) for tp_id in touchpoint_ids)
        if phase is not None
    }
    phase_count = len(phase_ids)

    if touchpoint_count >= threshold:
        depth = ReviewMode.DEEP_DIVE
        phases = f"{phase_count} journey phase{'s' if phase_count != 1 else ''}"
        reasoning = (
            f"You selected {touchpoint_count} touchpoints across {phases}. "
            f"A deep dive will give you comprehensive guidance across that broader footprint."
        )
    else:
        depth = ReviewMode.PULSE_CHECK
        reasoning = (
            f"You selected {touchpoint_count} touchpoint{'s' if touchpoint_count != 1 else ''}. "
            f"A pulse check covers a smaller footprint and will help you get started quickly."
        )

    logger.debug("Depth: %s (touchpoints=%d phases=%d threshold=%d)", depth.value, touchpoint_count, phase_count, threshold)

    return DepthRecommendation(
        recommended_depth=depth,
        touchpoint_count=touchpoint_count,
        phase_count=phase_count,
        threshold=threshold,
        reasoning=reasoning,
    )
