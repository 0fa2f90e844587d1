"""Re-run the engine against a persisted discovery session record."""
from typing import Optional
import logging

from app.schemas.catalog import Catalog
from app.schemas.discovery import BusinessContext, DiscoverySelection
from app.schemas.session import DiscoverySessionRecord
from app.services.catalog import get_catalog
from app.services.depth_classifier import calculate_depth_recommendation
from app.services.module_compat import normalize_module_codes
from app.services.recommendation_engine import generate_recommendations, module_ids_to_codes

logger = logging.getLogger(__name__)


def refresh_session_record(
    record: DiscoverySessionRecord,
    industry_id: str = "other",
    service_type_id: str = "other",
    business_context: Optional[BusinessContext] = None,
    catalog: Optional[Catalog] = None,
) -> DiscoverySessionRecord:
    """
    Return a copy of record with a freshly computed recommendation result.

    - Legacy module codes in recommended_modules are normalised to current display codes
    - User-confirmed modules are kept; an empty list is filled from the new result
    - An existing review_mode is kept; a missing one comes from the depth classifier

    Idempotent: refreshing the returned record again yields an equal record.
    """
    catalog = catalog or get_catalog()

    selection = DiscoverySelection(
        selected_touchpoint_ids=set(record.selected_touchpoints),
        selected_sub_touchpoint_ids=set(record.selected_sub_touchpoints),
        industry_id=industry_id,
        service_type_id=service_type_id,
        business_context=business_context,
    )
    result = generate_recommendations(selection, catalog=catalog)

    # Legacy codes normalise to module ids; project them back onto this catalog's display codes
    recommended_codes = list(dict.fromkeys(
        module_ids_to_codes(normalize_module_codes(record.recommended_modules), catalog=catalog)
    ))
    if not recommended_codes:
        recommended_codes = module_ids_to_codes(
            [m.module_id for m in result.recommended_modules], catalog=catalog
        )

    review_mode = record.review_mode
    if review_mode is None:
        review_mode = calculate_depth_recommendation(record.selected_touchpoints, catalog=catalog).recommended_depth

    if recommended_codes != record.recommended_modules:
        logger.info("Session refresh rewrote recommended modules: %s -> %s", record.recommended_modules, recommended_codes)

    return record.model_copy(update={
        "recommendation_result": result,
        "recommended_modules": recommended_codes,
        "review_mode": review_mode,
    })
