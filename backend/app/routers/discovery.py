from fastapi import APIRouter, Depends
import logging
import uuid as uuid_lib

from app.schemas.catalog import Catalog
from app.schemas.discovery import DepthRecommendation, DepthRequest, DiscoverySelection
from app.schemas.recommendation import (
    ModuleCodesRequest,
    ModuleCodesResponse,
    ModuleIdsRequest,
    ModuleIdsResponse,
    RecommendationsResponse,
)
from app.schemas.session import DiscoverySessionRecord, SessionRefreshRequest
from app.services.catalog import get_catalog
from app.services.depth_classifier import calculate_depth_recommendation
from app.services.module_compat import normalize_module_code
from app.services.recommendation_engine import (
    generate_recommendations,
    group_modules_by_group,
    module_codes_to_ids,
    module_ids_to_codes,
)
from app.services.session_refresh import refresh_session_record
from app.utils.instrumentation import log_event_best_effort

logger = logging.getLogger(__name__)

router = APIRouter(tags=["discovery"])


@router.post("/discovery/recommendations", response_model=RecommendationsResponse)
def post_recommendations(
    selection: DiscoverySelection,
    catalog: Catalog = Depends(get_catalog),
):
    """
    Recommend modules and an assessment depth for a discovery selection.

    Touchpoint ids must already be normalised by the caller.
    """
    request_id = str(uuid_lib.uuid4())
    logger.info(
        "Generating recommendations req_id=%s industry=%s touchpoints=%d sub_touchpoints=%d",
        request_id,
        selection.industry_id,
        len(selection.selected_touchpoint_ids),
        len(selection.selected_sub_touchpoint_ids),
    )

    result = generate_recommendations(selection, catalog=catalog)
    depth = calculate_depth_recommendation(selection.selected_touchpoint_ids, catalog=catalog)

    log_event_best_effort(
        event_name="recommendations_generated",
        request_id=request_id,
        properties={
            "mode": result.mode.value,
            "industry_id": selection.industry_id,
            "service_type_id": selection.service_type_id,
            "module_ids": [m.module_id for m in result.recommended_modules],
            "also_relevant_count": len(result.also_relevant),
            "warnings": [w.kind.value for w in result.warnings],
            "recommended_depth": depth.recommended_depth.value,
        },
    )

    return RecommendationsResponse(
        request_id=request_id,
        result=result,
        groups=group_modules_by_group(result.recommended_modules, catalog=catalog),
        depth=depth,
    )


@router.post("/discovery/depth", response_model=DepthRecommendation)
def post_depth(payload: DepthRequest, catalog: Catalog = Depends(get_catalog)):
    depth = calculate_depth_recommendation(payload.selected_touchpoint_ids, catalog=catalog)
    log_event_best_effort(
        event_name="depth_calculated",
        properties={
            "recommended_depth": depth.recommended_depth.value,
            "touchpoint_count": depth.touchpoint_count,
        },
    )
    return depth


@router.post("/discovery/session/refresh", response_model=DiscoverySessionRecord)
def post_session_refresh(payload: SessionRefreshRequest, catalog: Catalog = Depends(get_catalog)):
    """Recompute a stored session's recommendations against the current catalog."""
    return refresh_session_record(
        payload.record,
        industry_id=payload.industry_id,
        service_type_id=payload.service_type_id,
        business_context=payload.business_context,
        catalog=catalog,
    )


@router.post("/modules/codes", response_model=ModuleCodesResponse)
def post_module_codes(payload: ModuleIdsRequest, catalog: Catalog = Depends(get_catalog)):
    return ModuleCodesResponse(codes=module_ids_to_codes(payload.module_ids, catalog=catalog))


@router.post("/modules/ids", response_model=ModuleIdsResponse)
def post_module_ids(payload: ModuleCodesRequest, catalog: Catalog = Depends(get_catalog)):
    """Resolve display codes (legacy letter codes included) to module ids."""
    codes = [normalize_module_code(code) for code in payload.codes]
    return ModuleIdsResponse(module_ids=module_codes_to_ids(codes, catalog=catalog))
