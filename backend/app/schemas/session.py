from pydantic import BaseModel, Field
from typing import Optional, List

from app.schemas.discovery import ReviewMode, BusinessContext
from app.schemas.recommendation import RecommendationResult


class DiscoverySessionRecord(BaseModel):
    """
    Discovery state as the session store persists it.

    `recommended_modules` holds display codes confirmed by the user, which may
    include legacy letter codes written by older builds.
    """
    selected_touchpoints: List[str] = Field(default_factory=list)
    selected_sub_touchpoints: List[str] = Field(default_factory=list)
    recommendation_result: Optional[RecommendationResult] = None
    review_mode: Optional[ReviewMode] = None
    recommended_modules: List[str] = Field(default_factory=list)


class SessionRefreshRequest(BaseModel):
    record: DiscoverySessionRecord
    industry_id: str = "other"
    service_type_id: str = "other"
    business_context: Optional[BusinessContext] = None
