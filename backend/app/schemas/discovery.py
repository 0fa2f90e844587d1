from pydantic import BaseModel, Field
from typing import Optional, Set
import enum


class ReviewMode(str, enum.Enum):
    PULSE_CHECK = "pulse-check"
    DEEP_DIVE = "deep-dive"


class BusinessContext(BaseModel):
    has_physical_venue: Optional[bool] = None
    has_online_presence: Optional[bool] = None
    serves_public_customers: Optional[bool] = None
    has_online_services: Optional[bool] = None
    offers_experiences: Optional[bool] = None
    offers_accommodation: Optional[bool] = None

    @property
    def is_online_only(self) -> bool:
        """True when the business has an online presence but no venue to visit."""
        return self.has_physical_venue is False and bool(
            self.has_online_presence or self.has_online_services
        )


class DiscoverySelection(BaseModel):
    selected_touchpoint_ids: Set[str] = Field(default_factory=set)
    selected_sub_touchpoint_ids: Set[str] = Field(default_factory=set)
    industry_id: str = "other"
    service_type_id: str = "other"
    business_context: Optional[BusinessContext] = None


class DepthRequest(BaseModel):
    selected_touchpoint_ids: Set[str] = Field(default_factory=set)


class DepthRecommendation(BaseModel):
    recommended_depth: ReviewMode
    touchpoint_count: int
    phase_count: int
    threshold: int
    reasoning: str
