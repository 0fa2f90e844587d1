from pydantic import BaseModel, Field
from typing import Optional, List, Literal, Union, ClassVar, Annotated
import enum

from app.schemas.discovery import DepthRecommendation


class TriggeredReason(BaseModel):
    """Module mapped from one or more selected touchpoints."""
    precedence: ClassVar[int] = 0

    type: Literal["triggered"] = "triggered"
    triggering_touchpoint_ids: List[str] = Field(default_factory=list)
    triggering_question_texts: List[str] = Field(default_factory=list)


class DefaultStarterReason(BaseModel):
    """Module recommended for the industry regardless of selections."""
    precedence: ClassVar[int] = 1

    type: Literal["default-starter"] = "default-starter"
    industry_name: Optional[str] = None


class PaddingReason(BaseModel):
    """Optional module sharing a group with a triggered or default-starter module."""
    precedence: ClassVar[int] = 2

    type: Literal["padding"] = "padding"
    related_module_ids: List[str] = Field(default_factory=list)


WhySuggested = Annotated[
    Union[TriggeredReason, DefaultStarterReason, PaddingReason],
    Field(discriminator="type"),
]


class WarningKind(str, enum.Enum):
    NO_SELECTION = "no-selection"
    UNKNOWN_TOUCHPOINT = "unknown-touchpoint"
    TOO_MANY_MODULES = "too-many-modules"


class RecommendationWarning(BaseModel):
    kind: WarningKind
    message: str


class RecommendationMode(str, enum.Enum):
    DISCOVERY_DRIVEN = "discovery-driven"
    DEFAULT_STARTER_SET = "default-starter-set"


class ConfidenceLevel(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RecommendedModule(BaseModel):
    module_id: str
    module_code: str
    module_name: str
    group: str
    estimated_time: int
    why_suggested: WhySuggested


class RecommendationResult(BaseModel):
    mode: RecommendationMode
    recommended_modules: List[RecommendedModule]
    also_relevant: List[RecommendedModule] = Field(default_factory=list)
    warnings: List[RecommendationWarning] = Field(default_factory=list)
    reasoning: str = ""
    confidence_level: ConfidenceLevel = ConfidenceLevel.LOW  # display only, never affects selection


class ModuleGroupView(BaseModel):
    group_id: str
    label: str
    modules: List[RecommendedModule]


class RecommendationsResponse(BaseModel):
    """Response wrapper that includes request_id for event tracking."""
    request_id: str
    result: RecommendationResult
    groups: List[ModuleGroupView]  # recommended_modules bucketed by module group
    depth: DepthRecommendation


class ModuleIdsRequest(BaseModel):
    module_ids: List[str]


class ModuleCodesResponse(BaseModel):
    codes: List[str]


class ModuleCodesRequest(BaseModel):
    codes: List[str]


class ModuleIdsResponse(BaseModel):
    module_ids: List[str]
