from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from typing import Optional, List, Dict, Any


class SubTouchpoint(BaseModel):
    id: str
    label: str


class Touchpoint(BaseModel):
    id: str
    label: str
    label_online: Optional[str] = None  # Alternative label for online-only businesses
    description: str = ""
    example: Optional[str] = None
    sub_touchpoints: List[SubTouchpoint] = Field(default_factory=list)
    module_mapping: List[str] = Field(default_factory=list)

    def display_label(self, online_only: bool = False) -> str:
        if online_only and self.label_online:
            return self.label_online
        return self.label


class JourneyPhase(BaseModel):
    id: str
    label: str
    sub_label: Optional[str] = None
    description: Optional[str] = None
    touchpoints: List[Touchpoint] = Field(default_factory=list)


class ModuleGroup(BaseModel):
    id: str
    label: str
    description: str = ""


class Module(BaseModel):
    id: str
    code: str
    name: str
    description: str = ""
    group: str
    estimated_time: int  # minutes
    cost: int  # AUD, indicative


class Industry(BaseModel):
    id: str
    name: str
    default_modules: List[str] = Field(default_factory=list)


class Catalog(BaseModel):
    """
    Static touchpoint, module and industry data consumed by the engine.

    Declaration order is significant: it is the deterministic tie-break for
    ordering modules and the iteration order for aggregating touchpoints.
    Lookup indexes are built once after validation.
    """
    model_config = ConfigDict(frozen=True)

    version: str
    phases: List[JourneyPhase]
    module_groups: List[ModuleGroup]
    modules: List[Module]
    industries: List[Industry] = Field(default_factory=list)
    generic_defaults: List[str] = Field(default_factory=list)

    _touchpoints: Dict[str, Touchpoint] = PrivateAttr(default_factory=dict)
    _touchpoint_phase: Dict[str, str] = PrivateAttr(default_factory=dict)
    _modules: Dict[str, Module] = PrivateAttr(default_factory=dict)
    _module_order: Dict[str, int] = PrivateAttr(default_factory=dict)
    _industries: Dict[str, Industry] = PrivateAttr(default_factory=dict)
    _code_to_id: Dict[str, str] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        # First declaration wins on duplicates; validate_catalog reports them
        for phase in self.phases:
            for touchpoint in phase.touchpoints:
                self._touchpoints.setdefault(touchpoint.id, touchpoint)
                self._touchpoint_phase.setdefault(touchpoint.id, phase.id)
        for index, module in enumerate(self.modules):
            self._modules.setdefault(module.id, module)
            self._module_order.setdefault(module.id, index)
            self._code_to_id.setdefault(module.code, module.id)
        for industry in self.industries:
            self._industries.setdefault(industry.id, industry)

    def touchpoints(self) -> List[Touchpoint]:
        """All touchpoints as a flat list, in catalog order."""
        return [touchpoint for phase in self.phases for touchpoint in phase.touchpoints]

    def touchpoint(self, touchpoint_id: str) -> Optional[Touchpoint]:
        return self._touchpoints.get(touchpoint_id)

    def phase_for_touchpoint(self, touchpoint_id: str) -> Optional[JourneyPhase]:
        phase_id = self._touchpoint_phase.get(touchpoint_id)
        if phase_id is None:
            return None
        return next(phase for phase in self.phases if phase.id == phase_id)

    def module(self, module_id: str) -> Optional[Module]:
        return self._modules.get(module_id)

    def module_index(self, module_id: str) -> int:
        """Declaration position of a module; unknown ids sort last."""
        return self._module_order.get(module_id, len(self.modules))

    def modules_in_group(self, group_id: str) -> List[Module]:
        return [module for module in self.modules if module.group == group_id]

    def industry(self, industry_id: str) -> Optional[Industry]:
        return self._industries.get(industry_id)

    def code_for(self, module_id: str) -> Optional[str]:
        module = self._modules.get(module_id)
        return module.code if module else None

    def id_for_code(self, code: str) -> Optional[str]:
        return self._code_to_id.get(code)


class CatalogSummary(BaseModel):
    """Read-only catalog view returned by the catalog endpoint."""
    version: str
    phases: List[JourneyPhase]
    module_groups: List[ModuleGroup]
    modules: List[Module]
