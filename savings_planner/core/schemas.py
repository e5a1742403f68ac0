from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


# -------------------------
# Catalog / Allocation
# -------------------------

class AssetOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    display_name: str
    annual_return: float = Field(..., description="Annual return as a fraction, e.g. 0.1293")


class AllocationEntry(BaseModel):
    asset_key: Optional[str] = Field(default=None, description="Catalog key; empty/None means unset.")
    weight_percent: float = Field(default=0.0, ge=0, le=100)


# -------------------------
# Goal / Beneficiaries / Scenarios
# -------------------------

class Beneficiary(BaseModel):
    id: int
    current_age: int = Field(..., ge=0)


class Goal(BaseModel):
    target_amount: float = Field(..., gt=0)
    target_age: int


class ScenarioModifiers(BaseModel):
    conservative_percent: float = Field(default=25.0, ge=0, le=100, description="Haircut applied to the base rate (%).")
    optimistic_percent: float = Field(default=10.0, ge=0, description="Uplift applied to the base rate (%).")


class ScenarioKind(str, Enum):
    BASE = "base"
    CONSERVATIVE = "conservative"
    OPTIMISTIC = "optimistic"


SCENARIO_LABELS: Dict[ScenarioKind, str] = {
    ScenarioKind.BASE: "Base Case",
    ScenarioKind.CONSERVATIVE: "Conservative",
    ScenarioKind.OPTIMISTIC: "Optimistic",
}


# -------------------------
# Projection outputs
# -------------------------

class TrajectoryPoint(BaseModel):
    year: int = Field(..., ge=0)
    balance: float


class ScenarioProjection(BaseModel):
    kind: ScenarioKind
    annual_rate: float
    required_monthly_contribution: float
    trajectory: List[TrajectoryPoint] = Field(default_factory=list)


class ProjectionResult(BaseModel):
    beneficiary_id: int
    current_age: int
    horizon_years: int
    scenarios: Dict[ScenarioKind, ScenarioProjection] = Field(default_factory=dict)

    def final_balance(self, kind: ScenarioKind) -> float:
        traj = self.scenarios[kind].trajectory
        return traj[-1].balance if traj else 0.0

    @property
    def required_monthly_contribution(self) -> float:
        return self.scenarios[ScenarioKind.BASE].required_monthly_contribution


class BlendedRates(BaseModel):
    base: float
    conservative: float
    optimistic: float

    def for_kind(self, kind: ScenarioKind) -> float:
        return float(getattr(self, kind.value))


class ProjectionRequest(BaseModel):
    goal: Goal
    allocation: List[AllocationEntry] = Field(default_factory=list)
    beneficiaries: List[Beneficiary] = Field(..., min_length=1)
    modifiers: ScenarioModifiers = Field(default_factory=ScenarioModifiers)
    currency: str = "USD"

    @field_validator("beneficiaries")
    @classmethod
    def _unique_ids(cls, v: List[Beneficiary]) -> List[Beneficiary]:
        ids = [b.id for b in v]
        if len(ids) != len(set(ids)):
            raise ValueError(f"beneficiary ids must be unique, got {ids}")
        return v


class ProjectionReport(BaseModel):
    currency: str
    rates: BlendedRates
    allocation: List[AllocationEntry] = Field(default_factory=list)
    allocation_error: Optional[str] = None
    results: Dict[int, ProjectionResult] = Field(default_factory=dict)
    warnings: List[str] = Field(default_factory=list)
    data_quality: Dict[str, str] = Field(default_factory=dict)


# -------------------------
# Validation + Errors
# -------------------------

class ValidationIssue(BaseModel):
    level: str  # ERROR | WARN
    message: str
    location: Optional[str] = None


class ValidationReport(BaseModel):
    ok: bool = True
    errors: List[ValidationIssue] = Field(default_factory=list)
    warnings: List[ValidationIssue] = Field(default_factory=list)

    def add_error(self, msg: str, location: Optional[str] = None) -> None:
        self.errors.append(ValidationIssue(level="ERROR", message=msg, location=location))

    def add_warning(self, msg: str, location: Optional[str] = None) -> None:
        self.warnings.append(ValidationIssue(level="WARN", message=msg, location=location))

    def finalize(self) -> "ValidationReport":
        self.ok = len(self.errors) == 0
        return self


class ErrorEnvelope(BaseModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None
