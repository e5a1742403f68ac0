from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from savings_planner.core.schemas import ErrorEnvelope

ALLOCATION_SUM_MESSAGE = "Portfolio allocations must sum to 100%"


class ProjectionError(Exception):
    code = "PROJECTION_ERROR"

    def details(self) -> Optional[Dict[str, Any]]:
        return None

    def to_envelope(self) -> ErrorEnvelope:
        return ErrorEnvelope(code=self.code, message=str(self), details=self.details())


class AllocationSumError(ProjectionError):
    code = "ALLOCATION_SUM"

    def __init__(self, total_percent: float) -> None:
        super().__init__(ALLOCATION_SUM_MESSAGE)
        self.total_percent = total_percent

    def details(self) -> Optional[Dict[str, Any]]:
        return {"total_percent": self.total_percent}


class UnresolvedAssetKey(ProjectionError, KeyError):
    code = "UNRESOLVED_ASSET_KEY"

    def __init__(self, key: Optional[str]) -> None:
        super().__init__(f"Unknown asset key: {key!r}")
        self.key = key

    def __str__(self) -> str:
        return str(self.args[0])

    def details(self) -> Optional[Dict[str, Any]]:
        return {"key": self.key}


class InvalidHorizon(ProjectionError):
    """Target age is not after a beneficiary's current age."""

    code = "INVALID_HORIZON"

    def __init__(self, offenders: List[Tuple[Optional[int], int]]) -> None:
        # offenders: (beneficiary_id or None, horizon_years)
        self.offenders = list(offenders)
        desc = ", ".join(
            f"horizon {h}y" if bid is None else f"beneficiary {bid} (horizon {h}y)"
            for bid, h in self.offenders
        )
        super().__init__(f"Target age must be greater than current age: {desc}")

    @property
    def beneficiary_ids(self) -> List[Optional[int]]:
        return [bid for bid, _ in self.offenders]

    def details(self) -> Optional[Dict[str, Any]]:
        return {"beneficiaries": [{"id": bid, "horizon_years": h} for bid, h in self.offenders]}


class DegenerateRate(ProjectionError):
    code = "DEGENERATE_RATE"

    def __init__(self, annual_rate: float, reason: str) -> None:
        super().__init__(f"Annual rate {annual_rate!r} cannot be projected: {reason}")
        self.annual_rate = annual_rate

    def details(self) -> Optional[Dict[str, Any]]:
        return {"annual_rate": self.annual_rate}


class LastBeneficiaryError(ProjectionError):
    code = "LAST_BENEFICIARY"

    def __init__(self, beneficiary_id: int) -> None:
        super().__init__("At least one beneficiary is required; cannot remove the last one.")
        self.beneficiary_id = beneficiary_id


def validation_envelope(e: ValidationError) -> ErrorEnvelope:
    """Envelope for pydantic input errors (bad goal, weights, ages, payload shape)."""
    fields = [
        {"loc": ".".join(str(p) for p in err.get("loc", ())), "msg": err.get("msg", "")}
        for err in e.errors()
    ]
    summary = "; ".join(f"{f['loc']}: {f['msg']}" if f["loc"] else f["msg"] for f in fields)
    return ErrorEnvelope(code="INVALID_INPUT", message=summary or str(e), details={"errors": fields})
