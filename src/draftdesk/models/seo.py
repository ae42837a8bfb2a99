"""SEO assessment models."""

from typing import Literal

from pydantic import BaseModel, Field


Severity = Literal["critical", "warning", "info"]


class SeoCheck(BaseModel):
    """One pass/fail SEO heuristic."""

    label: str = Field(..., description="Human-readable check label, including the measured value")
    passed: bool = Field(..., description="Whether the heuristic is satisfied")
    severity: Severity = Field(..., description="How bad a failure of this check is")

    model_config = {"frozen": True}


class SeoAssessment(BaseModel):
    """Aggregate SEO score and its ordered checklist."""

    score: int = Field(..., ge=0, le=100, description="Percentage of checks passed (rounded)")
    checks: tuple[SeoCheck, ...] = Field(default=(), description="Checks in evaluation order")

    @property
    def failed_checks(self) -> tuple[SeoCheck, ...]:
        return tuple(c for c in self.checks if not c.passed)

    model_config = {"frozen": True}
