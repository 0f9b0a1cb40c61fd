"""Assessment answers captured from the onboarding questionnaire."""
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

IDEA = "idea"
STARTUP = "startup"
ESTABLISHED = "established"
GROWTH = "growth"
TRANSITION = "transition"

STAGE_DESCRIPTIONS = {
    IDEA: "exploring a business idea and considering starting a business",
    STARTUP: "actively launching their business",
    ESTABLISHED: "running an established business",
    GROWTH: "looking to scale and grow their business",
    TRANSITION: "making major changes, planning succession, or pivoting their business",
}


@dataclass(frozen=True)
class AssessmentAnswers:
    """
    Context about the business owner used to render the system prompt.

    Every field is optional; a skipped questionnaire yields all ``None``.
    """
    stage: Optional[str] = None
    industry: Optional[str] = None
    main_challenge: Optional[str] = None
    has_business_plan: Optional[bool] = None

    def __post_init__(self):
        if self.stage is not None and self.stage not in STAGE_DESCRIPTIONS:
            raise ValueError(f"Unknown business stage: {self.stage}")

    @property
    def stage_description(self) -> str:
        if self.stage:
            return STAGE_DESCRIPTIONS[self.stage]
        return "at an unknown stage"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssessmentAnswers":
        return cls(
            stage=data.get("stage"),
            industry=data.get("industry"),
            main_challenge=data.get("main_challenge", data.get("mainChallenge")),
            has_business_plan=data.get("has_business_plan", data.get("hasBusinessPlan")),
        )
