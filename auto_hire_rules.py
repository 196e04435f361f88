# auto_hire_rules.py
# Explainable auto-hire decision: a second, independently configured rule
# set that pairs the score with sales keyword hits and emits reasons.

from dataclasses import dataclass
from typing import List, Tuple

from sales_fresher_scorer import Verdict

# Overlaps with, but is not the same list as, the scorer's keywords
STRONG_KEYWORDS = [
    "sales",
    "business development",
    "client",
    "target",
    "revenue",
    "conversion",
    "lead",
    "crm",
]

AUTO_HIRE_SCORE = 75
AUTO_HIRE_MIN_HITS = 2
MAYBE_SCORE = 40


@dataclass(frozen=True)
class AutoHireResult:
    verdict: Verdict
    reasons: Tuple[str, ...]
    keyword_hits: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "verdict": self.verdict.value,
            "reasons": list(self.reasons),
            "keyword_hits": list(self.keyword_hits),
        }


def format_score(score) -> str:
    """Render the score the way it was given: 75 and 75.0 both print as 75."""
    if isinstance(score, float) and score.is_integer():
        return str(int(score))
    return str(score)


def find_keyword_hits(resume_text: str) -> List[str]:
    text = resume_text.lower()
    return [k for k in STRONG_KEYWORDS if k in text]


def auto_hire_decision(score, resume_text: str) -> AutoHireResult:
    hits = tuple(find_keyword_hits(resume_text))

    if score >= AUTO_HIRE_SCORE and len(hits) >= AUTO_HIRE_MIN_HITS:
        reasons = (
            "Strong sales keywords detected",
            f"Score {format_score(score)} meets auto-hire threshold",
        )
        return AutoHireResult(Verdict.HIRE, reasons, hits)

    if score >= MAYBE_SCORE:
        reasons = ("Moderate score", "Some sales indicators found")
        return AutoHireResult(Verdict.MAYBE, reasons, hits)

    return AutoHireResult(Verdict.REJECT, ("Low score or insufficient sales relevance",), hits)
