# sales_fresher_scorer.py
# Keyword / quality scorecard for entry-level sales resumes.
#
# Each category adds fixed points per signal found, then is clamped to its
# own cap. Matching is plain case-insensitive substring containment.

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple


class Verdict(str, Enum):
    HIRE = "HIRE"
    MAYBE = "MAYBE"
    REJECT = "REJECT"


# Keyword category (max 40)
KEYWORDS = ["sales", "client", "revenue", "customer", "lead", "closing"]
KEYWORD_POINTS = 5
KEYWORD_CAP = 40

# Experience category (max 25)
EXPERIENCE_SIGNALS = [("experience", 10), ("intern", 5), ("year", 10)]
EXPERIENCE_CAP = 25

# Tech category (max 20)
TECH_SIGNALS = [("crm", 10), ("excel", 5), ("salesforce", 10)]
TECH_CAP = 20

# Quality category (length of the raw text, effective max 15)
QUALITY_THRESHOLDS = [(800, 10), (1200, 5)]

HIRE_THRESHOLD = 70
MAYBE_THRESHOLD = 40


@dataclass(frozen=True)
class ScoreBreakdown:
    keywords: int
    experience: int
    tech: int
    quality: int

    @property
    def total(self) -> int:
        return self.keywords + self.experience + self.tech + self.quality

    def to_dict(self) -> dict:
        return {
            "keywords": self.keywords,
            "experience": self.experience,
            "tech": self.tech,
            "quality": self.quality,
        }


@dataclass(frozen=True)
class ScoreResult:
    score: int
    verdict: Verdict
    breakdown: ScoreBreakdown
    log: Tuple[Tuple[str, str, int], ...] = ()

    def to_dict(self, verbose: bool = False) -> dict:
        out = {
            "score": self.score,
            "verdict": self.verdict.value,
            "breakdown": self.breakdown.to_dict(),
        }
        if verbose:
            out["log"] = [list(entry) for entry in self.log]
        return out


def verdict_for_score(score) -> Verdict:
    if score >= HIRE_THRESHOLD:
        return Verdict.HIRE
    elif score >= MAYBE_THRESHOLD:
        return Verdict.MAYBE
    return Verdict.REJECT


def score_sales_fresher_resume(text: str) -> ScoreResult:
    lower = text.lower()
    log: List[Tuple[str, str, int]] = []

    # ----------------------------
    # Keyword signals
    keyword_score = 0
    for k in KEYWORDS:
        if k in lower:
            keyword_score += KEYWORD_POINTS
            log.append(("keywords", f"Mentions '{k}'", KEYWORD_POINTS))
    keyword_score = min(keyword_score, KEYWORD_CAP)

    # ----------------------------
    # Experience indicators
    experience_score = 0
    for term, points in EXPERIENCE_SIGNALS:
        if term in lower:
            experience_score += points
            log.append(("experience", f"Mentions '{term}'", points))
    experience_score = min(experience_score, EXPERIENCE_CAP)

    # ----------------------------
    # Tech exposure
    tech_score = 0
    for term, points in TECH_SIGNALS:
        if term in lower:
            tech_score += points
            log.append(("tech", f"Mentions '{term}'", points))
    tech_score = min(tech_score, TECH_CAP)

    # ----------------------------
    # Resume quality
    quality_score = 0
    # len() counts code points, so an emoji is one character
    for min_length, points in QUALITY_THRESHOLDS:
        if len(text) > min_length:
            quality_score += points
            log.append(("quality", f"Longer than {min_length} characters", points))

    breakdown = ScoreBreakdown(
        keywords=keyword_score,
        experience=experience_score,
        tech=tech_score,
        quality=quality_score,
    )
    score = breakdown.total
    return ScoreResult(
        score=score,
        verdict=verdict_for_score(score),
        breakdown=breakdown,
        log=tuple(log),
    )
