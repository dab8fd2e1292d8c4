# radar/core/score.py
from __future__ import annotations

from typing import Iterable, List, Mapping

from radar.core.models import (
    INDICATOR_META,
    SCORING_KEYS,
    AnalysisResult,
    Finding,
    IndicatorKey,
    RiskLabel,
    RiskStatus,
)

NO_ISSUES_MESSAGE = "No critical issues detected."
NO_GOOD_SIGNS_MESSAGE = "Insufficient data for positive signals."


def compute_score(findings: Mapping[IndicatorKey, Finding], keys: Iterable[IndicatorKey] = SCORING_KEYS) -> int:
    """100 minus the summed penalties of the scoring indicators, clamped to 0..100."""
    total = sum(findings[k].penalty for k in keys if k in findings)
    return max(0, min(100, 100 - total))


def score_to_label(score: int) -> RiskLabel:
    if score >= 80:
        return RiskLabel.LOW
    if score >= 50:
        return RiskLabel.MEDIUM
    return RiskLabel.HIGH


def key_findings(findings: Mapping[IndicatorKey, Finding]) -> List[str]:
    out = [f.reason for f in findings.values() if f.status is not RiskStatus.PASS]
    return out or [NO_ISSUES_MESSAGE]


def good_signs(findings: Mapping[IndicatorKey, Finding]) -> List[str]:
    out = [INDICATOR_META[k].good_message for k, f in findings.items() if f.status is RiskStatus.PASS]
    return out or [NO_GOOD_SIGNS_MESSAGE]


def aggregate(findings: Mapping[IndicatorKey, Finding]) -> AnalysisResult:
    score = compute_score(findings)
    return AnalysisResult(
        findings=dict(findings),
        score=score,
        label=score_to_label(score),
        key_findings=key_findings(findings),
        good_signs=good_signs(findings),
    )


__all__ = [
    "NO_ISSUES_MESSAGE", "NO_GOOD_SIGNS_MESSAGE",
    "compute_score", "score_to_label", "key_findings", "good_signs", "aggregate",
]
