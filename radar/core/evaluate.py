# radar/core/evaluate.py
# Pure entry point: one already-gathered snapshot in, one AnalysisResult out.
# No I/O, no env reads, no caching; identical inputs give identical output.
from __future__ import annotations

from typing import Dict, Iterable, Optional

from radar.core.indicators import EVALUATORS
from radar.core.models import INDICATOR_META, AnalysisResult, ExplorerInfo, Finding, IndicatorKey
from radar.core.score import aggregate


def run_findings(
    bytecode: Optional[str],
    abi: Optional[list],
    explorer_info: Optional[ExplorerInfo],
) -> Dict[IndicatorKey, Finding]:
    return {key: fn(bytecode, abi, explorer_info) for key, fn in EVALUATORS.items()}


def evaluate(
    bytecode: Optional[str],
    abi: Optional[list],
    explorer_info: Optional[ExplorerInfo],
    extra_findings: Optional[Iterable[Finding]] = None,
) -> AnalysisResult:
    """
    Score a contract snapshot.

    `extra_findings` lets a token-mode caller attach informational
    indicators (liquidity, holder distribution). They show up in the
    findings map and the summaries but are never summed into the score.
    Scoring keys cannot be overridden this way.
    """
    findings = run_findings(bytecode, abi, explorer_info)
    for extra in extra_findings or ():
        if INDICATOR_META[extra.key].scoring:
            raise ValueError(f"{extra.key.value} is a scoring indicator and is computed internally")
        findings[extra.key] = extra
    return aggregate(findings)


__all__ = ["run_findings", "evaluate"]
