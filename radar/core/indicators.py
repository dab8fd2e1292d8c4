# radar/core/indicators.py
# The four scoring evaluators. Each one is a pure
#   (bytecode, abi, explorer_info) -> Finding
# and never raises on missing inputs: absence routes to an explicit WARN.
from __future__ import annotations

from typing import Any, Dict, List, NamedTuple, Optional

from radar.core.abi import MatchMode, describe_keywords, function_names, match_keywords
from radar.core.bytecode import (
    describe_entries,
    detect_eip1967_slot,
    detect_opcodes,
    detect_selectors,
    has_code,
)
from radar.core.models import (
    INDICATOR_META,
    ExplorerInfo,
    Finding,
    IndicatorKey,
    RiskStatus,
    build_finding,
)
from radar.core.signatures import (
    DANGEROUS_FUNCTION_KEYWORDS,
    DANGEROUS_OPCODES,
    DANGEROUS_SELECTORS,
    HIGH_OWNER_PRIVILEGE_KEYWORDS,
    HIGH_RISK_OWNER_SELECTORS,
    OWNER_PRIVILEGE_KEYWORDS,
    OWNER_SELECTORS,
    PROXY_SELECTORS,
    UPGRADE_SELECTORS,
    RiskTier,
    SignatureEntry,
)
from radar.utils.addr import is_zero_address


class Verdict(NamedTuple):
    status: RiskStatus
    reason: str
    penalty: int


def _inputs_missing(bytecode: Optional[str], abi: Optional[list]) -> bool:
    return abi is None and not has_code(bytecode)


def _nonzero_address(addr: Optional[str]) -> bool:
    return bool(addr and addr.strip()) and not is_zero_address(addr)


# ---------- Verified source ----------

def analyze_verified_source(
    bytecode: Optional[str],
    abi: Optional[list],
    explorer_info: Optional[ExplorerInfo],
) -> Finding:
    key = IndicatorKey.VERIFIED_SOURCE
    has_parsed_abi = isinstance(abi, list) and len(abi) > 0
    flagged_verified = bool(explorer_info and explorer_info.is_verified)
    evidence = {"explorerVerified": flagged_verified, "abiAvailable": has_parsed_abi}

    if flagged_verified or has_parsed_abi:
        return build_finding(key, RiskStatus.PASS,
                             reason="Contract source is verified on the explorer.",
                             penalty=0, evidence=evidence)

    if explorer_info is None:
        return build_finding(key, RiskStatus.WARN,
                             reason="Could not confirm verification status from explorer.",
                             penalty=10)

    return build_finding(key, RiskStatus.FAIL,
                         reason="Source is not verified; code cannot be audited easily.",
                         penalty=INDICATOR_META[key].max_penalty, evidence=evidence)


# ---------- Proxy ----------

def proxy_verdict(has_upgrade_function: bool, has_admin: bool) -> Verdict:
    """Ladder for a contract already known to be a proxy. First match wins."""
    cap = INDICATOR_META[IndicatorKey.PROXY].max_penalty
    if has_upgrade_function and has_admin:
        return Verdict(RiskStatus.WARN,
                       "Upgradeable proxy with active admin - contract logic can be changed.",
                       min(15, cap))
    if has_upgrade_function:
        return Verdict(RiskStatus.WARN,
                       "Upgrade functions detected in bytecode - contract may be upgradeable.",
                       12)
    if has_admin:
        return Verdict(RiskStatus.WARN, "Proxy detected with active admin.", min(12, cap))
    return Verdict(RiskStatus.WARN, "Proxy detected, admin appears renounced.", 5)


def analyze_proxy(
    bytecode: Optional[str],
    abi: Optional[list],
    explorer_info: Optional[ExplorerInfo],
) -> Finding:
    key = IndicatorKey.PROXY
    explorer_proxy = bool(explorer_info and explorer_info.proxy)
    proxy_hits = detect_selectors(bytecode, PROXY_SELECTORS)
    has_eip1967 = detect_eip1967_slot(bytecode)
    bytecode_proxy = bool(proxy_hits) or has_eip1967

    if not (explorer_proxy or bytecode_proxy):
        return build_finding(key, RiskStatus.PASS,
                             reason="No proxy pattern detected in explorer data or bytecode.",
                             penalty=0)

    evidence: Dict[str, Any] = {
        "explorerProxy": explorer_proxy,
        "bytecodeProxyDetected": bytecode_proxy,
        "eip1967Slot": has_eip1967,
    }
    if proxy_hits:
        evidence["proxySelectors"] = [e.name for e in proxy_hits]
    if explorer_info and explorer_info.implementation:
        evidence["implementation"] = explorer_info.implementation
    if explorer_info and explorer_info.proxy_admin:
        evidence["admin"] = explorer_info.proxy_admin

    has_admin = explorer_info is not None and _nonzero_address(explorer_info.proxy_admin)
    has_upgrade = any(e.key in UPGRADE_SELECTORS for e in proxy_hits)
    verdict = proxy_verdict(has_upgrade, has_admin)
    return build_finding(key, verdict.status, reason=verdict.reason,
                         penalty=verdict.penalty, evidence=evidence)


# ---------- Owner privileges ----------

def analyze_owner_privileges(
    bytecode: Optional[str],
    abi: Optional[list],
    explorer_info: Optional[ExplorerInfo] = None,
) -> Finding:
    key = IndicatorKey.OWNER_PRIVILEGES
    keyword_matches = match_keywords(function_names(abi), OWNER_PRIVILEGE_KEYWORDS, MatchMode.CONTAINS)
    high_keyword_matches = match_keywords(keyword_matches, HIGH_OWNER_PRIVILEGE_KEYWORDS, MatchMode.CONTAINS)

    detected = detect_selectors(bytecode, OWNER_SELECTORS)
    high_detected = [e for e in detected if e.key in HIGH_RISK_OWNER_SELECTORS]

    evidence: Dict[str, Any] = {}
    if keyword_matches:
        evidence["keywordMatches"] = keyword_matches
    if detected:
        evidence["detectedSelectors"] = [e.name for e in detected]

    if high_keyword_matches or high_detected:
        parts = []
        if high_detected:
            parts.append("blacklist/whitelist capability detected in bytecode")
        if high_keyword_matches:
            parts.append(f"functions: {describe_keywords(high_keyword_matches)}")
        return build_finding(key, RiskStatus.WARN,
                             reason=f"Owner can restrict addresses: {'; '.join(parts)}",
                             penalty=min(18, INDICATOR_META[key].max_penalty), evidence=evidence)

    if keyword_matches or detected:
        count = max(len(keyword_matches), len(detected))
        return build_finding(key, RiskStatus.WARN,
                             reason=f"{count} admin function(s) detected via bytecode/ABI analysis.",
                             penalty=8, evidence=evidence)

    if _inputs_missing(bytecode, abi):
        return build_finding(key, RiskStatus.WARN,
                             reason="Cannot inspect owner-only functions because ABI and bytecode unavailable.",
                             penalty=10)

    return build_finding(key, RiskStatus.PASS,
                         reason="No sensitive owner-only functions detected in bytecode or ABI.",
                         penalty=0)


# ---------- Dangerous functions ----------

def dangerous_verdict(
    high: List[SignatureEntry],
    medium: List[SignatureEntry],
    keyword_matches: List[str],
) -> Verdict:
    """Ordered ladder; the first rule that matches decides."""
    cap = INDICATOR_META[IndicatorKey.DANGEROUS_FUNCTIONS].max_penalty
    distinct_high = list({e.key: e for e in high}.values())

    if len(distinct_high) >= 2:
        return Verdict(RiskStatus.FAIL, "; ".join(e.description for e in distinct_high[:3]), cap)
    if len(distinct_high) == 1:
        return Verdict(RiskStatus.WARN, f"High-risk capability: {distinct_high[0].description}", 18)
    if len(medium) >= 3:
        descs = "; ".join(e.description for e in medium[:3])
        return Verdict(RiskStatus.WARN, f"Multiple admin capabilities: {descs}", 12)
    if medium:
        return Verdict(RiskStatus.WARN, f"Admin capability detected: {medium[0].description}", 8)
    if keyword_matches:
        return Verdict(RiskStatus.WARN,
                       f"Admin capability detected: Functions: {describe_keywords(keyword_matches)}", 8)
    return Verdict(RiskStatus.PASS, "No dangerous function selectors or opcodes detected in bytecode.", 0)


def _keyword_evidence(matches: List[str]) -> List[Dict[str, str]]:
    out = []
    for name in matches:
        kw = next(k for k in DANGEROUS_FUNCTION_KEYWORDS if name.startswith(k))
        out.append({"function": name, "keyword": kw,
                    "description": f"ABI function name starts with '{kw}'"})
    return out


def analyze_dangerous_functions(
    bytecode: Optional[str],
    abi: Optional[list],
    explorer_info: Optional[ExplorerInfo] = None,
) -> Finding:
    key = IndicatorKey.DANGEROUS_FUNCTIONS
    if _inputs_missing(bytecode, abi):
        return build_finding(key, RiskStatus.WARN,
                             reason="Bytecode/ABI unavailable, cannot scan for red-flag functions.",
                             penalty=12)

    keyword_matches = match_keywords(function_names(abi), DANGEROUS_FUNCTION_KEYWORDS, MatchMode.STARTS_WITH)
    selectors = detect_selectors(bytecode, DANGEROUS_SELECTORS)
    opcodes = detect_opcodes(bytecode, DANGEROUS_OPCODES)

    high = [e for e in selectors + opcodes if e.risk is RiskTier.HIGH]
    medium = [e for e in selectors + opcodes if e.risk is RiskTier.MEDIUM]

    evidence: Dict[str, Any] = {}
    if selectors:
        evidence["detectedFunctions"] = describe_entries(selectors, "signature")
    if opcodes:
        evidence["dangerousOpcodes"] = describe_entries(opcodes, "opcode")
    if keyword_matches:
        evidence["keywordMatches"] = _keyword_evidence(keyword_matches)

    verdict = dangerous_verdict(high, medium, keyword_matches)
    return build_finding(key, verdict.status, reason=verdict.reason,
                         penalty=verdict.penalty, evidence=evidence)


EVALUATORS = {
    IndicatorKey.VERIFIED_SOURCE: analyze_verified_source,
    IndicatorKey.PROXY: analyze_proxy,
    IndicatorKey.OWNER_PRIVILEGES: analyze_owner_privileges,
    IndicatorKey.DANGEROUS_FUNCTIONS: analyze_dangerous_functions,
}


__all__ = [
    "Verdict", "proxy_verdict", "dangerous_verdict",
    "analyze_verified_source", "analyze_proxy", "analyze_owner_privileges", "analyze_dangerous_functions",
    "EVALUATORS",
]
