# radar/utils/source_patterns.py
# Plain-text red flags in verified Solidity source. Informational: shown
# next to the findings, never fed into the score.
from typing import Dict, List, Optional

SOURCE_CODE_PATTERNS = {
    "selfdestruct": ("high", "Contract can be destroyed"),
    "delegatecall": ("high", "Can execute arbitrary external code"),
    "tx.origin": ("medium", "Uses tx.origin (phishing vulnerability)"),
    "assembly": ("medium", "Contains inline assembly"),
    "block.timestamp": ("medium", "Relies on block timestamp (manipulatable)"),
    "transfer(": ("medium", "Uses transfer (gas limit issues)"),
}


def analyze_source_patterns(source_code: Optional[str]) -> List[Dict[str, str]]:
    if not source_code:
        return []
    lower = source_code.lower()
    return [
        {"pattern": pattern, "risk": risk, "description": desc}
        for pattern, (risk, desc) in SOURCE_CODE_PATTERNS.items()
        if pattern in lower
    ]
