# radar/core/abi.py
# ABI-name keyword heuristics. Renaming a function defeats these, which is
# why every indicator also scans bytecode selectors.
from __future__ import annotations

import re
from enum import Enum
from typing import Iterable, List, Optional


class MatchMode(str, Enum):
    CONTAINS = "contains"
    STARTS_WITH = "starts-with"


def function_names(abi: Optional[list]) -> List[str]:
    """Lowercased names of function entries; [] when the ABI is missing."""
    if not abi:
        return []
    out = []
    for item in abi:
        if not isinstance(item, dict) or item.get("type") != "function":
            continue
        name = item.get("name")
        if name:
            out.append(str(name).lower())
    return out


def match_keywords(names: Iterable[str], keywords: Iterable[str], mode: MatchMode) -> List[str]:
    """
    Names that hit any keyword. CONTAINS is used for owner controls,
    STARTS_WITH for the higher-severity dangerous vocabulary
    ("unwithdrawable" contains "withdraw" but does not start with it).
    """
    kws = [k.lower() for k in keywords]
    if mode is MatchMode.STARTS_WITH:
        return [n for n in names if any(n.startswith(k) for k in kws)]
    return [n for n in names if any(k in n for k in kws)]


def describe_keywords(matches: Iterable[str], limit: int = 4) -> str:
    unique = list(dict.fromkeys(matches))
    return ", ".join(re.sub(r"[^a-z0-9]", "", m, flags=re.IGNORECASE) for m in unique[:limit])


__all__ = ["MatchMode", "function_names", "match_keywords", "describe_keywords"]
