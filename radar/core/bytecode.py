# radar/core/bytecode.py
# Substring scans over hex bytecode. Over-approximate on purpose: a hit does
# not prove the selector sits in the dispatcher or the byte is an opcode.
from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from radar.core.signatures import DANGEROUS_OPCODES, EIP1967_SLOT_PREFIX, SignatureEntry


def normalize_bytecode(bytecode: Optional[str]) -> str:
    """Lowercase hex without the 0x prefix; "" when there is no code."""
    if not bytecode:
        return ""
    s = bytecode.strip().lower()
    if s.startswith("0x"):
        s = s[2:]
    return s


def has_code(bytecode: Optional[str]) -> bool:
    return bool(normalize_bytecode(bytecode))


def _scan(bytecode: Optional[str], table: Mapping[str, SignatureEntry]) -> List[SignatureEntry]:
    code = normalize_bytecode(bytecode)
    if not code:
        return []
    return [entry for key, entry in table.items() if key.lower() in code]


def detect_selectors(bytecode: Optional[str], table: Mapping[str, SignatureEntry]) -> List[SignatureEntry]:
    """Known 4-byte selectors from `table` present anywhere in the bytecode, in table order."""
    return _scan(bytecode, table)


def detect_opcodes(
    bytecode: Optional[str],
    table: Mapping[str, SignatureEntry] = DANGEROUS_OPCODES,
) -> List[SignatureEntry]:
    """
    Single-byte opcode markers (SELFDESTRUCT, DELEGATECALL, CALLCODE).
    Weakest signal we have: push-data and constants trip it too.
    """
    return _scan(bytecode, table)


def detect_eip1967_slot(bytecode: Optional[str]) -> bool:
    code = normalize_bytecode(bytecode)
    return bool(code) and EIP1967_SLOT_PREFIX in code


def selector_keys(entries: List[SignatureEntry]) -> List[str]:
    return [e.key for e in entries]


def describe_entries(entries: List[SignatureEntry], label: str = "signature") -> List[Dict[str, str]]:
    return [{label: e.name, "risk": e.risk.value, "description": e.description} for e in entries]


__all__ = [
    "normalize_bytecode", "has_code",
    "detect_selectors", "detect_opcodes", "detect_eip1967_slot",
    "selector_keys", "describe_entries",
]
