from typing import Any, Optional
from web3 import Web3


def normalize_evm_address(raw: str) -> str:
    """Strictly validate & checksum an EVM address."""
    s = (raw or "").strip()
    if "..." in s:
        raise ValueError("Ellipses ('...') are not allowed. Provide the full 42-char 0x address.")
    if not s.startswith("0x") or len(s) != 42:
        raise ValueError("Invalid address: must be 0x-prefixed and 42 characters long (0x + 40 hex).")
    try:
        return Web3.to_checksum_address(s)
    except Exception:
        raise ValueError("Invalid address: not a valid hex string.")


def safe_address(raw: Any) -> Optional[str]:
    """Checksummed address, or None for empty / malformed / non-string explorer fields."""
    if not raw or not isinstance(raw, str):
        return None
    try:
        return normalize_evm_address(raw)
    except ValueError:
        return None


def is_zero_address(raw: Optional[str]) -> bool:
    """True for any hex spelling of zero: "0x0", "0x00", the full 40-digit form."""
    s = (raw or "").strip()
    if s.lower() == "0x":
        return True
    try:
        return int(s, 16) == 0
    except ValueError:
        return False
