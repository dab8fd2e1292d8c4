# radar/utils/rpc.py
# Best-effort on-chain reads. Any RPC failure is logged and returned as None.
from typing import Any, Dict, Optional
from web3 import Web3

ERC20_METADATA_ABI = [
    {"type": "function", "name": "name", "stateMutability": "view", "inputs": [],
     "outputs": [{"name": "", "type": "string"}]},
    {"type": "function", "name": "symbol", "stateMutability": "view", "inputs": [],
     "outputs": [{"name": "", "type": "string"}]},
    {"type": "function", "name": "decimals", "stateMutability": "view", "inputs": [],
     "outputs": [{"name": "", "type": "uint8"}]},
    {"type": "function", "name": "totalSupply", "stateMutability": "view", "inputs": [],
     "outputs": [{"name": "", "type": "uint256"}]},
]


def _dbg(msg: str) -> None:
    print(f"[RPC] {msg}")


def get_bytecode(w3: Web3, address: str) -> Optional[str]:
    """Deployed code as 0x-hex, or None if the call fails."""
    try:
        code = w3.eth.get_code(Web3.to_checksum_address(address))
        hexcode = Web3.to_hex(code)
        _dbg(f"get_code -> {max(0, len(hexcode) - 2) // 2} bytes")
        return hexcode
    except Exception as e:
        _dbg(f"get_code error: {e}")
        return None


def _call_getter(contract, fn_name: str) -> Any:
    try:
        return getattr(contract.functions, fn_name)().call()
    except Exception as e:
        _dbg(f"{fn_name}() failed: {e}")
        return None


def read_erc20_metadata(w3: Web3, address: str) -> Dict[str, Any]:
    """name/symbol/decimals/totalSupply; each key is None when the getter reverts."""
    contract = w3.eth.contract(address=Web3.to_checksum_address(address), abi=ERC20_METADATA_ABI)
    out = {
        "name": _call_getter(contract, "name"),
        "symbol": _call_getter(contract, "symbol"),
        "decimals": _call_getter(contract, "decimals"),
        "total_supply": _call_getter(contract, "totalSupply"),
    }
    if not isinstance(out["decimals"], int):
        out["decimals"] = None
    if not isinstance(out["total_supply"], int):
        out["total_supply"] = None
    return out


def format_units(raw: Optional[int], decimals: Optional[int]) -> Optional[str]:
    """Exact integer -> decimal string (viem-style formatUnits)."""
    if raw is None or decimals is None:
        return None
    if decimals <= 0:
        return str(raw)
    digits = str(abs(raw)).rjust(decimals + 1, "0")
    whole, frac = digits[:-decimals], digits[-decimals:].rstrip("0")
    sign = "-" if raw < 0 else ""
    return f"{sign}{whole}.{frac}" if frac else f"{sign}{whole}"
