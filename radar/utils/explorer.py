# radar/utils/explorer.py
# Etherscan V2 multichain client. Every fetch is best-effort: failures are
# logged and come back as None so the evaluators see "metadata unavailable".
from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional, Tuple

from radar.chains import CHAINS, EXPLORER_V2_BASE
from radar.core.models import ExplorerInfo
from radar.utils.addr import safe_address
from radar.utils.ratelimit import http_get_json

HOST_KEY = "etherscan_v2"
ABI_NOT_VERIFIED = "Contract source code not verified"


def _dbg(msg: str) -> None:
    print(f"[EXPLORER] {msg}")


def explorer_api_key() -> str:
    return (os.getenv("ETHERSCAN_API_KEY") or "").strip()


def _query(chain_key: str, params: Dict[str, Any], api_key: Optional[str]) -> Optional[dict]:
    full = dict(params)
    full["chainid"] = CHAINS[chain_key]["chainid"]
    key = api_key if api_key is not None else explorer_api_key()
    if key:
        full["apikey"] = key
    try:
        data = http_get_json(HOST_KEY, EXPLORER_V2_BASE, full)
    except Exception as e:
        _dbg(f"{params.get('action')} failed: {e}")
        return None
    if not isinstance(data, dict):
        _dbg(f"{params.get('action')} unexpected payload type {type(data).__name__}")
        return None
    return data


def _first_result(data: Optional[dict]) -> Optional[dict]:
    if not data or data.get("status") == "0":
        return None
    res = data.get("result")
    if not isinstance(res, list) or not res or not isinstance(res[0], dict):
        return None
    return res[0]


def parse_abi(raw: Any) -> Optional[List[dict]]:
    """Explorer ABI string -> list of entries. Malformed / unverified -> None."""
    if isinstance(raw, list):
        return raw
    if not isinstance(raw, str):
        return None
    s = raw.strip()
    if not s or s == ABI_NOT_VERIFIED:
        return None
    try:
        parsed = json.loads(s)
    except ValueError:
        return None
    return parsed if isinstance(parsed, list) else None


def parse_source_entry(entry: dict) -> Tuple[ExplorerInfo, Optional[List[dict]]]:
    """Map one getsourcecode result row to (ExplorerInfo, abi)."""
    raw_abi = entry.get("ABI")
    abi = parse_abi(raw_abi)
    abi_text = _text(raw_abi) or ""
    has_valid_abi = abi is not None or (bool(abi_text) and abi_text != ABI_NOT_VERIFIED)
    source = _text(entry.get("SourceCode"))

    info = ExplorerInfo(
        is_verified=has_valid_abi or source is not None,
        proxy=str(entry.get("Proxy") or "0") == "1",
        implementation=_text(entry.get("Implementation")),
        proxy_admin=safe_address(entry.get("ProxyCreator")),
        contract_creator=safe_address(entry.get("ContractCreator")),
        contract_name=_text(entry.get("ContractName")),
        source_code=entry["SourceCode"] if source is not None else None,
    )
    return info, abi


def _text(value: Any) -> Optional[str]:
    # explorer rows are loosely typed; anything but a non-blank string is "absent"
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def fetch_contract_info(
    chain_key: str, address: str, api_key: Optional[str] = None
) -> Tuple[Optional[ExplorerInfo], Optional[List[dict]]]:
    _dbg(f"getsourcecode chain={chain_key} addr={address}")
    entry = _first_result(_query(chain_key, {"module": "contract", "action": "getsourcecode",
                                             "address": address}, api_key))
    if entry is None:
        _dbg("getsourcecode: no result")
        return None, None
    info, abi = parse_source_entry(entry)
    _dbg(f"contract={info.contract_name} verified={info.is_verified} "
         f"abi_items={len(abi) if abi is not None else None} proxy={info.proxy}")
    return info, abi


def fetch_contract_creation(chain_key: str, address: str, api_key: Optional[str] = None) -> Optional[str]:
    entry = _first_result(_query(chain_key, {"module": "contract", "action": "getcontractcreation",
                                             "contractaddresses": address}, api_key))
    creator = safe_address((entry or {}).get("contractCreator"))
    _dbg(f"getcontractcreation -> {creator}")
    return creator


def _optional_number(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    return num if num == num and num not in (float("inf"), float("-inf")) else None


def fetch_token_profile(chain_key: str, address: str, api_key: Optional[str] = None) -> Optional[Dict[str, Any]]:
    entry = _first_result(_query(chain_key, {"module": "token", "action": "tokeninfo",
                                             "contractaddress": address}, api_key))
    if entry is None:
        return None
    holders = _optional_number(entry.get("holderCount") or entry.get("holders"))
    decimals = _optional_number(entry.get("decimals") or entry.get("divisor"))
    return {
        "token_name": entry.get("tokenName") or entry.get("symbol") or None,
        "price_usd": _optional_number(entry.get("tokenPriceUSD") or entry.get("tokenPriceUsd")
                                      or entry.get("priceUsd")),
        "holder_count": int(holders) if holders is not None else None,
        "total_supply": entry.get("totalSupply") or None,
        "decimals": int(decimals) if decimals is not None else None,
    }


__all__ = [
    "parse_abi", "parse_source_entry",
    "fetch_contract_info", "fetch_contract_creation", "fetch_token_profile",
    "explorer_api_key",
]
