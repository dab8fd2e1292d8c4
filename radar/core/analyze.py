# radar/core/analyze.py
# Data-gathering side: collects one consistent snapshot for (chain, address)
# and hands it to the pure evaluate(). Every network step is best-effort and
# degrades to None; only bad user input raises.
from __future__ import annotations

from typing import Any, Dict, Optional

from radar.chains import CHAINS, get_w3_for_chain, normalize_chain
from radar.core.bytecode import has_code
from radar.core.evaluate import evaluate
from radar.utils.addr import normalize_evm_address
from radar.utils.explorer import (
    explorer_api_key,
    fetch_contract_creation,
    fetch_contract_info,
    fetch_token_profile,
)
from radar.utils.rpc import format_units, get_bytecode, read_erc20_metadata
from radar.utils.source_patterns import analyze_source_patterns

ADDRESS_KINDS = ("token", "contract", "auto")


class AnalyzerError(Exception):
    """Refusal to analyze, carrying the HTTP status the API should answer with."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def normalize_address_kind(value: Optional[str]) -> str:
    v = (value or "").strip().lower()
    return v if v in ("token", "contract") else "auto"


def _has_token_evidence(erc20: Dict[str, Any], profile: Optional[Dict[str, Any]], supply_fmt: Optional[str]) -> bool:
    return (
        bool((profile or {}).get("total_supply"))
        or isinstance(erc20.get("decimals"), int)
        or bool(erc20.get("symbol"))
        or bool(erc20.get("name"))
        or bool(supply_fmt)
    )


def resolve_address_kind(requested: str, token_evidence: bool) -> str:
    if requested == "contract":
        return "contract"
    if requested == "token":
        if not token_evidence:
            raise AnalyzerError("Check the address network or switch to contract mode to continue.", 400)
        return "token"
    return "token" if token_evidence else "contract"


def analyze_contract(chain: Optional[str], address: str, address_type: Optional[str] = None) -> Dict[str, Any]:
    print(f"[ANALYZE] analyze_contract start chain={chain} addr={address} type={address_type}")

    # 1) Inputs
    chain_key = normalize_chain(chain)
    if not chain_key:
        raise AnalyzerError("Unsupported chain", 400)
    try:
        checksum = normalize_evm_address(address)
    except ValueError as e:
        raise AnalyzerError(f"Invalid or missing address: {e}", 400)
    requested = normalize_address_kind(address_type)
    cfg = CHAINS[chain_key]

    if not explorer_api_key():
        raise AnalyzerError(f"Explorer API key missing for {cfg['display_name']}. Set ETHERSCAN_API_KEY.", 500)

    # 2) Web3 for chain
    try:
        w3 = get_w3_for_chain(chain_key)
    except ValueError as e:
        raise AnalyzerError(str(e), 500)

    # 3) Bytecode + ERC-20 getters
    bytecode = get_bytecode(w3, checksum)
    erc20 = read_erc20_metadata(w3, checksum)
    print(f"[ANALYZE] RPC OK: code={'yes' if has_code(bytecode) else 'no'} erc20={erc20}")
    if requested == "contract" and not has_code(bytecode):
        raise AnalyzerError("This address does not contain contract bytecode. Enter a deployed contract address.", 400)

    # 4) Explorer metadata
    explorer_info, abi = fetch_contract_info(chain_key, checksum)
    profile = fetch_token_profile(chain_key, checksum)
    creator = fetch_contract_creation(chain_key, checksum)

    # 5) Token or plain contract
    supply_fmt = format_units(erc20.get("total_supply"), erc20.get("decimals"))
    kind = resolve_address_kind(requested, _has_token_evidence(erc20, profile, supply_fmt))
    print(f"[ANALYZE] address kind -> {kind}")

    # 6) Score
    result = evaluate(bytecode, abi, explorer_info)
    print(f"[ANALYZE] Score OK: score={result.score} label={result.label.value}")

    deployer = creator or (explorer_info.contract_creator if explorer_info else None)
    owner = (explorer_info.proxy_admin if explorer_info else None) or deployer
    contract_name = explorer_info.contract_name if explorer_info else None
    profile = profile or {}

    if kind == "token":
        total_supply = erc20.get("total_supply")
        token = {
            "name": profile.get("token_name") or erc20.get("name") or contract_name,
            "symbol": erc20.get("symbol"),
            "decimals": erc20.get("decimals"),
            "totalSupply": str(total_supply) if total_supply is not None else profile.get("total_supply"),
            "totalSupplyFormatted": supply_fmt or profile.get("total_supply"),
            "priceUsd": profile.get("price_usd"),
        }
    else:
        token = {
            "name": contract_name or erc20.get("name"),
            "symbol": erc20.get("symbol"),
            "decimals": None,
            "totalSupply": None,
            "totalSupplyFormatted": None,
            "priceUsd": None,
        }

    payload = result.to_dict()
    out = {
        "chain": cfg["display_name"],
        "address": checksum,
        "token": token,
        "riskScore": {"score": payload["score"], "label": payload["label"]},
        "summary": {
            "rating": f"{payload['label']} Risk",
            "keyFindings": payload["keyFindings"],
            "goodSigns": payload["goodSigns"],
        },
        "findings": payload["findings"],
        "sourcePatterns": analyze_source_patterns(explorer_info.source_code if explorer_info else None),
        "metadata": {
            "chainLabel": cfg["display_name"],
            "deployer": deployer,
            "ownerAddress": owner,
            "proxyImplementation": explorer_info.implementation if explorer_info else None,
            "proxyAdmin": explorer_info.proxy_admin if explorer_info else None,
            "addressType": kind,
            "contractName": contract_name,
            "isVerified": bool(explorer_info and explorer_info.is_verified),
            "holderCount": profile.get("holder_count") if kind == "token" else None,
        },
    }
    print(f"[ANALYZE] analyze_contract done chain={chain_key} addr={checksum} score={result.score}")
    return out


__all__ = ["AnalyzerError", "ADDRESS_KINDS", "normalize_address_kind", "resolve_address_kind", "analyze_contract"]
