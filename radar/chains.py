# radar/chains.py
# Purpose: Chain config + web3 factory (Web3 v7). Injects POA middleware for BSC / Polygon.
# Only the data-gathering side reads this; radar.core never touches env or RPC.

import os
from typing import Optional
from web3 import Web3
from web3.middleware.proof_of_authority import ExtraDataToPOAMiddleware

# One Etherscan V2 base works for every chain, keyed by chainid
EXPLORER_V2_BASE = "https://api.etherscan.io/v2/api"

CHAINS = {
    "ethereum": {"name": "ethereum", "display_name": "Ethereum", "chainid": 1,
                 "rpc_env": "WEB3_PROVIDER_ETHEREUM", "alchemy_slug": "eth-mainnet"},
    "base": {"name": "base", "display_name": "Base", "chainid": 8453,
             "rpc_env": "WEB3_PROVIDER_BASE", "alchemy_slug": "base-mainnet"},
    "polygon": {"name": "polygon", "display_name": "Polygon", "chainid": 137,
                "rpc_env": "WEB3_PROVIDER_POLYGON", "alchemy_slug": "polygon-mainnet"},
    "bsc": {"name": "bsc", "display_name": "BNB Smart Chain", "chainid": 56,
            "rpc_env": "WEB3_PROVIDER_BSC", "alchemy_slug": "bnb-mainnet"},
    "scroll": {"name": "scroll", "display_name": "Scroll", "chainid": 534352,
               "rpc_env": "WEB3_PROVIDER_SCROLL", "alchemy_slug": "scroll-mainnet"},
    "arbitrum": {"name": "arbitrum", "display_name": "Arbitrum", "chainid": 42161,
                 "rpc_env": "WEB3_PROVIDER_ARBITRUM", "alchemy_slug": "arb-mainnet"},
}

CHAIN_ALIASES = {
    "eth": "ethereum", "mainnet": "ethereum",
    "matic": "polygon",
    "bnb": "bsc",
    "arb": "arbitrum",
}

POA_CHAIN_IDS = (56, 97, 137)


def normalize_chain(raw: Optional[str]) -> Optional[str]:
    """Map user input to a CHAINS key. None -> ethereum, unknown -> None."""
    if not raw:
        return "ethereum"
    key = raw.strip().lower()
    key = CHAIN_ALIASES.get(key, key)
    return key if key in CHAINS else None


def resolve_rpc_url(chain_key: str) -> str:
    cfg = CHAINS[chain_key]
    rpc = (os.getenv(cfg["rpc_env"]) or "").strip().rstrip("\r")
    if rpc and rpc not in {"https://", "http://"}:
        return rpc
    alchemy_key = (os.getenv("ALCHEMY_API_KEY") or "").strip()
    if alchemy_key:
        return f"https://{cfg['alchemy_slug']}.g.alchemy.com/v2/{alchemy_key}"
    raise ValueError(f"Missing RPC URL for {cfg['display_name']}. Set {cfg['rpc_env']} or ALCHEMY_API_KEY in .env")


def get_w3_for_chain(chain_key: str) -> Web3:
    print(f"[CHAINS] get_w3_for_chain({chain_key})")
    if chain_key not in CHAINS:
        raise ValueError(f"Unknown chain: {chain_key}")

    cfg = CHAINS[chain_key]
    rpc = resolve_rpc_url(chain_key)
    print(f"[CHAINS] HTTPProvider -> {cfg['name']} ({cfg['rpc_env']})")
    w3 = Web3(Web3.HTTPProvider(rpc, request_kwargs={"timeout": 30}))

    if cfg["chainid"] in POA_CHAIN_IDS:
        try:
            w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
            print(f"[CHAINS] POA middleware injected for {chain_key}")
        except Exception as e:
            print(f"[CHAINS] POA inject failed for {chain_key}: {e}")

    return w3


__all__ = ["EXPLORER_V2_BASE", "CHAINS", "normalize_chain", "resolve_rpc_url", "get_w3_for_chain"]
