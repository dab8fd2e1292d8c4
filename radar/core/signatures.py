# radar/core/signatures.py
# Static selector / opcode tables. Keys are lowercase hex without 0x.
# Selectors are the first 4 bytes of keccak256(signature), hardcoded so the
# core never needs a hashing dependency.
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class RiskTier(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"


@dataclass(frozen=True)
class SignatureEntry:
    key: str
    name: str
    risk: RiskTier
    description: str
    group: str  # "proxy" | "owner" | "dangerous" | "opcode"


def _table(group: str, rows) -> Dict[str, SignatureEntry]:
    return {
        key: SignatureEntry(key=key, name=name, risk=risk, description=desc, group=group)
        for key, name, risk, desc in rows
    }


H, M = RiskTier.HIGH, RiskTier.MEDIUM

# Proxy / upgrade surface
PROXY_SELECTORS: Dict[str, SignatureEntry] = _table("proxy", [
    ("3659cfe6", "upgradeTo(address)", H, "Contract can be upgraded"),
    ("4f1ef286", "upgradeToAndCall(address,bytes)", H, "Contract can be upgraded"),
    ("5c60da1b", "implementation()", M, "Uses proxy pattern"),
    ("f851a440", "admin()", M, "Has admin role"),
    ("8f283970", "changeAdmin(address)", M, "Proxy admin can be changed"),
    ("52d1902d", "proxiableUUID()", M, "UUPS upgradeable implementation"),
])

UPGRADE_SELECTORS: Tuple[str, ...] = ("3659cfe6", "4f1ef286")

# Owner / admin controls
OWNER_SELECTORS: Dict[str, SignatureEntry] = _table("owner", [
    ("f2fde38b", "transferOwnership(address)", M, "Ownership can be transferred"),
    ("715018a6", "renounceOwnership()", M, "Has ownership controls"),
    ("8da5cb5b", "owner()", M, "Has owner role"),
    ("8456cb59", "pause()", M, "Can pause all transfers"),
    ("3f4ba83a", "unpause()", M, "Can control transfer pausing"),
    ("44337ea1", "blacklist(address)", H, "Can blacklist addresses"),
    ("537df3b6", "unBlacklist(address)", H, "Has blacklist mechanism"),
    ("c0246668", "setFee(address,bool)", M, "Can modify fees"),
    ("8c0b5e22", "setMaxTxAmount(uint256)", M, "Can limit transactions"),
    ("e01af92c", "setTaxFee(uint256)", M, "Can modify tax fees"),
    ("8ee88c53", "setMaxWalletSize(uint256)", M, "Can limit wallet holdings"),
])

HIGH_RISK_OWNER_SELECTORS: Tuple[str, ...] = ("44337ea1", "537df3b6")

# Supply / funds / trading red flags. Selectors already owned by the proxy
# or owner tables are deliberately absent so each selector scores once.
DANGEROUS_SELECTORS: Dict[str, SignatureEntry] = _table("dangerous", [
    # minting
    ("40c10f19", "mint(address,uint256)", H, "Can create new tokens"),
    ("a0712d68", "mint(uint256)", H, "Can create new tokens"),
    ("4e6ec247", "mint(address,uint256,bytes)", H, "Can create new tokens"),
    # burning
    ("42966c68", "burn(uint256)", M, "Can destroy tokens"),
    ("9dc29fac", "burn(address,uint256)", H, "Can burn tokens from any address"),
    ("79cc6790", "burnFrom(address,uint256)", H, "Can burn tokens from any address"),
    # pause / blacklist lookups
    ("5c975abb", "paused()", M, "Has pause mechanism"),
    ("fe575a87", "isBlacklisted(address)", M, "Has blacklist mechanism"),
    ("e47d6060", "isBlackListed(address)", M, "Has blacklist mechanism"),
    # emergency / withdrawal
    ("db2e21bc", "emergencyWithdraw()", H, "Emergency fund withdrawal"),
    ("5312ea8e", "emergencyWithdraw(uint256)", H, "Emergency fund withdrawal"),
    ("00f714ce", "withdraw(uint256,address)", H, "Can withdraw funds"),
    ("2e1a7d4d", "withdraw(uint256)", M, "Can withdraw funds"),
    ("51cff8d9", "withdraw(address)", H, "Can withdraw to any address"),
    # self-destruct entry points
    ("83197ef0", "destroy()", H, "Can destroy contract"),
    ("41c0e1b5", "kill()", H, "Can destroy contract"),
    # allowance traps
    ("095ea7b3", "approve(address,uint256)", M, "Standard approve (check for max uint)"),
    ("39509351", "increaseAllowance(address,uint256)", M, "Can increase allowance"),
    # trading / router manipulation
    ("c9567bf9", "openTrading()", M, "Trading can be enabled/disabled"),
    ("c49b9a80", "setSwapAndLiquifyEnabled(bool)", M, "Can manipulate liquidity"),
    # delegation
    ("5c19a95c", "delegate(address)", H, "Can delegate to external contract"),
])

DANGEROUS_OPCODES: Dict[str, SignatureEntry] = _table("opcode", [
    ("ff", "SELFDESTRUCT", H, "Contract can be destroyed"),
    ("f4", "DELEGATECALL", H, "Can execute external code"),
    ("f2", "CALLCODE", H, "Deprecated dangerous opcode"),
])

# Every known selector, for name lookups in evidence.
ALL_SELECTORS: Dict[str, SignatureEntry] = {**PROXY_SELECTORS, **OWNER_SELECTORS, **DANGEROUS_SELECTORS}

# keccak256('eip1967.proxy.implementation') - 1
EIP1967_IMPL_SLOT = "360894a13ba1a3210667c828492db98dca3e2076cc3735a920a3ca505d382bbc"
EIP1967_SLOT_PREFIX = EIP1967_IMPL_SLOT[:16]

# ABI name vocabularies (lowercase)
OWNER_PRIVILEGE_KEYWORDS: Tuple[str, ...] = (
    "settax", "setfee", "setmax", "setlimit", "pause", "unpause", "blacklist", "whitelist",
)
HIGH_OWNER_PRIVILEGE_KEYWORDS: Tuple[str, ...] = ("blacklist", "whitelist")

DANGEROUS_FUNCTION_KEYWORDS: Tuple[str, ...] = (
    "mint", "burn", "withdraw", "emergencywithdraw", "rug", "swapandliquify", "delegatecall",
)


def selector_name(key: str) -> str:
    entry = ALL_SELECTORS.get(key)
    return entry.name if entry else key


__all__ = [
    "RiskTier", "SignatureEntry",
    "PROXY_SELECTORS", "UPGRADE_SELECTORS",
    "OWNER_SELECTORS", "HIGH_RISK_OWNER_SELECTORS",
    "DANGEROUS_SELECTORS", "DANGEROUS_OPCODES", "ALL_SELECTORS",
    "EIP1967_IMPL_SLOT", "EIP1967_SLOT_PREFIX",
    "OWNER_PRIVILEGE_KEYWORDS", "HIGH_OWNER_PRIVILEGE_KEYWORDS", "DANGEROUS_FUNCTION_KEYWORDS",
    "selector_name",
]
