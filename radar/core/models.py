# radar/core/models.py
from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    FieldSerializationInfo,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


class IndicatorKey(str, Enum):
    VERIFIED_SOURCE = "verifiedSource"
    PROXY = "proxy"
    OWNER_PRIVILEGES = "ownerPrivileges"
    DANGEROUS_FUNCTIONS = "dangerousFunctions"
    # informational only, never summed into the score
    LIQUIDITY = "liquidity"
    HOLDER_DISTRIBUTION = "holderDistribution"


class RiskStatus(str, Enum):
    PASS = "PASS"
    WARN = "WARN"
    FAIL = "FAIL"


class RiskLabel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class IndicatorMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    category: str
    explanation: str
    good_message: str
    max_penalty: int
    scoring: bool = True


# Versioned output contract; changing a row is a breaking change.
INDICATOR_META: Dict[IndicatorKey, IndicatorMeta] = {
    IndicatorKey.VERIFIED_SOURCE: IndicatorMeta(
        title="Verified Source",
        category="Code Security",
        explanation="Verified source code allows anyone to audit and diff the contract.",
        good_message="Contract source is verified on the explorer.",
        max_penalty=30,
    ),
    IndicatorKey.PROXY: IndicatorMeta(
        title="Proxy / Upgradeable",
        category="Proxy Security",
        explanation="Upgradeable contracts can change logic after deployment.",
        good_message="No proxy pattern detected.",
        max_penalty=15,
    ),
    IndicatorKey.OWNER_PRIVILEGES: IndicatorMeta(
        title="Owner Privileges",
        category="Admin Controls",
        explanation="Owner-only functions can change fees, pause transfers or restrict wallets.",
        good_message="No high-impact owner-only functions detected.",
        max_penalty=20,
    ),
    IndicatorKey.DANGEROUS_FUNCTIONS: IndicatorMeta(
        title="Dangerous Functions",
        category="Red Flags",
        explanation="Functions like mint, burn or emergency withdraw can impact supply or funds.",
        good_message="No red-flag functions detected.",
        max_penalty=30,
    ),
    IndicatorKey.LIQUIDITY: IndicatorMeta(
        title="Liquidity",
        category="Market",
        explanation="Thin or unlocked liquidity makes exits expensive or impossible.",
        good_message="Liquidity looks healthy.",
        max_penalty=20,
        scoring=False,
    ),
    IndicatorKey.HOLDER_DISTRIBUTION: IndicatorMeta(
        title="Holder Distribution",
        category="Token Distribution",
        explanation="Concentrated holdings let a few wallets move the market.",
        good_message="Token supply is reasonably distributed.",
        max_penalty=20,
        scoring=False,
    ),
}

SCORING_KEYS = tuple(k for k, meta in INDICATOR_META.items() if meta.scoring)


class ExplorerInfo(BaseModel):
    """Explorer-reported contract metadata. A missing record (None) means
    "unavailable", which is not the same as an unverified contract."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    is_verified: bool = False
    proxy: bool = False
    implementation: Optional[str] = None
    proxy_admin: Optional[str] = None
    contract_creator: Optional[str] = None
    contract_name: Optional[str] = None
    source_code: Optional[str] = None


def _freeze(value: Any) -> Any:
    """Read-only deep copy: mappings become MappingProxyType, lists become tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


class Finding(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: IndicatorKey
    title: str
    category: str
    status: RiskStatus
    reason: str
    hint: str
    penalty: int = Field(ge=0)
    explanation: str
    evidence: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)

    @field_validator("evidence", mode="after")
    @classmethod
    def _freeze_evidence(cls, v: Mapping[str, Any]) -> Mapping[str, Any]:
        return _freeze(v)

    @field_serializer("evidence")
    def _dump_evidence(self, v: Mapping[str, Any]) -> Dict[str, Any]:
        return _thaw(v)

    @model_validator(mode="after")
    def _penalty_within_cap(self) -> "Finding":
        cap = INDICATOR_META[self.key].max_penalty
        if self.penalty > cap:
            raise ValueError(f"penalty {self.penalty} exceeds max {cap} for {self.key.value}")
        return self


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    # read-only so score/label can never drift from the findings they came from
    findings: Mapping[IndicatorKey, Finding]
    score: int = Field(ge=0, le=100)
    label: RiskLabel
    key_findings: List[str]
    good_signs: List[str]

    @field_validator("findings", mode="after")
    @classmethod
    def _freeze_findings(cls, v: Mapping[IndicatorKey, Finding]) -> Mapping[IndicatorKey, Finding]:
        return MappingProxyType(dict(v))

    @field_serializer("findings")
    def _dump_findings(self, v: Mapping[IndicatorKey, Finding], info: FieldSerializationInfo) -> Dict[str, Any]:
        return {k.value: f.model_dump(mode=info.mode) for k, f in v.items()}

    def to_dict(self) -> Dict[str, Any]:
        """camelCase, JSON-ready view used by the API and the CLIs."""
        return self.model_dump(mode="json", by_alias=True)


def build_finding(
    key: IndicatorKey,
    status: RiskStatus,
    *,
    reason: str,
    penalty: int,
    evidence: Optional[Mapping[str, Any]] = None,
) -> Finding:
    meta = INDICATOR_META[key]
    return Finding(
        key=key,
        title=meta.title,
        category=meta.category,
        status=status,
        reason=reason,
        hint=reason,
        penalty=max(0, min(int(penalty), meta.max_penalty)),
        explanation=meta.explanation,
        evidence=evidence or {},
    )


__all__ = [
    "IndicatorKey", "RiskStatus", "RiskLabel", "IndicatorMeta", "INDICATOR_META", "SCORING_KEYS",
    "ExplorerInfo", "Finding", "AnalysisResult", "build_finding",
]
