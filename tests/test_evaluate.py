import itertools

import pytest

from radar.core.evaluate import evaluate, run_findings
from radar.core.models import (
    INDICATOR_META,
    SCORING_KEYS,
    ExplorerInfo,
    IndicatorKey,
    RiskLabel,
    RiskStatus,
    build_finding,
)

from fixtures import bytecodes as bc

ADMIN = "0x1111111111111111111111111111111111111111"

BYTECODES = [None, "", "0x", bc.CLEAN_CONTRACT, bc.BLACKLIST_TOKEN, bc.OWNABLE, bc.UPGRADEABLE_PROXY,
             bc.PASSIVE_PROXY, bc.EIP1967_PROXY, bc.MINTABLE, bc.MINT_AND_DELEGATECALL, bc.THREE_MEDIUM,
             bc.ONE_MEDIUM]
ABIS = [
    None,
    [],
    [{"type": "function", "name": "transfer"}],
    [{"type": "function", "name": "blacklist"}, {"type": "function", "name": "mint"}],
    [{"type": "function", "name": "setFee"}, {"type": "function", "name": "emergencyWithdraw"}],
]
EXPLORERS = [
    None,
    ExplorerInfo(),
    ExplorerInfo(is_verified=True),
    ExplorerInfo(proxy=True, proxy_admin=ADMIN),
]


@pytest.mark.parametrize("bytecode,abi,info", list(itertools.product(BYTECODES, ABIS, EXPLORERS)))
def test_penalties_bounded_and_score_consistent(bytecode, abi, info):
    result = evaluate(bytecode, abi, info)
    for key, f in result.findings.items():
        assert 0 <= f.penalty <= INDICATOR_META[key].max_penalty
    expected = max(0, min(100, 100 - sum(result.findings[k].penalty for k in SCORING_KEYS)))
    assert result.score == expected
    if result.score >= 80:
        assert result.label is RiskLabel.LOW
    elif result.score >= 50:
        assert result.label is RiskLabel.MEDIUM
    else:
        assert result.label is RiskLabel.HIGH


def test_exactly_one_finding_per_scoring_key():
    findings = run_findings(bc.CLEAN_CONTRACT, None, None)
    assert set(findings) == set(SCORING_KEYS)


def test_blacklist_selector_without_abi():
    result = evaluate(bc.BLACKLIST_TOKEN, None, None)
    f = result.findings[IndicatorKey.OWNER_PRIVILEGES]
    assert f.status is RiskStatus.WARN
    assert f.penalty == 18


def test_no_bytecode_no_abi_dangerous_is_inconclusive():
    f = evaluate(None, None, None).findings[IndicatorKey.DANGEROUS_FUNCTIONS]
    assert f.status is RiskStatus.WARN
    assert f.penalty == 12


def test_verified_flag_with_empty_abi():
    f = evaluate(None, [], ExplorerInfo(is_verified=True)).findings[IndicatorKey.VERIFIED_SOURCE]
    assert f.status is RiskStatus.PASS


def test_upgrade_selector_with_admin():
    f = evaluate(bc.UPGRADEABLE_PROXY, None, ExplorerInfo(proxy_admin=ADMIN)).findings[IndicatorKey.PROXY]
    assert f.status is RiskStatus.WARN
    assert f.penalty == 15


def test_mint_and_delegatecall_fail():
    f = evaluate(bc.MINT_AND_DELEGATECALL, None, None).findings[IndicatorKey.DANGEROUS_FUNCTIONS]
    assert f.status is RiskStatus.FAIL
    assert f.penalty == 30


def test_verified_clean_contract_is_low_risk():
    result = evaluate(bc.CLEAN_CONTRACT, [{"type": "function", "name": "transfer"}], ExplorerInfo(is_verified=True))
    assert result.score == 100
    assert result.label is RiskLabel.LOW
    assert result.key_findings == ["No critical issues detected."]
    assert len(result.good_signs) == 4


def test_nothing_known_is_medium_not_clean():
    result = evaluate(None, None, None)
    # verified 10 + owner 10 + dangerous 12
    assert result.score == 68
    assert result.label is RiskLabel.MEDIUM


def test_idempotent():
    args = (bc.MINT_AND_DELEGATECALL, [{"type": "function", "name": "mint"}], ExplorerInfo(proxy=True))
    first = evaluate(*args)
    second = evaluate(*args)
    assert first == second
    assert first.model_dump_json() == second.model_dump_json()


def test_to_dict_wire_format():
    out = evaluate(bc.BLACKLIST_TOKEN, None, None).to_dict()
    assert set(out) == {"findings", "score", "label", "keyFindings", "goodSigns"}
    assert set(out["findings"]) == {"verifiedSource", "proxy", "ownerPrivileges", "dangerousFunctions"}
    assert out["findings"]["ownerPrivileges"]["status"] == "WARN"
    assert out["label"] in ("Low", "Medium", "High")


def test_extra_informational_findings():
    liquidity = build_finding(IndicatorKey.LIQUIDITY, RiskStatus.FAIL, reason="No liquidity pool", penalty=20)
    result = evaluate(bc.CLEAN_CONTRACT, [], ExplorerInfo(is_verified=True), extra_findings=[liquidity])
    assert IndicatorKey.LIQUIDITY in result.findings
    assert result.score == 100
    assert "No liquidity pool" in result.key_findings


def test_extra_findings_cannot_override_scoring_keys():
    fake = build_finding(IndicatorKey.PROXY, RiskStatus.PASS, reason="trust me", penalty=0)
    with pytest.raises(ValueError):
        evaluate(bc.UPGRADEABLE_PROXY, None, None, extra_findings=[fake])


def test_findings_are_read_only():
    result = evaluate(bc.MINTABLE, None, None)
    f = result.findings[IndicatorKey.DANGEROUS_FUNCTIONS]
    with pytest.raises(TypeError):
        f.evidence["injected"] = True
    with pytest.raises(TypeError):
        f.evidence["detectedFunctions"][0]["risk"] = "low"
    with pytest.raises(TypeError):
        result.findings[IndicatorKey.PROXY] = None
    assert "injected" not in f.evidence
    assert result.findings[IndicatorKey.PROXY].status is RiskStatus.PASS


def test_finding_does_not_share_caller_evidence():
    evidence = {"keywordMatches": ["mint"]}
    f = build_finding(IndicatorKey.DANGEROUS_FUNCTIONS, RiskStatus.WARN, reason="mint", penalty=8,
                      evidence=evidence)
    evidence["keywordMatches"].append("burn")
    evidence["late"] = True
    assert f.evidence == {"keywordMatches": ("mint",)}


def test_to_dict_thaws_evidence():
    out = evaluate(bc.MINTABLE, None, None).to_dict()
    detected = out["findings"]["dangerousFunctions"]["evidence"]["detectedFunctions"]
    assert isinstance(detected, list)
    assert isinstance(detected[0], dict)
