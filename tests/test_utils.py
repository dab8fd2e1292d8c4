import pytest

from radar.chains import normalize_chain, resolve_rpc_url
from radar.utils.addr import is_zero_address, normalize_evm_address, safe_address
from radar.utils.rpc import format_units
from radar.utils.source_patterns import analyze_source_patterns

USDT_LOWER = "0xdac17f958d2ee523a2206206994597c13d831ec7"
USDT_CHECKSUM = "0xdAC17F958D2ee523a2206206994597C13D831ec7"


class TestAddresses:
    def test_checksums(self):
        assert normalize_evm_address(f"  {USDT_LOWER} ") == USDT_CHECKSUM

    @pytest.mark.parametrize("raw", ["", "0x123", "dac17f958d2ee523a2206206994597c13d831ec7xx",
                                     "0xdac17f...31ec7", "0x" + "zz" * 20])
    def test_rejects(self, raw):
        with pytest.raises(ValueError):
            normalize_evm_address(raw)

    def test_safe_address(self):
        assert safe_address(USDT_LOWER) == USDT_CHECKSUM
        assert safe_address("") is None
        assert safe_address(None) is None
        assert safe_address("0xnope") is None
        assert safe_address(12345) is None

    def test_zero(self):
        assert is_zero_address("0x" + "0" * 40)
        assert not is_zero_address(USDT_LOWER)
        assert not is_zero_address(None)
        assert is_zero_address("0x0")
        assert is_zero_address(" 0x000 ")
        assert not is_zero_address("0xnope")


class TestChains:
    @pytest.mark.parametrize("raw,key", [
        (None, "ethereum"), ("", "ethereum"), ("eth", "ethereum"), ("ETHEREUM", "ethereum"),
        ("matic", "polygon"), ("bnb", "bsc"), ("base", "base"), ("arbitrum", "arbitrum"),
        ("scroll", "scroll"), ("solana", None),
    ])
    def test_normalize(self, raw, key):
        assert normalize_chain(raw) == key

    def test_rpc_env_wins(self, monkeypatch):
        monkeypatch.setenv("WEB3_PROVIDER_BSC", "https://bsc.example/rpc")
        monkeypatch.setenv("ALCHEMY_API_KEY", "abc")
        assert resolve_rpc_url("bsc") == "https://bsc.example/rpc"

    def test_rpc_alchemy_fallback(self, monkeypatch):
        monkeypatch.delenv("WEB3_PROVIDER_BASE", raising=False)
        monkeypatch.setenv("ALCHEMY_API_KEY", "abc")
        assert resolve_rpc_url("base") == "https://base-mainnet.g.alchemy.com/v2/abc"

    def test_rpc_missing(self, monkeypatch):
        monkeypatch.delenv("WEB3_PROVIDER_ETHEREUM", raising=False)
        monkeypatch.delenv("ALCHEMY_API_KEY", raising=False)
        with pytest.raises(ValueError):
            resolve_rpc_url("ethereum")


@pytest.mark.parametrize("raw,decimals,out", [
    (None, 18, None), (10, None, None),
    (1_000_000, 6, "1"), (1_500_000, 6, "1.5"), (5, 6, "0.000005"),
    (123, 0, "123"), (10**27, 18, "1000000000"),
])
def test_format_units(raw, decimals, out):
    assert format_units(raw, decimals) == out


def test_source_patterns():
    src = "function kill() { selfdestruct(payable(msg.sender)); } require(tx.origin == owner);"
    found = {p["pattern"]: p["risk"] for p in analyze_source_patterns(src)}
    assert found == {"selfdestruct": "high", "tx.origin": "medium"}
    assert analyze_source_patterns(None) == []
