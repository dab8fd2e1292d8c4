from radar.core.abi import MatchMode, describe_keywords, function_names, match_keywords
from radar.core.signatures import DANGEROUS_FUNCTION_KEYWORDS, OWNER_PRIVILEGE_KEYWORDS

ABI = [
    {"type": "function", "name": "transfer", "stateMutability": "nonpayable", "inputs": [], "outputs": []},
    {"type": "function", "name": "setTaxFee", "stateMutability": "nonpayable", "inputs": [], "outputs": []},
    {"type": "event", "name": "Transfer", "inputs": []},
    {"type": "constructor", "inputs": []},
    {"type": "function", "stateMutability": "view", "inputs": [], "outputs": []},
    {"type": "function", "name": "unwithdrawable", "inputs": [], "outputs": []},
]


def test_function_names_only_named_functions_lowercased():
    assert function_names(ABI) == ["transfer", "settaxfee", "unwithdrawable"]


def test_function_names_without_abi():
    assert function_names(None) == []
    assert function_names([]) == []


def test_contains_vs_starts_with():
    names = ["unwithdrawable", "withdrawall"]
    assert match_keywords(names, ["withdraw"], MatchMode.CONTAINS) == ["unwithdrawable", "withdrawall"]
    assert match_keywords(names, ["withdraw"], MatchMode.STARTS_WITH) == ["withdrawall"]


def test_owner_vocabulary_contains():
    names = ["settaxfee", "addtoblacklist", "transfer", "unpausetrading"]
    assert match_keywords(names, OWNER_PRIVILEGE_KEYWORDS, MatchMode.CONTAINS) == [
        "settaxfee", "addtoblacklist", "unpausetrading",
    ]


def test_dangerous_vocabulary_starts_with():
    names = ["mintto", "burnfrom", "rugpull", "premint", "swapandliquify", "transfer"]
    assert match_keywords(names, DANGEROUS_FUNCTION_KEYWORDS, MatchMode.STARTS_WITH) == [
        "mintto", "burnfrom", "rugpull", "swapandliquify",
    ]


def test_describe_keywords_dedupes_and_limits():
    out = describe_keywords(["set_fee", "set_fee", "mint", "burn", "rug", "withdraw"])
    assert out == "setfee, mint, burn, rug"
