import pytest

from dex_mcp.tools.validators import (
    SUPPORTED_CHAINS,
    clamp_limit,
    detect_address_type,
    is_supported_chain,
    parse_optional_int,
)


@pytest.mark.parametrize("value", SUPPORTED_CHAINS)
def test_supported_chains_are_accepted(value):
    assert is_supported_chain(value)


@pytest.mark.parametrize(
    "value",
    [None, "", "dogechain", 5, "tron", "ETH", "eth", "SOL", " sol ", "solana", "bnb", "matic"],
)
def test_chain_check_is_exact(value):
    assert not is_supported_chain(value)


def test_detect_address_type():
    assert detect_address_type("0x" + "a" * 40) == "evm"
    assert detect_address_type("0x" + "A1" * 20) == "evm"
    assert detect_address_type("So11111111111111111111111111111111111111112") == "solana"
    assert detect_address_type("0x123") == "invalid"
    # 0, O, I and l are not Base58.
    assert detect_address_type("0" * 40) == "invalid"
    assert detect_address_type("") == "invalid"
    assert detect_address_type(None) == "invalid"


def test_parse_optional_int_variants():
    assert parse_optional_int(None) is None
    assert parse_optional_int(True) is None
    assert parse_optional_int(7) == 7
    assert parse_optional_int(7.0) == 7
    assert parse_optional_int(7.5) is None
    assert parse_optional_int(" 12 ") == 12
    assert parse_optional_int("") is None
    assert parse_optional_int("abc") is None
    assert parse_optional_int([1]) is None


def test_clamp_limit_bounds():
    assert clamp_limit(None, default=10, maximum=10) == 10
    assert clamp_limit(0, default=10, maximum=10) == 10
    assert clamp_limit(50, default=10, maximum=10) == 10
    assert clamp_limit(-3, default=10, maximum=10) == 1
    assert clamp_limit("5", default=10, maximum=10) == 5
    assert clamp_limit("junk", default=20, maximum=100) == 20
    assert clamp_limit("", default=20, maximum=100) == 20
    assert clamp_limit("0", default=20, maximum=100) == 1
    assert clamp_limit("-4", default=20, maximum=100) == 1
