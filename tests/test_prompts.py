import pytest

from dex_mcp import mcp
from dex_mcp.prompts import PROMPTS, PromptArgumentError, TOKEN_SEARCH_STRATEGIES, WALLET_STRATEGIES


def test_prompt_names_are_unique():
    names = [prompt.name for prompt in PROMPTS]
    assert len(names) == len(set(names))
    assert len(mcp.list_prompts()) == len(PROMPTS)


def test_list_prompts_shape():
    listed = {prompt["name"]: prompt for prompt in mcp.list_prompts()}
    candles = listed["token-candles-guide"]
    assert candles["description"]
    args = {arg["name"]: arg["required"] for arg in candles["arguments"]}
    assert args["resolution"] is True
    assert args["from_time"] is False


def test_listed_prompt_arguments_have_boolean_required():
    for prompt in mcp.list_prompts():
        for arg in prompt["arguments"]:
            assert isinstance(arg["required"], bool), (prompt["name"], arg["name"])


def test_enum_arguments_carry_choices():
    by_name = {prompt.name: prompt for prompt in PROMPTS}
    for prompt_name, arg_name in [
        ("token-search-strategy", "search_type"),
        ("token-search-strategy", "investment_goal"),
        ("token-candles-guide", "resolution"),
        ("wallet-analysis-strategy", "analysis_type"),
        ("wallet-analysis-strategy", "time_frame"),
    ]:
        arg = next(a for a in by_name[prompt_name].arguments if a.name == arg_name)
        assert arg.required is True
        assert arg.choices

    with pytest.raises(PromptArgumentError, match="Invalid value for analysis_type"):
        mcp.get_prompt("wallet-analysis-strategy", {"analysis_type": "vibes", "time_frame": "daily"})
    with pytest.raises(PromptArgumentError, match="Invalid value for resolution"):
        mcp.get_prompt("token-candles-guide", {"chain": "sol", "token_address": "Mint1", "resolution": "7m"})


def test_get_prompt_renders_two_messages():
    result = mcp.get_prompt("blockchain-latest-block-guide", {"chain": "sol"})
    assert result["description"] == "Latest block query guide"
    user, assistant = result["messages"]
    assert user["role"] == "user"
    assert assistant["role"] == "assistant"
    assert "sol" in user["content"]["text"]
    assert assistant["content"]["type"] == "text"
    assert "get_latest_block" in assistant["content"]["text"]


def test_get_prompt_unknown_name():
    assert mcp.get_prompt("no-such-prompt", {}) is None


def test_missing_required_argument():
    with pytest.raises(PromptArgumentError, match="Missing required argument: token_address"):
        mcp.get_prompt("token-research-guide", {"chain": "sol"})


def test_invalid_choice():
    with pytest.raises(PromptArgumentError, match="Invalid value for search_type"):
        mcp.get_prompt("token-search-strategy", {"search_type": "random", "investment_goal": "long-term"})


def test_strategy_tables():
    result = mcp.get_prompt("token-search-strategy", {"search_type": "trending", "investment_goal": "governance"})
    assert TOKEN_SEARCH_STRATEGIES["trending"]["governance"] in result["messages"][1]["content"]["text"]

    result = mcp.get_prompt("wallet-analysis-strategy", {"analysis_type": "risk-assessment", "time_frame": "weekly"})
    assert result["messages"][1]["content"]["text"] == WALLET_STRATEGIES["risk-assessment"]["weekly"]


def test_optional_details_are_listed():
    result = mcp.get_prompt(
        "trade-top-traders-guide",
        {"chain": "sol", "token_address": "Mint1", "time_frame": "1h", "limit": 5},
    )
    text = result["messages"][1]["content"]["text"]
    assert "- Time frame: 1h" in text
    assert "- Limit: 5" in text
    assert "Order" not in text


def test_every_prompt_renders_with_required_arguments():
    for prompt in PROMPTS:
        arguments = {}
        for arg in prompt.arguments:
            if arg.required:
                arguments[arg.name] = arg.choices[0] if arg.choices else "value"
        rendered = mcp.get_prompt(prompt.name, arguments)
        assert len(rendered["messages"]) == 2, prompt.name
