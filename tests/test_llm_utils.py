import pytest

from projectinsight.errors import MalformedResponseError
from projectinsight.services.llm_chain.llm_utils import (
    extract_assistant_text_chat,
    extract_json_block,
    parse_json_block,
    shape_system,
    shape_user,
)
from fakes import FakeCompletions


def test_extract_json_block_is_greedy_from_first_to_last_brace() -> None:
    text = 'Sure! {"a": {"b": 1}} and also {"c": 2} thanks'
    assert extract_json_block(text) == '{"a": {"b": 1}} and also {"c": 2}'


def test_extract_json_block_strips_code_fence() -> None:
    text = '```json\n{"name": "x"}\n```'
    assert extract_json_block(text) == '{"name": "x"}'


@pytest.mark.parametrize("text", ["", "no json here", "} backwards {"])
def test_extract_json_block_without_block_raises(text: str) -> None:
    with pytest.raises(MalformedResponseError):
        extract_json_block(text)


def test_extract_json_block_for_arrays() -> None:
    assert extract_json_block('Features: ["a", "b"].', "[") == '["a", "b"]'


def test_parse_json_block_invalid_json_raises() -> None:
    with pytest.raises(MalformedResponseError, match="invalid JSON"):
        parse_json_block('{"name": "x",}')


def test_parse_json_block_returns_object() -> None:
    assert parse_json_block('prefix {"name": "x"} suffix') == {"name": "x"}


async def test_extract_assistant_text_chat() -> None:
    resp = await FakeCompletions().reply("  hello  ").create(model="m")
    assert extract_assistant_text_chat(resp) == "hello"
    assert extract_assistant_text_chat(object()) == ""


def test_message_shapes() -> None:
    assert shape_system("s") == {"role": "system", "content": "s"}
    assert shape_user("u") == {"role": "user", "content": "u"}
