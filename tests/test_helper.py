from types import SimpleNamespace

from projectinsight.utils import helper
from projectinsight.utils.helper import parse_iso, slugify, truncate_by_tokens


class CharPairEncoding:
    """Two tokens per character, like many emoji and CJK characters."""

    def encode(self, text):
        return [c for ch in text for c in (ch, "")]

    def decode(self, tokens):
        return "".join(tokens)


def _use_encoding(monkeypatch, enc) -> None:
    monkeypatch.setattr(
        helper,
        "tiktoken",
        SimpleNamespace(encoding_for_model=lambda model: enc, get_encoding=lambda name: enc),
    )


def test_short_ascii_text_is_returned_unchanged(monkeypatch) -> None:
    def no_encoding(*args):
        raise AssertionError("encoding should not be loaded")

    monkeypatch.setattr(
        helper, "tiktoken", SimpleNamespace(encoding_for_model=no_encoding, get_encoding=no_encoding)
    )

    assert truncate_by_tokens("TaskFlow", 100) == "TaskFlow"


def test_multi_token_characters_are_truncated(monkeypatch) -> None:
    _use_encoding(monkeypatch, CharPairEncoding())

    text = "🦄" * 100
    result = truncate_by_tokens(text, 100)

    assert result == "🦄" * 50


def test_unknown_model_falls_back_to_base_encoding(monkeypatch) -> None:
    enc = CharPairEncoding()

    def unknown_model(model):
        raise KeyError(model)

    monkeypatch.setattr(
        helper, "tiktoken", SimpleNamespace(encoding_for_model=unknown_model, get_encoding=lambda name: enc)
    )

    assert truncate_by_tokens("界" * 10, 4, model="not-a-model") == "界" * 2


def test_slugify_collapses_whitespace() -> None:
    assert slugify("  My  Cool App ") == "my-cool-app"


def test_parse_iso_unparseable_sorts_first() -> None:
    assert parse_iso("not a date") < parse_iso("2023-05-01T10:00:00.000Z")
