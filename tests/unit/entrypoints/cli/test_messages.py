"""Unit tests for :mod:`cdcroute.entrypoints.cli.helpers.messages`.

Glyphs must follow the encoding of the stderr stream Click reports, and
messages must go to stderr so stdout stays reserved for JSON lines.
"""

import io

import click
import pytest

from cdcroute.entrypoints.cli.helpers.messages import (
    caution_glyph,
    error,
    error_glyph,
    success,
    success_glyph,
    warn,
)


class FakeStream(io.StringIO):
    """A text stream with a controllable encoding."""

    def __init__(self, encoding: str):
        super().__init__()
        self._encoding = encoding

    @property
    def encoding(self) -> str:
        """Declared character encoding."""
        return self._encoding


@pytest.mark.parametrize(
    ("encoding", "expected"),
    [
        ("utf-8", ("⚠️", "✅", "❌")),
        ("ascii", ("[!]", "[OK]", "[X]")),
    ],
)
def test_glyphs_follow_stream_encoding(monkeypatch, encoding, expected):
    """Emoji are used only when stderr can encode them."""
    monkeypatch.setattr(click, "get_text_stream", lambda name: FakeStream(encoding))
    assert (caution_glyph(), success_glyph(), error_glyph()) == expected


@pytest.mark.parametrize(
    ("emit", "text"),
    [(warn, "careful"), (success, "done"), (error, "broken")],
)
def test_messages_go_to_stderr(capsys, emit, text):
    """Messages are written to stderr only."""
    emit(text)
    captured = capsys.readouterr()
    assert text in captured.err
    assert captured.out == ""
