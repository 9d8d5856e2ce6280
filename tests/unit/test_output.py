"""Unit tests for process output forwarding."""

import asyncio
import io

import pytest

from e2e_sandbox.utils.output import forward_stream, strip_ansi


def make_stream(*chunks: bytes) -> asyncio.StreamReader:
    reader = asyncio.StreamReader()
    for chunk in chunks:
        reader.feed_data(chunk)
    reader.feed_eof()
    return reader


class TestStripAnsi:
    """Test ANSI escape removal."""

    def test_removes_color_codes(self):
        assert strip_ansi("\x1b[31merror\x1b[0m: failed") == "error: failed"

    def test_removes_cursor_and_erase_sequences(self):
        assert strip_ansi("\x1b[2K\x1b[1Gbuilding") == "building"

    def test_removes_osc_hyperlinks(self):
        text = "\x1b]8;;https://example.com\x07link\x1b]8;;\x07"
        assert strip_ansi(text) == "link"

    def test_plain_text_unchanged(self):
        assert strip_ansi("no escapes [here]") == "no escapes [here]"


class TestForwardStream:
    """Test streaming to the sink."""

    @pytest.mark.asyncio
    async def test_returns_raw_text_and_writes_stripped(self):
        """Test the sink gets stripped output while the caller gets raw output."""
        sink = io.StringIO()
        stream = make_stream(b"\x1b[32mok\x1b[0m\n", b"done\n")

        text = await forward_stream(stream, sink)

        assert text == "\x1b[32mok\x1b[0m\ndone\n"
        assert sink.getvalue() == "ok\ndone\n"

    @pytest.mark.asyncio
    async def test_multibyte_split_across_chunks(self):
        """Test UTF-8 sequences split between reads decode correctly."""
        encoded = "héllo".encode("utf-8")
        sink = io.StringIO()
        stream = make_stream(encoded[:2], encoded[2:])

        text = await forward_stream(stream, sink)

        assert text == "héllo"
        assert sink.getvalue() == "héllo"

    @pytest.mark.asyncio
    async def test_none_stream(self):
        assert await forward_stream(None) == ""

    @pytest.mark.asyncio
    async def test_defaults_to_stdout(self, capsys):
        """Test output goes to the controlling stdout by default."""
        await forward_stream(make_stream(b"\x1b[1mbold\x1b[22m"))

        assert capsys.readouterr().out == "bold"
