"""Forwarding of process output to the controlling terminal."""

import asyncio
import codecs
import re
import sys
from typing import Optional, TextIO

# CSI/OSC escape sequences, including the 8-bit CSI introducer
ANSI_RE = re.compile(
    r"[\u001B\u009B][\[\]()#;?]*"
    r"(?:(?:(?:(?:;[-a-zA-Z\d/#&.:=?%@~_]+)*"
    r"|[a-zA-Z\d]+(?:;[-a-zA-Z\d/#&.:=?%@~_]*)*)?\u0007)"
    r"|(?:(?:\d{1,4}(?:;\d{0,4})*)?[\dA-PR-TZcf-nq-uy=><~]))"
)

CHUNK_SIZE = 4096


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from text."""
    return ANSI_RE.sub("", text)


async def forward_stream(
    stream: Optional[asyncio.StreamReader],
    sink: Optional[TextIO] = None,
) -> str:
    """Copy a process stream to ``sink`` as data arrives.

    What reaches the sink has ANSI escapes stripped; the returned text is
    the raw decoded output.
    """
    if stream is None:
        return ""

    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    chunks = []

    while True:
        data = await stream.read(CHUNK_SIZE)
        text = decoder.decode(data, final=not data)
        if text:
            chunks.append(text)
            _emit(text, sink)
        if not data:
            break

    return "".join(chunks)


def _emit(text: str, sink: Optional[TextIO]) -> None:
    out = sink if sink is not None else sys.stdout
    out.write(strip_ansi(text))
    out.flush()
