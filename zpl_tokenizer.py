"""Split raw ZPL text into directive tokens."""

from __future__ import annotations

from typing import List

from zpl_types import Token

PREFIX = "^"
START_MARKER = "^XA"
END_MARKER = "^XZ"


def label_body(text: str) -> str:
    """Return the span between ``^XA`` and the last ``^XZ``, or the whole text."""

    start = text.find(START_MARKER)
    end = text.rfind(END_MARKER)
    if start != -1 and end != -1 and end > start:
        return text[start + len(START_MARKER):end]
    return text


def tokenize(text: str | None) -> List[Token]:
    """Return the directives of ``text`` in order.

    Empty fragments and fragments shorter than a two-character code are
    dropped; malformed input only ever yields fewer tokens.
    """

    if not text:
        return []

    tokens: List[Token] = []
    for fragment in label_body(text).split(PREFIX):
        fragment = fragment.strip()
        if len(fragment) < 2:
            continue
        tokens.append(Token(code=fragment[:2].upper(), arguments=fragment[2:]))
    return tokens
