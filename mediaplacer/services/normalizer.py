"""Filename normalization for metadata-derived path segments.

Output must stay identical across runs for identical input, otherwise the
same file would land at a different path on the next import.
"""
from __future__ import annotations

import re


SEPARATOR = "-"

ACCENT_FOLDS = [
    (re.compile(r"[áäâãà]"), "a"),
    (re.compile(r"[éëêẽè]"), "e"),
    (re.compile(r"[íïîĩì]"), "i"),
    (re.compile(r"[óöôõò]"), "o"),
    (re.compile(r"[úüûũù]"), "u"),
    (re.compile(r"ñ"), "n"),
]

NOT_ALNUM = re.compile(r"[^a-z0-9]")
SPACES = re.compile(r" +")


def textilize(text: str) -> str:
    """Reduce one string to a lower-case ``[a-z0-9-]`` token."""
    output = text.lower()
    for pattern, replacement in ACCENT_FOLDS:
        output = pattern.sub(replacement, output)
    output = NOT_ALNUM.sub(" ", output)
    output = SPACES.sub(" ", output).strip()
    return output.replace(" ", SEPARATOR)


def normalize(*parts: str, default: str = "") -> str:
    """Join the non-empty parts as one filesystem-safe token.

    Empty or blank parts, and parts with nothing left after cleanup, are
    dropped. When nothing remains the default is normalized instead.

    >>> normalize("Unknown Album")
    'unknown-album'
    >>> normalize("", "  ", default="Unknown Artist")
    'unknown-artist'
    """
    tokens = []
    for part in parts:
        part = (part or "").strip()
        if not part:
            continue
        token = textilize(part)
        if token:
            tokens.append(token)
    if not tokens:
        return textilize(default) if default else ""
    return SEPARATOR.join(tokens)
