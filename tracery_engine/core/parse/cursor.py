from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Cursor:
    """Scan position over an immutable rule string.

    `start` marks the beginning of the next slice handed out by `cut`, `pos`
    is the scan position and `saved` is a single backtrack checkpoint.
    """

    text: str
    start: int = 0
    pos: int = 0
    saved: int = 0


def is_exhausted(cur: Cursor) -> bool:
    return cur.pos >= len(cur.text)


def take(cur: Cursor) -> str:
    char = cur.text[cur.pos]
    cur.pos += 1
    return char


def peek(cur: Cursor) -> str:
    return cur.text[cur.pos]


def cut(cur: Cursor) -> str:
    """Return the slice scanned since the last cut and claim it."""
    chunk = cur.text[cur.start : cur.pos]
    cur.start = cur.pos
    return chunk


def save(cur: Cursor) -> Cursor:
    cur.saved = cur.pos
    return cur


def backtrack(cur: Cursor) -> Cursor:
    # Does not touch `start`: the unclaimed region stays pending for the next cut.
    cur.pos = cur.saved
    return cur
