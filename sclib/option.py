"""Matching of single command-line arguments against known options."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

__all__ = ["OptionItem", "UNKNOWN", "option_at"]

UNKNOWN = "?"


@dataclass(frozen=True)
class OptionItem:
    """An option known by a one-letter short form and an optional long name."""

    letter: str
    name: str | None = None


def option_at(options: Iterable[OptionItem], arg: str) -> tuple[str, str | None]:
    """Match ``arg`` against ``options``.

    Returns ``(letter, value)``. ``value`` is the text after ``=`` or an
    empty string if there is none. An unknown argument yields ``('?', None)``.
    """
    if not arg.startswith("-"):
        return UNKNOWN, None

    if not arg.startswith("--"):
        letter = arg[1:2]
        rest = arg[2:]
        if letter and (not rest or rest[0] in "= "):
            for item in options:
                if item.letter == letter:
                    return item.letter, rest[1:] if rest.startswith("=") else rest
        return UNKNOWN, None

    key, sep, value = arg[2:].partition("=")
    for item in options:
        if item.name is not None and item.name == key:
            return item.letter, value if sep else ""
    return UNKNOWN, None