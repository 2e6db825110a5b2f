from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

_whitespace_re = re.compile(r"\s+")


def as_text(value: Any) -> str:
    """`value` when it is a string, else an empty string."""

    return value if isinstance(value, str) else ""


def normalize_name(value: str) -> str:
    """Lower-case and collapse whitespace for case-insensitive comparisons."""

    v = value.strip().lower()
    v = _whitespace_re.sub(" ", v)
    return v


def _normalized(values: Iterable[Any]) -> list[str]:
    return [normalize_name(v) for v in values if isinstance(v, str) and v.strip()]


def names_overlap(candidates: Iterable[str | None], targets: Iterable[str | None]) -> bool:
    """
    True when any candidate name contains, or is contained in, any target name.

    Comparison is case-insensitive; blank values never match.
    """
    cands = _normalized(candidates)
    tgts = _normalized(targets)

    for c in cands:
        for t in tgts:
            if c in t or t in c:
                return True
    return False


def team_names_match(
    names: Iterable[str | None],
    abbreviations: Iterable[str | None],
    targets: Iterable[str | None],
) -> bool:
    """
    Match an upstream team against target names.

    Full names use `names_overlap`. Abbreviations ("LA", "KC") only match a
    whole word of a target, so "LA" does not hit "Philadelphia".
    """
    tgts = _normalized(targets)
    if names_overlap(names, tgts):
        return True

    words = {w for t in tgts for w in t.split(" ")}
    return any(a in words for a in _normalized(abbreviations))


def slugify(value: str) -> str:
    v = normalize_name(value)
    v = re.sub(r"[^a-z0-9]+", "-", v)
    return v.strip("-")
