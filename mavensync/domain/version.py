"""Maven-style version ordering.

Versions are split into numeric and qualifier items at ``.``, ``-``, ``_``,
``+`` and at digit/letter transitions. Numeric items compare as integers,
trailing zero and release items are dropped (``1.0 == 1 == 1.0-final``),
and qualifiers follow the usual Maven ranking::

    alpha < beta < milestone < rc == cr < snapshot < "" == ga == final < sp

Qualifiers outside that list sort after ``sp`` and lexically among
themselves. A numeric item always wins over a qualifier in the same slot, so
``1.0.1 > 1.0-rc1``.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Tuple

from mavensync.exceptions import InvalidVersionError

Item = Tuple[int, int, str]

_TOKEN_RE = re.compile(r"^[0-9][0-9A-Za-z._+\-]*$")
_ITEM_RE = re.compile(r"[0-9]+|[A-Za-z]+")

_NUMERIC = 1
_QUALIFIER = 0

_QUALIFIER_ALIASES = {
    "a": "alpha",
    "b": "beta",
    "m": "milestone",
    "cr": "rc",
    "ga": "",
    "final": "",
    "release": "",
}
_QUALIFIER_RANKS = {
    "alpha": 0,
    "beta": 1,
    "milestone": 2,
    "rc": 3,
    "snapshot": 4,
    "": 5,
    "sp": 6,
}
_RELEASE_RANK = _QUALIFIER_RANKS[""]
_UNKNOWN_RANK = 7

_ZERO: Item = (_NUMERIC, 0, "")
_RELEASE: Item = (_QUALIFIER, _RELEASE_RANK, "")


def is_version_token(value: str) -> bool:
    """Return True when ``value`` looks like a version directory name."""
    return bool(value) and _TOKEN_RE.match(value) is not None


@lru_cache(maxsize=4096)
def parse_version(value: str) -> Tuple[Item, ...]:
    if not is_version_token(value):
        raise InvalidVersionError(f"Not a version: {value!r}")
    items = []
    for raw in _ITEM_RE.findall(value):
        if raw.isdigit():
            items.append((_NUMERIC, int(raw), ""))
            continue
        qualifier = raw.lower()
        qualifier = _QUALIFIER_ALIASES.get(qualifier, qualifier)
        rank = _QUALIFIER_RANKS.get(qualifier, _UNKNOWN_RANK)
        items.append((_QUALIFIER, rank, qualifier if rank == _UNKNOWN_RANK else ""))
    while items and items[-1] in (_ZERO, _RELEASE):
        items.pop()
    return tuple(items)


def _compare_item(left: Item | None, right: Item | None) -> int:
    if left is None and right is None:
        return 0
    if right is None:
        return -_compare_item(right, left)
    if left is None:
        # a missing slot behaves like a zero / the plain release
        left = _ZERO if right[0] == _NUMERIC else _RELEASE
    if left[0] != right[0]:
        return 1 if left[0] == _NUMERIC else -1
    if left[1] != right[1]:
        return 1 if left[1] > right[1] else -1
    if left[2] != right[2]:
        return 1 if left[2] > right[2] else -1
    return 0


def compare_versions(left: str, right: str) -> int:
    """Compare two version strings, returning -1, 0 or 1."""
    left_items = parse_version(left)
    right_items = parse_version(right)
    for index in range(max(len(left_items), len(right_items))):
        result = _compare_item(
            left_items[index] if index < len(left_items) else None,
            right_items[index] if index < len(right_items) else None,
        )
        if result:
            return result
    return 0
