"""
Total-count reconciliation for job board responses.

The Jobsuche API (and the proxies in front of it) report the number of hits
under different names depending on version and endpoint. Each extractor is a
field path plus a parser; every path is checked and the largest parsed value
wins, since some nested counters only cover the internally paginated window.
"""
import math
from collections.abc import Callable, Mapping
from typing import Any


def parse_count(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float):
        if not math.isfinite(value) or value < 0 or not value.is_integer():
            return None
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if text.isdecimal():
            return int(text)
    return None


def _at(payload: Mapping, path: tuple[str, ...]) -> Any:
    node: Any = payload
    for key in path:
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    return node


TOTAL_EXTRACTORS: list[tuple[tuple[str, ...], Callable[[Any], int | None]]] = [
    (("total",), parse_count),
    (("maxErgebnisse",), parse_count),
    (("stellenangeboteGesamt",), parse_count),
    (("totalElements",), parse_count),
    (("gesamt",), parse_count),
    (("gesamtAnzahl",), parse_count),
    (("count",), parse_count),
    (("page", "totalElements"), parse_count),
    (("hits", "total", "value"), parse_count),
    (("hits", "total"), parse_count),
    (("meta", "total"), parse_count),
]


def extract_total(payload: Any) -> int | None:
    """Largest non-negative integer found under any known total field, or None if unknown."""
    if not isinstance(payload, Mapping):
        return None
    found = []
    for path, parse in TOTAL_EXTRACTORS:
        count = parse(_at(payload, path))
        if count is not None:
            found.append(count)
    return max(found) if found else None
