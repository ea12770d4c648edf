"""
Table-number canonicalization.

Clients send table numbers as a single number, a comma separated string, a list
of mixed values, or nothing at all. Everything is reduced to a sorted list of
distinct integers; entries that do not start with a number are dropped.
"""
import math
import re
from decimal import Decimal
from typing import List

LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def _parse_one(value):
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return int(value)
    if isinstance(value, Decimal):
        if not value.is_finite():
            return None
        return int(value)
    if isinstance(value, str):
        match = LEADING_INT_RE.match(value)
        return int(match.group(1)) if match else None
    return None


def normalize_table_numbers(value) -> List[int]:
    """Return the ascending, de-duplicated table numbers contained in `value`."""
    if value is None or value == "":
        return []

    if isinstance(value, str):
        raw = value.split(",") if "," in value else [value]
    elif isinstance(value, (list, tuple, set, frozenset)):
        raw = list(value)
    else:
        raw = [value]

    numbers = {n for n in (_parse_one(item) for item in raw) if n is not None}
    return sorted(numbers)


def format_table_display(table_numbers) -> str:
    numbers = normalize_table_numbers(table_numbers)
    if not numbers:
        return "No Table"
    if len(numbers) == 1:
        return f"Table {numbers[0]}"
    return "Tables " + ", ".join(str(n) for n in numbers)


def table_key(table_numbers) -> str:
    """Delimited form stored on the order so table lookups stay plain string filters."""
    numbers = normalize_table_numbers(table_numbers)
    if not numbers:
        return ""
    return "," + ",".join(str(n) for n in numbers) + ","


def table_token(number: int) -> str:
    return f",{number},"
