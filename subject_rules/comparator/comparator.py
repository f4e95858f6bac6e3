"""
Comparator

Type-aware comparison of a resolved value against an expected value.
"""

import logging
import math
import numbers
import re
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, List, Mapping, Optional

import pandas as pd

from subject_rules.models import Operator

# Optional sign, decimals and exponent, surrounding whitespace allowed
_NUMERIC_PATTERN = re.compile(r'^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$')


def is_missing(value: Any) -> bool:
    """None, or pandas' missing datetime (NaT)."""
    return value is None or value is pd.NaT


def is_datetime(value: Any) -> bool:
    """Dates and datetimes (including pandas Timestamps), never NaT."""
    return isinstance(value, date) and value is not pd.NaT


def to_timestamp(value: date) -> int:
    """
    Convert a date or datetime to whole Unix seconds.

    Naive values are taken as local time.
    """
    if not isinstance(value, datetime):
        value = datetime.combine(value, time())
    try:
        seconds = value.timestamp()
    except (OverflowError, OSError, ValueError):
        seconds = value.replace(tzinfo=value.tzinfo or timezone.utc).timestamp()
    return math.floor(seconds)


def parse_datetime(value: str) -> Optional[datetime]:
    """
    Parse a date string permissively.

    Returns:
        datetime, or None if the string is not a date
    """
    try:
        parsed = pd.to_datetime(value)
    except (ValueError, TypeError, OverflowError):
        return None

    if pd.isna(parsed):
        return None
    return parsed.to_pydatetime()


def to_number(value: Any) -> Optional[float]:
    """
    Numeric coercion used by ordering and equality.

    Real numbers (ints, floats, Decimals, Fractions, numpy scalars) and
    numeric strings coerce. Bools and everything else do not.
    """
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, (numbers.Real, Decimal)):
            return float(value)
        if isinstance(value, str) and _NUMERIC_PATTERN.match(value):
            return float(value)
    except (OverflowError, ValueError, TypeError):
        return None
    return None


def to_string(value: Any) -> str:
    """String form used when comparisons fall back to text."""
    if is_missing(value) or value is False:
        return ""
    if value is True:
        return "1"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    return str(value)


def members(value: Any) -> Optional[List[Any]]:
    """Elements of a collection value, or None when the value is not a collection."""
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    if isinstance(value, Mapping):
        return list(value.values())
    return None


def strictly_equal(a: Any, b: Any) -> bool:
    """Equal values of the same type."""
    try:
        return type(a) is type(b) and bool(a == b)
    except (TypeError, ValueError):
        # e.g. array-likes whose == is element-wise
        return False


class Comparator:
    """
    Compare values for a single operator.

    Every operator/type combination returns a bool; nothing raises.
    """

    def __init__(
        self,
        list_separator: str = ",",
        max_collection_depth: int = 32,
        logger: Optional[logging.Logger] = None
    ):
        self.list_separator = list_separator
        self.max_collection_depth = max_collection_depth
        self.logger = logger or logging.getLogger(__name__)

    def compare(self, actual: Any, operator: Any, expected: Any) -> bool:
        """
        Compare an actual value against an expected value.

        Args:
            actual: Resolved value from the subject
            operator: Operator or its string form (e.g., '==' or 'not_in')
            expected: Expected value from the rule

        Returns:
            Comparison result; False for unsupported operators
        """
        op = Operator.parse(operator)
        if op is None:
            self.logger.debug(f"Unsupported operator: {operator!r}")
            return False

        # NaT is read as a missing value
        if actual is pd.NaT:
            actual = None
        if expected is pd.NaT:
            expected = None

        # Date strings are parsed when compared against a date
        if is_datetime(actual) and isinstance(expected, str):
            parsed = parse_datetime(expected)
            if parsed is not None:
                expected = parsed
        elif is_datetime(expected) and isinstance(actual, str):
            parsed = parse_datetime(actual)
            if parsed is not None:
                actual = parsed

        actual_num = to_number(actual)
        expected_num = to_number(expected)

        if op == Operator.EQUALS:
            return self.loosely_equals(actual, expected)

        elif op == Operator.NOT_EQUALS:
            return not self.loosely_equals(actual, expected)

        elif op == Operator.IN:
            return self.in_operator(actual, expected)

        elif op == Operator.NOT_IN:
            return not self.in_operator(actual, expected)

        elif op == Operator.GREATER_THAN:
            return self.greater_than(actual, expected, actual_num, expected_num)

        elif op == Operator.LESS_THAN:
            return self.less_than(actual, expected, actual_num, expected_num)

        elif op == Operator.CONTAINS:
            return self.contains(actual, expected)

        return False

    def loosely_equals(self, a: Any, b: Any) -> bool:
        """
        Equality used by '==', 'in' and 'contains'.

        Dates compare by timestamp, None matches the string 'null', numeric
        values compare as floats and everything else by string form.
        """
        if is_datetime(a) and is_datetime(b):
            return to_timestamp(a) == to_timestamp(b)

        if is_missing(a) and isinstance(b, str) and b.lower() == 'null':
            return True
        if is_missing(b) and isinstance(a, str) and a.lower() == 'null':
            return True

        if strictly_equal(a, b):
            return True

        a_num = to_number(a)
        b_num = to_number(b)
        if a_num is not None and b_num is not None:
            return a_num == b_num

        return to_string(a) == to_string(b)

    def in_operator(self, actual: Any, expected: Any) -> bool:
        """
        Check membership of actual in expected.

        A string expected value is read as a comma-separated list. When actual
        is a collection, any of its elements matching is enough.
        """
        return self._in(actual, self._candidates(expected), 0)

    def _candidates(self, expected: Any) -> List[Any]:
        if isinstance(expected, str):
            if expected == '':
                return []
            return [part.strip() for part in expected.split(self.list_separator)]

        items = members(expected)
        if items is None:
            return [expected]
        return items

    def _in(self, actual: Any, candidates: List[Any], depth: int) -> bool:
        if depth > self.max_collection_depth:
            self.logger.debug("Collection nesting exceeds max depth; treating as no match")
            return False

        items = members(actual)
        if items is not None:
            return any(self._in(item, candidates, depth + 1) for item in items)

        return any(self.loosely_equals(actual, candidate) for candidate in candidates)

    def greater_than(self, a: Any, b: Any, a_num: Optional[float], b_num: Optional[float]) -> bool:
        if is_datetime(a) and is_datetime(b):
            return to_timestamp(a) > to_timestamp(b)
        if a_num is not None and b_num is not None:
            return a_num > b_num
        return to_string(a) > to_string(b)

    def less_than(self, a: Any, b: Any, a_num: Optional[float], b_num: Optional[float]) -> bool:
        if is_datetime(a) and is_datetime(b):
            return to_timestamp(a) < to_timestamp(b)
        if a_num is not None and b_num is not None:
            return a_num < b_num
        return to_string(a) < to_string(b)

    def contains(self, actual: Any, expected: Any) -> bool:
        """
        Check whether a collection holds expected, or a string contains it.

        String matching is case-insensitive and an empty needle always matches.
        """
        items = members(actual)
        if items is not None:
            return any(self.loosely_equals(item, expected) for item in items)

        if isinstance(actual, str):
            needle = expected if isinstance(expected, str) else to_string(expected)
            return needle == '' or needle.lower() in actual.lower()

        return False


_default_comparator = Comparator()


def compare(actual: Any, operator: Any, expected: Any) -> bool:
    """Compare with the default comparator."""
    return _default_comparator.compare(actual, operator, expected)
