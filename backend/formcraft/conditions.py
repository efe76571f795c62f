from __future__ import annotations

import logging
import math
import re
from typing import Any, Iterable, Mapping, Optional

from formcraft.schemas import ConditionalRule, FileReference

logger = logging.getLogger(__name__)

# Decimal literals a browser reads as numbers; "1_000", "inf" and "nan" are not.
NUMBER_PATTERN = re.compile(r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|Infinity)")


def _parse_decimal(s: str) -> Optional[float]:
    if not NUMBER_PATTERN.fullmatch(s):
        return None
    return float(s)


def to_number(x: Any) -> float:
    """Numeric coercion in the manner of a browser form: unset and text that
    is not a number become NaN, blank text is 0, booleans are 1/0."""
    if x is None:
        return math.nan
    if isinstance(x, bool):
        return 1.0 if x else 0.0
    if isinstance(x, (int, float)):
        return float(x)
    if isinstance(x, str):
        s = x.strip()
        if not s:
            return 0.0
        number = _parse_decimal(s)
        return math.nan if number is None else number
    return math.nan


def to_text(x: Any) -> str:
    """String coercion used by `contains` and the length checks."""
    if x is None:
        return ""
    if isinstance(x, bool):
        return "true" if x else "false"
    if isinstance(x, float) and x.is_integer():
        # 5.0 is entered as "5"
        return str(int(x))
    if isinstance(x, FileReference):
        return x.name
    return str(x)


def is_empty(x: Any) -> bool:
    # 0 and False count as empty, same as the builder UI.
    if isinstance(x, float) and math.isnan(x):
        return True
    return not x or x == ""


def _numeric(x: Any) -> Optional[float]:
    # booleans are never treated as numbers for equality
    if isinstance(x, bool) or x is None:
        return None
    if isinstance(x, (int, float)):
        return float(x)
    if isinstance(x, str) and x.strip():
        return _parse_decimal(x.strip())
    return None


def loosely_equal(left: Any, right: Any) -> bool:
    """Equality used by `equals` / `notEquals`.

    Rule values are typed as text in the builder while field values may be
    numbers or booleans, so:
      1. if both sides parse as numbers, compare numerically ("5" == 5);
      2. otherwise an unset side only equals another unset side;
      3. otherwise compare the text forms (True == "true").
    """
    left_num = _numeric(left)
    right_num = _numeric(right)
    if left_num is not None and right_num is not None:
        return left_num == right_num
    if left is None or right is None:
        return left is None and right is None
    return to_text(left) == to_text(right)


def evaluate_rule(rule: ConditionalRule, values: Mapping[str, Any]) -> bool:
    field_value = values.get(rule.fieldId)
    op = rule.operator

    if op == "equals":
        return loosely_equal(field_value, rule.value)
    if op == "notEquals":
        return not loosely_equal(field_value, rule.value)
    if op == "contains":
        haystack = "" if is_empty(field_value) else to_text(field_value)
        return to_text(rule.value) in haystack
    if op == "greaterThan":
        # NaN on either side makes the comparison False
        return to_number(field_value) > to_number(rule.value)
    if op == "lessThan":
        return to_number(field_value) < to_number(rule.value)
    if op == "isEmpty":
        return is_empty(field_value)
    if op == "isNotEmpty":
        return not is_empty(field_value)

    logger.debug("Unknown condition operator %r on rule %r, treating as satisfied", op, rule.id)
    return True


def evaluate_rule_list(rules: Iterable[ConditionalRule], values: Mapping[str, Any]) -> bool:
    """All rules must hold; an empty list always holds."""
    return all(evaluate_rule(r, values) for r in rules)
