"""How a condition's operator is evaluated against a respondent's trigger."""

import math
from typing import Any, Callable, Dict, List, Optional

from quizflow.core.ir import Condition, Operator, Trigger

IMAGE_ELEMENT_TYPES = frozenset({"image"})
BUTTON_ELEMENT_TYPES = frozenset({"continue_button", "button"})


def _texts(value: Any) -> List[str]:
    """A trigger value as a list of strings (multi-select answers give several)."""
    if value is None:
        return [""]
    if isinstance(value, (list, tuple, set)):
        return [str(v) for v in value if v is not None]
    if isinstance(value, bool):
        return ["true" if value else "false"]
    return [str(value)]


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip().replace(",", "."))
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def _expected(condition: Condition) -> str:
    return "" if condition.value is None else condition.value


def _equals(condition: Condition, trigger: Trigger) -> bool:
    return _expected(condition) in _texts(trigger.value)


def _not_equals(condition: Condition, trigger: Trigger) -> bool:
    return not _equals(condition, trigger)


def _contains(condition: Condition, trigger: Trigger) -> bool:
    return any(_expected(condition) in text for text in _texts(trigger.value))


def _compare(condition: Condition, trigger: Trigger, op: Callable[[float, float], bool]) -> bool:
    texts = _texts(trigger.value)
    if len(texts) != 1:
        return False
    left, right = _number(texts[0]), _number(_expected(condition))
    if left is None or right is None:
        return False
    return op(left, right)


def _exists(condition: Condition, trigger: Trigger) -> bool:
    if trigger.option_index is not None:
        return True
    return any(text.strip() for text in _texts(trigger.value))


def _option_selected(condition: Condition, trigger: Trigger) -> bool:
    if condition.option_index is None or trigger.option_index is None:
        return False
    return condition.option_index == trigger.option_index


def _clicked(kinds):
    def match(condition: Condition, trigger: Trigger, strict: bool = False) -> bool:
        if not strict:
            return True
        return (trigger.element_type or "") in kinds
    return match


_MATCHERS: Dict[Operator, Callable[..., bool]] = {
    Operator.EQUALS: _equals,
    Operator.NOT_EQUALS: _not_equals,
    Operator.CONTAINS: _contains,
    Operator.GREATER_THAN: lambda c, t: _compare(c, t, lambda a, b: a > b),
    Operator.LESS_THAN: lambda c, t: _compare(c, t, lambda a, b: a < b),
    Operator.EXISTS: _exists,
    Operator.OPTION_SELECTED: _option_selected,
}

_CLICK_MATCHERS = {
    Operator.IMAGE_CLICKED: _clicked(IMAGE_ELEMENT_TYPES),
    Operator.BUTTON_CLICKED: _clicked(BUTTON_ELEMENT_TYPES),
}


def matches(condition: Condition, trigger: Trigger, strict_clickable_types: bool = False) -> bool:
    """
    True if ``trigger`` satisfies ``condition``.

    The caller is responsible for checking that the trigger came from the
    condition's element. Unknown operators never match.
    """
    operator = condition.operator
    if operator in _CLICK_MATCHERS:
        return _CLICK_MATCHERS[operator](condition, trigger, strict_clickable_types)
    matcher = _MATCHERS.get(operator) if isinstance(operator, Operator) else None
    if matcher is None:
        return False
    return matcher(condition, trigger)
