"""Tests for operator semantics."""

import pytest
from quizflow.core.ir import Condition, Operator, Trigger
from quizflow.engine.conditions import matches


def cond(operator, value="", option_index=None):
    return Condition(operator=operator, value=value, element_id="e", option_index=option_index)


def trig(value=None, option_index=None, element_type="text"):
    return Trigger(element_id="e", element_type=element_type, value=value, option_index=option_index)


@pytest.mark.parametrize("operator, value, answer, expected", [
    (Operator.EQUALS, "yes", "yes", True),
    (Operator.EQUALS, "yes", "Yes", False),
    (Operator.EQUALS, "3", 3, True),
    (Operator.NOT_EQUALS, "yes", "no", True),
    (Operator.NOT_EQUALS, "yes", "yes", False),
    (Operator.CONTAINS, "gmail", "ana@gmail.com", True),
    (Operator.CONTAINS, "gmail", "ana@proton.me", False),
    (Operator.GREATER_THAN, "18", "25", True),
    (Operator.GREATER_THAN, "18", "18", False),
    (Operator.GREATER_THAN, "1.5", "1,75", True),
    (Operator.LESS_THAN, "100", 72.5, True),
    (Operator.LESS_THAN, "100", "150", False),
    (Operator.EXISTS, "", "anything", True),
    (Operator.EXISTS, "", "   ", False),
    (Operator.EXISTS, "", None, False),
])
def test_value_operators(operator, value, answer, expected):
    assert matches(cond(operator, value), trig(answer)) is expected


def test_numeric_operators_never_match_non_numbers():
    assert not matches(cond(Operator.GREATER_THAN, "10"), trig("lots"))
    assert not matches(cond(Operator.LESS_THAN, "ten"), trig("5"))
    assert not matches(cond(Operator.GREATER_THAN, "10"), trig(None))
    assert not matches(cond(Operator.LESS_THAN, "10"), trig(True))
    assert not matches(cond(Operator.GREATER_THAN, "1"), trig("nan"))


def test_missing_answer_compares_as_empty_text():
    assert matches(cond(Operator.EQUALS, ""), trig(None))
    assert not matches(cond(Operator.NOT_EQUALS, ""), trig(None))
    assert matches(cond(Operator.NOT_EQUALS, "yes"), trig(None))
    assert not matches(cond(Operator.CONTAINS, "a"), trig(None))


def test_condition_without_value_compares_as_empty_text():
    no_value = Condition(operator=Operator.EQUALS, value=None, element_id="e")
    assert matches(no_value, trig(""))
    assert not matches(no_value, trig("x"))


def test_list_answers_match_any_item():
    answer = ["red", "blue"]
    assert matches(cond(Operator.EQUALS, "blue"), trig(answer))
    assert matches(cond(Operator.CONTAINS, "ed"), trig(answer))
    assert not matches(cond(Operator.NOT_EQUALS, "red"), trig(answer))
    assert not matches(cond(Operator.GREATER_THAN, "1"), trig(["2", "3"]))


def test_exists_accepts_option_index_alone():
    assert matches(cond(Operator.EXISTS), trig(option_index=0))


def test_option_selected_compares_indexes_only():
    condition = cond(Operator.OPTION_SELECTED, value="18-25", option_index=1)

    assert matches(condition, trig("something else", option_index=1))
    assert not matches(condition, trig("18-25", option_index=0))
    assert not matches(condition, trig("18-25"))
    assert not matches(cond(Operator.OPTION_SELECTED, value="18-25"), trig("18-25", option_index=0))


@pytest.mark.parametrize("operator, kind", [
    (Operator.IMAGE_CLICKED, "image"),
    (Operator.BUTTON_CLICKED, "continue_button"),
])
def test_clicked_operators(operator, kind):
    assert matches(cond(operator), trig(element_type=kind))
    # Lenient by default: any trigger on the element counts as a click.
    assert matches(cond(operator), trig(element_type="text"))

    assert matches(cond(operator), trig(element_type=kind), strict_clickable_types=True)
    assert not matches(cond(operator), trig(element_type="text"), strict_clickable_types=True)
    assert not matches(cond(operator), trig(element_type=None), strict_clickable_types=True)


def test_unknown_operator_never_matches():
    assert not matches(cond("regex", ".*"), trig("anything"))
    assert not matches(cond("", ""), trig("anything"))
