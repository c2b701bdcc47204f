"""Human-readable edge labels shared by the exporters."""

from quizflow.core.ir import Connection, Operator

_OPERATOR_TEXT = {
    Operator.EQUALS: "=",
    Operator.NOT_EQUALS: "!=",
    Operator.CONTAINS: "contains",
    Operator.GREATER_THAN: ">",
    Operator.LESS_THAN: "<",
    Operator.EXISTS: "answered",
    Operator.OPTION_SELECTED: "option",
    Operator.IMAGE_CLICKED: "image clicked",
    Operator.BUTTON_CLICKED: "button clicked",
}


def connection_label(connection: Connection) -> str:
    """The author's label if set, otherwise a short rendering of the condition."""
    if connection.label:
        return connection.label
    condition = connection.condition
    if condition is None or not condition.element_id:
        return ""

    op_text = _OPERATOR_TEXT.get(condition.operator, str(condition.operator))
    if condition.operator == Operator.OPTION_SELECTED:
        option = condition.value or f"#{condition.option_index}"
        return f"{condition.element_id}: {option}"
    if condition.operator in (Operator.EXISTS, Operator.IMAGE_CLICKED, Operator.BUTTON_CLICKED):
        return f"{condition.element_id} {op_text}"
    return f"{condition.element_id} {op_text} {condition.value or ''}".rstrip()
