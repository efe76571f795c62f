"""Form templates with conditional visibility and field validation."""

from formcraft.conditions import evaluate_rule, evaluate_rule_list
from formcraft.session import FormSession, SessionState, SubmitResult
from formcraft.validation import validate_field, validate_fields
from formcraft.visibility import VisibilitySet, resolve_visibility

__all__ = [
    "FormSession",
    "SessionState",
    "SubmitResult",
    "VisibilitySet",
    "evaluate_rule",
    "evaluate_rule_list",
    "resolve_visibility",
    "validate_field",
    "validate_fields",
]
