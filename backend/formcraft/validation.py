from __future__ import annotations

import logging
import re
from typing import Any, Dict, Mapping, Optional

from pydantic import AnyUrl, TypeAdapter, ValidationError

from formcraft.conditions import is_empty, to_number, to_text
from formcraft.schemas import FormComponent, FormTemplate, ValidationRule
from formcraft.visibility import VisibilitySet, resolve_visibility

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

_url_adapter = TypeAdapter(AnyUrl)


def _is_absolute_url(text: str) -> bool:
    try:
        _url_adapter.validate_python(text)
    except ValidationError:
        return False
    return True


def _check(rule: ValidationRule, value: Any) -> Optional[str]:
    """Return the error for a single rule, or None when it passes."""
    kind = rule.type

    if kind == "required":
        if is_empty(value):
            return rule.message or "This field is required"
    elif kind == "minLength":
        if len(to_text(value)) < to_number(rule.value):
            return rule.message or f"Minimum length is {to_text(rule.value)}"
    elif kind == "maxLength":
        if len(to_text(value)) > to_number(rule.value):
            return rule.message or f"Maximum length is {to_text(rule.value)}"
    elif kind == "min":
        if to_number(value) < to_number(rule.value):
            return rule.message or f"Minimum value is {to_text(rule.value)}"
    elif kind == "max":
        if to_number(value) > to_number(rule.value):
            return rule.message or f"Maximum value is {to_text(rule.value)}"
    elif kind == "regex":
        source = to_text(rule.value)
        try:
            pattern = re.compile(source)
        except re.error as e:
            logger.warning("Invalid regex pattern %r in validation rule: %s", source, e)
            return f"Invalid pattern: {source}"
        if not pattern.search(to_text(value)):
            return rule.message or "Invalid format"
    elif kind == "email":
        if not EMAIL_PATTERN.fullmatch(to_text(value)):
            return rule.message or "Invalid email address"
    elif kind == "url":
        if not _is_absolute_url(to_text(value)):
            return rule.message or "Invalid URL"
    else:
        logger.debug("Unknown validation rule type %r, skipping", kind)

    return None


def validate_field(field: FormComponent, value: Any) -> Optional[str]:
    """Run the field's validation rules in order and return the first error.

    Only the first failing rule is reported; later rules are not evaluated.
    """
    for rule in field.validationRules:
        error = _check(rule, value)
        if error is not None:
            return error
    return None


def validate_fields(
    template: FormTemplate,
    values: Mapping[str, Any],
    visibility: Optional[VisibilitySet] = None,
) -> Dict[str, str]:
    """Validate every visible field of the template.

    Hidden fields are skipped entirely, even when they are required.
    Returns a mapping of component id -> error message.
    """
    if visibility is None:
        visibility = resolve_visibility(template, values)

    errors: Dict[str, str] = {}
    for component in visibility.visible_components(template):
        error = validate_field(component, values.get(component.id))
        if error is not None:
            errors[component.id] = error
    return errors
