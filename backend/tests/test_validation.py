from formcraft.schemas import (
    ConditionalRule,
    FormComponent,
    FormSection,
    FormTemplate,
    ValidationRule,
)
from formcraft.validation import validate_field, validate_fields


def field(*rules, **kwargs):
    return FormComponent(
        id=kwargs.pop("id", "F1"),
        type=kwargs.pop("type", "text"),
        label="Field",
        validationRules=[ValidationRule(**r) for r in rules],
        **kwargs,
    )


def test_min_with_custom_message():
    f = field({"type": "min", "value": 10, "message": "too small"})
    assert validate_field(f, 5) == "too small"
    assert validate_field(f, 15) is None


def test_no_rules_always_passes():
    assert validate_field(field(), None) is None


def test_required_default_message():
    f = field({"type": "required"})
    assert validate_field(f, "") == "This field is required"
    assert validate_field(f, None) == "This field is required"
    assert validate_field(f, False) == "This field is required"
    assert validate_field(f, "x") is None


def test_first_failing_rule_wins():
    f = field(
        {"type": "minLength", "value": 5, "message": "first"},
        {"type": "email", "message": "second"},
    )
    assert validate_field(f, "ab") == "first"
    assert validate_field(f, "abcdef") == "second"


def test_length_rules():
    f = field({"type": "minLength", "value": 3}, {"type": "maxLength", "value": "5"})
    assert validate_field(f, "ab") == "Minimum length is 3"
    assert validate_field(f, "abcdef") == "Maximum length is 5"
    assert validate_field(f, "abcd") is None
    assert validate_field(f, 1234) is None


def test_min_max_default_messages():
    f = field({"type": "min", "value": 1}, {"type": "max", "value": 10})
    assert validate_field(f, "0") == "Minimum value is 1"
    assert validate_field(f, 11) == "Maximum value is 10"
    assert validate_field(f, "7") is None


def test_min_max_skip_non_numeric_values():
    f = field({"type": "min", "value": 1}, {"type": "max", "value": 10})
    assert validate_field(f, "abc") is None
    assert validate_field(f, None) is None


def test_regex_searches_value():
    f = field({"type": "regex", "value": r"^\d{3}-\d{4}$"})
    assert validate_field(f, "555-1234") is None
    assert validate_field(f, "5551234") == "Invalid format"


def test_malformed_regex_reports_instead_of_raising():
    f = field({"type": "regex", "value": "([a-z"})
    assert validate_field(f, "abc") == "Invalid pattern: ([a-z"


def test_email():
    f = field({"type": "email"})
    assert validate_field(f, "someone@example.com") is None
    assert validate_field(f, "someone@example") == "Invalid email address"
    assert validate_field(f, "some one@example.com") == "Invalid email address"


def test_url():
    f = field({"type": "url"})
    assert validate_field(f, "https://example.com/path?q=1") is None
    assert validate_field(f, "example.com") == "Invalid URL"
    assert validate_field(f, "") == "Invalid URL"


def test_unknown_rule_type_passes():
    assert validate_field(field({"type": "phone"}), "nope") is None


def test_hidden_fields_are_not_validated():
    template = FormTemplate(
        formId="T",
        formName="T",
        sections=[
            FormSection(
                id="S1",
                name="Main",
                components=[
                    field({"type": "required"}, id="F1"),
                    field(
                        {"type": "required"},
                        id="F2",
                        conditionalRules=[ConditionalRule(fieldId="F1", operator="isNotEmpty")],
                    ),
                ],
            ),
            FormSection(
                id="S2",
                name="Hidden",
                conditionalRules=[ConditionalRule(fieldId="F1", operator="equals", value="show")],
                components=[field({"type": "required"}, id="F3")],
            ),
        ],
    )
    assert validate_fields(template, {"F1": ""}) == {"F1": "This field is required"}
    assert validate_fields(template, {"F1": "x"}) == {"F2": "This field is required"}
    assert validate_fields(template, {"F1": "show", "F2": "y"}) == {"F3": "This field is required"}
