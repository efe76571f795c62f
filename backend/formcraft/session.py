from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Set

from formcraft.errors import NoTemplateSelected
from formcraft.export import ExportSink
from formcraft.schemas import FormComponent, FormTemplate, FormValue
from formcraft.validation import validate_fields
from formcraft.visibility import VisibilitySet, resolve_visibility

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    NO_TEMPLATE = "no_template"
    TEMPLATE_LOADED = "template_loaded"
    SUBMITTED = "submitted"
    SUBMIT_FAILED = "submit_failed"


@dataclass
class SubmitResult:
    ok: bool
    errors: Dict[str, str] = field(default_factory=dict)
    values: Dict[str, Any] = field(default_factory=dict)
    visible_fields: List[FormComponent] = field(default_factory=list)
    export: Any = None


class FormSession:
    """State of one fill-out session of a template.

    The session owns the value bag. Visibility is recomputed from the whole
    bag every time it is asked for, and submit only validates the fields that
    are visible at that moment.
    """

    def __init__(self, sink: Optional[ExportSink] = None):
        self.sink = sink
        self.template: Optional[FormTemplate] = None
        self.values: Dict[str, FormValue] = {}
        self.errors: Dict[str, str] = {}
        self.collapsed_sections: Set[str] = set()
        self.state = SessionState.NO_TEMPLATE
        self.last_export: Any = None

    def _require_template(self) -> FormTemplate:
        if self.template is None:
            raise NoTemplateSelected("Select a template before editing or submitting")
        return self.template

    def select_template(self, template: FormTemplate) -> None:
        self.template = template
        self.values = template.default_values()
        self.errors = {}
        self.collapsed_sections = set()
        self.last_export = None
        self.state = SessionState.TEMPLATE_LOADED
        logger.debug("Selected template %s", template.formId)

    def close(self) -> None:
        """Leave the template and drop everything entered."""
        self.template = None
        self.values = {}
        self.errors = {}
        self.collapsed_sections = set()
        self.last_export = None
        self.state = SessionState.NO_TEMPLATE

    def set_value(self, field_id: str, value: FormValue) -> None:
        self._require_template()
        self.values[field_id] = value
        # cleared on edit; re-checked only on the next submit
        self.errors.pop(field_id, None)
        self.state = SessionState.TEMPLATE_LOADED

    def set_values(self, values: Mapping[str, FormValue]) -> None:
        for field_id, value in values.items():
            self.set_value(field_id, value)

    def toggle_section(self, section_id: str) -> None:
        if section_id in self.collapsed_sections:
            self.collapsed_sections.discard(section_id)
        else:
            self.collapsed_sections.add(section_id)

    def is_collapsed(self, section_id: str) -> bool:
        return section_id in self.collapsed_sections

    @property
    def visibility(self) -> VisibilitySet:
        return resolve_visibility(self._require_template(), self.values)

    def visible_components(self) -> List[FormComponent]:
        return self.visibility.visible_components(self._require_template())

    def submit(self) -> SubmitResult:
        template = self._require_template()
        visibility = resolve_visibility(template, self.values)
        errors = validate_fields(template, self.values, visibility)
        components = visibility.visible_components(template)

        if errors:
            self.errors = errors
            self.state = SessionState.SUBMIT_FAILED
            logger.info("Submit of %s failed validation on %d field(s)", template.formId, len(errors))
            return SubmitResult(ok=False, errors=dict(errors), values=dict(self.values), visible_fields=components)

        self.errors = {}
        export = self.sink(self.values, components) if self.sink is not None else None
        self.last_export = export
        self.state = SessionState.SUBMITTED
        logger.info("Submitted %s with %d visible field(s)", template.formId, len(components))
        return SubmitResult(ok=True, values=dict(self.values), visible_fields=components, export=export)

    def reset(self) -> None:
        """Clear values and errors. Defaults are not restored."""
        self._require_template()
        self.values = {}
        self.errors = {}
        self.state = SessionState.TEMPLATE_LOADED
