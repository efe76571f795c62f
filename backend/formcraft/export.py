from __future__ import annotations

import json
import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, Mapping, Protocol, Sequence

import requests

from formcraft.conditions import to_text
from formcraft.errors import ExportError
from formcraft.schemas import FileReference, FormComponent, FormTemplate

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("json", "xml")


class ExportSink(Protocol):
    """Receives the value bag and the visible components of a valid submit."""

    def __call__(self, values: Mapping[str, Any], components: Sequence[FormComponent]) -> Any:
        ...


def _export_value(value: Any) -> Any:
    if isinstance(value, FileReference):
        return f"[File: {value.name}]"
    return value


def build_submission(values: Mapping[str, Any], components: Sequence[FormComponent]) -> Dict[str, Any]:
    """Key the submitted values by each component's export key (fieldId, else id)."""
    return {c.export_key: _export_value(values.get(c.id)) for c in components}


def submission_to_json(values: Mapping[str, Any], components: Sequence[FormComponent]) -> str:
    return json.dumps(build_submission(values, components), indent=2)


def submission_to_xml(values: Mapping[str, Any], components: Sequence[FormComponent]) -> str:
    root = ET.Element("formSubmission")
    for component in components:
        text = to_text(_export_value(values.get(component.id)))
        field_el = ET.SubElement(root, "field", id=component.export_key, label=component.label)
        ET.SubElement(field_el, "value").text = text
    ET.indent(root, space="  ")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + ET.tostring(root, encoding="unicode")


def render_submission(values: Mapping[str, Any], components: Sequence[FormComponent], fmt: str = "json") -> str:
    if fmt == "json":
        return submission_to_json(values, components)
    if fmt == "xml":
        return submission_to_xml(values, components)
    raise ValueError(f"Unsupported export format: {fmt}")


def template_to_json(template: FormTemplate) -> str:
    return template.model_dump_json(indent=2)


class RenderingSink:
    """Sink that renders the submission as JSON or XML text."""

    def __init__(self, fmt: str = "json"):
        if fmt not in EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format: {fmt}")
        self.fmt = fmt

    def __call__(self, values: Mapping[str, Any], components: Sequence[FormComponent]) -> str:
        return render_submission(values, components, self.fmt)


class HttpSubmissionSink:
    """Sink that posts the submission to a formcraft backend."""

    def __init__(self, base_url: str, form_id: str, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.form_id = form_id
        self.timeout = timeout

    @property
    def url(self) -> str:
        return f"{self.base_url}/api/forms/{self.form_id}/submit"

    def __call__(self, values: Mapping[str, Any], components: Sequence[FormComponent]) -> Dict[str, Any]:
        payload = {
            "values": build_submission(values, components),
            "visibleFields": [c.export_key for c in components],
        }
        try:
            response = requests.post(
                self.url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ExportError(f"Could not reach {self.url}: {e}") from e

        if not response.ok:
            raise ExportError(f"Submission rejected by {self.url}: {response.status_code} - {response.text}")

        logger.info("Posted submission for form %s", self.form_id)
        if response.status_code == 204:
            return {}
        return response.json()
