import json

import pytest
import requests

from formcraft.errors import ExportError
from formcraft.export import (
    HttpSubmissionSink,
    RenderingSink,
    build_submission,
    submission_to_xml,
    template_to_json,
)
from formcraft.schemas import FileReference, FormComponent, FormSection, FormTemplate


COMPONENTS = [
    FormComponent(id="c1", type="text", label="Full name", fieldId="full_name"),
    FormComponent(id="c2", type="file", label="Scan"),
    FormComponent(id="c3", type="checkbox", label="Agree & sign"),
]


def test_build_submission_uses_export_keys():
    values = {"c1": "Ada", "c2": FileReference(name="scan.pdf", url="/uploads/x.pdf"), "c3": True, "other": 1}
    assert build_submission(values, COMPONENTS) == {
        "full_name": "Ada",
        "c2": "[File: scan.pdf]",
        "c3": True,
    }


def test_missing_values_export_as_null():
    assert build_submission({}, COMPONENTS[:1]) == {"full_name": None}


def test_xml_escapes_and_labels():
    xml = submission_to_xml({"c1": "<Ada>", "c3": False}, COMPONENTS)
    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<formSubmission>')
    assert '<field id="full_name" label="Full name">' in xml
    assert "<value>&lt;Ada&gt;</value>" in xml
    assert 'label="Agree &amp; sign"' in xml
    assert "<value>false</value>" in xml


def test_rendering_sink_rejects_unknown_format():
    with pytest.raises(ValueError):
        RenderingSink("xsd")


def test_template_json_round_trip():
    template = FormTemplate(
        formId="T",
        formName="Round trip",
        sections=[FormSection(id="S", name="Main", components=COMPONENTS)],
    )
    assert FormTemplate.model_validate_json(template_to_json(template)) == template


class FakeResponse:
    def __init__(self, status_code, payload=None):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self._payload = payload or {}
        self.text = json.dumps(self._payload)

    def json(self):
        return self._payload


def test_http_sink_posts_submission(monkeypatch):
    calls = []

    def fake_post(url, json=None, headers=None, timeout=None):
        calls.append((url, json))
        return FakeResponse(200, {"id": "abc"})

    monkeypatch.setattr(requests, "post", fake_post)
    sink = HttpSubmissionSink("http://backend:8001/", "T1")

    assert sink({"c1": "Ada"}, COMPONENTS[:1]) == {"id": "abc"}
    assert calls == [(
        "http://backend:8001/api/forms/T1/submit",
        {"values": {"full_name": "Ada"}, "visibleFields": ["full_name"]},
    )]


def test_http_sink_raises_on_rejection(monkeypatch):
    monkeypatch.setattr(requests, "post", lambda *a, **kw: FakeResponse(404, {"detail": "Form not found"}))
    with pytest.raises(ExportError):
        HttpSubmissionSink("http://backend", "missing")({}, [])


def test_http_sink_raises_when_unreachable(monkeypatch):
    def boom(*args, **kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(requests, "post", boom)
    with pytest.raises(ExportError):
        HttpSubmissionSink("http://backend", "T1")({}, [])


def test_http_sink_accepts_any_success_status(monkeypatch):
    monkeypatch.setattr(requests, "post", lambda *a, **kw: FakeResponse(201, {"id": "new"}))
    assert HttpSubmissionSink("http://backend", "T1")({}, []) == {"id": "new"}

    monkeypatch.setattr(requests, "post", lambda *a, **kw: FakeResponse(204))
    assert HttpSubmissionSink("http://backend", "T1")({}, []) == {}


def test_xml_writes_integral_floats_without_decimal_point():
    number = FormComponent(id="n", type="number", label="Count")
    xml = submission_to_xml({"n": 5.0}, [number])
    assert "<value>5</value>" in xml
    assert "<value>2.5</value>" in submission_to_xml({"n": 2.5}, [number])
