#!/usr/bin/env python3
"""
Fill a saved template offline and check it the way the fill page does.

Usage:
    # Show visibility and validation errors, print the JSON submission if valid
    formcraft-fill template.json values.json

    # Render XML instead
    formcraft-fill template.json values.json --format xml

    # Post the submission to a backend (defaults to BACKEND_URL from .env)
    formcraft-fill template.json values.json --post
"""
import argparse
import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import TypeAdapter, ValidationError

from formcraft.config import settings
from formcraft.errors import ExportError
from formcraft.export import EXPORT_FORMATS, HttpSubmissionSink, RenderingSink
from formcraft.schemas import FormTemplate, FormValues
from formcraft.session import FormSession

logger = logging.getLogger("formcraft.cli")

_values_adapter = TypeAdapter(FormValues)


def load_template(path: Path) -> FormTemplate:
    return FormTemplate.model_validate_json(path.read_text(encoding="utf-8"))


def load_values(path: Path) -> FormValues:
    return _values_adapter.validate_json(path.read_text(encoding="utf-8"))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fill a form template and validate it")
    parser.add_argument("template", type=Path, help="Template JSON file")
    parser.add_argument("values", type=Path, help="JSON object of component id -> value")
    parser.add_argument("--format", choices=EXPORT_FORMATS, default="json", help="Output format (default: json)")
    parser.add_argument(
        "--post",
        nargs="?",
        const="",
        default=None,
        metavar="BACKEND_URL",
        help="Post the submission to a backend instead of printing it",
    )
    parser.add_argument("--no-defaults", action="store_true", help="Do not start from the template's default values")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else os.getenv("LOG_LEVEL", "WARNING").upper(),
        format="%(levelname)s - %(message)s",
    )

    try:
        template = load_template(args.template)
        values = load_values(args.values)
    except (OSError, ValidationError) as e:
        print(f"✗ Could not load input: {e}", file=sys.stderr)
        return 2

    if args.post is not None:
        backend_url = args.post or settings.BACKEND_URL
        sink = HttpSubmissionSink(backend_url, template.formId)
    else:
        sink = RenderingSink(args.format)

    session = FormSession(sink=sink)
    session.select_template(template)
    if args.no_defaults:
        session.reset()
    session.set_values(values)

    visibility = session.visibility
    for section in template.sections:
        if not visibility.is_section_visible(section):
            print(f"- section {section.name!r} hidden", file=sys.stderr)
            continue
        hidden = [c.label or c.id for c in section.components if not visibility.is_field_visible(c)]
        if hidden:
            print(f"- section {section.name!r}: hidden fields {', '.join(hidden)}", file=sys.stderr)

    try:
        result = session.submit()
    except ExportError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 3

    if not result.ok:
        for field_id, message in result.errors.items():
            component = template.find_component(field_id)
            label = component.label if component and component.label else field_id
            print(f"✗ {label}: {message}", file=sys.stderr)
        return 1

    if args.post is not None:
        print(f"✓ Submitted: {json.dumps(result.export)}")
    else:
        print(result.export)
    return 0


if __name__ == "__main__":
    sys.exit(main())
