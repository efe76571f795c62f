from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Set

from formcraft.conditions import evaluate_rule_list
from formcraft.schemas import FormComponent, FormSection, FormTemplate


@dataclass
class VisibilitySet:
    visible_sections: Set[str] = field(default_factory=set)
    visible_fields: Set[str] = field(default_factory=set)

    def is_section_visible(self, section: FormSection) -> bool:
        return section.id in self.visible_sections

    def is_field_visible(self, component: FormComponent) -> bool:
        return component.id in self.visible_fields

    def visible_components(self, template: FormTemplate) -> List[FormComponent]:
        """Visible components in template order."""
        return [
            c
            for section in template.sections
            if section.id in self.visible_sections
            for c in section.components
            if c.id in self.visible_fields
        ]


def resolve_visibility(template: FormTemplate, values: Mapping[str, Any]) -> VisibilitySet:
    """Compute which sections and fields are shown for the given values.

    A hidden section hides all of its fields whatever their own rules say.
    Values of hidden fields are not cleared and still take part in other
    rules.
    """
    result = VisibilitySet()
    for section in template.sections:
        if not evaluate_rule_list(section.conditionalRules, values):
            continue
        result.visible_sections.add(section.id)
        for component in section.components:
            if evaluate_rule_list(component.conditionalRules, values):
                result.visible_fields.add(component.id)
    return result
