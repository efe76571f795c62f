from pydantic import BaseModel, Field
from typing import Any, Dict, Iterator, List, Literal, Optional, Union
from datetime import datetime, timezone


ComponentType = Literal[
    "text",
    "number",
    "email",
    "textarea",
    "radio",
    "checkbox",
    "date",
    "dropdown",
    "file",
    "toggle",
    "slider",
    "section",
    "table",
]

# Operators and validation types are kept as plain strings on the models so a
# template written by a newer builder still loads; unknown entries fail open.
CONDITION_OPERATORS = (
    "equals",
    "notEquals",
    "contains",
    "greaterThan",
    "lessThan",
    "isEmpty",
    "isNotEmpty",
)

VALIDATION_TYPES = (
    "required",
    "minLength",
    "maxLength",
    "min",
    "max",
    "regex",
    "email",
    "url",
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FileReference(BaseModel):
    """A file picked for a `file` component, referenced by name rather than bytes."""
    name: str
    url: Optional[str] = None
    size: Optional[int] = None


FormValue = Union[FileReference, bool, int, float, str, None]
FormValues = Dict[str, FormValue]


class ConditionalRule(BaseModel):
    id: str = ""
    # id of the component whose value drives this rule
    fieldId: str
    operator: str = "equals"
    # ignored by isEmpty / isNotEmpty
    value: Union[bool, int, float, str, None] = None


class ValidationRule(BaseModel):
    type: str
    value: Union[int, float, str, None] = None
    message: Optional[str] = None


class TableColumn(BaseModel):
    id: str
    label: str
    type: Literal["text", "number", "dropdown", "checkbox"] = "text"
    options: Optional[List[str]] = None


class FormComponent(BaseModel):
    id: str
    type: ComponentType
    label: str = ""
    # external key used when exporting; falls back to id
    fieldId: Optional[str] = None
    placeholder: Optional[str] = None
    required: bool = False
    options: Optional[List[str]] = None
    defaultValue: Union[bool, int, float, str, None] = None
    validationRules: List[ValidationRule] = Field(default_factory=list)
    conditionalRules: List[ConditionalRule] = Field(default_factory=list)
    sectionId: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    accept: Optional[str] = None
    columns: Optional[List[TableColumn]] = None
    rows: Optional[int] = None

    @property
    def export_key(self) -> str:
        return self.fieldId or self.id


class FormSection(BaseModel):
    id: str
    name: str
    collapsed: bool = False
    isReusable: bool = False
    components: List[FormComponent] = Field(default_factory=list)
    conditionalRules: List[ConditionalRule] = Field(default_factory=list)


class FormTemplate(BaseModel):
    formId: str
    formName: str
    description: Optional[str] = None
    sections: List[FormSection] = Field(default_factory=list)
    createdAt: datetime = Field(default_factory=utcnow)
    updatedAt: datetime = Field(default_factory=utcnow)

    def iter_components(self) -> Iterator[FormComponent]:
        for section in self.sections:
            yield from section.components

    def find_component(self, component_id: str) -> Optional[FormComponent]:
        for component in self.iter_components():
            if component.id == component_id:
                return component
        return None

    def default_values(self) -> FormValues:
        """Values a fill session starts from: every non-empty defaultValue."""
        return {
            c.id: c.defaultValue
            for c in self.iter_components()
            if c.defaultValue is not None and c.defaultValue != ""
        }


class FormTemplateSummary(BaseModel):
    formId: str
    formName: str
    description: Optional[str] = None
    sectionCount: int
    fieldCount: int
    createdAt: datetime
    updatedAt: datetime


class NewFormIn(BaseModel):
    formName: str
    description: Optional[str] = None


class SubmissionIn(BaseModel):
    # keyed by each component's export key
    values: Dict[str, Any]
    visibleFields: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class SubmissionOut(BaseModel):
    id: str
    formId: str
    values: Dict[str, Any]
    visibleFields: List[str]
    metadata: Dict[str, Any]
    submittedAt: datetime
