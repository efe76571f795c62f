from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Dict, List, Optional, Protocol

from bson import ObjectId
from bson.errors import InvalidId

from formcraft.database import convert_objectid_to_str
from formcraft.schemas import FormSection, FormTemplate, SubmissionOut, utcnow

logger = logging.getLogger(__name__)


def new_template(name: str, description: Optional[str] = None) -> FormTemplate:
    """A fresh template holding a single empty section."""
    stamp = int(time.time() * 1000)
    now = utcnow()
    return FormTemplate(
        formId=f"F{stamp}",
        formName=name,
        description=description,
        sections=[FormSection(id=f"S{stamp}", name="Default Section")],
        createdAt=now,
        updatedAt=now,
    )


class TemplateStore(Protocol):
    async def load_all(self) -> List[FormTemplate]: ...

    async def get(self, form_id: str) -> Optional[FormTemplate]: ...

    async def save(self, template: FormTemplate) -> FormTemplate: ...

    async def delete(self, form_id: str) -> bool: ...


class SubmissionStore(Protocol):
    async def add(self, form_id: str, values: Dict[str, Any], visible_fields: List[str],
                  metadata: Dict[str, Any]) -> SubmissionOut: ...

    async def list(self, form_id: str) -> List[SubmissionOut]: ...

    async def delete(self, form_id: str, submission_id: str) -> bool: ...

    async def delete_for_form(self, form_id: str) -> int: ...


def _template_from_doc(doc: Dict[str, Any]) -> FormTemplate:
    doc = dict(doc)
    form_id = doc.pop("_id", None)
    doc.setdefault("formId", form_id)
    return FormTemplate.model_validate(doc)


class MongoTemplateStore:
    """Templates kept one document per form, `_id` = formId."""

    def __init__(self, collection):
        self.collection = collection

    async def load_all(self) -> List[FormTemplate]:
        templates = []
        async for doc in self.collection.find({}, sort=[("updatedAt", -1)]):
            templates.append(_template_from_doc(doc))
        return templates

    async def get(self, form_id: str) -> Optional[FormTemplate]:
        doc = await self.collection.find_one({"_id": form_id})
        return _template_from_doc(doc) if doc else None

    async def save(self, template: FormTemplate) -> FormTemplate:
        existing = await self.collection.find_one({"_id": template.formId}, {"createdAt": 1})
        update: Dict[str, Any] = {"updatedAt": utcnow()}
        # Preserve createdAt of an existing document
        if existing and existing.get("createdAt"):
            update["createdAt"] = existing["createdAt"]
        saved = template.model_copy(update=update)

        doc = saved.model_dump()
        doc["_id"] = saved.formId
        await self.collection.replace_one({"_id": saved.formId}, doc, upsert=True)
        logger.info("Saved template %s", saved.formId)
        return saved

    async def delete(self, form_id: str) -> bool:
        result = await self.collection.delete_one({"_id": form_id})
        return result.deleted_count > 0


class InMemoryTemplateStore:
    def __init__(self):
        self._templates: Dict[str, FormTemplate] = {}

    async def load_all(self) -> List[FormTemplate]:
        templates = sorted(self._templates.values(), key=lambda t: t.updatedAt, reverse=True)
        return [t.model_copy(deep=True) for t in templates]

    async def get(self, form_id: str) -> Optional[FormTemplate]:
        template = self._templates.get(form_id)
        return template.model_copy(deep=True) if template else None

    async def save(self, template: FormTemplate) -> FormTemplate:
        update: Dict[str, Any] = {"updatedAt": utcnow()}
        existing = self._templates.get(template.formId)
        if existing:
            update["createdAt"] = existing.createdAt
        saved = template.model_copy(update=update, deep=True)
        self._templates[saved.formId] = saved
        return saved.model_copy(deep=True)

    async def delete(self, form_id: str) -> bool:
        return self._templates.pop(form_id, None) is not None


def _submission_from_doc(doc: Dict[str, Any]) -> SubmissionOut:
    doc = convert_objectid_to_str(doc)
    return SubmissionOut(
        id=doc["_id"],
        formId=doc["formId"],
        values=doc.get("values", {}),
        visibleFields=doc.get("visibleFields", []),
        metadata=doc.get("metadata", {}),
        submittedAt=doc["submittedAt"],
    )


class MongoSubmissionStore:
    def __init__(self, collection):
        self.collection = collection

    async def add(self, form_id, values, visible_fields, metadata) -> SubmissionOut:
        doc = {
            "formId": form_id,
            "values": values,
            "visibleFields": visible_fields,
            "metadata": metadata,
            "submittedAt": utcnow(),
        }
        result = await self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return _submission_from_doc(doc)

    async def list(self, form_id: str) -> List[SubmissionOut]:
        submissions = []
        cursor = self.collection.find({"formId": form_id}, sort=[("submittedAt", -1)])
        async for doc in cursor:
            submissions.append(_submission_from_doc(doc))
        return submissions

    async def delete(self, form_id: str, submission_id: str) -> bool:
        try:
            oid = ObjectId(submission_id)
        except InvalidId:
            raise ValueError(f"Invalid submission id: {submission_id}")
        result = await self.collection.delete_one({"_id": oid, "formId": form_id})
        return result.deleted_count > 0

    async def delete_for_form(self, form_id: str) -> int:
        result = await self.collection.delete_many({"formId": form_id})
        return result.deleted_count


class InMemorySubmissionStore:
    def __init__(self):
        self._submissions: List[SubmissionOut] = []

    async def add(self, form_id, values, visible_fields, metadata) -> SubmissionOut:
        submission = SubmissionOut(
            id=uuid.uuid4().hex,
            formId=form_id,
            values=dict(values),
            visibleFields=list(visible_fields),
            metadata=dict(metadata),
            submittedAt=utcnow(),
        )
        self._submissions.append(submission)
        return submission

    async def list(self, form_id: str) -> List[SubmissionOut]:
        found = [s for s in self._submissions if s.formId == form_id]
        return sorted(found, key=lambda s: s.submittedAt, reverse=True)

    async def delete(self, form_id: str, submission_id: str) -> bool:
        before = len(self._submissions)
        self._submissions = [
            s for s in self._submissions
            if not (s.formId == form_id and s.id == submission_id)
        ]
        return len(self._submissions) < before

    async def delete_for_form(self, form_id: str) -> int:
        before = len(self._submissions)
        self._submissions = [s for s in self._submissions if s.formId != form_id]
        return before - len(self._submissions)
