import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from formcraft.deps import get_submission_store, get_template_store
from formcraft.export import template_to_json
from formcraft.schemas import FormTemplate, FormTemplateSummary, NewFormIn
from formcraft.store import SubmissionStore, TemplateStore, new_template

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/forms", tags=["forms"])


@router.get("", response_model=list[FormTemplateSummary])
async def list_forms(store: TemplateStore = Depends(get_template_store)):
    """Get a list of all templates with basic info."""
    items = []
    for template in await store.load_all():
        items.append(FormTemplateSummary(
            formId=template.formId,
            formName=template.formName,
            description=template.description,
            sectionCount=len(template.sections),
            fieldCount=sum(1 for _ in template.iter_components()),
            createdAt=template.createdAt,
            updatedAt=template.updatedAt,
        ))
    return items


@router.post("")
async def upsert_form(form: FormTemplate, store: TemplateStore = Depends(get_template_store)):
    saved = await store.save(form)
    return {"status": "ok", "formId": saved.formId, "updatedAt": saved.updatedAt}


@router.post("/new", response_model=FormTemplate)
async def create_form(body: NewFormIn, store: TemplateStore = Depends(get_template_store)):
    """Create an empty template with one default section."""
    name = body.formName.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Form name is required")
    return await store.save(new_template(name, body.description))


@router.get("/{form_id}", response_model=FormTemplate)
async def get_form(form_id: str, store: TemplateStore = Depends(get_template_store)):
    template = await store.get(form_id)
    if not template:
        raise HTTPException(status_code=404, detail="Form not found")
    return template


@router.get("/{form_id}/export")
async def export_form(form_id: str, store: TemplateStore = Depends(get_template_store)):
    """The template definition as a downloadable JSON document."""
    template = await store.get(form_id)
    if not template:
        raise HTTPException(status_code=404, detail="Form not found")
    return Response(
        content=template_to_json(template),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{form_id}.json"'},
    )


@router.delete("/{form_id}")
async def delete_form(
    form_id: str,
    store: TemplateStore = Depends(get_template_store),
    submissions: SubmissionStore = Depends(get_submission_store),
):
    """Delete a template and all its submissions."""
    if not await store.delete(form_id):
        raise HTTPException(status_code=404, detail="Form not found")
    removed = await submissions.delete_for_form(form_id)
    logger.info("Deleted template %s and %d submission(s)", form_id, removed)
    return {"status": "ok", "formId": form_id}
