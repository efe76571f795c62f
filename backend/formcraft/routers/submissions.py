from fastapi import APIRouter, Depends, HTTPException

from formcraft.deps import get_submission_store, get_template_store
from formcraft.schemas import SubmissionIn, SubmissionOut
from formcraft.store import SubmissionStore, TemplateStore

router = APIRouter(prefix="/api/forms", tags=["submissions"])


@router.post("/{form_id}/submit", response_model=SubmissionOut)
async def submit_form(
    form_id: str,
    submission: SubmissionIn,
    templates: TemplateStore = Depends(get_template_store),
    store: SubmissionStore = Depends(get_submission_store),
):
    # Callers validate against the template before posting; the backend only stores.
    if not await templates.get(form_id):
        raise HTTPException(status_code=404, detail="Form not found")
    return await store.add(form_id, submission.values, submission.visibleFields, submission.metadata)


@router.get("/{form_id}/submissions", response_model=list[SubmissionOut])
async def list_submissions(form_id: str, store: SubmissionStore = Depends(get_submission_store)):
    """Return submissions for a form (most recent first)."""
    return await store.list(form_id)


@router.delete("/{form_id}/submissions/{submission_id}")
async def delete_submission(
    form_id: str,
    submission_id: str,
    store: SubmissionStore = Depends(get_submission_store),
):
    """Delete a single submission by id."""
    try:
        deleted = await store.delete(form_id, submission_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid submission id")
    if not deleted:
        raise HTTPException(status_code=404, detail="Submission not found")
    return {"status": "ok", "deletedId": submission_id}
