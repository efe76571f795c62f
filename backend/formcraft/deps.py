from formcraft.database import forms_collection, submissions_collection
from formcraft.store import MongoSubmissionStore, MongoTemplateStore, SubmissionStore, TemplateStore


def get_template_store() -> TemplateStore:
    return MongoTemplateStore(forms_collection())


def get_submission_store() -> SubmissionStore:
    return MongoSubmissionStore(submissions_collection())
