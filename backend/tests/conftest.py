import pytest
from fastapi.testclient import TestClient

from formcraft.deps import get_submission_store, get_template_store
from formcraft.main import app
from formcraft.store import InMemorySubmissionStore, InMemoryTemplateStore


@pytest.fixture
def stores():
    return InMemoryTemplateStore(), InMemorySubmissionStore()


@pytest.fixture
def client(stores):
    templates, submissions = stores
    app.dependency_overrides[get_template_store] = lambda: templates
    app.dependency_overrides[get_submission_store] = lambda: submissions
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
