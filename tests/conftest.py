import json
import os

os.environ["STORAGE_BACKEND"] = "memory"
os.environ["DATABASE_URL"] = ""
os.environ["DEEPSEEK_API_KEY"] = ""
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SESSION_SECRET"] = "test-secret"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from langchain_core.language_models.chat_models import SimpleChatModel  # noqa: E402
from langchain_core.language_models.fake_chat_models import FakeListChatModel  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from resume_tailor.api.app import app  # noqa: E402
from resume_tailor.api.deps import get_llm  # noqa: E402
from resume_tailor.api.limiter import limiter  # noqa: E402
from resume_tailor.db import init_db  # noqa: E402
from resume_tailor.services.insights import clear_insights_cache  # noqa: E402
from resume_tailor.storage import DatabaseStorage, MemStorage, get_storage  # noqa: E402

RESUME_TEXT = """Jane Doe
Senior Database Administrator
jane.doe@example.com | (555) 123-4567 | Austin, TX | linkedin.com/in/janedoe

Experience
Database Administrator, Acme Health (2019 - Present)
- Tuned SQL Server queries, cutting report runtimes by 40%
- Automated backups and restore tests with PowerShell

Skills
SQL Server, PostgreSQL, PowerShell, Performance Tuning, Azure
"""

JOB_DESCRIPTION = """Senior Database Engineer at Globex

We are looking for a Senior Database Engineer to own our PostgreSQL and SQL Server fleet.
You will drive Performance Tuning, High Availability and Disaster Recovery, automate with
PowerShell and Terraform, and run workloads on AWS with Kubernetes.
"""

CONTACT = {
    "name": "Jane Doe",
    "title": "Senior Database Administrator",
    "phone": "(555) 123-4567",
    "email": "jane.doe@example.com",
    "city": "Austin",
    "state": "TX",
    "linkedin": "linkedin.com/in/janedoe",
}

JOB_ANALYSIS = {
    "title": "Senior Database Engineer",
    "company": "Globex Corp.",
    "requirements": ["5+ years of database administration"],
    "keywords": ["PostgreSQL", "High Availability", "Terraform"],
    "skills": ["PostgreSQL", "SQL Server"],
    "technologies": ["AWS", "Kubernetes"],
    "roleArchetype": "Database Engineer",
    "keywordBuckets": {"coreTech": ["PostgreSQL", "SQL Server"], "tools": ["Terraform"]},
}

RESUME_ANALYSIS = {
    "strengths": ["Deep SQL Server tuning experience"],
    "gaps": ["No Kubernetes"],
    "matchedKeywords": ["PostgreSQL", "SQL Server", "PowerShell"],
    "missingKeywords": ["Kubernetes", "Terraform"],
    "matchScore": 78,
}

TAILORED = {
    "contact": CONTACT,
    "summary": "Database engineer focused on PostgreSQL and SQL Server reliability.",
    "experience": [
        {
            "title": "Database Administrator",
            "company": "Acme Health",
            "duration": "2019 - Present",
            "achievements": ["Tuned SQL Server queries, cutting report runtimes by 40%"],
        }
    ],
    "skills": ["PostgreSQL", "SQL Server", "PowerShell"],
    "keywords": ["PostgreSQL", "High Availability"],
    "improvements": ["Led with PostgreSQL experience"],
    "appliedMicroEdits": ["Reworded summary"],
    "atsScore": 88,
    "coverageReport": {
        "matchedKeywords": ["PostgreSQL", "SQL Server"],
        "missingKeywords": ["Kubernetes"],
        "truthfulnessLevel": {"PostgreSQL": "hands-on", "Kubernetes": "omitted"},
    },
}


def fake_llm(*responses) -> FakeListChatModel:
    """Chat model that replies with the given payloads in order."""
    return FakeListChatModel(responses=[r if isinstance(r, str) else json.dumps(r) for r in responses])


class BrokenChatModel(SimpleChatModel):
    """Chat model whose every call fails."""

    def _call(self, messages, stop=None, run_manager=None, **kwargs):
        raise RuntimeError("model unavailable")

    @property
    def _llm_type(self) -> str:
        return "broken"


@pytest.fixture(autouse=True)
def _reset_caches():
    limiter.enabled = False
    clear_insights_cache()
    yield
    clear_insights_cache()


@pytest.fixture
def memory_storage():
    return MemStorage()


@pytest.fixture
def database_storage():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    init_db(engine)
    yield DatabaseStorage(sessionmaker(autocommit=False, autoflush=False, bind=engine))
    engine.dispose()


@pytest.fixture(params=["memory", "database"])
def storage(request):
    """Every storage test runs against both backends."""
    return request.getfixturevalue(f"{request.param}_storage")


@pytest.fixture
def api(memory_storage):
    """Test client over a fresh in-memory store; ``api.llm`` sets the model replies."""
    app.dependency_overrides[get_storage] = lambda: memory_storage
    client = TestClient(app)
    client.storage = memory_storage

    def use_llm(*responses):
        model = fake_llm(*responses)
        app.dependency_overrides[get_llm] = lambda: model

    client.llm = use_llm
    yield client
    app.dependency_overrides.clear()


def register(client: TestClient, username: str = "alice", password: str = "correct horse") -> dict:
    response = client.post("/api/auth/register", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()
