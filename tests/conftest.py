"""
Shared fixtures.

Every test runs with the LLM offline unless it installs a fake runner via
`fake_llm`, so no test ever reaches the network.
"""
import pytest

from app.core import rate_limit
from app.llm.provider import LLMNotConfiguredError
from app.llm.runner import extract_json
from app.services import ai_service


class FakeRunner:
    """Stands in for LLMRunner: canned responses per feature."""

    def __init__(self, responses=None, error=None, available=True):
        self.responses = responses or {}
        self.error = error
        self.available = available
        self.calls = []

    def generate(self, prompt, feature, **kwargs):
        self.calls.append((feature, prompt))
        if not self.available:
            raise LLMNotConfiguredError("AI not configured")
        if self.error is not None:
            raise self.error
        return self.responses[feature]

    def generate_json(self, prompt, feature, **kwargs):
        return extract_json(self.generate(prompt, feature, **kwargs))


@pytest.fixture(autouse=True)
def offline_llm(monkeypatch):
    """Default: no LLM configured."""
    runner = FakeRunner(available=False)
    monkeypatch.setattr(ai_service, "get_llm_runner", lambda: runner)
    return runner


@pytest.fixture
def fake_llm(monkeypatch):
    """Install a FakeRunner with the given responses/error and return it."""
    def _install(responses=None, error=None):
        runner = FakeRunner(responses=responses, error=error)
        monkeypatch.setattr(ai_service, "get_llm_runner", lambda: runner)
        return runner
    return _install


@pytest.fixture(autouse=True)
def reset_rate_limit():
    rate_limit.rate_limit_store.clear()
    yield
    rate_limit.rate_limit_store.clear()


FILLER = " ".join(["delivered scalable backend services for global customers"] * 40)


@pytest.fixture
def complete_resume():
    """Between 200 and 1000 words, every section, email and phone."""
    return "\n".join([
        "Jane Doe",
        "jane.doe@example.com | (555) 123-4567",
        "Summary",
        "Backend engineer focused on reliable systems.",
        "Experience",
        "Senior Engineer at Acme Corp 2019 - Present",
        FILLER,
        "Education",
        "BSc Computer Science, State University",
        "Skills",
        "Python, Kubernetes, PostgreSQL",
        "Projects",
        "Open source task queue",
    ])


@pytest.fixture
def marker_free_text():
    """250 words with no email, phone or section markers."""
    return " ".join(["lorem ipsum dolor sit amet"] * 50)


@pytest.fixture
def job_description():
    return "Seeking Python engineer with Kubernetes, Terraform experience."
