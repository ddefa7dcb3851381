from __future__ import annotations

import pytest

from tests.fakes import FakeClient, FakeCompletions


@pytest.fixture
def fake_completions():
    return FakeCompletions(reply="ok")


@pytest.fixture
def groq_backend(fake_completions, monkeypatch):
    from tutorapp.core.tutor_backend_groq import GroqTutorBackend

    monkeypatch.setenv("GROQ_API_KEY", "gsk_test_key_1234567890")
    created = []

    def factory(api_key):
        created.append(api_key)
        return FakeClient(fake_completions)

    backend = GroqTutorBackend(model="llama-3.1-8b-instant", temperature=0.3, client_factory=factory)
    backend.created_keys = created
    return backend


@pytest.fixture(autouse=True)
def _isolate_cwd(tmp_path, monkeypatch):
    # data/ dirs are relative to the cwd
    monkeypatch.chdir(tmp_path)
