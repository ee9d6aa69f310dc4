import threading

import pytest
from fastapi.testclient import TestClient

from app.core import auth as deps
from app.core.errors import GenerationFailedError
from app.db.sql import SqlKeyValueStore
from app.main import app
from app.services.generation_service import (
    ContentGenerator, INTERVIEW_PROMPT, MOCK_TEST_PROMPT, RESUME_PROMPT, ROADMAP_PROMPT
)
from app.services.persistence_service import PersistenceStore
from app.services.session_service import SessionAuthenticator


SAMPLE_ROADMAP = {
    "role": "whatever the model says",
    "steps": [
        {
            "title": "Learn Python",
            "description": "Syntax, data structures, OOP.",
            "resources": [
                {"name": "Python Docs", "url": "https://docs.python.org/3/tutorial/"},
                {"name": "no url"},
            ],
        },
        {
            "title": "Data Structures",
            "description": "Arrays, trees, graphs.",
            "resources": [{"name": "CLRS", "url": "https://mitpress.mit.edu/clrs"}],
        },
    ],
}

SAMPLE_QUESTIONS = {
    "questions": [
        {
            "question_text": "What is 2 + 2?",
            "options": ["3", "4", "5", "6"],
            "correct_answer": "4",
            "explanation": "Basic arithmetic.",
        },
        {
            "question_text": "Only three options",
            "options": ["a", "b", "c"],
            "correct_answer": "a",
            "explanation": "",
        },
        {
            "question_text": "Answer not among options",
            "options": ["a", "b", "c", "d"],
            "correct_answer": "e",
            "explanation": "",
        },
    ]
}

SAMPLE_FEEDBACK = {
    "ats_score": 72,
    "strengths": ["Clear layout", "Quantified impact"],
    "weaknesses": ["No summary"],
    "suggestions": ["Add keywords"],
}

SAMPLE_INTERVIEW = {
    "questions": [
        {"question": "Tell me about yourself.", "answer": "Keep it short and relevant."},
        {"question": "Why us?", "answer": "Tie your goals to the company mission."},
    ]
}


class FakeGeneratorClient:
    """Stands in for ContentGeneratorClient; answers by system prompt."""

    def __init__(self):
        self.calls = []
        self.threads = []
        self.fail = False
        self.responses = {
            RESUME_PROMPT: SAMPLE_FEEDBACK,
            MOCK_TEST_PROMPT: SAMPLE_QUESTIONS,
            ROADMAP_PROMPT: SAMPLE_ROADMAP,
            INTERVIEW_PROMPT: SAMPLE_INTERVIEW,
        }

    def generate_json(self, system_prompt, user_content, max_tokens=2000, temperature=0.5):
        self.calls.append((system_prompt, user_content))
        self.threads.append(threading.get_ident())
        if self.fail:
            raise GenerationFailedError("AI service error: boom")
        return self.responses[system_prompt]


@pytest.fixture
def kv(tmp_path):
    return SqlKeyValueStore(f"sqlite:///{tmp_path / 'test.db'}")


@pytest.fixture
def store(kv):
    return PersistenceStore(kv, logo_url_template="https://logo.clearbit.com/{domain}.com")


@pytest.fixture
def authenticator(store, kv):
    return SessionAuthenticator(store, kv, admin_email="admin@campus.edu")


@pytest.fixture
def fake_client():
    return FakeGeneratorClient()


@pytest.fixture
def generator(fake_client):
    return ContentGenerator(client=fake_client)


@pytest.fixture
def client(store, authenticator, generator):
    app.dependency_overrides[deps.get_persistence_store] = lambda: store
    app.dependency_overrides[deps.get_session_authenticator] = lambda: authenticator
    app.dependency_overrides[deps.get_generator] = lambda: generator
    yield TestClient(app)
    app.dependency_overrides.clear()
