import pytest

from app.core.errors import GenerationFailedError
from app.services.ai_client import ContentGeneratorClient
from app.services.generation_service import (
    MOCK_TEST_PROMPT, RESUME_PROMPT, ROADMAP_PROMPT, validate_interview_questions, validate_questions,
    validate_resume_feedback, validate_roadmap
)


# ============================================================
# JSON EXTRACTION
# ============================================================

def test_extract_json_strips_markdown_fences():
    text = '```json\n{"a": 1}\n```'
    assert ContentGeneratorClient._extract_json(text) == {"a": 1}


def test_extract_json_plain():
    assert ContentGeneratorClient._extract_json('  {"questions": []} ') == {"questions": []}


# ============================================================
# VALIDATORS
# ============================================================

def test_resume_feedback_clamps_score_and_accepts_camel_case():
    feedback = validate_resume_feedback({
        "atsScore": 140.4, "strengths": ["Good", " ", None], "weaknesses": "not a list"
    })
    assert feedback.ats_score == 100
    assert feedback.strengths == ["Good"]
    assert feedback.weaknesses == []
    assert feedback.suggestions == []


@pytest.mark.parametrize("data", [
    {"strengths": []},
    {"ats_score": "high", "strengths": []},
    {"ats_score": 50},
    ["not", "an", "object"],
])
def test_resume_feedback_rejects_unusable(data):
    with pytest.raises(ValueError):
        validate_resume_feedback(data)


def test_questions_drop_malformed_entries():
    questions = validate_questions({
        "questions": [
            {"questionText": "Q1", "options": ["a", "b", "c", "d"], "correctAnswer": "b"},
            {"question_text": "Q2", "options": ["a", "b"], "correct_answer": "a"},
            "garbage",
        ]
    })
    assert len(questions) == 1
    assert questions[0].question_text == "Q1"
    assert questions[0].correct_answer == "b"
    assert questions[0].explanation == ""


def test_questions_all_invalid_raise():
    with pytest.raises(ValueError):
        validate_questions({"questions": [{"question_text": "Q", "options": [], "correct_answer": ""}]})


def test_roadmap_forces_role_and_resets_completion():
    roadmap = validate_roadmap({
        "role": "Something Else",
        "steps": [
            {"title": "Step", "description": "Do it", "completed": True,
             "resources": [{"name": "R", "url": "https://r.test"}, {"url": "https://nameless.test"}]},
            {"description": "no title"},
        ]
    }, "Backend Developer")

    assert roadmap.role == "Backend Developer"
    assert len(roadmap.steps) == 1
    assert roadmap.steps[0].completed is False
    assert [r.name for r in roadmap.steps[0].resources] == ["R"]


def test_roadmap_without_steps_raises():
    with pytest.raises(ValueError):
        validate_roadmap({"role": "X", "steps": []}, "X")


def test_interview_questions_filter_blank():
    questions = validate_interview_questions({"questions": [
        {"question": "Q", "answer": "A"},
        {"question": "", "answer": "A"},
    ]})
    assert [q.question for q in questions] == ["Q"]


# ============================================================
# CONTENT GENERATOR
# ============================================================

def test_analyze_resume(generator, fake_client):
    feedback = generator.analyze_resume("Jane Doe, Python developer")
    assert feedback.ats_score == 72
    assert "Jane Doe" in fake_client.calls[0][1]


def test_generate_mock_test_keeps_valid_questions(generator, fake_client):
    questions = generator.generate_mock_test("Arithmetic", "Easy", 3, "warm-up")
    assert [q.question_text for q in questions] == ["What is 2 + 2?"]
    request = fake_client.calls[0][1]
    assert "Topic: Arithmetic" in request
    assert "Test Description: warm-up" in request


def test_generate_mock_test_truncates_to_requested_count(generator, fake_client):
    fake_client.responses[MOCK_TEST_PROMPT] = {
        "questions": [
            {"question_text": f"Q{i}", "options": ["a", "b", "c", "d"], "correct_answer": "a"}
            for i in range(6)
        ]
    }
    assert len(generator.generate_mock_test("T", "Hard", 4)) == 4


def test_generate_roadmap(generator):
    roadmap = generator.generate_roadmap("Data Analyst")
    assert roadmap.role == "Data Analyst"
    assert [s.title for s in roadmap.steps] == ["Learn Python", "Data Structures"]
    assert all(not s.completed for s in roadmap.steps)


def test_generate_interview_questions(generator):
    questions = generator.generate_interview_questions("Google", "Technical")
    assert len(questions) == 2


def test_generator_failure_carries_feature_hint(generator, fake_client):
    fake_client.fail = True
    with pytest.raises(GenerationFailedError) as exc:
        generator.generate_roadmap("Quantum Basket Weaver")
    assert "too niche" in str(exc.value)


def test_invalid_shape_becomes_generation_failure(generator, fake_client):
    fake_client.responses[ROADMAP_PROMPT] = {"role": "x"}
    with pytest.raises(GenerationFailedError):
        generator.generate_roadmap("SDE")


@pytest.mark.parametrize("score", [float("inf"), float("-inf"), float("nan")])
def test_resume_feedback_rejects_non_finite_score(score):
    with pytest.raises(ValueError):
        validate_resume_feedback({"ats_score": score, "strengths": []})


def test_roadmap_ignores_non_list_resources():
    roadmap = validate_roadmap({"steps": [
        {"title": "x", "resources": 5},
        {"title": "y", "resources": {"name": "R", "url": "https://r.test"}},
    ]}, "r")
    assert [s.resources for s in roadmap.steps] == [[], []]


def test_infinite_score_becomes_generation_failure(generator, fake_client):
    # json.loads accepts Infinity, so the client can hand this back
    fake_client.responses[RESUME_PROMPT] = {"ats_score": float("inf"), "strengths": ["x"]}
    with pytest.raises(GenerationFailedError):
        generator.analyze_resume("resume")
