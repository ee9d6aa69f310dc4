"""
Generation Service - prompts and result validation for the four
AI features:

1. Resume feedback (ATS score + strengths/weaknesses/suggestions)
2. Mock tests (multiple-choice questions)
3. Career roadmaps (4-6 steps with resources)
4. Interview questions (question + ideal answer)

AI OUTPUT -> VALIDATED -> RETURNED (and persisted by the caller)
Malformed items are dropped where a partial result is still useful.
If nothing usable remains, GenerationFailedError is raised with a
feature-specific hint for the user.
"""

import logging
import math
from typing import Any, List, Optional

from app.core.errors import GenerationFailedError
from app.services.ai_client import ContentGeneratorClient, get_generator_client
from app.schemas.schemas import (
    InterviewQuestion, Question, Resource, ResumeFeedback, Roadmap, RoadmapStep
)

logger = logging.getLogger(__name__)


# ============================================================
# JSON VALIDATION HELPERS
# ============================================================

def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(s).strip() for s in value if s is not None and str(s).strip()]


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def validate_resume_feedback(data: Any) -> ResumeFeedback:
    """
    Validate resume feedback. Score is clamped into 0..100.
    A missing score or strengths list means the reply is unusable.
    """
    if not isinstance(data, dict):
        raise ValueError("resume feedback must be an object")
    score = data.get("ats_score", data.get("atsScore"))
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise ValueError("ats_score must be a number")
    if not math.isfinite(score):
        raise ValueError("ats_score must be finite")
    if not isinstance(data.get("strengths"), list):
        raise ValueError("strengths must be a list")

    return ResumeFeedback(
        ats_score=max(0, min(100, round(score))),
        strengths=_string_list(data.get("strengths")),
        weaknesses=_string_list(data.get("weaknesses")),
        suggestions=_string_list(data.get("suggestions"))
    )


def validate_questions(data: Any) -> List[Question]:
    """
    Keep questions with exactly 4 options whose correct answer is one of them.
    """
    items = data.get("questions") if isinstance(data, dict) else None
    if not isinstance(items, list):
        raise ValueError("questions must be a list")

    questions = []
    for item in items:
        if not isinstance(item, dict):
            continue
        text = _text(item.get("question_text", item.get("questionText")))
        options = _string_list(item.get("options"))
        answer = _text(item.get("correct_answer", item.get("correctAnswer")))
        if not text or len(options) != 4 or answer not in options:
            continue
        questions.append(Question(
            question_text=text,
            options=options,
            correct_answer=answer,
            explanation=_text(item.get("explanation"))
        ))

    if not questions:
        raise ValueError("no valid questions")
    return questions


def validate_roadmap(data: Any, role: str) -> Roadmap:
    """
    Validate a roadmap. The role is forced to the requested one and every
    step starts out not completed.
    """
    if not isinstance(data, dict) or not isinstance(data.get("steps"), list):
        raise ValueError("roadmap must have a steps list")

    steps = []
    for step in data["steps"]:
        if not isinstance(step, dict):
            continue
        title = _text(step.get("title"))
        if not title:
            continue
        raw_resources = step.get("resources")
        resources = []
        for res in raw_resources if isinstance(raw_resources, list) else []:
            if isinstance(res, dict) and _text(res.get("name")) and _text(res.get("url")):
                resources.append(Resource(name=_text(res["name"]), url=_text(res["url"])))
        steps.append(RoadmapStep(
            title=title,
            description=_text(step.get("description")),
            resources=resources,
            completed=False
        ))

    if not steps:
        raise ValueError("roadmap has no usable steps")
    return Roadmap(role=role, steps=steps)


def validate_interview_questions(data: Any) -> List[InterviewQuestion]:
    items = data.get("questions") if isinstance(data, dict) else None
    if not isinstance(items, list):
        raise ValueError("questions must be a list")

    questions = [
        InterviewQuestion(question=_text(item.get("question")), answer=_text(item.get("answer")))
        for item in items
        if isinstance(item, dict) and _text(item.get("question")) and _text(item.get("answer"))
    ]
    if not questions:
        raise ValueError("no valid interview questions")
    return questions


# ============================================================
# PROMPTS
# ============================================================

RESUME_PROMPT = """You are an expert tech recruiter and career coach. Be critical but constructive.
Evaluate the resume for clarity, impact, and keyword optimization for an Applicant Tracking System (ATS).
Return ONLY valid JSON:
{
  "ats_score": integer 0-100,
  "strengths": ["3-4 key strengths"],
  "weaknesses": ["3-4 key weaknesses"],
  "suggestions": ["3-4 actionable suggestions"]
}"""

MOCK_TEST_PROMPT = """You create multiple-choice mock tests for college students preparing for placements.
Return ONLY valid JSON:
{
  "questions": [
    {"question_text": "string", "options": ["4 strings"], "correct_answer": "one of the options, verbatim", "explanation": "why it is right"}
  ]
}"""

ROADMAP_PROMPT = """You are an expert career coach for college students.
Return ONLY valid JSON:
{
  "role": "the requested role, verbatim",
  "steps": [
    {"title": "concise actionable title", "description": "what to learn or accomplish", "resources": [{"name": "string", "url": "full URL"}]}
  ]
}
Use 4 to 6 steps, each with 2-3 real, high-quality online resources."""

INTERVIEW_PROMPT = """You are a senior hiring manager.
Return ONLY valid JSON:
{
  "questions": [{"question": "string", "answer": "detailed ideal answer"}]
}
Give 5 to 7 questions. Each answer should show how to structure the response and what a strong candidate says."""


# ============================================================
# CONTENT GENERATOR
# ============================================================

class ContentGenerator:
    """
    Structured request in, validated structured data out.
    Every failure surfaces as GenerationFailedError.
    """

    def __init__(self, client: Optional[ContentGeneratorClient] = None):
        self.client = client or get_generator_client()

    def _generate(self, system_prompt: str, user_content: str, temperature: float, hint: str,
                  max_tokens: int = 2000) -> Any:
        try:
            return self.client.generate_json(system_prompt, user_content, max_tokens=max_tokens,
                                             temperature=temperature)
        except GenerationFailedError as e:
            raise GenerationFailedError(f"{hint} ({e})") from e

    def analyze_resume(self, resume_text: str) -> ResumeFeedback:
        hint = "Failed to get feedback from AI. Please check the resume content or file type and try again."
        data = self._generate(RESUME_PROMPT, f"Resume Text:\n---\n{resume_text}\n---", 0.5, hint)
        try:
            return validate_resume_feedback(data)
        except ValueError as e:
            logger.warning("Invalid resume feedback: %s", e)
            raise GenerationFailedError(hint) from e

    def generate_mock_test(self, topic: str, difficulty: str, num_questions: int,
                           description: str = "") -> List[Question]:
        hint = ("Failed to generate the mock test. The topic might be too specific or there was "
                "an issue with the AI service. Please try again.")
        request = (
            f"Topic: {topic}\n"
            f"Difficulty: {difficulty}\n"
            f"Number of Questions: {num_questions}\n"
        )
        if description:
            request += f"Test Description: {description}\n"
        request += f"Generate exactly {num_questions} questions, each with exactly 4 options."

        data = self._generate(MOCK_TEST_PROMPT, request, 0.7, hint, max_tokens=4000)
        try:
            return validate_questions(data)[:num_questions]
        except ValueError as e:
            logger.warning("Invalid mock test for %s: %s", topic, e)
            raise GenerationFailedError(hint) from e

    def generate_roadmap(self, role: str) -> Roadmap:
        hint = (f'Failed to generate a roadmap for "{role}". The AI service may be temporarily '
                "unavailable or the role might be too niche. Please try again.")
        request = f'Generate a step-by-step roadmap for a student preparing for a "{role}" role in the tech industry.'
        data = self._generate(ROADMAP_PROMPT, request, 0.6, hint)
        try:
            return validate_roadmap(data, role)
        except ValueError as e:
            logger.warning("Invalid roadmap for %s: %s", role, e)
            raise GenerationFailedError(hint) from e

    def generate_interview_questions(self, company_name: str, interview_round: str) -> List[InterviewQuestion]:
        hint = (f"Failed to generate interview questions for {company_name}. "
                "The AI service may be temporarily unavailable. Please try again.")
        request = (
            f"You work at {company_name}. Generate realistic interview questions for a college "
            f'student applying for a tech role during the "{interview_round}" round.'
        )
        data = self._generate(INTERVIEW_PROMPT, request, 0.7, hint)
        try:
            return validate_interview_questions(data)
        except ValueError as e:
            logger.warning("Invalid interview questions for %s: %s", company_name, e)
            raise GenerationFailedError(hint) from e
