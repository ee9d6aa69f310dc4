"""
Preparation Routes (AI generated content, student only)

POST /prep/resume - Resume feedback from pasted text
POST /prep/resume/upload - Resume feedback from a PDF/DOCX/TXT file
GET /prep/resume/formats - Supported resume file formats
POST /prep/mock-test - Generate a multiple-choice mock test
POST /prep/interview - Generate interview questions with ideal answers

Generator calls block on the AI service, so they run in a worker thread.
"""

import asyncio
from fastapi import APIRouter, HTTPException, Depends, UploadFile, File
from typing import List

from app.core.auth import get_current_student, get_generator
from app.core.errors import GenerationFailedError, ResumeFileError, ResumeTooLargeError
from app.services.generation_service import ContentGenerator
from app.utils.file_upload import resume_text, supported_formats
from app.schemas.schemas import (
    Identity, ResumeTextRequest, ResumeFeedback, MockTestRequest, Question,
    InterviewRequest, InterviewQuestion
)

router = APIRouter(prefix="/prep", tags=["Preparation"])


async def _generate(func, *args):
    try:
        return await asyncio.to_thread(func, *args)
    except GenerationFailedError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.post("/resume", response_model=ResumeFeedback)
async def analyze_resume_text(
    request: ResumeTextRequest,
    student: Identity = Depends(get_current_student),
    generator: ContentGenerator = Depends(get_generator)
):
    return await _generate(generator.analyze_resume, request.text)


@router.post("/resume/upload", response_model=ResumeFeedback)
async def analyze_resume_file(
    file: UploadFile = File(..., description="Resume file (PDF, DOCX, or TXT)"),
    student: Identity = Depends(get_current_student),
    generator: ContentGenerator = Depends(get_generator)
):
    """
    Upload a resume and get ATS feedback.

    Supported formats: PDF, DOCX, TXT (max 5MB)
    """
    content = await file.read()
    try:
        text = await asyncio.to_thread(resume_text, file.filename, content)
    except ResumeTooLargeError as e:
        raise HTTPException(status_code=413, detail=str(e))
    except ResumeFileError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return await _generate(generator.analyze_resume, text)


@router.get("/resume/formats")
async def resume_formats():
    return supported_formats()


@router.post("/mock-test", response_model=List[Question])
async def generate_mock_test(
    request: MockTestRequest,
    student: Identity = Depends(get_current_student),
    generator: ContentGenerator = Depends(get_generator)
):
    """Generate a mock test. Record the score afterwards with POST /students/mock-tests."""
    return await _generate(
        generator.generate_mock_test,
        request.topic, request.difficulty, request.num_questions, request.description
    )


@router.post("/interview", response_model=List[InterviewQuestion])
async def generate_interview_questions(
    request: InterviewRequest,
    student: Identity = Depends(get_current_student),
    generator: ContentGenerator = Depends(get_generator)
):
    return await _generate(generator.generate_interview_questions, request.company_name, request.interview_round)
