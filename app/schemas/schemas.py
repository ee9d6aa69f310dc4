"""
Pydantic Schemas - Persisted records, Request/Response Validation

All schemas in one file for simplicity. The persisted records
(Database, UserRecord, Drive, ...) double as API response bodies.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List, Dict
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    admin = "admin"


# ============================================================
# IDENTITY / AUTH SCHEMAS
# ============================================================

class Identity(BaseModel):
    """Who is signed in. Also the shape of the stored session record."""
    uid: str
    email: str
    role: UserRole

class UserAuth(BaseModel):
    email: str
    password_secret: str
    role: UserRole = UserRole.student

class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

class SignInRequest(BaseModel):
    email: EmailStr
    password: str

class SessionResponse(BaseModel):
    signed_in: bool
    user: Optional[Identity] = None


# ============================================================
# STUDENT SCHEMAS
# ============================================================

def _clean_strings(values: List[str]) -> List[str]:
    return [v.strip() for v in values if v and v.strip()]


class StudentProfile(BaseModel):
    goal_role: str = Field(..., min_length=1)
    goal_companies: List[str] = []
    skills: List[str] = []

    @field_validator("goal_role")
    @classmethod
    def strip_goal_role(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("goal_role must not be blank")
        return v

    @field_validator("goal_companies")
    @classmethod
    def dedupe_companies(cls, v: List[str]) -> List[str]:
        # Set-like: first occurrence wins, order kept
        return list(dict.fromkeys(_clean_strings(v)))

    @field_validator("skills")
    @classmethod
    def clean_skills(cls, v: List[str]) -> List[str]:
        return _clean_strings(v)


# ============================================================
# ROADMAP SCHEMAS
# ============================================================

class Resource(BaseModel):
    name: str
    url: str

class RoadmapStep(BaseModel):
    title: str
    description: str
    resources: List[Resource] = []
    completed: bool = False

class Roadmap(BaseModel):
    role: str
    steps: List[RoadmapStep] = []

class AddRoadmapRequest(BaseModel):
    role: str = Field(..., min_length=1)

    @field_validator("role")
    @classmethod
    def strip_role(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("role must not be blank")
        return v


# ============================================================
# MOCK TEST SCHEMAS
# ============================================================

class MockTestCreate(BaseModel):
    topic: str
    score: int = Field(..., ge=0)
    total_questions: int = Field(..., ge=0)

class MockTestResult(MockTestCreate):
    id: str
    date: str

class MockTestRequest(BaseModel):
    topic: str = Field(..., min_length=1)
    difficulty: str = "Medium"
    num_questions: int = Field(5, ge=1, le=20)
    description: str = ""

class Question(BaseModel):
    question_text: str
    options: List[str]
    correct_answer: str
    explanation: str = ""


# ============================================================
# DRIVE SCHEMAS
# ============================================================

class DriveCreate(BaseModel):
    company_name: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    description: str = ""
    date: str
    apply_url: str = "#"

class Drive(DriveCreate):
    id: str
    logo_url: str


# ============================================================
# PERSISTED DATABASE RECORD
# ============================================================

class UserRecord(BaseModel):
    auth: UserAuth
    profile: Optional[StudentProfile] = None
    roadmaps: List[Roadmap] = []
    mock_tests: List[MockTestResult] = []

class Database(BaseModel):
    users: Dict[str, UserRecord] = {}
    drives: List[Drive] = []


class UserDocumentResponse(BaseModel):
    """A user record without the auth block."""
    uid: str
    email: str
    profile: Optional[StudentProfile] = None
    roadmaps: List[Roadmap] = []
    mock_tests: List[MockTestResult] = []


# ============================================================
# GENERATION SCHEMAS
# ============================================================

class ResumeTextRequest(BaseModel):
    text: str = Field(..., min_length=1)

class ResumeFeedback(BaseModel):
    ats_score: int = Field(..., ge=0, le=100)
    strengths: List[str] = []
    weaknesses: List[str] = []
    suggestions: List[str] = []

class InterviewRequest(BaseModel):
    company_name: str = Field(..., min_length=1)
    interview_round: str = Field(..., min_length=1)

class InterviewQuestion(BaseModel):
    question: str
    answer: str


# ============================================================
# ANALYTICS SCHEMAS
# ============================================================

class StudentDashboardResponse(BaseModel):
    goal_role: Optional[str] = None
    upcoming_drives: int
    roadmap_progress: int
    mock_tests_taken: int
    recent_drives: List[Drive] = []
    recent_mock_tests: List[MockTestResult] = []

class AdminDashboardResponse(BaseModel):
    total_drives: int
    total_students: int


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True
