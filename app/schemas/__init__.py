"""
Schemas module - persisted records and API request/response schemas.

Everything lives in app.schemas.schemas:
- Persisted: Database, UserRecord, Drive, Roadmap, MockTestResult
- Requests: SignUpRequest, DriveCreate, MockTestRequest, ...
- Generation: ResumeFeedback, Question, InterviewQuestion
"""
