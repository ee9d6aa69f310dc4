"""
Domain errors raised by the store, session and generation services.

Routes translate these into HTTP responses; services never catch them.
"""

from typing import Optional


class PortalError(Exception):
    """Base class for all portal errors."""


class DuplicateEmailError(PortalError):
    def __init__(self, message: str = "An account with this email already exists."):
        super().__init__(message)


class InvalidCredentialsError(PortalError):
    # One message for unknown email and wrong secret alike
    def __init__(self, message: str = "Invalid credentials. Please check your email and password."):
        super().__init__(message)


class StoreUnavailableError(PortalError):
    """The durable backing store could not be read or written."""


class GenerationFailedError(PortalError):
    """The content generator failed or returned an unusable result."""


class DuplicateRoadmapError(PortalError):
    def __init__(self, role: str):
        self.role = role
        super().__init__(f'A roadmap for "{role}" already exists.')


class RoadmapNotFoundError(PortalError):
    def __init__(self, role: str, step_index: Optional[int] = None):
        self.role = role
        self.step_index = step_index
        if step_index is None:
            super().__init__(f'No roadmap found for "{role}".')
        else:
            super().__init__(f'Roadmap "{role}" has no step {step_index}.')


class ResumeFileError(PortalError):
    """An uploaded resume could not be turned into text."""


class ResumeTooLargeError(ResumeFileError):
    pass
