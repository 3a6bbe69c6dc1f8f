class RecruitAIError(Exception):
    """Base class for caller-visible domain errors."""


class AttemptNotFoundError(RecruitAIError, LookupError):
    def __init__(self, attempt_id: str):
        super().__init__(f"Attempt not found: {attempt_id}")
        self.attempt_id = attempt_id


class DuplicateSubmissionError(RecruitAIError):
    """Raised for a second submit of a mock-test attempt or mock interview."""

    def __init__(self, record_id: str):
        super().__init__(f"Already submitted: {record_id}")
        self.record_id = record_id


class SessionNotFoundError(RecruitAIError, LookupError):
    def __init__(self, session_id: str):
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


class InterviewNotFoundError(RecruitAIError, LookupError):
    def __init__(self, interview_id: str):
        super().__init__(f"Interview not found: {interview_id}")
        self.interview_id = interview_id
