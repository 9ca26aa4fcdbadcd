"""Custom exception classes for the Challenge Portal.

This module defines application-specific exceptions following Google Python
Style Guide. Managers raise these; route handlers translate them into HTTP
responses.
"""


class PortalError(Exception):
    """Base exception for all Challenge Portal errors."""

    pass


# --- Not found ---


class NotFoundError(PortalError):
    """Raised when a requested record does not exist."""

    pass


class UserNotFoundError(NotFoundError):
    """Raised when a requested user cannot be found."""

    def __init__(self, identifier: str):
        """Initialize the exception.

        Args:
            identifier: The user_id, phone or email that was looked up.
        """
        self.identifier = identifier
        super().__init__("User not found")


class TeamNotFoundError(NotFoundError):
    """Raised when a requested team cannot be found."""

    def __init__(self, team_id: str):
        self.team_id = team_id
        super().__init__("Team not found")


class InvalidTeamCodeError(NotFoundError):
    """Raised when a team code does not resolve to any team."""

    def __init__(self, team_code: str):
        self.team_code = team_code
        super().__init__("Invalid Team Code")


class PhaseNotFoundError(NotFoundError):
    """Raised when a requested phase cannot be found."""

    def __init__(self, phase_id: str):
        self.phase_id = phase_id
        super().__init__("Phase not found")


class TaskNotFoundError(NotFoundError):
    """Raised when a requested task cannot be found."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__("Task not found")


class SubmissionNotFoundError(NotFoundError):
    """Raised when a requested submission cannot be found."""

    def __init__(self, identifier: str, message: str = "Submission not found"):
        self.identifier = identifier
        super().__init__(message)


# --- Conflicts ---


class ConflictError(PortalError):
    """Raised when a uniqueness rule would be violated."""

    pass


class UserAlreadyExistsError(ConflictError):
    """Raised when the email or phone is already registered."""

    def __init__(self):
        super().__init__("User with this email or phone already exists")


class TeamNameTakenError(ConflictError):
    """Raised when a team name is already registered."""

    def __init__(self, team_name: str):
        self.team_name = team_name
        super().__init__("Team name already taken")


class PhaseNameTakenError(ConflictError):
    """Raised when a phase name is already used."""

    def __init__(self, name: str):
        self.name = name
        super().__init__("Phase name already exists")


# --- Rule violations ---


class ValidationError(PortalError):
    """Raised when data validation fails."""

    pass


class TeamFullError(ValidationError):
    """Raised when a team roster is already at capacity."""

    def __init__(self, max_members: int):
        self.max_members = max_members
        super().__init__(f"Team is full (Max {max_members} members)")


class DeadlinePassedError(ValidationError):
    """Raised when a submission arrives after the task deadline."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__("Deadline has passed")


class InvalidUploadError(ValidationError):
    """Raised when an uploaded file is missing, too large or not a PDF."""

    pass


class MarksOutOfRangeError(ValidationError):
    """Raised when a grade falls outside 0..max_marks of its task."""

    def __init__(self, marks: float, max_marks: int):
        self.marks = marks
        self.max_marks = max_marks
        super().__init__(f"Marks must be between 0 and {max_marks}")


# --- Authorization ---


class PermissionDeniedError(PortalError):
    """Raised when a principal lacks the capability for an action."""

    pass
