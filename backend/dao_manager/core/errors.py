"""Error Hierarchy — typed, categorized exceptions for all DAO Manager failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Not-found errors (404) are fatal to the calling operation, never retried here
    - Progress clamping is normalization, not an error: no exception exists for it
    - to_response() produces the REST envelope

Design Decisions:
    - Single hierarchy with DaoManagerError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    dao_id: str | None = None
    task_id: int | None = None
    member_id: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class DaoManagerError(Exception):
    """Base exception for all DAO Manager errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "dao_id": self.context.dao_id,
                    "task_id": self.context.task_id,
                    "member_id": self.context.member_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ResourceNotFoundError(DaoManagerError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class DaoNotFoundError(ResourceNotFoundError):
    """No dossier with this identifier in the store."""
    def __init__(self, dao_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.dao_id = dao_id
        super().__init__("DAO", dao_id, ctx)
        self.code = "DAO_NOT_FOUND"


class TaskNotFoundError(ResourceNotFoundError):
    """Task identifier absent from the dossier's task list."""
    def __init__(self, dao_id: str, task_id: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.dao_id = dao_id
        ctx.task_id = task_id
        super().__init__("Task", str(task_id), ctx)
        self.code = "TASK_NOT_FOUND"


class TeamMemberNotFoundError(ResourceNotFoundError):
    """Team member identifier absent from the dossier's team."""
    def __init__(self, dao_id: str, member_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.dao_id = dao_id
        ctx.member_id = member_id
        super().__init__("Team member", member_id, ctx)
        self.code = "TEAM_MEMBER_NOT_FOUND"


class InvalidTaskListError(DaoManagerError):
    """Replacement task list does not carry exactly the dossier's template task ids."""
    def __init__(self, dao_id: str, missing: list[int], unexpected: list[int]):
        super().__init__(
            f"Task list must keep the template ids (missing: {missing}, unexpected: {unexpected})",
            "INVALID_TASK_LIST", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ErrorContext(dao_id=dao_id), 400,
        )
        self.missing = missing
        self.unexpected = unexpected


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(DaoManagerError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
