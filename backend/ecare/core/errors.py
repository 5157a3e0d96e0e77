"""Complaint workflow error taxonomy.

Every error is local and synchronous: it is raised to the immediate caller,
leaves prior state intact and is never retried by the workflow. Routers map
``status_code`` onto the HTTP response.
"""


class ComplaintWorkflowError(ValueError):
    """Base class for guarded-operation failures."""

    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class Forbidden(ComplaintWorkflowError):
    """Role or ownership check failed."""

    status_code = 403


class InvalidTransition(ComplaintWorkflowError):
    """State machine guard rejected the requested transition."""

    status_code = 409


class RemarkLimitReached(ComplaintWorkflowError):
    """The complaint already carries the maximum number of remarks."""

    status_code = 400


class InvalidAssignee(ComplaintWorkflowError):
    """Forward target is not an active technician."""

    status_code = 400


class NotFound(ComplaintWorkflowError):
    """Complaint, remark or account is missing."""

    status_code = 404
