"""
Core error taxonomy
===================

Every failure of a core operation is raised as a CoreError subclass with a
stable machine-readable `code` and the HTTP status the API layer renders.

    CoreError
    ├── ValidationError          malformed or missing input
    ├── PreconditionViolation    an invariant would break
    ├── NotFoundError            referenced user/content/request is absent
    ├── AuthorizationError       caller lacks the required identity or role
    └── ConcurrencyError         entity lock could not be acquired
"""


class CoreError(Exception):
    """Base class for all core operation failures."""

    code = "core_error"
    http_status = 500
    default_message = "Operation failed."

    def __init__(self, message: str = None, **context):
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code}


# =============================================================================
# CATEGORIES
# =============================================================================

class ValidationError(CoreError):
    code = "validation_error"
    http_status = 400
    default_message = "Invalid input."


class PreconditionViolation(CoreError):
    code = "precondition_violation"
    http_status = 409
    default_message = "Operation conflicts with current state."


class NotFoundError(CoreError):
    code = "not_found"
    http_status = 404
    default_message = "Not found."


class AuthorizationError(CoreError):
    code = "authorization_error"
    http_status = 403
    default_message = "You do not have permission to do this."


class ConcurrencyError(CoreError):
    code = "concurrency_error"
    http_status = 503
    default_message = "Resource is busy, try again."


# =============================================================================
# SOCIAL GRAPH
# =============================================================================

class SelfFollow(PreconditionViolation):
    code = "self_follow"
    http_status = 403
    default_message = "You cannot follow yourself."


class AlreadyFollowing(PreconditionViolation):
    code = "already_following"
    default_message = "You are already following this user."


class NotFollowing(PreconditionViolation):
    code = "not_following"
    default_message = "You cannot unfollow a user you have never followed."


class AlreadyPresent(PreconditionViolation):
    code = "interest_already_present"
    default_message = "You have already added this interest."


class NotPresent(PreconditionViolation):
    code = "interest_not_present"
    default_message = "You are trying to delete an interest you have not yet added."


# =============================================================================
# CONTENT TRUST LEDGER
# =============================================================================

class NotAFact(AuthorizationError):
    code = "not_a_fact"
    default_message = "You cannot endorse or denounce content that is an opinion."


class NotVerified(AuthorizationError):
    code = "not_verified"
    default_message = "You cannot endorse or denounce content if you are not a VSP."


class AlreadyEndorsed(PreconditionViolation):
    code = "already_endorsed"
    default_message = "You have already endorsed this content."


class NotEndorsed(PreconditionViolation):
    code = "not_endorsed"
    default_message = "You have not yet endorsed this content."


class AlreadyDenounced(PreconditionViolation):
    code = "already_denounced"
    default_message = "You have already denounced this content."


class NotDenounced(PreconditionViolation):
    code = "not_denounced"
    default_message = "You have not yet denounced this content."


# =============================================================================
# TRUST ELEVATION WORKFLOW
# =============================================================================

class AlreadyVerified(PreconditionViolation):
    code = "already_verified"
    default_message = "User is already a VSP."


class RequestAlreadyExists(PreconditionViolation):
    code = "request_already_exists"
    default_message = "User has already submitted a request."


class AlreadyGranted(PreconditionViolation):
    code = "already_granted"
    default_message = "Request already granted."


class NotYetGranted(PreconditionViolation):
    code = "not_yet_granted"
    default_message = "Request has not yet been granted."


class RequestNotPending(PreconditionViolation):
    code = "request_not_pending"
    default_message = "Request was revoked; a new request must be submitted."


class NotAuthorized(AuthorizationError):
    code = "not_authorized"
    default_message = "You do not have permission to do this."


class Unauthenticated(AuthorizationError):
    code = "unauthenticated"
    http_status = 401
    default_message = "You must be logged in to complete this action."


# =============================================================================
# LOOKUPS
# =============================================================================

class UserNotFound(NotFoundError):
    code = "user_not_found"
    default_message = "User does not exist."


class ContentNotFound(NotFoundError):
    code = "content_not_found"
    default_message = "Content does not exist."


class RequestNotFound(NotFoundError):
    code = "request_not_found"
    default_message = "Request not found."


class NoInterests(NotFoundError):
    code = "no_interests"
    default_message = "You do not currently have any interests added."


# =============================================================================
# CONCURRENCY
# =============================================================================

class LockTimeout(ConcurrencyError):
    code = "lock_timeout"
