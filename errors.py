"""Domain errors raised by the services.

Every error carries ``errors``, a mapping of field name to a human readable
message, which is what the API returns as the response body.
"""


class DevConnectorError(Exception):
    status_code = 400
    field = "error"
    default_message = "Request could not be completed"

    def __init__(self, message: str | None = None, *, field: str | None = None, errors: dict[str, str] | None = None):
        if errors is None:
            errors = {field or self.field: message or self.default_message}
        self.errors = dict(errors)
        super().__init__("; ".join(f"{key}: {value}" for key, value in self.errors.items()))


class ValidationError(DevConnectorError):
    field = "validation"
    default_message = "Invalid input"

    def __init__(self, errors: dict[str, str]):
        super().__init__(errors=errors)


class NotFoundError(DevConnectorError):
    status_code = 404
    field = "notfound"
    default_message = "Resource not found"


class ProfileNotFoundError(NotFoundError):
    field = "noprofile"
    default_message = "There is no profile for this user"


class NotAuthorizedError(DevConnectorError):
    status_code = 401
    field = "notauthorized"
    default_message = "User not authorized"


class DuplicateHandleError(DevConnectorError):
    field = "handle"
    default_message = "That handle already exists"


class AlreadyLikedError(DevConnectorError):
    field = "alreadyliked"
    default_message = "User already liked this post"


class NotLikedError(DevConnectorError):
    field = "notliked"
    default_message = "You have not yet liked this post"


class ConcurrentUpdateError(DevConnectorError):
    status_code = 409
    field = "conflict"
    default_message = "The document was modified by another request, try again"


class PersistenceError(DevConnectorError):
    status_code = 500
    field = "persistence"
    default_message = "Storage operation failed"


class PartialDeleteError(PersistenceError):
    """A multi-step delete stopped after some steps had already been applied."""

    def __init__(self, failed_step: str, completed_steps: list[str]):
        self.failed_step = failed_step
        self.completed_steps = list(completed_steps)
        done = ", ".join(self.completed_steps) or "nothing"
        super().__init__(
            f"Deleted {done} but could not delete {failed_step}",
            field=failed_step,
        )
