"""Failures raised by the account and news services.

Every error here is recovered at the request boundary and rendered as a
user-facing message; nothing is retried automatically.
"""


class NewsAppError(Exception):
    """Base class for application level failures."""

    message = 'Something went wrong.'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        self.message = message or self.message


class RegistrationClosed(NewsAppError):
    message = 'Registration is currently disabled as an administrator already exists.'


class ValidationFailed(NewsAppError):
    """Input rejected by the account store; ``messages`` lists every reason."""

    message = 'The submitted data is not valid.'

    def __init__(self, messages):
        if isinstance(messages, str):
            messages = [messages]
        self.messages = list(messages)
        super().__init__('; '.join(self.messages) or None)


class InvalidCredentials(NewsAppError):
    # Same text for unknown identifiers and wrong passwords.
    message = 'Invalid login attempt.'


class RoleAlreadyExists(NewsAppError):
    def __init__(self, name):
        super().__init__(f"Role name '{name}' is already taken.")
        self.name = name


class StoreUnavailable(NewsAppError):
    message = 'The service is temporarily unavailable. Please try again later.'
