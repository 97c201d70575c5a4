"""Exceptions raised by FitCoach services and stores."""


class FitCoachError(Exception):
    """Base class for errors the UI reports to the user."""


class AuthError(FitCoachError):
    message = "Authentication failed"

    def __init__(self, message: str = ""):
        super().__init__(message or self.message)


class InvalidCredentialsError(AuthError):
    message = "Invalid email or password"


class EmailAlreadyInUseError(AuthError):
    message = "An account with this email already exists"


class WeakPasswordError(AuthError):
    message = "Password is too weak"


class InvalidEmailError(AuthError):
    message = "Invalid email address"


class PasswordMismatchError(AuthError):
    message = "Passwords do not match"


class NotAuthenticatedError(FitCoachError):
    def __init__(self, action: str = "this action"):
        super().__init__(f"You must be signed in to perform {action}")
        self.action = action


class ProfileIncompleteError(FitCoachError):
    def __init__(self, missing: list[str]):
        super().__init__(
            "Complete your profile to unlock personalized plans "
            f"(missing: {', '.join(missing)})"
        )
        self.missing = missing


class StorageError(FitCoachError):
    def __init__(self, key: str, reason: str):
        super().__init__(f"storage error for '{key}': {reason}")
        self.key = key
        self.reason = reason
