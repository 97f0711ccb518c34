"""
Error messages and exception types shared by the identity services and the HTTP layer.
"""

ERRORS = {
    "TOKEN": {
        "REQUIRED": "Token is required",
        "EXPIRED_TOKEN": "Token has expired",
        "INVALID_TOKEN": "Invalid token",
        "INVALID_OR_EXPIRED": "Invalid or expired token",
        "VERIFICATION_FAILED": "Token verification failed",
        "NOT_CONFIGURED": "JWT secret is not configured",
    },
    "AUTHENTICATION": {
        "INVALID_CREDENTIALS": "Invalid credentials",
        "ACCOUNT_LOCKED": "Account is temporarily locked due to too many failed login attempts",
    },
    "USER": {
        "NOT_FOUND_OR_ALREADY_ACTIVE": "User not found or already active",
        "EMAIL_ALREADY_EXISTS": "Email already exists",
        "WEAK_PASSWORD": "Password does not meet security requirements",
        "INVALID_BODY": "Invalid request body",
    },
    "PASSWORD_RESET": {
        "INVALID_TOKEN": "The reset token is invalid or has expired",
    },
    "INTERNAL_SERVER_ERROR": "Internal server error",
}

MESSAGE = {
    "USER_ACTIVATED_SUCCESSFULLY": "User activated successfully",
    "PASSWORD_RESET_REQUESTED": "If an account with this email exists, a password reset link has been sent",
    "PASSWORD_RESET_SUCCESSFULLY": "Password reset successfully. You can now log in with your new password.",
}


class TokenError(Exception):
    """Base class of token decoding failures."""

    def __init__(self, message: str = ERRORS["TOKEN"]["VERIFICATION_FAILED"]):
        super().__init__(message)
        self.message = message


class TokenExpiredError(TokenError):
    def __init__(self):
        super().__init__(ERRORS["TOKEN"]["EXPIRED_TOKEN"])


class InvalidTokenError(TokenError):
    def __init__(self):
        super().__init__(ERRORS["TOKEN"]["INVALID_TOKEN"])


class TokenVerificationError(TokenError):
    pass


class PasswordResetTokenError(TokenError):
    """Reset token of the wrong type, already used, superseded or past its expiry."""

    def __init__(self):
        super().__init__(ERRORS["PASSWORD_RESET"]["INVALID_TOKEN"])


class TokenConfigurationError(RuntimeError):
    """The signing secret is missing."""

    def __init__(self):
        super().__init__(ERRORS["TOKEN"]["NOT_CONFIGURED"])


class EmailAlreadyExistsError(Exception):
    def __init__(self, email: str):
        super().__init__(ERRORS["USER"]["EMAIL_ALREADY_EXISTS"])
        self.email = email


class UserNotFoundError(Exception):
    def __init__(self, user_id: int):
        super().__init__(f"User with ID {user_id} not found")
        self.user_id = user_id


class WeakPasswordError(ValueError):
    """Password rejected by the strength policy; ``details`` lists the failed rules."""

    def __init__(self, details: list[str]):
        super().__init__(ERRORS["USER"]["WEAK_PASSWORD"])
        self.details = details
