"""
Pydantic models used for request/response validation and API data contracts.

Each class defines the structure of data expected in API endpoints, ensuring
validation and automatic OpenAPI schema generation. Field names follow the
camelCase JSON used by the front-ends.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserRegistration(BaseModel):
    """
    Represents data required to register a new user.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    firstname: str = Field(..., min_length=1, examples=["John"])
    """First name of the user."""
    lastname: str = Field(..., min_length=1, examples=["Doe"])
    """Last name of the user."""
    email: EmailStr = Field(..., examples=["john.doe@example.net"])
    """Email address, used as login."""
    password: str = Field(..., min_length=1, examples=["Str0ng!Password"])
    """Plaintext password chosen by the user."""
    birthday: str = Field(..., min_length=1, examples=["01/01/2001"])
    """Birthday as entered by the user."""


class UserCredentials(BaseModel):
    """
    Represents login credentials for a user.
    """
    email: EmailStr = Field(..., examples=["john.doe@example.net"])
    """The email address of the user."""
    password: str = Field(..., min_length=1)
    """The plaintext password provided for authentication."""


class AuthenticationData(BaseModel):
    """Identity and token issued after a successful authentication."""
    userId: int
    token: str


class AuthenticationResponse(BaseModel):
    """Envelope returned by the authenticate endpoint."""
    data: AuthenticationData


class ActivationResponse(BaseModel):
    message: str


class AuthenticatedUser(BaseModel):
    """
    The user resolved from a valid token.
    """
    firstName: str
    lastName: str
    userId: int


class PasswordResetRequest(BaseModel):
    """
    Represents a request for a password reset link.
    """
    email: EmailStr = Field(..., examples=["john.doe@example.net"])
    """Email address of the account to reset."""


class PasswordReset(BaseModel):
    """
    Represents a new password submitted with an emailed reset token.
    """
    token: str = Field(..., min_length=1)
    """Reset token from the emailed link."""
    newPassword: str = Field(..., min_length=1, examples=["N3w!Password"])
    """Plaintext password replacing the current one."""


class MessageResponse(BaseModel):
    message: str
