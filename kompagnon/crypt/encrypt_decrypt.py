import re

import bcrypt

from kompagnon.database.config.config import settings

SPECIAL_CHARACTERS = r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]"


class EncryptionDec:
    """
    Utility class for password hashing and password policy checks.

    Methods
    -------
    hash_password(text: str) -> str
        Hashes a plaintext password using bcrypt with a generated salt.
    check_passwords(plain_text: str, passwd: str) -> bool
        Verifies a plaintext password against a hashed password.
    validate_password_strength(password: str) -> list[str]
        Lists the password rules that are not met (empty when valid).
    is_valid_password(password: str) -> bool
        True when `validate_password_strength` reports nothing.
    """

    def __init__(self, rounds: int | None = None):
        """
        Parameters
        ----------
        rounds : int, optional
            bcrypt cost factor. Defaults to ``settings.PASSWORD_HASH_ROUNDS``.
        """
        self.rounds = rounds or settings.PASSWORD_HASH_ROUNDS

    def hash_password(self, text: str) -> str:
        """
        Hash a plaintext password using bcrypt.

        Parameters
        ----------
        text : str
            The plaintext password.

        Returns
        -------
        str
            The bcrypt-hashed password (UTF-8 decoded).
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(text.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def check_passwords(self, plain_text: str, passwd: str) -> bool:
        """
        Verify if a plaintext password matches a hashed password.

        Returns
        -------
        bool
            True if the password matches, False otherwise (including when
            either value is empty or the hash is malformed).
        """
        if not plain_text or not passwd:
            return False
        try:
            return bcrypt.checkpw(plain_text.encode("utf-8"), passwd.encode("utf-8"))
        except ValueError:
            return False

    def validate_password_strength(self, password: str) -> list[str]:
        """
        Check a password against the security policy.

        Returns
        -------
        list[str]
            One message per failed rule; empty if the password is acceptable.

        Notes
        -----
        - Length between 8 and 128 characters
        - Must contain at least one lowercase letter, one uppercase letter,
          one digit and one special character
        """
        errors = []
        if not password:
            return ["Password is required"]

        if len(password) < 8:
            errors.append("Password must be at least 8 characters long")
        if len(password) > 128:
            errors.append("Password must be less than 128 characters long")
        if not re.search(r"[a-z]", password):
            errors.append("Password must contain at least one lowercase letter")
        if not re.search(r"[A-Z]", password):
            errors.append("Password must contain at least one uppercase letter")
        if not re.search(r"\d", password):
            errors.append("Password must contain at least one number")
        if not re.search(SPECIAL_CHARACTERS, password):
            errors.append("Password must contain at least one special character")

        return errors

    def is_valid_password(self, password: str) -> bool:
        return not self.validate_password_strength(password)
