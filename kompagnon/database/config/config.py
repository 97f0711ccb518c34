"""
Configuration — Pydantic v2 Settings (env / .env)
=================================================

Purpose
-------
Centralized, strongly-typed application configuration using:
- Pydantic v2 `BaseSettings` for environment-driven values
- `pydantic-settings` v2 for `.env` loading and model config

Load Order & Behavior
---------------------
- Values are read from the environment; if not present, `.env` is used.
- `extra="ignore"`: unknown env vars are ignored (not an error).
- Database credentials are optional so that file-based drivers
  (e.g. `sqlite+aiosqlite`) only need `DB_DATABASE_NAME`.

Usage
-----
from kompagnon.database.config.config import settings

db_host = settings.DB_HOST
token_ttl = settings.ACCESS_TOKEN_EXPIRE_MINUTES

Security
--------
- Never commit secrets or the `.env` file to source control.
- Prefer runtime environment variables in production.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application configuration settings loaded from environment variables
    or a `.env` file. Provides strongly typed access to environment values.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    DB_DRIVER_NAME: str = Field("postgresql+asyncpg", description="SQLAlchemy async driver (e.g., `postgresql+asyncpg`, `sqlite+aiosqlite`).")
    DB_USERNAME: Optional[str] = Field(None, description="Database username credential.")
    DB_PASSWORD: Optional[str] = Field(None, description="Database password credential.")
    DB_HOST: Optional[str] = Field(None, description="Hostname or IP address of the database server.")
    DB_PORT: Optional[int] = Field(None, description="Port of the database server.")
    DB_DATABASE_NAME: str = Field("kompagnon", description="Name of the database (or file path for SQLite).")
    DB_ECHO: bool = Field(False, description="Echo emitted SQL statements to the log.")

    # Tokens
    SECRET_KEY: str = Field("", description="Secret key for signing tokens.")
    ALGORITHM: str = Field("HS256", description="Algorithm used for JWT signing.")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(60, description="Lifetime (in minutes) of authentication tokens.")
    ACTIVATION_TOKEN_EXPIRE_MINUTES: int = Field(24 * 60, description="Lifetime (in minutes) of account activation tokens.")
    PASSWORD_RESET_TOKEN_EXPIRE_MINUTES: int = Field(60, description="Lifetime (in minutes) of password reset tokens.")

    # Passwords
    PASSWORD_HASH_ROUNDS: int = Field(10, description="bcrypt cost factor used when hashing passwords.")

    # Login lockout
    MAX_LOGIN_ATTEMPTS: int = Field(10, description="Failed authentications after which the account is locked.")
    ACCOUNT_LOCK_MINUTES: int = Field(24 * 60, description="Duration (in minutes) of an account lockout.")

    # Front-end / links
    FRONTEND_URL: str = Field("http://localhost:5173", description="Comma separated list of origins allowed by CORS.")
    BASE_URL: str = Field("http://localhost:5173/", description="Base URL used to build links sent by email.")

    # Mail
    MAIL_ENABLED: bool = Field(False, description="Whether outgoing emails are actually sent.")
    MAIL_HOST: str = Field("smtp.gmail.com", description="SMTP server host.")
    MAIL_PORT: int = Field(587, description="SMTP server port.")
    MAIL_USE_TLS: bool = Field(True, description="Upgrade the SMTP connection with STARTTLS.")
    SENDER_EMAIL: str = Field("no-reply@kompagnon.local", description="Address used as sender of application emails.")
    APP_PASSWORD: str = Field("", description="SMTP password for the sender account.")

    # Runtime
    INIT_MODE: str = Field("", description="If `runtime`, database tables are created at application startup.")
    LOG_LEVEL: str = Field("INFO", description="Root log level.")
    LOG_JSON: bool = Field(False, description="Emit logs as JSON lines.")

    @property
    def cors_origins(self) -> list[str]:
        """FRONTEND_URL split into a list of origins."""
        return [origin.strip() for origin in self.FRONTEND_URL.split(",") if origin.strip()]


# Singleton instance of Settings, ready to be imported across the app
settings = Settings()
"""Defines a Settings object that contains the contents of the environment / .env file"""
