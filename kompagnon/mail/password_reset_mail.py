"""
Password reset email.
"""

from html import escape
from typing import Any, Awaitable, Callable, Mapping

from kompagnon.database.config.config import settings
from kompagnon.mail.send_mail_service import send_mail_async

RESET_PATH = "authentication/reset-password?token="
MAIL_SUBJECT = "Réinitialiser votre mot de passe Kompagnon"


def get_password_reset_url(token: str) -> str:
    return f"{settings.BASE_URL}{RESET_PATH}{token}"


def create_password_reset_mail_body(firstname: str, lastname: str, reset_link: str, expires_minutes: int) -> str:
    """Render the HTML body of the password reset email."""
    link = escape(reset_link, quote=True)
    return f"""
        <h2>Bonjour {escape(firstname)} {escape(lastname)},</h2>
        <p>Une demande de réinitialisation de mot de passe a été faite pour votre compte Kompagnon.</p>
        <a href="{link}" style="background-color: #007bff; color: white; padding: 10px 20px; text-decoration: none; border-radius: 5px;">Choisir un nouveau mot de passe</a>
        <p>Si le bouton ne fonctionne pas, copiez ce lien dans votre navigateur :</p>
        <p>{link}</p>
        <p>Ce lien expire dans {expires_minutes} minutes. Si vous n'êtes pas à l'origine de cette demande, ignorez cet email.</p>
    """


async def send_password_reset_mail(
    firstname: str,
    lastname: str,
    email: str,
    token: str,
    send_mail: Callable[[Mapping[str, Any]], Awaitable[dict]] = send_mail_async,
) -> dict:
    """Send the password reset link for `token` to `email`."""
    body = create_password_reset_mail_body(
        firstname, lastname, get_password_reset_url(token), settings.PASSWORD_RESET_TOKEN_EXPIRE_MINUTES
    )
    return await send_mail({"to": email, "subject": MAIL_SUBJECT, "html": body})
