"""
Account activation email.
"""

from html import escape
from typing import Any, Awaitable, Callable, Mapping

from kompagnon.database.config.config import settings
from kompagnon.mail.send_mail_service import send_mail_async

ACTIVATE_PATH = "authentication/activate?token="
MAIL_SUBJECT = "Activer votre compte Kompagnon"


def get_activation_url(token: str) -> str:
    return f"{settings.BASE_URL}{ACTIVATE_PATH}{token}"


def create_activation_mail_body(firstname: str, lastname: str, activation_link: str) -> str:
    """Render the HTML body of the activation email."""
    link = escape(activation_link, quote=True)
    return f"""
        <h2>Bienvenue sur Kompagnon, {escape(firstname)} {escape(lastname)} !</h2>
        <p>Merci pour votre inscription. Cliquez sur le lien ci-dessous pour activer votre compte :</p>
        <a href="{link}" style="background-color: #007bff; color: white; padding: 10px 20px; text-decoration: none; border-radius: 5px;">Activer mon compte</a>
        <p>Si le bouton ne fonctionne pas, copiez ce lien dans votre navigateur :</p>
        <p>{link}</p>
        <p>Ce lien expire dans 24 heures.</p>
    """


async def send_activation_mail(
    firstname: str,
    lastname: str,
    email: str,
    token: str,
    send_mail: Callable[[Mapping[str, Any]], Awaitable[dict]] = send_mail_async,
) -> dict:
    """Send the activation link for `token` to `email`."""
    body = create_activation_mail_body(firstname, lastname, get_activation_url(token))
    return await send_mail({"to": email, "subject": MAIL_SUBJECT, "html": body})
