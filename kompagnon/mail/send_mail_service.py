"""
Outgoing mail over SMTP.

`send_mail` builds the message from a request mapping
(`{"to", "subject"?, "text" | "html"}`) and sends it with `smtplib`
using the `MAIL_*`, `SENDER_EMAIL` and `APP_PASSWORD` settings. When
`MAIL_ENABLED` is false nothing is sent and the prepared mail is echoed back.
"""

import asyncio
import json
import logging
import smtplib
from email.mime.text import MIMEText
from typing import Any, Mapping

from kompagnon.database.config.config import settings

logger = logging.getLogger(__name__)


def send_mail(request: Mapping[str, Any]) -> dict[str, Any]:
    """
    Send an email.

    Parameters
    ----------
    request : mapping
        ``to`` (required), ``subject`` (defaults to "No Subject") and either
        ``html`` or ``text``. ``html`` wins when both are given.

    Returns
    -------
    dict
        ``{"info": ..., "data": <mail options>}``.

    Raises
    ------
    ValueError
        Missing recipient or content.
    smtplib.SMTPException, OSError
        Transport failures, logged then re-raised.
    """
    if not request.get("to"):
        raise ValueError("Recipient email address is required")

    mail_options = {
        "from": settings.SENDER_EMAIL,
        "to": request["to"],
        "subject": request.get("subject") or "No Subject",
    }
    if request.get("html"):
        mail_options["html"] = request["html"]
    elif request.get("text"):
        mail_options["text"] = request["text"]
    else:
        raise ValueError("Email content is required")

    if not settings.MAIL_ENABLED:
        logger.info("Email disabled. Mail not sent. Mail info: %s", json.dumps(mail_options))
        return {"info": "Email sending disabled", "data": mail_options}

    if "html" in mail_options:
        msg = MIMEText(mail_options["html"], "html", "utf-8")
    else:
        msg = MIMEText(mail_options["text"], "plain", "utf-8")
    msg["Subject"] = mail_options["subject"]
    msg["From"] = mail_options["from"]
    msg["To"] = mail_options["to"]

    try:
        with smtplib.SMTP(settings.MAIL_HOST, settings.MAIL_PORT) as server:
            if settings.MAIL_USE_TLS:
                server.starttls()
            if settings.APP_PASSWORD:
                server.login(settings.SENDER_EMAIL, settings.APP_PASSWORD)
            server.sendmail(mail_options["from"], mail_options["to"], msg.as_string())
    except (smtplib.SMTPException, OSError):
        logger.exception("Error sending email to %s", mail_options["to"])
        raise

    logger.info("Email sent to %s", mail_options["to"])
    return {"info": "Email sent", "data": mail_options}


async def send_mail_async(request: Mapping[str, Any]) -> dict[str, Any]:
    """`send_mail` on a worker thread, so the event loop is not blocked by SMTP."""
    return await asyncio.to_thread(send_mail, request)
