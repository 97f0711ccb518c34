"""
The `mail` package sends application emails.

Contents
--------
- send_mail_service
    * `send_mail` — SMTP delivery (or disabled-mode echo) of `{to, subject, text|html}`
    * `send_mail_async` — the same on a worker thread
- activation_mail
    * `send_activation_mail` — renders and sends the account activation link
- password_reset_mail
    * `send_password_reset_mail` — renders and sends the password reset link
"""
