import html
import logging
import smtplib
from email.message import EmailMessage
from typing import Optional, Protocol

import resend

from app.configs.app_settings import Settings
from app.models.email_models import EmailSendResult, NotificationEmail

logger = logging.getLogger(__name__)

ACCESS_EMAIL_SUBJECT = "Acesso liberado ✨"


class EmailNotifier(Protocol):
    def send(self, recipient: str, subject: str, text_body: str, html_body: str) -> EmailSendResult: ...


def build_access_email(customer_email: str, product_name: str) -> NotificationEmail:
    """Build the "access granted" email sent after an approved purchase"""

    html_content = f"""
    <p>Seu acesso ao produto <b>{html.escape(product_name)}</b> foi liberado! </p>
    <p>Use este e-mail ({html.escape(customer_email)}) pra entrar na área de membros.</p>
    """

    return NotificationEmail(
        recipient=customer_email,
        subject=ACCESS_EMAIL_SUBJECT,
        text_body=f'Seu acesso ao produto "{product_name}" foi liberado.',
        html_body=html_content,
    )


class ResendEmailNotifier:
    """Send emails via Resend"""

    def __init__(self, api_key: Optional[str], sender: str):
        self.api_key = api_key
        self.sender = sender

    def send(self, recipient: str, subject: str, text_body: str, html_body: str) -> EmailSendResult:
        if not self.api_key:
            return EmailSendResult.failure("RESEND_API_KEY not configured")

        try:
            resend.api_key = self.api_key
            params = {
                "from": self.sender,
                "to": [recipient],
                "subject": subject,
                "text": text_body,
                "html": html_body,
            }

            email = resend.Emails.send(params)
            provider_id = email.get("id") if isinstance(email, dict) else None
            logger.info(f"✅ Email sent to {recipient} via Resend: {provider_id}")
            return EmailSendResult.success(provider_id)

        except Exception as e:
            # Don't raise exception - email failure must not block the webhook
            logger.error(f"❌ Failed to send email to {recipient} via Resend: {str(e)}")
            return EmailSendResult.failure(str(e))


class SmtpEmailNotifier:
    """Send emails through a plain SMTP server (STARTTLS + optional login)"""

    def __init__(
        self,
        host: Optional[str],
        port: int,
        sender: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def _build_message(self, recipient: str, subject: str, text_body: str, html_body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = recipient
        msg.set_content(text_body)
        msg.add_alternative(html_body, subtype="html")
        return msg

    def send(self, recipient: str, subject: str, text_body: str, html_body: str) -> EmailSendResult:
        if not self.host:
            return EmailSendResult.failure("SMTP_HOST not configured")

        msg = self._build_message(recipient, subject, text_body, html_body)

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                if self.username and self.password:
                    server.login(self.username, self.password)
                server.send_message(msg)
            logger.info(f"✅ Email sent to {recipient} via SMTP {self.host}:{self.port}")
            return EmailSendResult.success()

        except Exception as e:
            logger.error(f"❌ Failed to send email to {recipient} via SMTP: {str(e)}")
            return EmailSendResult.failure(str(e))


def create_email_notifier(settings: Settings) -> EmailNotifier:
    """Pick the notifier configured by EMAIL_PROVIDER"""

    if settings.EMAIL_PROVIDER == "smtp":
        return SmtpEmailNotifier(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            sender=settings.EMAIL_FROM,
            username=settings.SMTP_USERNAME,
            password=settings.SMTP_PASSWORD,
            use_tls=settings.SMTP_USE_TLS,
            timeout=settings.SMTP_TIMEOUT,
        )

    return ResendEmailNotifier(settings.RESEND_API_KEY, settings.EMAIL_FROM)
