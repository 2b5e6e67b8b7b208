"""Email delivery for activation links.

SendGrid is used when SENDGRID_API_KEY is set; otherwise plain SMTP with the
SMTP_* credentials. With neither configured the service stays disabled and
every send returns False.
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail
from starlette.concurrency import run_in_threadpool

from onboarding_api.core.config import Settings, settings

logger = logging.getLogger(__name__)


class EmailService:
    """Email service for sending onboarding notifications."""

    def __init__(self, cfg: Settings = settings):
        self.cfg = cfg
        self.from_email = cfg.EMAIL_FROM_ADDRESS or cfg.SMTP_USER or "noreply@globalcallpartners.com"
        self.from_name = cfg.EMAIL_FROM_NAME

        if cfg.SENDGRID_API_KEY:
            self.transport = "sendgrid"
            self.client = SendGridAPIClient(cfg.SENDGRID_API_KEY)
        elif cfg.SMTP_HOST and cfg.SMTP_USER and cfg.SMTP_PASS:
            self.transport = "smtp"
        else:
            self.transport = None

    @property
    def enabled(self) -> bool:
        return self.transport is not None

    async def send_email(
        self,
        to: str,
        subject: str,
        html_body: str,
        plain_body: Optional[str] = None,
    ) -> bool:
        """
        Send an email.

        Args:
            to: Recipient email address
            subject: Email subject
            html_body: HTML body content
            plain_body: Plain text body (optional)

        Returns:
            True if sent successfully, False otherwise
        """
        if not self.enabled:
            logger.warning("Email transport not configured. Would have sent to %s: %s", to, subject)
            return False

        try:
            if self.transport == "sendgrid":
                return await run_in_threadpool(self._send_sendgrid, to, subject, html_body, plain_body)
            return await run_in_threadpool(self._send_smtp, to, subject, html_body, plain_body)
        except Exception as e:
            logger.error("Error sending email to %s: %s", to, e)
            return False

    def _send_sendgrid(self, to: str, subject: str, html_body: str, plain_body: Optional[str]) -> bool:
        message = Mail(
            from_email=(self.from_email, self.from_name),
            to_emails=to,
            subject=subject,
            html_content=html_body,
        )
        if plain_body:
            message.plain_text_content = plain_body

        response = self.client.send(message)
        if 200 <= response.status_code < 300:
            logger.info("Email sent to %s via SendGrid: %s", to, subject)
            return True
        logger.error("Failed to send email to %s: %s %s", to, response.status_code, response.body)
        return False

    def _send_smtp(self, to: str, subject: str, html_body: str, plain_body: Optional[str]) -> bool:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f'"{self.from_name}" <{self.from_email}>'
        msg["To"] = to
        if plain_body:
            msg.attach(MIMEText(plain_body, "plain"))
        msg.attach(MIMEText(html_body, "html"))

        port = self.cfg.SMTP_PORT
        timeout = self.cfg.HTTP_TIMEOUT_SECONDS
        # 465 is implicit TLS; everything else upgrades with STARTTLS
        if port == 465:
            with smtplib.SMTP_SSL(self.cfg.SMTP_HOST, port, timeout=timeout) as server:
                server.login(self.cfg.SMTP_USER, self.cfg.SMTP_PASS)
                server.send_message(msg)
        else:
            with smtplib.SMTP(self.cfg.SMTP_HOST, port, timeout=timeout) as server:
                server.starttls()
                server.login(self.cfg.SMTP_USER, self.cfg.SMTP_PASS)
                server.send_message(msg)

        logger.info("Email sent to %s via SMTP: %s", to, subject)
        return True

    async def send_activation_email(
        self,
        owner_email: str,
        owner_name: str,
        business_name: str,
        activation_link: str,
    ) -> bool:
        """Send the WhatsApp activation link to the business owner."""
        subject = f"Activate WhatsApp for {business_name}"

        html_body = f"""
        <html>
            <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
                <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
                    <h2 style="color: #25D366;">Hi {owner_name}, your registration is in!</h2>

                    <p>We received the details for <strong>{business_name}</strong>.
                    The last step is connecting your WhatsApp Business Account.</p>

                    <p>
                        <a href="{activation_link}"
                           style="display: inline-block; padding: 12px 24px; background-color: #25D366;
                                  color: white; text-decoration: none; border-radius: 5px; margin: 20px 0;">
                            Connect WhatsApp
                        </a>
                    </p>

                    <p>If the button does not work, copy this link into your browser:<br>
                    <a href="{activation_link}">{activation_link}</a></p>

                    <p style="color: #666; font-size: 14px; margin-top: 40px;">
                        Best regards,<br>
                        The {self.from_name} Team
                    </p>
                </div>
            </body>
        </html>
        """

        plain_body = f"""
        Hi {owner_name}, your registration is in!

        We received the details for {business_name}.
        The last step is connecting your WhatsApp Business Account:

        {activation_link}

        Best regards,
        The {self.from_name} Team
        """

        return await self.send_email(owner_email, subject, html_body, plain_body)


# Global email service instance
email_service = EmailService()
