# passguard/app/services/mailer.py
import logging
import smtplib
from email.message import EmailMessage

from starlette.concurrency import run_in_threadpool

from passguard.app.core.config import Settings
from passguard.app.core.errors import MailDeliveryError

logger = logging.getLogger(__name__)

VERIFY_HTML = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h1 style="color: #6366f1;">PassGuard</h1>
  <h2>{heading}</h2>
  <p>Hi <strong>{name}</strong>,</p>
  <p>{lead}</p>
  <h1 style="letter-spacing: 8px;">{code}</h1>
  <p>This code will expire in <strong>{minutes} minutes</strong>.</p>
  <p style="color: #6b7280;">If you didn't create an account, please ignore this email.</p>
</div>
"""


class Mailer:
    """Sends verification codes over SMTP with STARTTLS."""

    def __init__(self, settings: Settings):
        self.host = settings.SMTP_HOST
        self.port = settings.SMTP_PORT
        self.timeout = settings.SMTP_TIMEOUT_SECONDS
        self.username = settings.EMAIL
        self.password = settings.EMAIL_PASS
        self.from_name = settings.MAIL_FROM_NAME
        self.ttl_minutes = max(1, settings.OTP_TTL_SECONDS // 60)

    def build_message(self, to: str, name: str, code: str, resend: bool = False) -> EmailMessage:
        if resend:
            subject = "Your New PassGuard Verification Code"
            heading = "New Verification Code"
            lead = "Your new verification code is:"
        else:
            subject = "Verify Your PassGuard Account"
            heading = "Welcome to PassGuard!"
            lead = "Thank you for joining PassGuard! Your verification code is:"

        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = f'"{self.from_name}" <{self.username}>'
        msg["To"] = to
        msg.set_content(
            f"Hi {name},\n\n{lead} {code}\n"
            f"It expires in {self.ttl_minutes} minutes.\n"
        )
        msg.add_alternative(
            VERIFY_HTML.format(
                heading=heading, name=name, lead=lead, code=code, minutes=self.ttl_minutes
            ),
            subtype="html",
        )
        return msg

    def _deliver(self, msg: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            server.ehlo()
            server.starttls()
            server.login(self.username, self.password)
            server.send_message(msg)

    async def send_verification_code(self, to: str, name: str, code: str, resend: bool = False) -> None:
        msg = self.build_message(to, name, code, resend=resend)
        try:
            # smtplib blocks; keep it off the event loop
            await run_in_threadpool(self._deliver, msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.exception("Could not send verification email to %s", to)
            raise MailDeliveryError("Failed to send verification email") from exc
        logger.info("Sent verification email to %s", to)
