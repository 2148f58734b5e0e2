import logging

import resend

from app.core.config import settings

logger = logging.getLogger(__name__)


class EmailService:
    def __init__(self):
        resend.api_key = settings.RESEND_API_KEY
        self.sender = getattr(settings, "EMAIL_FROM", "Fintar <noreply@example.com>")

    def build_verification_link(self, token: str) -> str:
        return f"{settings.FRONTEND_URL.rstrip('/')}/verify-email?token={token}"

    def send_verification_email(self, to: str, name: str, token: str) -> bool:
        """Send the account verification link. Returns False if delivery failed."""
        link = self.build_verification_link(token)
        hours = settings.EMAIL_VERIFICATION_EXPIRE_HOURS
        subject = "Verify your Fintar account"
        html = f"""
        <div style='font-family: Inter, Arial, sans-serif; line-height:1.6;'>
            <h2>Hi {name},</h2>
            <p>Confirm your email address to finish creating your Fintar account:</p>
            <p><a href='{link}' style='display:inline-block;padding:12px 20px;background:#111827;color:#fff;border-radius:6px;text-decoration:none'>Verify email</a></p>
            <p>This link expires in {hours} hours.</p>
            <p>If you didn't sign up, you can ignore this email.</p>
        </div>
        """
        try:
            resend.Emails.send({
                "from": self.sender,
                "to": [to],
                "subject": subject,
                "html": html,
            })
            return True
        except Exception as e:
            logger.error(f"Verification email to {to} failed: {e}")
            return False
