"""
MentorHub Email Service - SendGrid Integration
Handles account verification and session booking confirmations
"""

import logging
from typing import Optional
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail
from mentorhub.core.config import SENDGRID_API_KEY, FROM_EMAIL, NOTIFY_PROVIDER, BASE_URL

logger = logging.getLogger(__name__)


class EmailService:
    def __init__(
        self,
        api_key: Optional[str] = None,
        from_email: Optional[str] = None,
        provider: Optional[str] = None,
        base_url: Optional[str] = None,
    ):
        self.api_key = SENDGRID_API_KEY if api_key is None else api_key
        self.from_email = from_email or FROM_EMAIL
        self.provider = provider or NOTIFY_PROVIDER
        self.base_url = (base_url or BASE_URL).rstrip("/")

        if self.provider == 'email' and self.api_key:
            self.client = SendGridAPIClient(self.api_key)
        else:
            self.client = None

    def _send(self, to_email: str, subject: str, html_content: str) -> bool:
        try:
            message = Mail(
                from_email=self.from_email,
                to_emails=to_email,
                subject=subject,
                html_content=html_content
            )

            response = self.client.send(message)
            logger.info("Email sent to %s: %s", to_email, response.status_code)
            return response.status_code == 202

        except Exception as e:
            logger.error("Email error for %s: %s", to_email, e)
            return False

    def verification_link(self, token: str) -> str:
        return f"{self.base_url}/auth/verify-email?token={token}"

    def send_verification_email(self, user_email: str, name: str, token: str):
        """Send the account verification link"""
        link = self.verification_link(token)
        if not self.client:
            logger.info("[MOCK EMAIL] Verification to %s: %s", user_email, link)
            return None

        subject = "Verify your MentorHub account"

        html_content = f"""
        <!DOCTYPE html>
        <html>
        <head>
            <style>
                body {{ font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; }}
                .header {{ background: #4f46e5; color: white; padding: 30px; text-align: center; border-radius: 8px; }}
                .content {{ padding: 30px; background: #f8fafc; border-radius: 8px; margin: 20px 0; }}
                .button {{ background: #4f46e5; color: white; padding: 12px 24px; text-decoration: none;
                          border-radius: 6px; display: inline-block; margin: 10px 0; }}
                .footer {{ text-align: center; color: #64748b; font-size: 14px; margin-top: 20px; }}
            </style>
        </head>
        <body>
            <div class="header">
                <h1>Welcome, {name}!</h1>
            </div>
            <div class="content">
                <p>Confirm your email address to start booking mentorship sessions.</p>
                <div style="text-align: center; margin-top: 20px;">
                    <a href="{link}" class="button">Verify Email</a>
                </div>
                <p style="font-size: 12px; color: #94a3b8;">If you did not create an account, ignore this email.</p>
            </div>
            <div class="footer">
                <p>Need help? Email support@mentorhub.app</p>
            </div>
        </body>
        </html>
        """

        return self._send(user_email, subject, html_content)

    def send_booking_confirmation(self, user_email: str, booking_data: dict):
        """Send session booking confirmation"""
        if not self.client:
            logger.info("[MOCK EMAIL] Booking confirmation to %s", user_email)
            return None

        subject = f"Your session with {booking_data['mentor_name']} is confirmed - {booking_data['session_date']}"

        html_content = f"""
        <!DOCTYPE html>
        <html>
        <head>
            <style>
                body {{ font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; }}
                .header {{ background: #4f46e5; color: white; padding: 30px; text-align: center; border-radius: 8px; }}
                .content {{ padding: 30px; background: #f8fafc; border-radius: 8px; margin: 20px 0; }}
                .detail-row {{ padding: 12px 0; border-bottom: 1px solid #e2e8f0; }}
                .label {{ font-weight: bold; color: #475569; }}
                .value {{ color: #1e293b; }}
                .button {{ background: #4f46e5; color: white; padding: 12px 24px; text-decoration: none;
                          border-radius: 6px; display: inline-block; margin: 10px 0; }}
            </style>
        </head>
        <body>
            <div class="header">
                <h1>You're booked!</h1>
                <p>Your mentorship session is confirmed</p>
            </div>

            <div class="content">
                <div class="detail-row">
                    <span class="label">Session ID:</span>
                    <span class="value">{booking_data['session_id']}</span>
                </div>
                <div class="detail-row">
                    <span class="label">Mentor:</span>
                    <span class="value">{booking_data['mentor_name']}</span>
                </div>
                <div class="detail-row">
                    <span class="label">Date & Time:</span>
                    <span class="value">{booking_data['session_date']} at {booking_data['session_time']}</span>
                </div>
                <div class="detail-row">
                    <span class="label">Duration:</span>
                    <span class="value">{booking_data['duration']} minutes</span>
                </div>

                <div style="text-align: center; margin-top: 20px;">
                    <a href="{self.base_url}/dashboard/mentee" class="button">Open Dashboard</a>
                </div>
            </div>
        </body>
        </html>
        """

        return self._send(user_email, subject, html_content)
