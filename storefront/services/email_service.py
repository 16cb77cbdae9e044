"""Service for sending emails."""

import logging
import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending emails via SMTP."""

    def __init__(
        self,
        smtp_host: Optional[str] = None,
        smtp_port: int = 587,
        smtp_username: Optional[str] = None,
        smtp_password: Optional[str] = None,
        from_email: Optional[str] = None,
        from_name: str = "Storefront",
    ):
        self.smtp_host = smtp_host or ""
        self.smtp_port = smtp_port
        self.smtp_username = smtp_username or ""
        self.smtp_password = smtp_password or ""
        self.from_email = from_email or ""
        self.from_name = from_name
        self.enabled = bool(self.smtp_host and self.smtp_username and self.from_email)

    def send_otp_email(self, to_email: str, username: str, otp: str, expiry_minutes: int) -> bool:
        """
        Send the account verification code.

        Args:
            to_email: Recipient email
            username: Recipient handle used in the greeting
            otp: Six-digit verification code
            expiry_minutes: Minutes before the code expires

        Returns:
            True if sent successfully, False otherwise
        """
        if not self.enabled:
            logger.info("SMTP disabled; verification code for %s is %s", to_email, otp)
            return True

        subject = f"Your Verification Code - {self.from_name}"
        html_body = f"""
        <html>
            <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
                <div style="background-color: #0f172a; padding: 30px; border-radius: 10px; text-align: center;">
                    <h1 style="color: #93c5fd; margin: 0;">{self.from_name}</h1>
                </div>

                <div style="padding: 30px 0;">
                    <h2 style="color: #1e293b; margin-bottom: 20px;">Hi {username},</h2>

                    <p style="color: #475569; line-height: 1.6; margin-bottom: 20px;">
                        Use the code below to verify your email address and activate your account:
                    </p>

                    <div style="text-align: center; margin: 30px 0;">
                        <span style="background-color: #3b82f6; color: white; padding: 15px 30px;
                                     border-radius: 5px; display: inline-block; font-weight: bold;
                                     font-size: 24px; letter-spacing: 6px;">
                            {otp}
                        </span>
                    </div>

                    <p style="color: #64748b; font-size: 14px; margin-top: 30px;">
                        This code expires in {expiry_minutes} minutes.
                    </p>

                    <p style="color: #64748b; font-size: 14px; margin-top: 20px;">
                        If you did not create an account, you can ignore this email.
                    </p>
                </div>

                {self._footer_html()}
            </body>
        </html>
        """

        text_body = f"""
        {self.from_name} - Email Verification

        Hi {username},

        Your verification code is: {otp}

        This code expires in {expiry_minutes} minutes.

        If you did not create an account, you can ignore this email.
        """

        return self._send_email(to_email, subject, html_body, text_body)

    def send_password_reset_email(
        self, to_email: str, username: str, reset_url: str, expiry_minutes: int
    ) -> bool:
        """Send the password reset link."""
        if not self.enabled:
            logger.info("SMTP disabled; password reset link for %s: %s", to_email, reset_url)
            return True

        subject = f"Password Reset Request - {self.from_name}"
        html_body = f"""
        <html>
            <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
                <div style="background-color: #0f172a; padding: 30px; border-radius: 10px; text-align: center;">
                    <h1 style="color: #93c5fd; margin: 0;">{self.from_name}</h1>
                </div>

                <div style="padding: 30px 0;">
                    <h2 style="color: #1e293b; margin-bottom: 20px;">Hi {username},</h2>

                    <p style="color: #475569; line-height: 1.6; margin-bottom: 20px;">
                        We received a request to reset your password. Click the button below to choose a new one:
                    </p>

                    <div style="text-align: center; margin: 30px 0;">
                        <a href="{reset_url}"
                           style="background-color: #3b82f6; color: white; padding: 15px 30px;
                                  text-decoration: none; border-radius: 5px; display: inline-block;
                                  font-weight: bold;">
                            Reset Password
                        </a>
                    </div>

                    <p style="color: #64748b; font-size: 14px; margin-top: 30px;">
                        This link expires in {expiry_minutes} minutes.
                    </p>

                    <p style="color: #64748b; font-size: 14px; margin-top: 20px;">
                        If you did not request a password reset, you can ignore this email.
                    </p>
                </div>

                {self._footer_html()}
            </body>
        </html>
        """

        text_body = f"""
        {self.from_name} - Password Reset

        Hi {username},

        Reset your password using the link below:
        {reset_url}

        This link expires in {expiry_minutes} minutes.

        If you did not request a password reset, you can ignore this email.
        """

        return self._send_email(to_email, subject, html_body, text_body)

    def _footer_html(self) -> str:
        return f"""
                <div style="border-top: 1px solid #e2e8f0; padding-top: 20px; text-align: center;">
                    <p style="color: #94a3b8; font-size: 12px;">
                        © {datetime.now().year} {self.from_name}. All rights reserved.
                    </p>
                </div>
        """

    def _send_email(self, to_email: str, subject: str, html_body: str, text_body: str) -> bool:
        """
        Send an email via SMTP.

        Args:
            to_email: Recipient email
            subject: Email subject
            html_body: HTML body
            text_body: Plain text body

        Returns:
            True if sent successfully, False otherwise
        """
        try:
            msg = MIMEMultipart("alternative")
            msg["Subject"] = subject
            msg["From"] = f"{self.from_name} <{self.from_email}>"
            msg["To"] = to_email

            msg.attach(MIMEText(text_body, "plain", "utf-8"))
            msg.attach(MIMEText(html_body, "html", "utf-8"))

            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                server.starttls()
                server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)

            logger.info("Sent '%s' email to %s", subject, to_email)
            return True

        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send email to %s: %s", to_email, exc)
            return False
