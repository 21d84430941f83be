from typing import Dict, Any, Mapping, Optional
from email.mime.text import MIMEText
import logging
import smtplib

from app.config import EmailConfig

logger = logging.getLogger(__name__)


def booking_confirmation_text(booking: Mapping[str, Any], company_name: str) -> str:
    # Use Markdown-ish bullets; mail clients show them as plain lines
    return (
        f"Thank you for booking with {company_name}!\n\n"
        f"- Service: {booking.get('service_name')}\n"
        f"- Date: {booking.get('booking_date')}\n"
        f"- Time: {booking.get('booking_time')}\n"
        f"- Address: {booking.get('address')}\n"
        f"- Amount: ₹{booking.get('total_amount') or 0}\n"
        f"- Status: {booking.get('status') or 'Pending'}\n\n"
        "We will confirm your slot shortly."
    )


# --- EMAIL TOOL -------------------------------------------------------------

def email_tool(email_cfg: Optional[EmailConfig], to_email: str, subject: str, body: str) -> Dict[str, Any]:
    if not email_cfg or not email_cfg.smtp_host:
        logger.info("Email skipped: no SMTP config provided.")
        return {"success": True, "skipped": True, "error": None}

    msg = MIMEText(body, "plain")
    msg["Subject"] = subject
    msg["From"] = f"{email_cfg.from_name} <{email_cfg.from_email}>"
    msg["To"] = to_email

    try:
        with smtplib.SMTP(email_cfg.smtp_host, email_cfg.smtp_port) as server:
            server.starttls()
            server.login(email_cfg.smtp_user, email_cfg.smtp_password)
            server.send_message(msg)
        return {"success": True, "skipped": False, "error": None}

    except (smtplib.SMTPException, OSError) as e:
        logger.exception("Sending email to %s failed", to_email)
        return {"success": False, "skipped": False, "error": str(e)}


def send_booking_confirmation(email_cfg: Optional[EmailConfig], booking: Mapping[str, Any], company_name: str) -> Dict[str, Any]:
    return email_tool(
        email_cfg,
        to_email=booking.get("customer_email") or "",
        subject=f"{company_name}: Booking received",
        body=booking_confirmation_text(booking, company_name),
    )
