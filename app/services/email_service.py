import smtplib
import os
from datetime import datetime
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Iterable, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape
from loguru import logger

from app.core.config import settings

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates", "email")

_env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
)

DATE_FORMAT = "%d-%m-%Y %I:%M %p"


# Helper to get template
def get_template(template_name):
    return _env.get_template(template_name)


def _now() -> str:
    return datetime.now().strftime(DATE_FORMAT)


def _fmt(value: Optional[datetime], fallback: str) -> str:
    return value.strftime(DATE_FORMAT) if value else fallback


def render(template_name: str, **context) -> str:
    return get_template(template_name).render(**context)


# ---------------------------------------------------------
# SMTP TRANSPORT
# ---------------------------------------------------------
def _deliver(to_email: str, subject: str, html_content: str,
             text_content: Optional[str] = None, cc: Optional[Iterable[str]] = None):
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"{settings.EMAILS_FROM_NAME} <{settings.EMAILS_FROM_EMAIL}>"
    msg["To"] = to_email

    cc_list = [c for c in (cc or []) if c]
    if cc_list:
        msg["Cc"] = ", ".join(cc_list)

    if text_content:
        msg.attach(MIMEText(text_content, "plain"))
    msg.attach(MIMEText(html_content, "html"))

    logger.debug(f"📧 Connecting to SMTP: {settings.SMTP_HOST}:{settings.SMTP_PORT}")

    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
        server.ehlo()

        # TLS on submission ports only; local catchers (Mailpit on 1025) run plain
        if settings.SMTP_PORT in [587, 2525]:
            server.starttls()
            server.ehlo()

        if settings.SMTP_USER and settings.SMTP_PASSWORD:
            server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)

        server.sendmail(settings.EMAILS_FROM_EMAIL, [to_email, *cc_list], msg.as_string())


def send_email_via_smtp(to_email, subject, html_content, text_content=None, cc=None) -> bool:
    """
    Best-effort delivery. Returns False (and logs) on a missing host,
    a missing recipient or any SMTP error.
    """
    if not settings.SMTP_HOST:
        logger.warning(f"SMTP host not configured. Skipping email '{subject}'.")
        return False

    if not to_email:
        logger.warning(f"No recipient for email '{subject}'. Skipping.")
        return False

    try:
        _deliver(to_email, subject, html_content, text_content, cc)
        logger.info(f"✅ Email sent successfully to {to_email}")
        return True
    except Exception as e:
        logger.error(f"❌ Failed to send email to {to_email}: {e}")
        return False


# ---------------------------------------------------------
# REPAIR REQUEST NOTIFICATIONS
#
# `request` is a plain dict snapshot (see repair_service.mail_context)
# so these can run as background tasks after the session is gone.
# ---------------------------------------------------------
def send_new_request_email(request: dict):
    html = render(
        "new_request.html",
        request=request,
        request_type="New Requirement" if request.get("is_new_requirement") else "Repair Request",
        date=_now(),
    )
    return send_email_via_smtp(
        settings.PROJECT_OFFICE_EMAIL,
        "📋 New Repair Request Created",
        html,
        text_content=f"A new repair request has been created by {request.get('username')} "
                     f"from {request.get('department')}.",
    )


def send_assigned_to_staff_email(request: dict, staff: dict):
    html = render("assigned_to_staff.html", request=request, staff=staff)
    return send_email_via_smtp(staff.get("email"), "📌 Repair Request Assigned to You", html)


def send_assignment_notification_email(request: dict, staff: dict):
    html = render("assignment_notification.html", request=request, staff=staff)
    return send_email_via_smtp(settings.PROJECT_OFFICE_EMAIL, "👤 Repair Request Assigned", html)


def send_requester_assignment_email(request: dict, staff: dict):
    html = render("requester_assignment.html", request=request, staff=staff)
    return send_email_via_smtp(request.get("email"), "🔄 Your Repair Request Has Been Assigned", html)


def send_completion_to_requester_email(request: dict):
    html = render("completion_to_requester.html", request=request, date=_now())
    return send_email_via_smtp(request.get("email"), "✅ Your Repair Request Has Been Completed", html)


def send_completion_to_project_email(request: dict):
    html = render("completion_to_project.html", request=request, date=_now())
    return send_email_via_smtp(settings.PROJECT_OFFICE_EMAIL, "✅ Repair Request Completed", html)


def send_verification_notification_email(request: dict):
    html = render(
        "verification_notification.html",
        request=request,
        completed_at=_fmt(request.get("completed_at"), "Not completed"),
        date=_now(),
    )
    return send_email_via_smtp(settings.PROJECT_OFFICE_EMAIL, "✅ Repair Request Verified by Admin", html)


def send_verification_to_requester_email(request: dict):
    html = render("verification_to_requester.html", request=request, date=_now())
    return send_email_via_smtp(request.get("email"), "✅ Your Repair Request Has Been Verified", html)


def send_new_remark_email(request: dict, remark: dict):
    html = render(
        "new_remark.html",
        request=request,
        remark=remark,
        remark_date=_fmt(remark.get("date"), _now()),
    )
    return send_email_via_smtp(
        request.get("email"),
        "💬 New Remark Added to Your Request",
        html,
        text_content="A new remark has been added to your repair request.",
    )


# ---------------------------------------------------------
# ROOM BOOKING NOTIFICATIONS
# ---------------------------------------------------------
def send_booking_assigned_email(booking: dict, staff: dict):
    html = render("booking_assigned.html", booking=booking, staff=staff)
    return send_email_via_smtp(staff.get("email"), "🏛️ Room Booking Assigned to You", html)


# ---------------------------------------------------------
# TEST MAIL (raises, so the caller can report the SMTP error)
# ---------------------------------------------------------
def send_test_email(to_email: str):
    if not settings.SMTP_HOST:
        raise RuntimeError("SMTP host not configured")

    html = render("test_mail.html", date=_now())
    _deliver(to_email, "Test Email from PROCCMS", html, text_content="This is a plain text test email.")
    logger.info(f"✅ Test email sent to {to_email}")
