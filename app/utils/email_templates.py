"""
Email Templates

HTML bodies for every transactional email the API sends.
User-supplied values are escaped before interpolation.
"""

from html import escape
from typing import Iterable, Optional, Tuple

from app.core.config import settings


def _wrap(inner: str) -> str:
    return f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
      {inner}
    </div>
    """


def _button(url: str, label: str, color: str = "#0070f3") -> str:
    return f"""
      <p>
        <a href="{url}"
           style="background-color: {color}; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px; display: inline-block;">
          {label}
        </a>
      </p>
    """


def _or_default(value, default: str) -> str:
    if value is None or value == "":
        return default
    return escape(str(value))


# ============================================================
# Password Reset
# ============================================================

def reset_code_email(code: str, expires_in_minutes: int) -> Tuple[str, str]:
    """Subject and body for a password reset code."""
    subject = "Password Reset Code - ExpertGate"
    html = _wrap(f"""
      <h1 style="color: #333;">Password Reset Request</h1>
      <p>You requested to reset your password for your ExpertGate account.</p>
      <p>Your verification code is:</p>
      <div style="background-color: #f4f4f4; padding: 20px; text-align: center; font-size: 32px; font-weight: bold; letter-spacing: 5px; margin: 20px 0;">
        {code}
      </div>
      <p>This code will expire in {expires_in_minutes} minutes.</p>
      <p>If you didn't request this password reset, please ignore this email.</p>
      <p>Best regards,<br>The ExpertGate Team</p>
    """)
    return subject, html


# ============================================================
# Expert Signup (to admin)
# ============================================================

def expert_signup_email(
    full_name: str,
    email: str,
    institution: Optional[str],
    field_of_expertise: Optional[Iterable[str]],
    years_of_experience: Optional[int],
    specific_experience: Optional[str],
) -> Tuple[str, str]:
    fields = ", ".join(field_of_expertise) if field_of_expertise else None

    subject = f"New Expert Registration: {full_name}"
    html = _wrap(f"""
      <h1 style="color: #333;">New Expert Registration</h1>
      <p>A new expert has registered and is awaiting verification:</p>
      <div style="background-color: #f5f5f5; padding: 20px; border-radius: 8px; margin: 20px 0;">
        <p><strong>Name:</strong> {escape(full_name)}</p>
        <p><strong>Email:</strong> {escape(email)}</p>
        <p><strong>Institution:</strong> {_or_default(institution, "Not specified")}</p>
        <p><strong>Field of Expertise:</strong> {_or_default(fields, "Not specified")}</p>
        <p><strong>Years of Experience:</strong> {_or_default(years_of_experience, "Not specified")}</p>
        <p><strong>Specific Experience:</strong> {_or_default(specific_experience, "Not provided")}</p>
      </div>
      {_button(f"{settings.FRONTEND_URL}/admin-panel", "Review in Admin Panel")}
    """)
    return subject, html


# ============================================================
# Expert Verification (to expert)
# ============================================================

def expert_verification_email(full_name: str, approved: bool) -> Tuple[str, str]:
    name = escape(full_name)

    if approved:
        subject = "Your ExpertGate Account Has Been Verified!"
        html = _wrap(f"""
          <h1 style="color: #22c55e;">Congratulations, {name}!</h1>
          <p>Your expert account on ExpertGate has been verified.</p>
          <p>You can now:</p>
          <ul>
            <li>Receive interview requests from researchers</li>
            <li>Connect with other experts</li>
            <li>Build your professional network</li>
          </ul>
          {_button(f"{settings.FRONTEND_URL}/expert-home", "Go to Your Dashboard", "#22c55e")}
          <p>Thank you for joining ExpertGate!</p>
        """)
    else:
        subject = "ExpertGate Account Verification Update"
        html = _wrap(f"""
          <h1 style="color: #ef4444;">Verification Update</h1>
          <p>Dear {name},</p>
          <p>Unfortunately, your expert account verification was not approved at this time.</p>
          <p>If you believe this was an error or would like to provide additional information, please contact our support team.</p>
          {_button(f"{settings.FRONTEND_URL}/support", "Contact Support")}
        """)

    return subject, html


# ============================================================
# Support Ticket (to admin)
# ============================================================

def new_support_ticket_email(
    subject_line: str,
    author_name: Optional[str],
    author_email: Optional[str],
    created_at,
) -> Tuple[str, str]:
    created = created_at.strftime("%Y-%m-%d %H:%M UTC") if created_at else "Unknown"

    subject = f"New Support Ticket: {subject_line}"
    html = _wrap(f"""
      <h1 style="color: #333;">New Support Ticket</h1>
      <p>A new support ticket has been submitted:</p>
      <div style="background-color: #f5f5f5; padding: 20px; border-radius: 8px; margin: 20px 0;">
        <p><strong>Subject:</strong> {escape(subject_line)}</p>
        <p><strong>From:</strong> {_or_default(author_name, "Unknown")} ({_or_default(author_email, "no email")})</p>
        <p><strong>Created:</strong> {created}</p>
      </div>
      {_button(f"{settings.FRONTEND_URL}/admin-panel", "View in Admin Panel")}
    """)
    return subject, html


def _format_date(value, fmt: str = "%Y-%m-%d %H:%M UTC") -> str:
    return value.strftime(fmt) if value else "To be decided"


def _details(*rows: Tuple[str, str], background: str = "#f5f5f5") -> str:
    lines = "\n".join(f"<p><strong>{label}:</strong> {value}</p>" for label, value in rows)
    return f"""
      <div style="background-color: {background}; padding: 20px; border-radius: 8px; margin: 20px 0;">
        {lines}
      </div>
    """


# ============================================================
# Interview Requests
# ============================================================

def new_interview_request_email(
    expert_name: Optional[str],
    researcher_name: Optional[str],
    research_topic: str,
    duration_minutes: int,
    preferred_date,
) -> Tuple[str, str]:
    """To the expert: a researcher asked for an interview."""
    rows = [
        ("Research Topic", escape(research_topic)),
        ("Duration", f"{duration_minutes} minutes"),
    ]
    if preferred_date:
        rows.append(("Preferred Date", _format_date(preferred_date, "%Y-%m-%d")))

    subject = "New Interview Request on ExpertGate"
    html = _wrap(f"""
      <h1 style="color: #333;">New Interview Request</h1>
      <p>Hello {_or_default(expert_name, "Expert")},</p>
      <p><strong>{_or_default(researcher_name, "A researcher")}</strong> has sent you an interview request.</p>
      {_details(*rows)}
      <p>Please log in to your dashboard to review and respond to this request.</p>
      {_button(f"{settings.FRONTEND_URL}/expert-home", "Review Request")}
      <p>Best regards,<br>The ExpertGate Team</p>
    """)
    return subject, html


def interview_accepted_email(
    researcher_name: Optional[str],
    expert_name: Optional[str],
    research_topic: str,
    duration_minutes: int,
) -> Tuple[str, str]:
    """To the researcher: the expert accepted."""
    subject = "Your Interview Request Has Been Accepted!"
    html = _wrap(f"""
      <h1 style="color: #22c55e;">Great News!</h1>
      <p>Hello {_or_default(researcher_name, "Researcher")},</p>
      <p><strong>{_or_default(expert_name, "The expert")}</strong> has accepted your interview request!</p>
      {_details(("Research Topic", escape(research_topic)), ("Duration", f"{duration_minutes} minutes"), background="#e8f5e9")}
      <p>You can now chat with the expert through the Connections page to coordinate your interview.</p>
      <p>Best regards,<br>The ExpertGate Team</p>
    """)
    return subject, html


def interview_declined_email(
    researcher_name: Optional[str],
    expert_name: Optional[str],
    research_topic: str,
) -> Tuple[str, str]:
    """To the researcher: the expert declined."""
    subject = "Update on Your Interview Request"
    html = _wrap(f"""
      <h1 style="color: #333;">Interview Request Update</h1>
      <p>Hello {_or_default(researcher_name, "Researcher")},</p>
      <p>Unfortunately, <strong>{_or_default(expert_name, "The expert")}</strong> was unable to accept your interview request at this time.</p>
      {_details(("Research Topic", escape(research_topic)), background="#fff3e0")}
      <p>There are many other experts available. Browse the Experts Directory to find someone who can help with your research.</p>
      {_button(f"{settings.FRONTEND_URL}/experts", "Browse Experts")}
      <p>Best regards,<br>The ExpertGate Team</p>
    """)
    return subject, html


# ============================================================
# Connections
# ============================================================

def _role_label(user_type: Optional[str]) -> str:
    return "Expert" if user_type == "expert" else "Researcher"


def connection_request_email(
    recipient_name: Optional[str],
    sender_name: Optional[str],
    sender_type: Optional[str],
    sender_institution: Optional[str],
) -> Tuple[str, str]:
    """To the recipient: someone wants to connect."""
    sender = _or_default(sender_name, "A user")
    role = _role_label(sender_type)

    subject = "New Connection Request on ExpertGate"
    html = _wrap(f"""
      <h1 style="color: #333;">New Connection Request</h1>
      <p>Hello {_or_default(recipient_name, "User")},</p>
      <p><strong>{sender}</strong> ({role}) would like to connect with you.</p>
      {_details(("Name", sender), ("Role", role), ("Institution", _or_default(sender_institution, "Unknown institution")))}
      <p>To accept or decline this request, log in to ExpertGate and open the <strong>Chats</strong> page.</p>
      {_button(f"{settings.FRONTEND_URL}/chats", "Open Chats")}
      <p>Best regards,<br>The ExpertGate Team</p>
    """)
    return subject, html


def connection_accepted_email(
    requester_name: Optional[str],
    accepter_name: Optional[str],
    accepter_type: Optional[str],
    accepter_institution: Optional[str],
) -> Tuple[str, str]:
    """To the requester: the connection was accepted."""
    accepter = _or_default(accepter_name, "A user")
    role = _role_label(accepter_type)

    subject = "Your Connection Request Has Been Accepted!"
    html = _wrap(f"""
      <h1 style="color: #22c55e;">Great News!</h1>
      <p>Hello {_or_default(requester_name, "User")},</p>
      <p><strong>{accepter}</strong> ({role}) has accepted your connection request!</p>
      {_details(("Name", accepter), ("Role", role), ("Institution", _or_default(accepter_institution, "Unknown institution")), background="#e8f5e9")}
      <p>You can now chat with {accepter} through the <strong>Chats</strong> page on ExpertGate.</p>
      <p>Best regards,<br>The ExpertGate Team</p>
    """)
    return subject, html


# ============================================================
# Interview Reminders
# ============================================================

def interview_day_reminder_email(
    recipient_name: Optional[str],
    other_name: Optional[str],
    research_topic: str,
    scheduled_date,
    duration_minutes: int,
    dashboard_path: str,
) -> Tuple[str, str]:
    """Sent to both participants about a day before the interview."""
    other = _or_default(other_name, "your contact")

    subject = f"Interview Reminder: Tomorrow with {other_name or 'your contact'}"
    html = _wrap(f"""
      <h1 style="color: #333;">Interview Reminder</h1>
      <p>Dear {_or_default(recipient_name, "User")},</p>
      <p>This is a reminder that you have an interview scheduled for <strong>tomorrow</strong>.</p>
      {_details(("Topic", escape(research_topic)), ("With", other), ("Date", _format_date(scheduled_date)), ("Duration", f"{duration_minutes} minutes"))}
      {_button(f"{settings.FRONTEND_URL}{dashboard_path}", "View Interviews")}
    """)
    return subject, html


def interview_soon_reminder_email(
    recipient_name: Optional[str],
    other_name: Optional[str],
    research_topic: str,
    duration_minutes: int,
) -> Tuple[str, str]:
    """Sent to both participants about thirty minutes before the interview."""
    other = _or_default(other_name, "your contact")

    subject = f"Interview Starting Soon: In 30 minutes with {other_name or 'your contact'}"
    html = _wrap(f"""
      <h1 style="color: #f59e0b;">Interview Starting Soon!</h1>
      <p>Dear {_or_default(recipient_name, "User")},</p>
      <p>Your interview is starting in <strong>30 minutes</strong>.</p>
      {_details(("Topic", escape(research_topic)), ("With", other), ("Duration", f"{duration_minutes} minutes"), background="#fef3c7")}
      <p>Please make sure you're ready for the interview.</p>
    """)
    return subject, html
