"""
Email templates for application status notifications.

Each template renders subject, HTML and plain text from the same arguments
so the multipart/alternative parts never disagree. Every value interpolated
into HTML is escaped first; the interview note in particular is free text
typed by the company.
"""

from dataclasses import dataclass
from datetime import datetime
from html import escape
from typing import Optional


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html: str
    text: str


def _sent_on(sent_at: Optional[datetime]) -> str:
    return (sent_at or datetime.now()).strftime("%Y-%m-%d %H:%M")


def _one_line(value: str) -> str:
    """Collapse whitespace, line breaks included; header values must be a single line."""
    return " ".join((value or "").split())


def render_offer_letter(
    student_name: str,
    company_name: str,
    job_title: str,
    sent_at: Optional[datetime] = None,
) -> RenderedEmail:
    sent_on = _sent_on(sent_at)
    student, company, job = escape(student_name), escape(company_name), escape(job_title)

    subject = f"Congratulations! {_one_line(company_name)} accepted your application"
    html = f"""
    <div style="font-family: Arial, sans-serif; line-height: 1.6;">
      <h2>Congratulations, {student}!</h2>
      <p>Your application for the <strong>{job}</strong> position at <strong>{company}</strong> has been <strong>ACCEPTED</strong>.</p>
      <p>We are excited to move forward. Our team will reach out with next steps shortly.</p>
      <h3 style="margin-top:16px;">Next Steps</h3>
      <ol>
        <li>Please reply to confirm your acceptance.</li>
        <li>Share your availability for onboarding discussions.</li>
        <li>Prepare required documents (ID, transcripts, etc.).</li>
      </ol>
      <p style="color:#6b7280; font-size:12px; margin-top:16px;">Sent on: {sent_on}</p>
      <p>Best regards,<br/>{company} Team</p>
    </div>
    """
    text = (
        f"Congratulations, {student_name}! Your application for {job_title} at {company_name} "
        f"has been ACCEPTED.\n\n"
        "Next steps:\n"
        "1) Reply to confirm acceptance\n"
        "2) Share availability for onboarding discussion\n"
        "3) Prepare required documents\n\n"
        f"Sent on: {sent_on}"
    )
    return RenderedEmail(subject=subject, html=html, text=text)


def render_interview_invite(
    student_name: str,
    company_name: str,
    job_title: str,
    note: str = "",
    sent_at: Optional[datetime] = None,
) -> RenderedEmail:
    sent_on = _sent_on(sent_at)
    student, company, job = escape(student_name), escape(company_name), escape(job_title)
    note = note or ""

    note_html = ""
    if note:
        note_html = f"<p><strong>Details / Note from company:</strong><br/>{escape(note)}</p>"

    subject = f"Interview Invitation: {_one_line(job_title)} at {_one_line(company_name)}"
    html = f"""
    <div style="font-family: Arial, sans-serif; line-height: 1.6;">
      <h2>Interview Invitation</h2>
      <p>Hi {student},</p>
      <p>{company} would like to invite you to interview for the <strong>{job}</strong> role.</p>
      {note_html}
      <div style="margin-top:12px;">
        <h3 style="margin:0 0 6px 0;">Interview Logistics</h3>
        <ul>
          <li><strong>Format:</strong> Online/Onsite (reply with your preference)</li>
          <li><strong>Proposed date/time:</strong> Please reply with 2-3 suitable slots</li>
          <li><strong>Location/Link:</strong> Will be shared upon confirmation</li>
        </ul>
      </div>
      <p>Please reply to this email to coordinate timing.</p>
      <p style="color:#6b7280; font-size:12px;">Sent on: {sent_on}</p>
      <p>Best regards,<br/>{company} Talent Team</p>
    </div>
    """
    text = f"Hi {student_name},\n{company_name} invites you to interview for {job_title}."
    if note:
        text += f"\nDetails: {note}"
    text += (
        "\n\nInterview logistics:\n"
        "- Format: Online/Onsite (confirm preference)\n"
        "- Proposed date/time: Please reply with 2-3 slots\n"
        "- Location/Link: Will be shared upon confirmation\n\n"
        "Please reply to coordinate timing.\n"
        f"Sent on: {sent_on}"
    )
    return RenderedEmail(subject=subject, html=html, text=text)
