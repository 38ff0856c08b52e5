"""
Cover letter layouts (plain text).
"""
from datetime import date

from app.documents.base import BaseTemplate, CoverLetterData
from app.documents.latex import format_latex_date


def _paragraphs(body: str) -> str:
    """Normalise body text to blank-line separated paragraphs."""
    parts = [p.strip() for p in body.replace("\r\n", "\n").split("\n\n")]
    return "\n\n".join(p for p in parts if p)


def _letter_date(data: CoverLetterData) -> str:
    if data.date:
        return format_latex_date(data.date)
    today = date.today()
    return today.strftime("%B %d, %Y")


class StandardCoverLetter(BaseTemplate):
    template_id = "standard"
    name = "Standard"
    description = "Conventional business letter."

    def render(self, data: CoverLetterData) -> str:
        sender = [data.sender_name or "Your Name"]
        sender.extend(p for p in (data.sender_location, data.sender_email, data.sender_phone) if p)
        recipient = [p for p in (data.recipient_name, data.company) if p]
        greeting = f"Dear {data.recipient_name}," if data.recipient_name else "Dear Hiring Manager,"
        blocks = [
            "\n".join(sender),
            _letter_date(data),
            "\n".join(recipient),
        ]
        if data.job_title:
            blocks.append(f"Re: {data.job_title}")
        blocks.extend([
            greeting,
            _paragraphs(data.body),
            f"Sincerely,\n{data.sender_name or 'Your Name'}",
        ])
        return "\n\n".join(b for b in blocks if b) + "\n"


class ModernCoverLetter(BaseTemplate):
    template_id = "modern"
    name = "Modern"
    description = "Compact header line, first-name greeting."

    def render(self, data: CoverLetterData) -> str:
        contact = " · ".join(p for p in (data.sender_email, data.sender_phone, data.sender_location) if p)
        header = (data.sender_name or "Your Name").upper()
        if contact:
            header = f"{header}\n{contact}"
        subject = data.job_title
        if data.job_title and data.company:
            subject = f"{data.job_title} at {data.company}"
        first = data.recipient_name.split()[0] if data.recipient_name else ""
        blocks = [
            header,
            "-" * 40,
            subject,
            f"Hi {first}," if first else "Hello,",
            _paragraphs(data.body),
            f"Best regards,\n{data.sender_name or 'Your Name'}",
        ]
        return "\n\n".join(b for b in blocks if b) + "\n"


class FormalCoverLetter(BaseTemplate):
    template_id = "formal"
    name = "Formal"
    description = "Full block format with subject line."

    def render(self, data: CoverLetterData) -> str:
        blocks = [
            "\n".join(p for p in (data.sender_name or "Your Name", data.sender_location,
                                  data.sender_phone, data.sender_email) if p),
            _letter_date(data),
            "\n".join(p for p in (data.recipient_name or "Hiring Committee", data.company) if p),
        ]
        if data.job_title:
            blocks.append(f"SUBJECT: APPLICATION FOR THE POSITION OF {data.job_title.upper()}")
        blocks.extend([
            f"Dear {data.recipient_name or 'Sir or Madam'}:",
            _paragraphs(data.body),
            "Thank you for your time and consideration.",
            f"Yours faithfully,\n\n\n{data.sender_name or 'Your Name'}",
        ])
        return "\n\n".join(b for b in blocks if b) + "\n"
