from app.documents.registry import (
    generate_cover_letter,
    generate_text_resume,
    list_templates,
    resolve_template_id,
)


RESUME = {
    "full_name": "Jane Doe",
    "email": "jane@example.com",
    "summary": "Backend engineer.",
    "technical_skills": ["Python", "PostgreSQL"],
    "work_experience": [
        {"company": "Acme", "position": "Engineer", "start_date": "2020-01", "current": True,
         "achievements": ["Shipped billing"]},
    ],
    "education": [
        {"institution": "MIT", "degree": "BSc", "field_of_study": "Computer Science",
         "start_date": "2014-09", "end_date": "2018-06"},
    ],
}


def test_professional_text_layout():
    text = generate_text_resume(RESUME, "professional")

    assert text.startswith("Jane Doe\n")
    assert "SUMMARY\nBackend engineer." in text
    assert "Technical Skills: Python, PostgreSQL" in text
    assert "Engineer, Acme" in text
    assert "  - Shipped billing" in text
    assert "Jan 2020 - Present" in text


def test_corporate_puts_experience_before_skills():
    text = generate_text_resume(RESUME, "corporate")

    assert "JANE DOE" in text
    assert text.index("| EXPERIENCE |") < text.index("| SKILLS |")


def test_creative_uses_friendly_titles():
    text = generate_text_resume(RESUME, "creative")

    assert ">> About Me" in text
    assert ">> Where I've Worked" in text


def test_empty_sections_are_skipped():
    text = generate_text_resume({"full_name": "Jane Doe"}, "professional")

    assert "EXPERIENCE" not in text
    assert "SKILLS" not in text


def test_legacy_and_unknown_text_ids():
    assert resolve_template_id("text", "plain") == "professional"
    assert resolve_template_id("text", "nope") == "professional"
    assert resolve_template_id("text", "Minimalist") == "minimalist"


def test_list_templates_by_kind():
    latex = list_templates("latex")
    text_ids = {t["id"] for t in list_templates("text")}

    assert {t["id"] for t in latex} == {"professional", "modern"}
    assert all(t["kind"] == "latex" for t in latex)
    assert text_ids == {"professional", "minimalist", "elegant", "corporate", "modern", "creative"}
    assert len(list_templates()) == 2 + 6 + 3


LETTER = {
    "sender_name": "Jane Doe",
    "sender_email": "jane@example.com",
    "recipient_name": "Alex Smith",
    "company": "Globex",
    "job_title": "Staff Engineer",
    "body": "First paragraph.\n\n\n\nSecond paragraph.",
    "date": "2024-05-01",
}


def test_standard_cover_letter():
    text = generate_cover_letter(LETTER, "standard")

    assert text.startswith("Jane Doe\njane@example.com")
    assert "May 2024" in text
    assert "Re: Staff Engineer" in text
    assert "Dear Alex Smith," in text
    assert "First paragraph.\n\nSecond paragraph." in text
    assert text.rstrip().endswith("Sincerely,\nJane Doe")


def test_modern_cover_letter_greets_by_first_name():
    text = generate_cover_letter(LETTER, "modern")

    assert text.startswith("JANE DOE")
    assert "Staff Engineer at Globex" in text
    assert "Hi Alex," in text


def test_formal_cover_letter_without_recipient():
    text = generate_cover_letter({**LETTER, "recipient_name": ""}, "formal")

    assert "Hiring Committee" in text
    assert "Dear Sir or Madam:" in text
    assert "SUBJECT: APPLICATION FOR THE POSITION OF STAFF ENGINEER" in text


def test_unknown_cover_letter_template_uses_standard():
    assert generate_cover_letter(LETTER, "fancy") == generate_cover_letter(LETTER, "standard")
