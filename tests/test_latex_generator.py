from datetime import date

import pytest

from app.documents.base import ResumeData
from app.documents.latex import date_range, escape_latex, format_latex_date
from app.documents.registry import LATEX_TEMPLATES, generate_latex_resume, resolve_template_id


RESUME = {
    "full_name": "Jane Doe",
    "email": "jane@example.com",
    "phone": "+1 555 0100",
    "city": "Austin",
    "country": "USA",
    "summary": "Backend engineer.",
    "technical_skills": ["Python", "C#"],
    "work_experience": [
        {
            "company": "Acme & Sons",
            "position": "Engineer",
            "start_date": "2020-01",
            "current": True,
            "achievements": ["Cut costs by 30%"],
        }
    ],
}


def test_escape_latex_special_characters():
    assert escape_latex("R&D") == r"R\&D"
    assert escape_latex("100%") == r"100\%"
    assert escape_latex("$5") == r"\$5"
    assert escape_latex("#1") == r"\#1"
    assert escape_latex("snake_case") == r"snake\_case"
    assert escape_latex("{x}") == r"\{x\}"
    assert escape_latex("~") == r"\textasciitilde{}"
    assert escape_latex("^") == r"\textasciicircum{}"
    assert escape_latex("a<b>c") == r"a\textless{}b\textgreater{}c"


def test_escape_backslash_braces_are_not_double_escaped():
    assert escape_latex("a\\b") == r"a\textbackslash{}b"


def test_escape_none_is_empty():
    assert escape_latex(None) == ""


def test_format_latex_date():
    assert format_latex_date("2021-03-15") == "Mar 2021"
    assert format_latex_date("2019-11") == "Nov 2019"
    assert format_latex_date(date(2020, 1, 2)) == "Jan 2020"
    assert format_latex_date("") == "Present"
    assert format_latex_date(None) == "Present"
    assert format_latex_date("sometime") == "sometime"


def test_date_range():
    assert date_range("2020-01", None, current=True) == "Jan 2020 -- Present"
    assert date_range("2018-05", "2019-06") == "May 2018 -- Jun 2019"
    assert date_range("", "", current=False) == ""


def test_professional_resume_renders_sections_and_escapes():
    tex = generate_latex_resume(RESUME, "professional")

    assert tex.startswith(r"\documentclass")
    assert tex.rstrip().endswith(r"\end{document}")
    assert "Jane Doe" in tex
    assert "Austin, USA" in tex
    assert r"\section{Skills}" in tex
    assert r"Python, C\#" in tex
    assert r"\section{Experience}" in tex
    assert r"Acme \& Sons" in tex
    assert r"Cut costs by 30\%" in tex
    assert "Jan 2020 -- Present" in tex


def test_empty_sections_are_omitted():
    tex = generate_latex_resume({"full_name": "Jane Doe"}, "professional")

    assert r"\section{Experience}" not in tex
    assert r"\section{Education}" not in tex
    assert r"\section{Skills}" not in tex
    assert r"\resumeSubHeadingList" not in tex.split(r"\begin{document}")[1]


def test_missing_contact_uses_placeholders():
    tex = generate_latex_resume({}, "professional")

    assert "Your Name" in tex
    assert "email@example.com" in tex


def test_unknown_template_falls_back_to_professional():
    assert resolve_template_id("latex", "does-not-exist") == "professional"
    assert generate_latex_resume(RESUME, "does-not-exist") == generate_latex_resume(RESUME, "professional")


def test_modern_template_uses_its_own_section_macro():
    tex = generate_latex_resume(RESUME, "modern")

    assert r"\cvsection{" in tex
    assert r"Acme \& Sons" in tex


def test_rich_text_is_flattened_for_documents():
    data = ResumeData.from_dict({
        "summary": "<p>Builds APIs &amp; data pipelines</p><p>Mentors engineers</p>",
    })

    assert data.summary == "Builds APIs & data pipelines\nMentors engineers"

    tex = generate_latex_resume({"summary": "<p>R&amp;D lead</p>"}, "professional")
    assert r"R\&D lead" in tex
    assert "<p>" not in tex


# ── Escaping across every template and free-text field ──

SPECIALS = "\\&%$#_{}~^<>"
PAYLOAD = f"Xq{SPECIALS}qX"
ESCAPED = f"Xq{escape_latex(SPECIALS)}qX"

FREE_TEXT_FIELDS = [
    ("full_name",),
    ("phone",),
    ("location",),
    ("linkedin_url",),
    ("portfolio_url",),
    ("target_job_title",),
    ("technical_skills", 0),
    ("soft_skills", 0),
    ("skills", 0),
    ("work_experience", 0, "company"),
    ("work_experience", 0, "position"),
    ("work_experience", 0, "location"),
    ("work_experience", 0, "achievements", 0),
    ("education", 0, "institution"),
    ("education", 0, "degree"),
    ("education", 0, "field_of_study"),
    ("education", 0, "gpa"),
    ("projects", 0, "name"),
    ("projects", 0, "technologies", 0),
    ("projects", 0, "url"),
    ("publications", 0, "title"),
    ("publications", 0, "authors"),
    ("publications", 0, "publisher"),
    ("certifications", 0, "name"),
    ("certifications", 0, "issuer"),
]

# Fields a layout does not print at all
NOT_RENDERED = {
    ("professional", "target_job_title"),
    ("professional", "education.0.gpa"),
}


def _full_resume():
    return {
        "full_name": "Jane Doe",
        "email": "jane@example.com",
        "phone": "+1 555 0100",
        "location": "Austin",
        "linkedin_url": "https://linkedin.com/in/jane",
        "portfolio_url": "https://jane.dev",
        "target_job_title": "Engineer",
        "technical_skills": ["Python"],
        "soft_skills": ["Mentoring"],
        "skills": ["Chess"],
        "work_experience": [
            {
                "company": "Acme",
                "position": "Engineer",
                "location": "Remote",
                "start_date": "2020-01",
                "current": True,
                "achievements": ["Shipped the billing service"],
            }
        ],
        "education": [
            {
                "institution": "MIT",
                "degree": "BSc",
                "field_of_study": "Computer Science",
                "gpa": "3.9",
                "start_date": "2014-09",
                "end_date": "2018-06",
            }
        ],
        "projects": [{"name": "Forge", "technologies": ["FastAPI"], "url": "https://forge.dev"}],
        "publications": [{"title": "Paper", "authors": "Doe", "publisher": "ACM"}],
        "certifications": [{"name": "CKA", "issuer": "CNCF"}],
    }


def _set(data, path, value):
    target = data
    for key in path[:-1]:
        target = target[key]
    target[path[-1]] = value


@pytest.mark.parametrize("template_id", sorted(LATEX_TEMPLATES))
@pytest.mark.parametrize("path", FREE_TEXT_FIELDS, ids=lambda p: ".".join(map(str, p)))
def test_every_free_text_field_is_escaped(template_id, path):
    data = _full_resume()
    _set(data, path, PAYLOAD)

    output = generate_latex_resume(data, template_id)

    assert PAYLOAD not in output
    assert output.count("Xq") == output.count(ESCAPED)
    if (template_id, ".".join(map(str, path))) not in NOT_RENDERED:
        assert ESCAPED in output
