from app.core.ats_score import (
    EMPTY_RESUME_SCORE,
    MISSING_KEYWORDS_SUGGESTION,
    TITLE_MISMATCH_SUGGESTION,
    calculate_ats_score,
    general_score,
    job_specific_score,
    keyword_found,
    normalize_text,
    position_matches,
)
from app.documents.base import ResumeData

RESUME = ResumeData.from_dict({
    "full_name": "Jane Doe",
    "email": "jane@example.com",
    "phone": "+1 555 0100",
    "target_job_title": "Backend Engineer",
    "summary": "Backend engineer with strong communication and leadership, building Python services.",
    "technical_skills": ["Python", "PostgreSQL", "Docker"],
    "soft_skills": ["Communication", "Leadership", "Teamwork"],
    "work_experience": [
        {
            "company": "Acme",
            "position": "Backend Engineer",
            "start_date": "2020-01",
            "achievements": [
                "Built Python APIs on Docker",
                "Cut PostgreSQL query time by 40%",
                "Mentored two engineers",
            ],
        },
        {
            "company": "Globex",
            "position": "Support Analyst",
            "start_date": "2018-03",
            "achievements": [
                "Resolved customer tickets",
                "Wrote runbooks",
                "Trained staff on problem solving",
            ],
        },
    ],
    "education": [
        {
            "institution": "State University",
            "degree": "BSc",
            "field_of_study": "Computer Science",
            "end_date": "2018-01",
        }
    ],
    "certifications": [{"name": "AWS Certified Developer"}],
})


def _by_category(feedback):
    return {entry["category"]: entry for entry in feedback}


def test_empty_resume_gets_the_floor_score():
    result = general_score(ResumeData())

    assert result["score"] == EMPTY_RESUME_SCORE
    assert [f["category"] for f in result["feedback"]] == [
        "Content Completeness",
        "ATS Compatibility",
        "Resume Structure",
    ]
    assert all(f["priority"] == "high" for f in result["feedback"])


def test_short_summary_alone_is_not_enough_content():
    assert general_score(ResumeData(summary="Hard worker."))["score"] == EMPTY_RESUME_SCORE


def test_category_breakdown():
    result = general_score(RESUME)
    feedback = _by_category(result["feedback"])

    # 18.5 keyword match + 20 placement + 15 formatting + 7.5 relevance + 8 education
    assert result["score"] == 69
    assert list(feedback) == [
        "Keyword Match",
        "Keyword Placement",
        "Formatting Compliance",
        "Experience Relevance",
        "Education & Certifications",
    ]
    assert feedback["Keyword Match"]["priority"] == "high"
    assert "project management" in feedback["Keyword Match"]["feedback"]
    assert feedback["Keyword Placement"]["score"] == 100
    assert feedback["Formatting Compliance"]["score"] == 100
    assert feedback["Experience Relevance"]["score"] == 50
    assert feedback["Experience Relevance"]["priority"] == "high"
    assert feedback["Education & Certifications"]["score"] == 80
    assert feedback["Education & Certifications"]["priority"] == "low"


def test_formatting_penalties():
    resume = ResumeData.from_dict({
        "full_name": "Jane Doe",
        "email": "jane@example.com",
        "skills": ["Python"],
        "work_experience": [
            {"position": "Engineer", "start_date": "2020-01", "description": "Built services."},
            {"position": "Intern", "start_date": "Jan 2019", "achievements": ["Wrote tests"]},
        ],
    })

    entry = _by_category(general_score(resume)["feedback"])["Formatting Compliance"]

    # missing sections -3, missing phone -1.5, date shapes -3, mixed bullets -3
    assert entry["score"] == 30
    assert entry["priority"] == "high"
    assert entry["feedback"] == (
        "Format issues: Missing standard sections: summary, education. "
        "Missing contact details: phone"
    )


def test_relevance_without_target_rewards_detailed_entries():
    resume = ResumeData.from_dict({
        "skills": ["Python"],
        "work_experience": [
            {"position": "Engineer", "achievements": ["a", "b", "c"]},
            {"position": "Intern", "description": "Short."},
        ],
    })

    entry = _by_category(general_score(resume)["feedback"])["Experience Relevance"]

    assert entry["score"] == 50


def test_position_matching_uses_meaningful_words():
    assert position_matches("Senior Backend Engineer", "Backend Engineer")
    assert position_matches("Dev", "Dev")
    assert not position_matches("Support Analyst", "Backend Engineer")
    assert not position_matches("", "Backend Engineer")


def test_keyword_variations_count_as_found():
    text = "built ui in react and shipped problem solving tools on aws\nmanaged project manager duties"
    normalized = normalize_text(text)

    assert keyword_found(text, normalized, "ReactJS")
    assert keyword_found(text, normalized, "Problem-Solving")
    assert keyword_found(text, normalized, "Amazon Web Services")
    assert keyword_found(text, normalized, "Tools")
    assert not keyword_found(text, normalized, "Kubernetes")
    assert not keyword_found(text, normalized, "   ")


def test_job_specific_score_is_weighted_by_category():
    job_keywords = {
        "technicalSkills": ["Python", "Kubernetes"],
        "softSkills": ["Mentoring"],
        "tools": ["Dockers"],
        "certifications": ["Amazon Web Services"],
    }

    result = job_specific_score(RESUME, job_keywords)

    # found 1.5 + 1.3 + 1.1 of 3.0 + 1.0 + 1.3 + 1.1
    assert result["score"] == 61
    assert result["found"] == ["Python", "Dockers", "Amazon Web Services"]
    assert result["missing"] == ["Kubernetes", "Mentoring"]
    assert result["categories"]["technicalSkills"] == {
        "found": ["Python"],
        "missing": ["Kubernetes"],
    }
    assert result["categories"]["education"] == {"found": [], "missing": []}


def test_report_without_job_keywords():
    report = calculate_ats_score(RESUME)

    assert report["general_score"] == 69
    assert report["job_specific_score"] is None
    assert report["keywords"] is None
    high = [f["feedback"] for f in report["feedback"] if f["priority"] == "high"]
    assert report["suggestions"] == high


def test_report_flags_title_mismatch_and_missing_keywords():
    report = calculate_ats_score(RESUME, "Data Scientist", {"technicalSkills": ["Kubernetes"]})

    assert report["job_specific_score"] == 0
    assert report["keywords"]["missing"] == ["Kubernetes"]
    assert TITLE_MISMATCH_SUGGESTION in report["suggestions"]
    assert MISSING_KEYWORDS_SUGGESTION in report["suggestions"]
    relevance = _by_category(report["feedback"])["Experience Relevance"]
    assert relevance["score"] == 0


def test_matching_title_is_not_a_mismatch():
    report = calculate_ats_score(RESUME, "Backend Engineer", {"technicalSkills": ["Python"]})

    assert report["job_specific_score"] == 100
    assert TITLE_MISMATCH_SUGGESTION not in report["suggestions"]
    assert MISSING_KEYWORDS_SUGGESTION not in report["suggestions"]
