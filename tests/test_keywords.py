from app.core.keywords import (
    CATEGORIES,
    categorize_keyword,
    categorize_keywords,
    compact_keyword,
    guess_by_shape,
    process_keywords_for_ats,
    simple_categorize,
)


def test_credential_wording_wins_over_broader_rules():
    assert categorize_keyword("AWS Certified Solutions Architect") == "certifications"


def test_rule_categories():
    assert categorize_keyword("Python") == "technicalSkills"
    assert categorize_keyword("Communication") == "softSkills"
    assert categorize_keyword("Bachelor's degree") == "education"
    assert categorize_keyword("Docker") == "tools"


def test_shape_heuristics_for_unmatched_keywords():
    assert guess_by_shape("XYZ") == "certifications"
    assert guess_by_shape("GHJKL") == "tools"
    assert guess_by_shape("Zorbing") == "softSkills"
    assert guess_by_shape("Foobar") == "industryTerms"
    assert guess_by_shape("Proficiency in something unusual") == "responsibilities"


def test_categorize_keywords_keeps_all_categories_and_order():
    result = categorize_keywords(["Python", "  ", "JavaScript", "Docker", 42])

    assert tuple(result) == CATEGORIES
    assert result["technicalSkills"] == ["Python", "JavaScript"]
    assert result["tools"] == ["Docker"]
    assert sum(len(v) for v in result.values()) == 3


def test_categorization_is_deterministic():
    keywords = ["Python", "Leadership", "Kubernetes", "PMP", "Foobar"]

    assert categorize_keywords(keywords) == categorize_keywords(list(keywords))


def test_process_keywords_dedupes_case_insensitively():
    result = process_keywords_for_ats({"tools": ["Docker", "docker", "Kubernetes"]})

    assert result["tools"] == ["Docker", "Kubernetes"]
    assert result["softSkills"] == []


def test_long_responsibility_is_broken_down():
    result = process_keywords_for_ats(
        {"responsibilities": ["Oversee and manage the release process"]}
    )

    assert result["responsibilities"] == ["manage the release process"]


def test_long_phrase_is_split_on_commas_and_capped():
    phrase = "Python, Django, Flask and PostgreSQL with Redis for the backend services"

    result = process_keywords_for_ats({"technicalSkills": [phrase]})

    assert result["technicalSkills"] == ["Python", "Django", "Flask", "PostgreSQL Redis backend services"]
    assert all(len(k.split()) <= 4 for k in result["technicalSkills"])


def test_compact_keyword_drops_stop_words_before_capping():
    assert compact_keyword("Experience with the design of distributed systems") == "Experience design distributed systems"
    assert compact_keyword("R&D team lead") == "R&D team lead"
    assert compact_keyword("one two three four five six") == "one two three four"


def test_simple_categorize_prefixes_and_limit():
    result = simple_categorize(["Programming in Go", "Leadership", "Blockchain"])

    assert result["technicalSkills"] == ["Programming in Go"]
    assert result["softSkills"] == ["Leadership"]
    assert result["industryTerms"] == ["Blockchain"]

    capped = simple_categorize([f"term {i}" for i in range(15)], limit=10)
    assert len(capped["industryTerms"]) == 10
