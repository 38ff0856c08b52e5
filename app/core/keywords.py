"""
Keyword categorization for ATS keyword analysis.

Keywords extracted from a job description are sorted into seven fixed
categories by an ordered list of regex rules; the first rule that matches
wins. Keywords no rule matches fall through to shape heuristics (length,
casing, digits) and finally default to ``industryTerms``.

Rule order is part of the contract: reordering ``CATEGORY_RULES`` changes
results for overlapping keywords, so tests pin the precedence.
"""
import re
from typing import Dict, Iterable, List, Pattern, Tuple

CATEGORIES: Tuple[str, ...] = (
    "technicalSkills",
    "softSkills",
    "education",
    "responsibilities",
    "industryTerms",
    "tools",
    "certifications",
)


def _rule(alternatives: str) -> Pattern[str]:
    return re.compile(f"({alternatives})", re.IGNORECASE)


# ── Category rules (ordered, first match wins) ────────────────────────────────

# Explicit credential wording beats every broader pattern below, so
# "AWS Certified Solutions Architect" never lands in industryTerms via
# "solution".
_CREDENTIAL = _rule(r"certified|certification|certificate|licen[cs]e[ds]?")

_TECHNICAL = _rule(
    r"programming|coding|development|software|web|api|database|framework|language|"
    r"algorithm|architecture|front-end|back-end|full-stack|javascript|typescript|python|"
    r"java|c\+\+|c#|ruby|php|html|css|sql|nosql|react|angular|vue|node|express|django|"
    r"flask|spring|engineering|design|sysadmin|devops|data.science|machine.learning|ai|"
    r"artificial.intelligence|testing|qa|ux|ui|infrastructure|scaling|performance|"
    r"optimization|analysis|design.thinking|systems|networks|security|troubleshooting|"
    r"debug|code|implementation|deployment"
)

_SOFT = _rule(
    r"communication|leadership|teamwork|collaboration|problem.solving|critical.thinking|"
    r"adaptability|time.management|creativity|work.ethic|interpersonal|flexibility|"
    r"organization|analytical|attention.to.detail|conflict.resolution|decision.making|"
    r"emotional.intelligence|empathy|negotiation|persuasion|presentation|"
    r"stress.management|verbal|written|team.player|self.motivated|proactive|"
    r"customer.service|management|mentoring|coaching|training|facilitation|"
    r"public.speaking|liaison|coordination|motivation|passion|initiative|dedication|"
    r"professionalism|detail.oriented|multi.tasking|prioritization|growth.mindset|"
    r"learning|ownership|discipline|self.starter|independent"
)

_EDUCATION = _rule(
    r"degree|education|bachelor|master|phd|mba|certification|diploma|graduate|university|"
    r"college|school|academic|study|major|minor|concentration|course|curriculum|thesis|"
    r"dissertation|research|scholarship|fellowship|alumnus|alumni|graduation|accredited|"
    r"program|qualification|credentials|licensed|training|field.of.study|gpa|grade|"
    r"educational|requirement"
)

_RESPONSIBILITIES = _rule(
    r"responsible|responsibility|duty|duties|task|function|role|accountable|manage|"
    r"coordinate|lead|direct|supervise|oversee|handle|execute|implement|develop|create|"
    r"maintain|support|assist|help|provide|deliver|ensure|facilitate|monitor|report|"
    r"review|analyze|evaluate|assess|resolve|address|respond|build|design|optimize|"
    r"innovate|transform|establish|define|prepare|perform|conduct|administer|operate|"
    r"run|guide|drive|organize|plan|track|follow|comply|enforce|leverage|utilize|"
    r"streamline"
)

_INDUSTRY = _rule(
    r"industry|sector|market|business|corporate|enterprise|commercial|professional|"
    r"operational|strategic|compliance|regulatory|policy|procedure|standard|guideline|"
    r"protocol|best.practice|benchmark|service|product|solution|client|customer|vendor|"
    r"partner|stakeholder|user|roi|growth|revenue|profit|scalable|sustainable|"
    r"innovative|disruptive|cutting.edge|state.of.the.art|agile|scrum|kanban|lean|"
    r"waterfall|iterative|sprint|milestone|deliverable|requirements|specifications|"
    r"architecture|mvp|poc|go.to.market|b2b|b2c|saas|ecommerce|fintech|healthtech|"
    r"insurtech|regtech|blockchain|cryptocurrency|distributed.ledger"
)

_TOOLS = _rule(
    r"tool|software|platform|application|system|suite|environment|solution|technology|"
    r"interface|dashboard|analytics|automation|infrastructure|cloud|saas|aws|azure|"
    r"google|microsoft|office|excel|word|powerpoint|jira|trello|slack|github|gitlab|"
    r"docker|kubernetes|jenkins|terraform|splunk|tableau|power.bi|salesforce|sap|oracle|"
    r"adobe|windows|linux|unix|mac|ios|android|mobile|desktop|web|browser|framework|"
    r"library|sdk|api|rest|soap|graphql|json|xml|yaml|database|sql|nosql|mysql|"
    r"postgresql|mongodb|firebase|redux|react|angular|vue|svelte|next|nuxt|webpack|"
    r"babel|typescript|golang|rust|scala"
)

_CERTIFICATIONS = _rule(
    r"certified|certification|certificate|license|credential|qualified|accredited|"
    r"authorized|approved|recognized|validated|verified|pmp|agile|scrum|itil|cissp|cpa|"
    r"cfa|series|aws.certified|microsoft.certified|google.certified|oracle.certified|"
    r"cisco.certified|comptia|isaca|iso|ceh|security\+|network\+|azure|aws|gcp|"
    r"professional|associate|expert|specialty|practitioner|foundation|advanced|master"
)

CATEGORY_RULES: List[Tuple[str, Pattern[str]]] = [
    ("certifications", _CREDENTIAL),
    ("technicalSkills", _TECHNICAL),
    ("softSkills", _SOFT),
    ("education", _EDUCATION),
    ("responsibilities", _RESPONSIBILITIES),
    ("industryTerms", _INDUSTRY),
    ("tools", _TOOLS),
    ("certifications", _CERTIFICATIONS),
]

# ── Shape heuristics ──────────────────────────────────────────────────────────

_ALL_UPPER = re.compile(r"^[A-Z]+$")
_UPPER_PREFIX = re.compile(r"^[A-Z]{2,}")
_UPPER_PLUS = re.compile(r"^[A-Z]+\+$")
_HAS_DIGIT = re.compile(r"\d")
_DIGIT_CREDENTIAL = re.compile(r"certification|certified|license|credential", re.IGNORECASE)
_VERSION_LIKE = re.compile(r"version|v\d|\.io|\.\w{2,3}$|\d+\.\d+")
_DEGREE_WORDS = re.compile(r"degree|education|bachelor|master|phd", re.IGNORECASE)
_ING_TECH = re.compile(r"(software|programming|engineering|computing|networking)")
_ACTION_START = re.compile(
    r"^(manage|create|develop|implement|design|provide|ensure|maintain|support)", re.IGNORECASE
)
_KNOWLEDGE_START = re.compile(
    r"^(knowledge of|experience with|proficiency in|expertise in|familiarity with)", re.IGNORECASE
)
_EDU_PHRASE = re.compile(r"degree|certification|diploma|license", re.IGNORECASE)


def empty_result() -> Dict[str, List[str]]:
    return {category: [] for category in CATEGORIES}


def match_rule(keyword: str) -> str:
    """Return the category of the first matching rule, or "" if none match."""
    lowered = keyword.lower()
    for category, pattern in CATEGORY_RULES:
        if pattern.search(lowered):
            return category
    return ""


def guess_by_shape(keyword: str) -> str:
    """Heuristic category for a keyword no rule matched."""
    if " " in keyword and len(keyword) > 15:
        return "responsibilities"

    if _ALL_UPPER.match(keyword) or _UPPER_PREFIX.match(keyword):
        if len(keyword) <= 3 or _UPPER_PLUS.match(keyword):
            return "certifications"
        return "tools"

    if _HAS_DIGIT.search(keyword):
        if _DIGIT_CREDENTIAL.search(keyword):
            return "certifications"
        if _VERSION_LIKE.search(keyword):
            return "tools"
        if _DEGREE_WORDS.search(keyword):
            return "education"
        return "tools"

    if keyword.endswith("ing") and not _ING_TECH.search(keyword):
        return "softSkills" if len(keyword) < 12 else "responsibilities"

    if " " in keyword:
        if _ACTION_START.match(keyword):
            return "responsibilities"
        if _KNOWLEDGE_START.match(keyword):
            return "technicalSkills"
        if _EDU_PHRASE.search(keyword):
            return "education"
        return "industryTerms"

    return "industryTerms"


def categorize_keyword(keyword: str) -> str:
    return match_rule(keyword) or guess_by_shape(keyword)


def categorize_keywords(keywords: Iterable[str]) -> Dict[str, List[str]]:
    """
    Partition keywords into the seven categories.

    Input order is kept within each category. Blank entries are skipped.
    """
    result = empty_result()
    for keyword in keywords:
        if not isinstance(keyword, str):
            continue
        keyword = keyword.strip()
        if not keyword:
            continue
        result[categorize_keyword(keyword)].append(keyword)
    return result


# ── ATS post-processing ───────────────────────────────────────────────────────

MAX_KEYWORD_WORDS = 4

_LIST_SEPARATOR = re.compile(r"\s*[,;]\s*")
_CONJUNCTION = re.compile(r"\s*\b(?:and|or|as well as)\b\s*|\s+&\s+", re.IGNORECASE)
_NOUN_PHRASE = re.compile(
    r"(?:\w+\s){0,2}(?:skills|knowledge|experience|abilities|proficiency|expertise)",
    re.IGNORECASE,
)
_ACTION_PHRASE = re.compile(
    r"(?:manage|develop|create|implement|design|provide|ensure|maintain)\s+(?:\w+\s){0,3}\w+",
    re.IGNORECASE,
)
_RESP_VERB_START = re.compile(
    r"^(manage|develop|create|implement|design|provide|ensure|maintain|support|assist)",
    re.IGNORECASE,
)
_ACTION_VERBS = (
    "manage", "develop", "create", "implement", "design", "provide", "ensure",
    "maintain", "support", "assist", "handle", "coordinate", "analyze", "evaluate",
    "monitor", "review", "plan", "organize", "lead", "direct", "prepare", "perform",
    "conduct", "administer", "collaborate", "communicate", "deliver", "build",
)
_VERB_OBJECT = [
    re.compile(rf"{verb}\s+(?:\w+\s){{0,3}}\w+", re.IGNORECASE) for verb in _ACTION_VERBS
]

STOP_WORDS = frozenset({
    "a", "an", "the", "of", "for", "to", "in", "on", "at", "by", "with", "from",
    "into", "as", "is", "are", "be", "our", "your", "their", "its", "this",
    "that", "these", "those", "using", "via", "within", "across", "other",
    "such", "strong", "good", "excellent", "various",
})


def break_down_phrase(phrase: str, category: str) -> List[str]:
    """
    Split a long phrase into shorter ATS-friendly keywords.

    Commas and semicolons separate list items; each item is split again on
    and / or / "as well as". Bare one-word fragments are dropped for
    responsibilities, where a lone verb carries no meaning.
    """
    parts: List[str] = []
    for item in _LIST_SEPARATOR.split(phrase):
        for segment in _CONJUNCTION.split(item):
            segment = segment.strip(" .")
            if not segment:
                continue
            if category == "responsibilities" and len(segment.split()) < 2:
                continue
            parts.append(segment)

    if len(phrase.split()) > 3:
        parts.extend(m.strip() for m in _NOUN_PHRASE.findall(phrase))
        if category == "responsibilities":
            parts.extend(m.strip() for m in _ACTION_PHRASE.findall(phrase))

    return parts or [phrase]


def compact_keyword(keyword: str) -> str:
    """Drop stop words from keywords over four words, then keep the first four."""
    words = keyword.split()
    if len(words) <= MAX_KEYWORD_WORDS:
        return keyword
    content = [w for w in words if w.lower() not in STOP_WORDS] or words
    return " ".join(content[:MAX_KEYWORD_WORDS])


def simplify_responsibility(text: str) -> str:
    """Reduce a responsibility to its "verb object" core when one is found."""
    for pattern in _VERB_OBJECT:
        match = pattern.search(text)
        if match:
            return match.group(0)
    return text


def process_keywords_for_ats(categorized: Dict[str, List[str]]) -> Dict[str, List[str]]:
    """
    Tidy categorized keywords for ATS matching.

    Long phrases (more than 5 words, 40 chars, or a comma list) are broken
    down, responsibilities reduced to verb-object form, stop words dropped
    and every keyword capped at four words. Duplicates are removed
    case-insensitively in first-seen order.
    """
    result = empty_result()
    for category in CATEGORIES:
        seen = set()
        processed: List[str] = []
        for keyword in categorized.get(category) or []:
            keyword = keyword.strip()
            if not keyword:
                continue
            if len(keyword.split()) > 5 or len(keyword) > 40 or "," in keyword:
                tokens = break_down_phrase(keyword, category)
            else:
                tokens = [keyword]
            for token in tokens:
                if category == "responsibilities" and not _RESP_VERB_START.match(token):
                    token = simplify_responsibility(token)
                token = compact_keyword(token)
                if token.lower() not in seen:
                    seen.add(token.lower())
                    processed.append(token)
        result[category] = processed
    return result


# Used when the LLM reply cannot be parsed
_SIMPLE_TECH = re.compile(r"^(programming|coding|development|software|web|api|database)")
_SIMPLE_SOFT = re.compile(r"^(communication|leadership|teamwork|collaboration)")


def simple_categorize(keywords: Iterable[str], limit: int = 10) -> Dict[str, List[str]]:
    """Coarse prefix-based split into technical, soft and industry terms."""
    result = empty_result()
    for keyword in keywords:
        lowered = keyword.lower()
        if _SIMPLE_TECH.match(lowered):
            bucket = "technicalSkills"
        elif _SIMPLE_SOFT.match(lowered):
            bucket = "softSkills"
        else:
            bucket = "industryTerms"
        if len(result[bucket]) < limit:
            result[bucket].append(keyword)
    return result
