"""
Field-level sanitizers.

Two policies:
  - strict_text: names, titles, status values. Attack signatures raise
    SanitizationError; tags are stripped.
  - clean_text / clean_html: free text. Tags outside the allow-list,
    dangerous schemes and SQL signatures are removed; nothing raises
    except the script-exfiltration patterns that are never legitimate.
"""
import re
from datetime import date, datetime
from typing import Any, Iterable, List, Optional, Pattern, Sequence
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from email_validator import EmailNotValidError, validate_email

from app.core.exceptions import SanitizationError
from app.core.logging import get_logger
from app.sanitization.patterns import (
    CONTROL_CHARS,
    DANGEROUS_SCHEME,
    DANGEROUS_SCRIPT_PATTERNS,
    EVENT_HANDLER,
    SQL_INJECTION_PATTERNS,
    SUSPICIOUS_PATTERNS,
    XSS_PATTERNS,
    matches_any,
)

logger = get_logger(__name__)

ALLOWED_HTML_TAGS = frozenset({"p", "br", "strong", "em", "ul", "ol", "li"})
FORBIDDEN_HTML_TAGS = ("script", "style", "iframe", "object", "embed", "link", "meta", "noscript")

BLOCKED_URL_SCHEMES = ("javascript", "data", "vbscript", "file", "ftp", "chrome", "chrome-extension")
_URL_ENCODED_TAGS = re.compile(r"%3c|%3e|<script", re.IGNORECASE)
_PHONE_CHARS = re.compile(r"[^0-9\s\-()+.]")
_SLUG = re.compile(r"^[a-z\-_]*$")
_WHITESPACE = re.compile(r"[ \t]+")
_TAG_OPENER = re.compile(r"<(?=[A-Za-z/!?])")
_MAX_STRIP_PASSES = 5


def _to_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _preview(text: str) -> str:
    return text[:50]


def _soup(text: str) -> BeautifulSoup:
    soup = BeautifulSoup(text, "html.parser")
    for tag in soup.find_all(FORBIDDEN_HTML_TAGS):
        tag.decompose()
    return soup


def strip_tags(text: str) -> str:
    """
    Remove all markup, dropping script/style content entirely.

    get_text() decodes entities, so ``&lt;script&gt;`` becomes a real tag;
    passes repeat until the text stops changing and any tag opener left
    over is removed.
    """
    for _ in range(_MAX_STRIP_PASSES):
        if "<" not in text:
            return text
        stripped = _soup(text).get_text()
        if stripped == text:
            break
        text = stripped
    return _TAG_OPENER.sub("", text)


def _remove(patterns: Sequence[Pattern[str]], text: str) -> str:
    for pattern in patterns:
        text = pattern.sub("", text)
    return text


def find_sql_injection(text: str) -> bool:
    return matches_any(SQL_INJECTION_PATTERNS, text)


# ── Strict fields ─────────────────────────────────────────────────────────────


def strict_text(
    value: Any,
    field: str,
    *,
    max_length: int = 200,
    required: bool = False,
    allowed: Optional[Pattern[str]] = None,
) -> str:
    """
    Sanitize a field that must not carry any attack signature.

    Raises:
        SanitizationError: SQL injection signature, disallowed characters,
            or a required field left empty
    """
    text = _to_str(value)
    if not text:
        if required:
            raise SanitizationError(f"{field} is required", field=field)
        return ""

    if find_sql_injection(text):
        logger.warning("sql_injection_attempt", field=field, preview=_preview(text))
        raise SanitizationError(f"SQL injection pattern detected in {field}", field=field)

    if matches_any(XSS_PATTERNS, text):
        logger.warning("xss_attempt", field=field, preview=_preview(text))

    cleaned = strip_tags(text)
    cleaned = EVENT_HANDLER.sub("", DANGEROUS_SCHEME.sub("", cleaned))
    cleaned = CONTROL_CHARS.sub("", cleaned).strip()

    if allowed is not None and not allowed.match(cleaned):
        raise SanitizationError(f"{field} contains invalid characters", field=field)

    if required and not cleaned:
        raise SanitizationError(f"{field} is required", field=field)

    if len(cleaned) > max_length:
        logger.info("field_truncated", field=field, length=len(cleaned), max_length=max_length)
        cleaned = cleaned[:max_length]
    return cleaned


def slug_text(value: Any, field: str, max_length: int = 50) -> str:
    """Lowercase identifier such as a template id."""
    return strict_text(_to_str(value).lower(), field, max_length=max_length, allowed=_SLUG)


# ── Free text ─────────────────────────────────────────────────────────────────


def _reject_exfiltration(text: str, field: str) -> None:
    if matches_any(DANGEROUS_SCRIPT_PATTERNS, text):
        logger.warning("malicious_script_rejected", field=field, preview=_preview(text))
        raise SanitizationError(f"{field} contains potentially malicious content", field=field)


def clean_text(value: Any, field: str = "text", *, max_length: int = 1000) -> str:
    """Plain text: strip every tag, dangerous scheme and SQL signature."""
    text = _to_str(value)
    if not text:
        return ""
    _reject_exfiltration(text, field)

    cleaned = strip_tags(text)
    cleaned = EVENT_HANDLER.sub("", DANGEROUS_SCHEME.sub("", cleaned))
    if find_sql_injection(cleaned):
        logger.warning("sql_signature_stripped", field=field, preview=_preview(cleaned))
        cleaned = _remove(SQL_INJECTION_PATTERNS, cleaned)
    cleaned = CONTROL_CHARS.sub("", cleaned)
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    return cleaned[:max_length]


def _truncate_html(soup: BeautifulSoup, max_length: int) -> str:
    """Shorten text nodes from the end so the serialized markup fits."""
    html = CONTROL_CHARS.sub("", str(soup)).strip()
    while len(html) > max_length:
        nodes = soup.find_all(string=True)
        if not nodes:
            return ""
        node = nodes[-1]
        overflow = len(html) - max_length
        text = str(node)
        if len(text) > overflow:
            node.replace_with(text[: len(text) - overflow])
        else:
            parent = node.parent
            node.extract()
            # Drop elements left without any text
            while parent is not None and parent is not soup and not parent.get_text():
                grandparent = parent.parent
                parent.decompose()
                parent = grandparent
        html = CONTROL_CHARS.sub("", str(soup)).strip()
    return html


def clean_html(value: Any, field: str = "html", *, max_length: int = 2000) -> str:
    """
    Rich text limited to p, br, strong, em, ul, ol, li with no attributes.

    Other tags are unwrapped (their text survives); script-like tags are
    removed with their content.
    """
    text = _to_str(value)
    if not text:
        return ""
    _reject_exfiltration(text, field)

    soup = _soup(text)
    for tag in soup.find_all(True):
        if tag.name in ALLOWED_HTML_TAGS:
            tag.attrs = {}
        else:
            tag.unwrap()
    for node in soup.find_all(string=True):
        cleaned = DANGEROUS_SCHEME.sub("", str(node))
        if find_sql_injection(cleaned):
            logger.warning("sql_signature_stripped", field=field, preview=_preview(cleaned))
            cleaned = _remove(SQL_INJECTION_PATTERNS, cleaned)
        if cleaned != str(node):
            node.replace_with(cleaned)

    return _truncate_html(soup, max_length)


def clean_string_list(
    values: Any,
    field: str,
    *,
    max_items: int = 50,
    max_length: int = 50,
) -> List[str]:
    """Sanitize a list of short strings; invalid or empty items are dropped."""
    if not isinstance(values, (list, tuple)):
        return []
    if len(values) > max_items:
        logger.info("list_truncated", field=field, count=len(values), max_items=max_items)
    result = []
    for item in values[:max_items]:
        if not isinstance(item, (str, int, float)):
            continue
        try:
            cleaned = clean_text(item, field, max_length=max_length)
        except SanitizationError:
            continue
        if cleaned:
            result.append(cleaned)
    return result


# ── Typed values ──────────────────────────────────────────────────────────────


def sanitize_email(value: Any, field: str = "email") -> str:
    """
    Validate and normalise an email address (lowercased, max 254 chars).

    Raises:
        SanitizationError: Suspicious content or an invalid address
    """
    text = strip_tags(_to_str(value))
    if not text:
        return ""
    if re.search(r"<script|javascript:|on\w+=|data:", text, re.IGNORECASE):
        logger.warning("suspicious_email", field=field, preview=_preview(text))
        raise SanitizationError(f"Suspicious content in {field}", field=field)
    if len(text) > 254:
        raise SanitizationError(f"{field} is too long", field=field)
    try:
        result = validate_email(text, check_deliverability=False)
    except EmailNotValidError as exc:
        raise SanitizationError(f"Invalid {field}: {exc}", field=field) from exc
    return result.normalized.lower()


def sanitize_phone(value: Any, field: str = "phone") -> str:
    """Keep digits and phone punctuation; result must be 7-20 chars."""
    text = strip_tags(_to_str(value))
    if not text:
        return ""
    if re.search(r"<script|javascript:|on\w+=", text, re.IGNORECASE):
        raise SanitizationError(f"Suspicious content in {field}", field=field)
    phone = _PHONE_CHARS.sub("", text).strip()
    if not 7 <= len(phone) <= 20:
        raise SanitizationError(f"Invalid {field} length", field=field)
    return phone


def sanitize_url(
    value: Any,
    field: str = "url",
    *,
    allowed_domains: Optional[Iterable[str]] = None,
) -> str:
    """
    Validate an http(s) URL, adding https:// when no scheme is given.

    Raises:
        SanitizationError: Blocked scheme, encoded markup, bad hostname or
            a domain outside `allowed_domains`
    """
    url = _to_str(value)
    if not url:
        return ""

    lowered = url.lower()
    scheme = lowered.split(":", 1)[0] if ":" in lowered else ""
    if scheme in BLOCKED_URL_SCHEMES or _URL_ENCODED_TAGS.search(url):
        logger.warning("blocked_url", field=field, preview=_preview(url))
        raise SanitizationError(f"{field} uses a blocked protocol or content", field=field)

    if not re.match(r"^https?://", lowered):
        url = f"https://{url}"

    parsed = urlparse(url)
    hostname = (parsed.hostname or "").lower()
    if not hostname or "." not in hostname:
        raise SanitizationError(
            f"Please enter a valid website URL for {field} (e.g., www.example.com)", field=field
        )
    if len(hostname) > 253:
        raise SanitizationError(f"{field} domain is too long", field=field)

    if allowed_domains:
        domains = list(allowed_domains)
        bare = hostname[4:] if hostname.startswith("www.") else hostname
        if not any(bare == d or bare.endswith(f".{d}") for d in domains):
            raise SanitizationError(
                f"{field} must be on one of: {', '.join(domains)}", field=field
            )
    return url[:2048]


def sanitize_date(
    value: Any,
    field: str = "date",
    *,
    min_year: int = 1950,
    max_year: int = 2050,
) -> str:
    """
    Accept YYYY-MM-DD, YYYY-MM, MM/DD/YYYY or ISO-8601 and return YYYY-MM-DD.

    Raises:
        SanitizationError: Unparseable or out of range
    """
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        parsed = value
    else:
        text = strip_tags(_to_str(value))
        if not text:
            return ""
        parsed = None
        for fmt in ("%Y-%m-%d", "%Y-%m", "%m/%d/%Y"):
            try:
                parsed = datetime.strptime(text, fmt).date()
                break
            except ValueError:
                continue
        if parsed is None:
            try:
                parsed = datetime.fromisoformat(text.replace("Z", "+00:00")).date()
            except ValueError:
                raise SanitizationError(f"Invalid {field} format. Use YYYY-MM-DD", field=field)

    if not min_year <= parsed.year <= max_year:
        raise SanitizationError(f"{field} is out of range", field=field)
    return parsed.isoformat()


# ── Detection ─────────────────────────────────────────────────────────────────


def detect_suspicious_patterns(text: str, field: str = "text") -> List[str]:
    """
    List reasons a value looks like an obfuscated attack. Empty means clean.

    Reports; never raises. Callers decide whether to reject.
    """
    if not text:
        return []
    reasons = []
    if re.fullmatch(r"[A-Za-z0-9+/]+=*", text) and len(text) > 50:
        reasons.append(f"Base64-like content in {field}")
    special = sum(1 for ch in text if not (ch.isalnum() or ch.isspace()))
    if special > len(text) * 0.3:
        reasons.append(f"Excessive special characters in {field}")
    if DANGEROUS_SCHEME.search(text):
        reasons.append(f"Dangerous URL protocol in {field}")
    if CONTROL_CHARS.search(text):
        reasons.append(f"Control characters detected in {field}")
    for pattern in SUSPICIOUS_PATTERNS[1:]:
        if pattern.search(text):
            reasons.append(f"Injection pattern in {field}")
            break
    return reasons
