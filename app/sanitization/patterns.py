"""
Attack signatures shared by the sanitizers.

Strict fields (names, titles, status) are rejected when any
``SQL_INJECTION_PATTERNS`` entry matches. Free text has the matching
fragment removed instead.
"""
import re
from typing import List, Pattern

_I = re.IGNORECASE

SQL_INJECTION_PATTERNS: List[Pattern[str]] = [
    re.compile(r"'\s*(or|and)\s*'?\s*'?\s*(=|<|>)", _I),          # ' OR '1'='1
    re.compile(r"'\s*;"),                                           # '; ...
    re.compile(r"'\s*--"),                                          # admin'--
    re.compile(r";\s*(drop|delete|truncate|alter|insert|update|create|exec)\b", _I),
    re.compile(r"\bunion\b\s+(all\s+)?\bselect\b", _I),
    re.compile(r"'\s*(union|select)\s+.*(from|where)", _I),
    re.compile(r"\bselect\b\s+[\w*,\s]+\bfrom\b", _I),
    re.compile(r"\b(drop|truncate|alter)\s+(table|database|schema|column)\b", _I),
    re.compile(r"\binsert\s+into\b", _I),
    re.compile(r"\bdelete\s+from\b", _I),
    re.compile(r"\bupdate\s+\w+\s+set\b", _I),
    re.compile(r"/\*.*?\*/", re.DOTALL),                            # /* block */
    re.compile(r"\b(exec|execute)\s*\(", _I),
    re.compile(r"\b(sp_|xp_)\w+", _I),
    re.compile(r"\b0x[0-9a-f]{4,}\b|\bchar\s*\(", _I),
    re.compile(r"\b(or|and)\b\s+['\"]?\w+['\"]?\s*=\s*['\"]?\w+", _I),  # or 1=1
]

# Always rejected in plain-text fields, even after tag stripping
DANGEROUS_SCRIPT_PATTERNS: List[Pattern[str]] = [
    re.compile(r"<script[^>]*>.*?(fetch\s*\(|document\.|window\.|location\.|cookie)", _I | re.DOTALL),
    re.compile(r"javascript:\s*document\.", _I),
    re.compile(r"\bon\w+\s*=.*?(fetch\s*\(|document\.)", _I),
]

XSS_PATTERNS: List[Pattern[str]] = [
    re.compile(r"<script[^>]*>.*?</script>", _I | re.DOTALL),
    re.compile(r"<iframe[^>]*>.*?</iframe>", _I | re.DOTALL),
    re.compile(r"<object[^>]*>.*?</object>", _I | re.DOTALL),
    re.compile(r"<embed[^>]*>", _I),
    re.compile(r"javascript:", _I),
    re.compile(r"\bon\w+\s*=", _I),
]

DANGEROUS_SCHEME = re.compile(r"\b(javascript|vbscript|data|file)\s*:", _I)
EVENT_HANDLER = re.compile(r"\bon\w+\s*=\s*(\"[^\"]*\"|'[^']*'|\S+)?", _I)
CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")

SUSPICIOUS_PATTERNS: List[Pattern[str]] = [
    re.compile(r"<script|javascript:|data:|vbscript:", _I),
    re.compile(r"(\$\{|\$\(|<%|%>|\{\{|\}\})"),                    # template injection
    re.compile(r"(eval\(|Function\(|setTimeout\(|setInterval\()", _I),
    re.compile(r"(\bon\w+\s*=|href\s*=\s*[\"']?javascript:)", _I),
]

# Prompt injection attempts in text sent to the LLM
PROMPT_INJECTION_PATTERNS: List[Pattern[str]] = [
    re.compile(r"ignore\s+(all\s+)?(previous|prior|above)\s+(instructions|prompts?|rules)", _I),
    re.compile(r"disregard\s+(all\s+)?(previous|prior|above)", _I),
    re.compile(r"forget\s+(everything|all|your)\s+(instructions|rules|above)?", _I),
    re.compile(r"you\s+are\s+now\s+(a|an|the)\b", _I),
    re.compile(r"\bact\s+as\s+(a|an)\s+(different|new|unrestricted)", _I),
    re.compile(r"pretend\s+(to\s+be|you\s+are)", _I),
    re.compile(r"^\s*(system|assistant)\s*:", _I | re.MULTILINE),
    re.compile(r"\[\s*(system|inst)\s*\]|<\|im_start\|>|<<\s*sys\s*>>", _I),
    re.compile(r"(reveal|show|print|output)\s+(your|the)\s+(system\s+)?(prompt|instructions)", _I),
    re.compile(r"instead\s*,?\s+(write|generate|output|tell)", _I),
    re.compile(r"\b(jailbreak|dan\s+mode|developer\s+mode)\b", _I),
]


def matches_any(patterns: List[Pattern[str]], text: str) -> bool:
    return any(p.search(text) for p in patterns)
