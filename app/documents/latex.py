"""
LaTeX helpers and Jinja2 environment for .tex templates.

Templates use LaTeX-friendly delimiters so braces stay literal:
    \\VAR{expr}      output (always passed through escape_latex)
    %% if cond      line statement
"""
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

TEMPLATE_DIR = Path(__file__).parent / "templates"

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

LATEX_SPECIAL_CHARS = {
    "\\": r"\textbackslash{}",
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
    "<": r"\textless{}",
    ">": r"\textgreater{}",
}

_ESCAPE_TABLE = str.maketrans(LATEX_SPECIAL_CHARS)


def escape_latex(value: Any) -> str:
    """
    Escape LaTeX special characters in one pass.

    A single translate() means the braces emitted for a backslash are
    never escaped a second time.
    """
    if value is None:
        return ""
    return str(value).translate(_ESCAPE_TABLE)


def _parse_date(value: str) -> Optional[date]:
    text = value.strip()
    if len(text) == 7 and text[4] == "-":  # YYYY-MM
        text = f"{text}-01"
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def format_latex_date(value: Any) -> str:
    """Render a date as "Mon YYYY"; empty means "Present", junk passes through."""
    if not value:
        return "Present"
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        parsed = value
    else:
        parsed = _parse_date(str(value))
    if parsed is None:
        return str(value)
    return f"{_MONTHS[parsed.month - 1]} {parsed.year}"


def date_range(start: Any, end: Any, current: bool = False, sep: str = " -- ") -> str:
    """Build "Jan 2020 -- Present" style ranges. Both empty gives ""."""
    if not start and not end and not current:
        return ""
    finish = "Present" if current else format_latex_date(end)
    if not start:
        return finish
    return f"{format_latex_date(start)}{sep}{finish}"


latex_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    block_start_string=r"\BLOCK{",
    block_end_string="}",
    variable_start_string=r"\VAR{",
    variable_end_string="}",
    comment_start_string=r"\#{",
    comment_end_string="}",
    line_statement_prefix="%%",
    trim_blocks=True,
    lstrip_blocks=True,
    autoescape=False,
    keep_trailing_newline=True,
    undefined=StrictUndefined,
    finalize=escape_latex,
)
latex_env.globals.update(
    format_date=format_latex_date,
    date_range=date_range,
)
