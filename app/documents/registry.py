"""
Template registry - maps template ids to layout implementations.

HOW THE REGISTRY WORKS:
  1. Each layout class has a unique string id ("professional", "modern", ...)
  2. Resume / CoverLetter rows store that id in their `template` column
  3. At render time we look up the id, instantiate the class, call render()

Unknown ids never raise: they resolve to the kind's default layout so an
old or mistyped id still produces a document.
"""
from typing import Any, Dict, List, Mapping, Optional, Type

from app.core.logging import get_logger
from app.documents.base import BaseTemplate, CoverLetterData, ResumeData
from app.documents.cover_letters import FormalCoverLetter, ModernCoverLetter, StandardCoverLetter
from app.documents.latex_templates import ModernLatexTemplate, ProfessionalLatexTemplate
from app.documents.pdf import PDF_LAYOUTS, render_resume_pdf
from app.documents.text_templates import TEXT_TEMPLATE_CLASSES

logger = get_logger(__name__)

# ─── Registries ───────────────────────────────────────────────────
# Key = value stored in the `template` column
# Value = the class to instantiate
LATEX_TEMPLATES: Dict[str, Type[BaseTemplate]] = {
    "professional": ProfessionalLatexTemplate,
    "modern": ModernLatexTemplate,
}

TEXT_TEMPLATES: Dict[str, Type[BaseTemplate]] = {
    cls.template_id: cls for cls in TEXT_TEMPLATE_CLASSES
}
# Legacy ids kept by older saved resumes
TEXT_TEMPLATE_ALIASES = {"plain": "professional", "latex": "professional"}

COVER_LETTER_TEMPLATES: Dict[str, Type[BaseTemplate]] = {
    "standard": StandardCoverLetter,
    "modern": ModernCoverLetter,
    "formal": FormalCoverLetter,
}

_REGISTRIES = {
    "latex": (LATEX_TEMPLATES, "professional"),
    "text": (TEXT_TEMPLATES, "professional"),
    "cover_letter": (COVER_LETTER_TEMPLATES, "standard"),
}

DEFAULT_RESUME_TEMPLATE = "professional"
DEFAULT_COVER_LETTER_TEMPLATE = "standard"


def resolve_template_id(kind: str, template_id: Optional[str]) -> str:
    """
    Normalise a requested template id to one that is registered.

    Raises:
        ValueError: If `kind` itself is unknown (programming error)
    """
    if kind not in _REGISTRIES:
        raise ValueError(f"Unknown template kind: {kind}")
    registry, default = _REGISTRIES[kind]

    key = (template_id or "").strip().lower()
    if kind == "text":
        key = TEXT_TEMPLATE_ALIASES.get(key, key)
    if key in registry:
        return key

    if template_id:
        logger.info("template_fallback", kind=kind, requested=template_id, used=default)
    return default


def get_template(kind: str, template_id: Optional[str]) -> BaseTemplate:
    """Get a layout instance, falling back to the kind's default."""
    key = resolve_template_id(kind, template_id)
    registry, _ = _REGISTRIES[kind]
    return registry[key]()


def list_templates(kind: Optional[str] = None) -> List[Dict[str, str]]:
    """List registered layouts, optionally for one kind."""
    kinds = [kind] if kind else list(_REGISTRIES)
    items = []
    for k in kinds:
        registry, _ = _REGISTRIES[k]
        for cls in registry.values():
            items.append({"kind": k, **cls().info()})
    return items


# ─── Entry points ─────────────────────────────────────────────────


def _resume(data: Any) -> ResumeData:
    return data if isinstance(data, ResumeData) else ResumeData.from_dict(data)


def generate_latex_resume(data: Any, template_id: Optional[str] = DEFAULT_RESUME_TEMPLATE) -> str:
    """
    Render resume content as LaTeX source.

    Args:
        data: ResumeData or the raw resume content dict
        template_id: Layout id; unknown ids fall back to "professional"

    Returns:
        Complete .tex document as a string
    """
    return get_template("latex", template_id).render(_resume(data))


def generate_text_resume(data: Any, template_id: Optional[str] = DEFAULT_RESUME_TEMPLATE) -> str:
    """Render resume content as plain text."""
    return get_template("text", template_id).render(_resume(data))


def generate_resume_pdf(data: Any, template_id: Optional[str] = DEFAULT_RESUME_TEMPLATE) -> bytes:
    """Render resume content as PDF bytes."""
    key = (template_id or "").strip().lower()
    if key not in PDF_LAYOUTS:
        key = DEFAULT_RESUME_TEMPLATE
    return render_resume_pdf(_resume(data), key)


def generate_cover_letter(
    data: Mapping[str, Any],
    template_id: Optional[str] = DEFAULT_COVER_LETTER_TEMPLATE,
) -> str:
    """Render a cover letter as plain text."""
    letter = data if isinstance(data, CoverLetterData) else CoverLetterData.from_dict(data)
    return get_template("cover_letter", template_id).render(letter)
