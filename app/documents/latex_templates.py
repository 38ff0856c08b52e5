"""
LaTeX resume layouts.

Each class points at a .tex file under ``templates/``; the Jinja2
environment escapes every interpolated value, so the .tex files only
decide structure.
"""
from app.documents.base import BaseTemplate, ResumeData
from app.documents.latex import latex_env


class LatexTemplate(BaseTemplate):
    """Render ``ResumeData`` through a .tex Jinja2 template."""

    output_format = "latex"
    template_file: str = ""

    def render(self, data: ResumeData) -> str:
        template = latex_env.get_template(self.template_file)
        return template.render(r=data)


class ProfessionalLatexTemplate(LatexTemplate):
    template_id = "professional"
    name = "Professional"
    description = "Single-column letter-size layout with ruled section headings."
    template_file = "professional.tex"


class ModernLatexTemplate(LatexTemplate):
    template_id = "modern"
    name = "Modern"
    description = "A4 layout with shaded section banners; education and projects first."
    template_file = "modern.tex"
