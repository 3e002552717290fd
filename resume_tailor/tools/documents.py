"""
Resume document rendering.

Turns tailored resume content into DOCX (python-docx) or PDF (reportlab)
bytes, plus the download filename.
"""

import io
import re
from collections.abc import Iterable
from xml.sax.saxutils import escape

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches, Pt, RGBColor
from reportlab.lib.colors import HexColor
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer

from resume_tailor.agents.results import TailoredContent

FORMATS = ("pdf", "docx")
MEDIA_TYPES = {
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

NAVY = "1a365d"
SLATE = "2d3748"
GREY = "4a5568"
MUTED = "718096"
ACCENT = "3182ce"


def _first_name(name: str) -> str:
    parts = name.split()
    return re.sub(r"[^A-Za-z0-9]", "", parts[0]) if parts else ""


def clean_company(company: str) -> str:
    """Alphanumerics only, at most 20 characters."""
    return re.sub(r"[^A-Za-z0-9]", "", company or "")[:20]


def resume_basename(name: str, company: str) -> str:
    """``<FirstName>_Resume_<Company>`` with whatever parts are known."""
    first = _first_name(name or "")
    company = clean_company(company)
    if first and company:
        return f"{first}_Resume_{company}"
    if first:
        return f"{first}_Resume"
    return "tailored_resume"


def _clean_bullet(text: str) -> str:
    return re.sub(r"^[•\-*]\s*", "", text)


def _sections(content: TailoredContent) -> Iterable[tuple[str, list[str]]]:
    """Simple bullet sections after the experience block."""
    yield "CERTIFICATIONS", content.certifications
    yield "PROFESSIONAL DEVELOPMENT", content.professional_development
    yield "EDUCATION", content.education


def _contact_line(content: TailoredContent) -> str:
    contact = content.contact
    location = ", ".join(part for part in (contact.city, contact.state) if part)
    return " | ".join(part for part in (contact.phone, contact.email, location, contact.linkedin) if part)


# DOCX


def _docx_heading(doc, text: str):
    p = doc.add_paragraph()
    run = p.add_run(text)
    run.font.size = Pt(13)
    run.font.bold = True
    run.font.color.rgb = RGBColor.from_string(SLATE)
    p.paragraph_format.space_before = Pt(10)
    p.paragraph_format.space_after = Pt(4)


def _docx_text(doc, text: str, size: int = 10, color: str = GREY, style: str | None = None):
    p = doc.add_paragraph(style=style)
    run = p.add_run(text)
    run.font.size = Pt(size)
    run.font.color.rgb = RGBColor.from_string(color)
    p.paragraph_format.space_after = Pt(2)
    return p


def render_docx(content: TailoredContent) -> bytes:
    """Generates a .docx file from tailored resume content."""
    doc = Document()
    for section in doc.sections:
        section.top_margin = Inches(0.7)
        section.bottom_margin = Inches(0.7)
        section.left_margin = Inches(0.7)
        section.right_margin = Inches(0.7)

    name = doc.add_paragraph()
    name.alignment = WD_ALIGN_PARAGRAPH.CENTER
    run = name.add_run(content.contact.name or "Resume")
    run.font.size = Pt(22)
    run.font.bold = True
    run.font.color.rgb = RGBColor.from_string(NAVY)

    if content.contact.title:
        _docx_text(doc, content.contact.title, size=13, color=SLATE).alignment = WD_ALIGN_PARAGRAPH.CENTER
    if contact_line := _contact_line(content):
        _docx_text(doc, contact_line).alignment = WD_ALIGN_PARAGRAPH.CENTER

    if content.summary:
        _docx_heading(doc, "PROFESSIONAL SUMMARY")
        _docx_text(doc, content.summary).alignment = WD_ALIGN_PARAGRAPH.JUSTIFY

    if content.skills:
        _docx_heading(doc, "CORE COMPETENCIES")
        for skill in content.skills:
            _docx_text(doc, skill, style="List Bullet")

    if content.experience:
        _docx_heading(doc, "PROFESSIONAL EXPERIENCE")
        for entry in content.experience:
            p = doc.add_paragraph()
            title = p.add_run(" | ".join(part for part in (entry.title, entry.company) if part))
            title.font.size = Pt(11)
            title.font.bold = True
            if entry.duration:
                dates = p.add_run(f"  {entry.duration}")
                dates.font.size = Pt(10)
                dates.font.italic = True
                dates.font.color.rgb = RGBColor.from_string(MUTED)
            for achievement in entry.achievements:
                _docx_text(doc, _clean_bullet(achievement), style="List Bullet")

    if content.keywords:
        _docx_heading(doc, "TECHNICAL PROFICIENCIES")
        _docx_text(doc, " • ".join(content.keywords))

    for heading, items in _sections(content):
        if items:
            _docx_heading(doc, heading)
            for item in items:
                _docx_text(doc, item, style="List Bullet")

    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


# PDF


def _pdf_styles() -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()["Normal"]
    return {
        "name": ParagraphStyle(
            "Name", parent=base, fontName="Helvetica-Bold", fontSize=24, leading=28,
            alignment=TA_CENTER, textColor=HexColor(f"#{NAVY}"),
        ),
        "title": ParagraphStyle(
            "Title", parent=base, fontSize=14, leading=18, alignment=TA_CENTER, textColor=HexColor(f"#{SLATE}"),
        ),
        "contact": ParagraphStyle(
            "Contact", parent=base, fontSize=10, leading=13, alignment=TA_CENTER, textColor=HexColor(f"#{GREY}"),
        ),
        "section": ParagraphStyle(
            "Section", parent=base, fontName="Helvetica-Bold", fontSize=13, leading=16,
            spaceBefore=10, textColor=HexColor(f"#{SLATE}"),
        ),
        "body": ParagraphStyle(
            "Body", parent=base, fontSize=10, leading=13, alignment=TA_JUSTIFY, textColor=HexColor(f"#{GREY}"),
        ),
        "job": ParagraphStyle(
            "Job", parent=base, fontName="Helvetica-Bold", fontSize=11, leading=14,
            spaceBefore=6, textColor=HexColor(f"#{SLATE}"),
        ),
        "dates": ParagraphStyle(
            "Dates", parent=base, fontName="Helvetica-Oblique", fontSize=10, leading=13,
            textColor=HexColor(f"#{MUTED}"),
        ),
        "bullet": ParagraphStyle(
            "Bullet", parent=base, fontSize=10, leading=13, leftIndent=12, firstLineIndent=-8,
            textColor=HexColor(f"#{GREY}"),
        ),
    }


def _pdf_section(story: list, styles: dict, heading: str):
    story.append(Paragraph(heading, styles["section"]))
    story.append(HRFlowable(width="100%", thickness=0.8, color=HexColor(f"#{ACCENT}"), spaceAfter=4))


def _pdf_bullets(story: list, styles: dict, items: list[str]):
    for item in items:
        story.append(Paragraph(f"• {escape(_clean_bullet(item))}", styles["bullet"]))


def render_pdf(content: TailoredContent) -> bytes:
    """Generates a .pdf file from tailored resume content."""
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer, pagesize=letter,
        rightMargin=0.7 * inch, leftMargin=0.7 * inch,
        topMargin=0.7 * inch, bottomMargin=0.7 * inch,
    )
    styles = _pdf_styles()
    story = [Paragraph(escape(content.contact.name or "Resume"), styles["name"])]

    if content.contact.title:
        story.append(Paragraph(escape(content.contact.title), styles["title"]))
    if contact_line := _contact_line(content):
        story.append(Paragraph(escape(contact_line), styles["contact"]))
    story.append(Spacer(1, 8))

    if content.summary:
        _pdf_section(story, styles, "PROFESSIONAL SUMMARY")
        story.append(Paragraph(escape(content.summary), styles["body"]))

    if content.skills:
        _pdf_section(story, styles, "CORE COMPETENCIES")
        _pdf_bullets(story, styles, content.skills)

    if content.experience:
        _pdf_section(story, styles, "PROFESSIONAL EXPERIENCE")
        for entry in content.experience:
            story.append(Paragraph(escape(" | ".join(p for p in (entry.title, entry.company) if p)), styles["job"]))
            if entry.duration:
                story.append(Paragraph(escape(entry.duration), styles["dates"]))
            _pdf_bullets(story, styles, entry.achievements)

    if content.keywords:
        _pdf_section(story, styles, "TECHNICAL PROFICIENCIES")
        story.append(Paragraph(escape(" • ".join(content.keywords)), styles["body"]))

    for heading, items in _sections(content):
        if items:
            _pdf_section(story, styles, heading)
            _pdf_bullets(story, styles, items)

    doc.build(story)
    return buffer.getvalue()


def render_document(content: TailoredContent | dict, fmt: str) -> bytes:
    """Render tailored content as ``pdf`` or ``docx`` bytes."""
    if fmt not in FORMATS:
        raise ValueError("Format must be pdf or docx")
    if not isinstance(content, TailoredContent):
        content = TailoredContent.model_validate(content)
    return render_pdf(content) if fmt == "pdf" else render_docx(content)
