from __future__ import annotations

import logging
from io import BytesIO

from bs4 import BeautifulSoup
from reportlab.lib import colors
from reportlab.lib.enums import TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import letter as letter_pagesize
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from jobtracker.views.letter_view import DEFAULT_ACCENT_COLOR, Letter

logger = logging.getLogger(__name__)


def html_paragraphs(markup: str) -> list[str]:
    """Split letter HTML into plain paragraphs, one per block element."""
    if not markup.strip():
        return []
    soup = BeautifulSoup(markup, "html.parser")
    for br in soup.find_all("br"):
        br.replace_with("\n")
    blocks = soup.find_all(["p", "li"])
    texts = [block.get_text() for block in blocks] if blocks else [soup.get_text()]
    return [text.strip() for text in texts if text.strip()]


def _accent(value: str) -> colors.Color:
    try:
        return colors.toColor(value)
    except ValueError:
        logger.warning("Unrecognised letter color %r; using default", value)
        return colors.toColor(DEFAULT_ACCENT_COLOR)


def _escape(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace("\n", "<br/>")


def export_letter_pdf(letter: Letter) -> bytes:
    """Render an already loaded letter to PDF bytes.

    Only the letter's own content is used; an unloaded letter exports the
    error message it displays.
    """
    buffer = BytesIO()
    document = SimpleDocTemplate(
        buffer,
        pagesize=letter_pagesize,
        leftMargin=inch,
        rightMargin=inch,
        topMargin=inch,
        bottomMargin=inch,
        title="Cover Letter",
    )
    styles = getSampleStyleSheet()
    accent = _accent(letter.color)
    body_style = ParagraphStyle("LetterBody", parent=styles["Normal"], fontSize=11, leading=15, alignment=TA_LEFT)
    date_style = ParagraphStyle("LetterDate", parent=body_style, alignment=TA_RIGHT, textColor=accent)
    heading_style = ParagraphStyle("LetterHeading", parent=body_style, textColor=accent, fontName="Helvetica-Bold")

    story: list = [Paragraph(_escape(letter.display_date), date_style), Spacer(1, 0.3 * inch)]
    if letter.record is None:
        story.append(Paragraph(_escape(letter.error), body_style))
    else:
        for text in html_paragraphs(letter.record.greeting):
            story.extend([Paragraph(_escape(text), heading_style), Spacer(1, 0.15 * inch)])
        for text in html_paragraphs(letter.record.body):
            story.extend([Paragraph(_escape(text), body_style), Spacer(1, 0.15 * inch)])
        for text in html_paragraphs(letter.record.salutation):
            story.append(Paragraph(_escape(text), body_style))

    document.build(story)
    return buffer.getvalue()
