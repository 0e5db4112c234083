# backend/course_eval/services/pdf_report.py
import logging
from io import BytesIO
from typing import List, Optional, Sequence, Tuple
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from .aggregator import MetricBucket

logger = logging.getLogger(__name__)

# ----------------------------------------------------------------------
# Fixed header, identical on every report
# ----------------------------------------------------------------------
HEADER_LINES: Tuple[str, ...] = (
    "UNIVERSIDADE CATÓLICA DE PERNAMBUCO",
    "SISTEMA DE AVALIAÇÃO",
    "RESULTADO DA AVALIAÇÃO DISCENTE 2024.1",
    "ICAM-TECH",
    "CURSO DE SISTEMAS PARA INTERNET",
    "RELATÓRIO DO SISTEMA DE AVALIAÇÃO",
)

INSTRUCTIONS = (
    "Manifeste o seu grau de concordância com as afirmações a seguir, referentes à "
    "maioria dos professores deste semestre segundo a escala que apresenta uma variação "
    "de 1 (discordo totalmente) a 5 (concordo plenamente)."
)

REPORT_TITLE = "Relatório do Sistema de Avaliação"


# ----------------------------------------------------------------------
# Filenames
# ----------------------------------------------------------------------
def _sanitize_filename(name: str, fallback: str = "rating_metrics.pdf") -> str:
    # Keep it simple: alnum, dash, underscore, dot
    safe = "".join(ch for ch in name if ch.isalnum() or ch in ("-", "_", "."))
    return safe or fallback


def report_filename(course_id: str) -> str:
    return _sanitize_filename(f"rating_metrics_course_{course_id}.pdf")


# ----------------------------------------------------------------------
# PDF generation
# ----------------------------------------------------------------------
def _styles():
    styles = getSampleStyleSheet()
    header = ParagraphStyle("ReportHeader", parent=styles["Normal"], fontSize=12, leading=15)
    instructions = ParagraphStyle("Instructions", parent=styles["Normal"], fontSize=14, leading=18, spaceBefore=24, spaceAfter=24)
    section = ParagraphStyle("SectionLabel", parent=styles["Normal"], fontName="Times-Bold", fontSize=12, leading=15, spaceBefore=14, spaceAfter=4)
    body = ParagraphStyle("SectionBody", parent=styles["Normal"], fontSize=11, leading=14)
    return header, instructions, section, body


def build_story(sections: Sequence[Tuple[str, MetricBucket]]) -> List:
    header, instructions, section, body = _styles()

    story: List = [Paragraph(escape(line), header) for line in HEADER_LINES]
    story.append(Paragraph(escape(INSTRUCTIONS), instructions))

    for label, bucket in sections:
        story.append(Paragraph(escape(label), section))
        story.append(
            Paragraph(f"Média: {bucket.average:.2f} - Participação: {bucket.response_count}", body)
        )
        story.append(Spacer(1, 0.08 * inch))
        for score, count in bucket.histogram.items():
            story.append(Paragraph(f"{score}: {count}", body))
    return story


def render_report(sections: Sequence[Tuple[str, MetricBucket]], title: Optional[str] = None) -> bytes:
    """
    Render ordered (label, bucket) pairs into PDF bytes.
    An empty sequence yields a header-only document.
    """
    buf = BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        rightMargin=50,
        leftMargin=50,
        topMargin=50,
        bottomMargin=50,
        title=title or REPORT_TITLE,
        author="Sistema de Avaliação",
    )
    doc.build(build_story(sections))
    pdf = buf.getvalue()
    logger.info("[pdf_report] rendered %d section(s), %d bytes", len(sections), len(pdf))
    return pdf
