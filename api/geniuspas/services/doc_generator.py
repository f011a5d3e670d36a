"""
Document Generator Service
Handles the printable .docx exam paper, with the answer key shown only on request.
"""
import logging
from typing import Optional

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches, Pt, RGBColor

from geniuspas.config import EXAM_DURATION_LABEL
from geniuspas.schemas import Difficulty, EssayQuestion, GeneratedExam, MultipleChoiceQuestion
from geniuspas.services.text_export import option_label

log = logging.getLogger(__name__)

BLANK_FIELD = "_________________"

DIFFICULTY_COLORS = {
    Difficulty.EASY: RGBColor(0x16, 0xA3, 0x4A),
    Difficulty.MEDIUM: RGBColor(0xCA, 0x8A, 0x04),
    Difficulty.HARD: RGBColor(0xDC, 0x26, 0x26),
}


def _add_labeled(doc: Document, label: str, value: str, indent: float = 0.5):
    p = doc.add_paragraph()
    p.paragraph_format.left_indent = Inches(indent)
    p.add_run(f"{label}: ").bold = True
    run = p.add_run(value)
    return run


def _add_multiple_choice_key(doc: Document, item: MultipleChoiceQuestion) -> None:
    _add_labeled(doc, "Kunci", item.key).bold = True
    _add_labeled(doc, "Level", item.level)
    run = _add_labeled(doc, "Kesulitan", item.difficulty.value)
    run.font.color.rgb = DIFFICULTY_COLORS[item.difficulty]
    _add_labeled(doc, "Pembahasan", item.explanation).italic = True


def _add_essay_key(doc: Document, item: EssayQuestion) -> None:
    _add_labeled(doc, "Jawaban Ideal", item.ideal_answer)
    _add_labeled(doc, "Rubric/Poin", item.rubric)
    _add_labeled(doc, "Level", f"{item.level} - {item.difficulty.value}")


def _add_question(doc: Document, number: int, question: str) -> None:
    p = doc.add_paragraph()
    p.paragraph_format.space_before = Pt(12)
    p.alignment = WD_ALIGN_PARAGRAPH.JUSTIFY
    p.add_run(f"{number}. ").bold = True
    p.add_run(question)


def _add_answer_lines(doc: Document, count: int = 3) -> None:
    for _ in range(count):
        p_line = doc.add_paragraph()
        p_line.paragraph_format.left_indent = Inches(0.5)
        p_line.add_run("." * 90)


def _add_signatures(doc: Document) -> None:
    doc.add_paragraph("_" * 50).alignment = WD_ALIGN_PARAGRAPH.CENTER
    table = doc.add_table(rows=1, cols=2)
    left, right = table.rows[0].cells
    left.text = "Mengetahui,\nKepala Sekolah\n\n\n\n(__________________)\nNIP."
    right.text = "Guru Mata Pelajaran\n\n\n\n\n(__________________)\nNIP."
    for cell in (left, right):
        for paragraph in cell.paragraphs:
            paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER


def build_document(
    exam: GeneratedExam,
    class_name: Optional[str] = None,
    show_key: bool = False,
) -> Document:
    """
    Builds the exam paper as a python-docx Document.

    Args:
        exam: Generated exam to render.
        class_name: Class label printed in the header ('Kelas/Semester').
        show_key: Include keys, explanations, ideal answers and rubrics.
    """
    doc = Document()

    core_properties = doc.core_properties
    core_properties.title = exam.title
    core_properties.subject = "Penilaian Akhir Semester (PAS)"

    style = doc.styles['Normal']
    style.font.size = Pt(12)

    # Header
    p_head = doc.add_paragraph()
    p_head.alignment = WD_ALIGN_PARAGRAPH.CENTER
    p_head.add_run("PENILAIAN AKHIR SEMESTER (PAS)").bold = True

    heading = doc.add_heading(exam.title.upper(), 1)
    heading.alignment = WD_ALIGN_PARAGRAPH.CENTER

    p_info = doc.add_paragraph()
    p_info.alignment = WD_ALIGN_PARAGRAPH.CENTER
    p_info.add_run(f"Mata Pelajaran: {BLANK_FIELD}")
    p_info.add_run(f" | Kelas/Semester: {class_name or BLANK_FIELD}")
    p_info.add_run(f" | Waktu: {EXAM_DURATION_LABEL}")

    doc.add_paragraph("_" * 50).alignment = WD_ALIGN_PARAGRAPH.CENTER

    if exam.multiple_choice:
        doc.add_heading("A. Pilihan Ganda", level=2)
        for item in exam.multiple_choice:
            _add_question(doc, item.number, item.question)
            for index, option in enumerate(item.options):
                p_opt = doc.add_paragraph()
                p_opt.paragraph_format.left_indent = Inches(0.5)
                p_opt.add_run(f"{option_label(index)}. {option}")
            if show_key:
                _add_multiple_choice_key(doc, item)

    if exam.essays:
        if exam.multiple_choice:
            doc.add_page_break()
        doc.add_heading("B. Soal Uraian (Essai)", level=2)
        for item in exam.essays:
            _add_question(doc, item.number, item.question)
            if show_key:
                _add_essay_key(doc, item)
            else:
                _add_answer_lines(doc)

    _add_signatures(doc)
    return doc


def generate_docx(
    exam: GeneratedExam,
    output_path: str,
    class_name: Optional[str] = None,
    show_key: bool = False,
) -> None:
    """
    Generates a printable .docx file from a GeneratedExam.

    Args:
        exam: GeneratedExam containing the exam data.
        output_path: Path where the .docx file should be saved.
        class_name: Class label for the header.
        show_key: Whether the answer key is printed.
    """
    log.info("[Publisher] Generating DOCX at %s (answer key %s)", output_path, "on" if show_key else "off")
    doc = build_document(exam, class_name=class_name, show_key=show_key)
    doc.save(output_path)
