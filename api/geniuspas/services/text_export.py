"""
Plain-Text Export Service
Student-facing text copy of an exam. Keys, explanations, rubrics and ideal
answers are never included, whatever the answer-key toggle says.
"""
from typing import List, Optional

from geniuspas.schemas import GeneratedExam


def option_label(index: int) -> str:
    """0 -> 'A', 1 -> 'B', ..."""
    return chr(ord("A") + index)


def export_plain_text(exam: GeneratedExam, class_name: Optional[str] = None) -> str:
    lines: List[str] = [
        exam.title,
        f"Kelas: {class_name or '-'}",
        "",
        "A. PILIHAN GANDA",
    ]
    for item in exam.multiple_choice:
        lines.append(f"{item.number}. {item.question}")
        for index, option in enumerate(item.options):
            lines.append(f"   {option_label(index)}. {option}")
        lines.append("")

    lines.append("")
    lines.append("B. ESSAI")
    for item in exam.essays:
        lines.append(f"{item.number}. {item.question}")
        lines.append("")

    return "\n".join(lines) + "\n"
