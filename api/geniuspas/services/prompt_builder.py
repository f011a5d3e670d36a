"""
Prompt Builder Service
Turns an exam configuration into the Gemini prompt and the strict output schema.
"""
from typing import NamedTuple, Optional

from google.genai import types

from geniuspas.config import get_prompt
from geniuspas.schemas import ExamConfig, QuestionType


class GenerationRequest(NamedTuple):
    prompt: str
    schema: types.Schema


MULTIPLE_CHOICE_FIELDS = ["number", "question", "options", "key", "explanation", "level", "difficulty"]
ESSAY_FIELDS = ["number", "question", "idealAnswer", "rubric", "level", "difficulty"]
EXAM_FIELDS = ["title", "multipleChoice", "essays"]


def describe_question_counts(config: ExamConfig) -> str:
    """
    Build the item-count line of the prompt.

    Only the counts relevant to the selected question type are mentioned, so a
    stale count for the other type never reaches the model.
    """
    if config.question_type == QuestionType.PG:
        return f"{config.pg_count} PG"
    if config.question_type == QuestionType.ESSAY:
        return f"{config.essay_count} Essai"
    return f"{config.pg_count} PG dan {config.essay_count} Essai"


def _string(description: Optional[str] = None) -> types.Schema:
    return types.Schema(type=types.Type.STRING, description=description)


def build_exam_schema() -> types.Schema:
    """Schema descriptor for the GeneratedExam JSON the model must return."""
    multiple_choice_item = types.Schema(
        type=types.Type.OBJECT,
        properties={
            "number": types.Schema(type=types.Type.INTEGER),
            "question": _string(),
            "options": types.Schema(
                type=types.Type.ARRAY,
                items=_string(),
                description="Array of 4 or 5 options (A, B, C, D, E)",
            ),
            "key": _string("Jawaban benar (misal: 'A')"),
            "explanation": _string("Pembahasan singkat"),
            "level": _string("Level Kognitif (C1-C6)"),
            "difficulty": _string("Tingkat Kesulitan (Mudah/Sedang/Sulit)"),
        },
        required=list(MULTIPLE_CHOICE_FIELDS),
    )
    essay_item = types.Schema(
        type=types.Type.OBJECT,
        properties={
            "number": types.Schema(type=types.Type.INTEGER),
            "question": _string(),
            "idealAnswer": _string("Jawaban yang diharapkan"),
            "rubric": _string("Kisi-kisi atau poin penilaian"),
            "level": _string("Level Kognitif"),
            "difficulty": _string("Tingkat Kesulitan"),
        },
        required=list(ESSAY_FIELDS),
    )
    return types.Schema(
        type=types.Type.OBJECT,
        properties={
            "title": _string("Judul ujian yang relevan dengan materi"),
            "multipleChoice": types.Schema(
                type=types.Type.ARRAY,
                description="Daftar soal pilihan ganda",
                items=multiple_choice_item,
            ),
            "essays": types.Schema(
                type=types.Type.ARRAY,
                description="Daftar soal essai",
                items=essay_item,
            ),
        },
        required=list(EXAM_FIELDS),
    )


def build_request(config: ExamConfig) -> GenerationRequest:
    """
    Build the prompt and output schema for one generation call.

    Args:
        config: Validated exam configuration.

    Returns:
        GenerationRequest with the prompt text and the response schema.
    """
    prompt = get_prompt(
        "pas",
        kd=config.kd,
        indicators=config.indicators,
        material=config.material,
        class_name=config.class_name,
        cognitive_level=config.cognitive_level,
        question_counts=describe_question_counts(config),
        question_type=config.question_type.value,
    )
    return GenerationRequest(prompt=prompt, schema=build_exam_schema())
