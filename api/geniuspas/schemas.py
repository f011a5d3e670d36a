"""
Data Schemas for GeniusPAS
Pydantic models for the exam configuration form and the generated exam document.
"""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from geniuspas.config import (
    COGNITIVE_LEVELS,
    DEFAULT_ESSAY_COUNT,
    DEFAULT_PG_COUNT,
    MAX_ESSAY_COUNT,
    MAX_PG_COUNT,
    MIXED_COGNITIVE_LEVEL,
)


class QuestionType(str, Enum):
    """Question mix requested for the exam."""
    PG = "Pilihan Ganda"
    ESSAY = "Essai"
    BOTH = "Keduanya"


class Difficulty(str, Enum):
    """Difficulty label attached to each generated item."""
    EASY = "Mudah"
    MEDIUM = "Sedang"
    HARD = "Sulit"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        return None


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON while exposing snake_case attributes."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )


class ExamConfig(CamelModel):
    """Exam blueprint (kisi-kisi) submitted from the configuration form."""
    model_config = ConfigDict(str_strip_whitespace=True)

    kd: str = Field(..., min_length=1, description="Kompetensi Dasar")
    indicators: str = Field(..., min_length=1, description="Indikator soal")
    material: str = Field(..., min_length=1, description="Materi pokok")
    class_name: str = Field(..., min_length=1, description="Kelas/Tingkat")
    cognitive_level: str = Field(MIXED_COGNITIVE_LEVEL, description="Level kognitif (C1-C6)")
    pg_count: int = Field(DEFAULT_PG_COUNT, ge=0, description="Jumlah soal PG")
    essay_count: int = Field(DEFAULT_ESSAY_COUNT, ge=0, description="Jumlah soal essai")
    question_type: QuestionType = Field(QuestionType.BOTH, description="Jenis soal")

    @field_validator("cognitive_level")
    @classmethod
    def check_cognitive_level(cls, value: str) -> str:
        if value not in COGNITIVE_LEVELS:
            raise ValueError(f"cognitiveLevel must be one of: {', '.join(COGNITIVE_LEVELS)}")
        return value

    @model_validator(mode="after")
    def check_counts(self) -> "ExamConfig":
        # Only the counts of the selected type are bounded; the other may be stale
        if self.question_type in (QuestionType.PG, QuestionType.BOTH):
            if not 1 <= self.pg_count <= MAX_PG_COUNT:
                raise ValueError(f"pgCount must be between 1 and {MAX_PG_COUNT} for the selected question type")
        if self.question_type in (QuestionType.ESSAY, QuestionType.BOTH):
            if not 1 <= self.essay_count <= MAX_ESSAY_COUNT:
                raise ValueError(
                    f"essayCount must be between 1 and {MAX_ESSAY_COUNT} for the selected question type"
                )
        return self

    @property
    def requested_pg_count(self) -> int:
        """Multiple-choice count actually requested (0 when essays only)."""
        return 0 if self.question_type == QuestionType.ESSAY else self.pg_count

    @property
    def requested_essay_count(self) -> int:
        """Essay count actually requested (0 when multiple choice only)."""
        return 0 if self.question_type == QuestionType.PG else self.essay_count


class QuestionBase(CamelModel):
    """Fields shared by every generated item. Numbering is supplied by the generator."""
    number: int = Field(..., ge=1, description="Question number")
    question: str = Field(..., description="The question text")
    level: str = Field(..., description="Level kognitif (C1-C6)")
    difficulty: Difficulty = Field(..., description="Tingkat kesulitan (Mudah/Sedang/Sulit)")

    @field_validator("difficulty", mode="before")
    @classmethod
    def normalize_difficulty(cls, value):
        if isinstance(value, str):
            return Difficulty(value)
        return value


class MultipleChoiceQuestion(QuestionBase):
    """A single multiple-choice item with its key and explanation."""
    options: List[str] = Field(
        ..., min_length=4, max_length=5, description="Options rendered as A, B, C, D[, E]"
    )
    key: str = Field(..., description="Correct option letter")
    explanation: str = Field(..., description="Pembahasan singkat")


class EssayQuestion(QuestionBase):
    """A single essay item with its ideal answer and scoring rubric."""
    ideal_answer: str = Field(..., description="Jawaban yang diharapkan")
    rubric: str = Field(..., description="Kisi-kisi atau poin penilaian")


# Fields shown only while the answer key is visible
_KEY_FIELDS = {
    "multiple_choice": {"__all__": {"key", "explanation", "level", "difficulty"}},
    "essays": {"__all__": {"ideal_answer", "rubric", "level", "difficulty"}},
}


class GeneratedExam(CamelModel):
    """Represents a complete generated exam. Never mutated after creation."""
    title: str = Field(..., description="Judul ujian")
    multiple_choice: List[MultipleChoiceQuestion] = Field(..., description="Soal pilihan ganda")
    essays: List[EssayQuestion] = Field(..., description="Soal essai")

    def to_view(self, show_key: bool = False) -> Dict[str, Any]:
        """Serialize for the result view, stripping key material unless shown."""
        if show_key:
            return self.model_dump(mode="json", by_alias=True)
        return self.model_dump(mode="json", by_alias=True, exclude=_KEY_FIELDS)


class SessionView(CamelModel):
    """Read-only snapshot of a session returned by the API."""
    session_id: str
    state: str
    exam_config: Optional[ExamConfig] = None
    exam: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    show_key: bool = False
