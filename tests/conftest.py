"""
Pytest Configuration & Shared Fixtures
"""
import json
from unittest.mock import MagicMock

import pytest

from geniuspas.main import sessions
from geniuspas.schemas import ExamConfig, GeneratedExam, QuestionType


@pytest.fixture
def exam_config():
    """A valid blueprint requesting both question types."""
    return ExamConfig(
        kd="3.4 Menganalisis besaran-besaran fisis pada gerak lurus",
        indicators="Siswa dapat menghitung kecepatan rata-rata",
        material="Gerak Lurus Berubah Beraturan (GLBB)",
        class_name="X SMA",
        cognitive_level="C3 - Menerapkan",
        pg_count=2,
        essay_count=1,
        question_type=QuestionType.BOTH,
    )


@pytest.fixture
def exam_payload():
    """Raw Gemini JSON: 2 multiple-choice items (4 options each) and 1 essay."""
    return {
        "title": "PAS Fisika Kelas X",
        "multipleChoice": [
            {
                "number": 1,
                "question": "Satuan kecepatan dalam SI adalah ...",
                "options": ["m/s", "km/jam", "m/s²", "cm/s"],
                "key": "A",
                "explanation": "Satuan SI untuk panjang adalah meter dan waktu adalah sekon",
                "level": "C1",
                "difficulty": "Mudah",
            },
            {
                "number": 2,
                "question": "Benda menempuh 100 m dalam 20 s. Kecepatan rata-ratanya adalah ...",
                "options": ["2 m/s", "5 m/s", "10 m/s", "20 m/s"],
                "key": "B",
                "explanation": "Kecepatan rata-rata sama dengan jarak dibagi waktu",
                "level": "C3",
                "difficulty": "Sulit",
            },
        ],
        "essays": [
            {
                "number": 1,
                "question": "Jelaskan perbedaan GLB dan GLBB beserta contohnya!",
                "idealAnswer": "GLB memiliki kecepatan tetap sedangkan GLBB memiliki percepatan tetap",
                "rubric": "Skor 4 jika kedua definisi dan contoh benar",
                "level": "C2",
                "difficulty": "Sedang",
            }
        ],
    }


@pytest.fixture
def sample_exam(exam_payload):
    """Returns a valid GeneratedExam instance for testing."""
    return GeneratedExam.model_validate(exam_payload)


@pytest.fixture
def mock_gemini_client(exam_payload):
    """Mock Gemini client to avoid real API calls."""
    client = MagicMock()
    response = MagicMock()
    response.text = json.dumps(exam_payload)
    client.models.generate_content.return_value = response
    return client


@pytest.fixture(autouse=True)
def clear_sessions():
    """Keep the in-memory session store isolated between tests."""
    sessions.clear()
    yield
    sessions.clear()
