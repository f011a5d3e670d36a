"""
Configuration Module for GeniusPAS
Centralizes environment variables, model settings, form options and prompt templates.
"""
import os
from dotenv import load_dotenv

from geniuspas.exceptions import ConfigurationError

# --- API Configuration ---
MODEL_NAME = "gemini-2.5-flash"
TEMPERATURE = 0.7

SYSTEM_INSTRUCTION = (
    "Anda adalah pembuat soal ujian profesional untuk sekolah di Indonesia. "
    "Output harus dalam format JSON yang valid sesuai skema yang diberikan."
)

# --- Form Options ---
MIXED_COGNITIVE_LEVEL = "C1 - C6 (Campuran)"

COGNITIVE_LEVELS = (
    MIXED_COGNITIVE_LEVEL,
    "C1 - Mengingat",
    "C2 - Memahami",
    "C3 - Menerapkan",
    "C4 - Menganalisis",
    "C5 - Mengevaluasi",
    "C6 - Mencipta",
)

DEFAULT_PG_COUNT = 10
DEFAULT_ESSAY_COUNT = 5
MAX_PG_COUNT = 50
MAX_ESSAY_COUNT = 10

# Printed on the exam paper header
EXAM_DURATION_LABEL = "90 Menit"


def get_api_key() -> str:
    """
    Validates and returns the Gemini API Key.

    Raises:
        ConfigurationError: If GEMINI_API_KEY is not found in environment.
    """
    # Load environment variables fresh (for testing and reload scenarios)
    load_dotenv()
    api_key = os.getenv("GEMINI_API_KEY")

    if not api_key:
        raise ConfigurationError(
            "GEMINI_API_KEY not found. "
            "Please create a .env file with your API key."
        )
    return api_key


# --- Prompt Templates ---
PROMPT_TEMPLATES = {
    "pas": """Buatkan soal PAS (Penilaian Akhir Semester) lengkap berdasarkan data berikut:

1. Kompetensi Dasar (KD): {kd}
2. Indikator Soal: {indicators}
3. Materi Pokok: {material}
4. Kelas/Tingkat: {class_name} (Sesuaikan tingkat kesulitan bahasa dan logika dengan jenjang ini)
5. Level Kognitif Target: {cognitive_level}
6. Jumlah Soal: {question_counts}
7. Jenis Soal: {question_type}

Ketentuan:
- Soal harus original, relevan, dan akademik.
- Distribusi tingkat kesulitan: Variatif (Mudah, Sedang, Sulit). Minimal 20% sulit.
- Bahasa baku Indonesia.
- Pilihan ganda harus memiliki 4 atau 5 opsi.""",
}


def get_prompt(template_name: str, **kwargs) -> str:
    """
    Retrieves a formatted prompt template.

    Args:
        template_name: Name of the template ("pas").
        **kwargs: Variables to format into the template.

    Returns:
        Formatted prompt string.

    Raises:
        KeyError: If template_name is not found in templates.
    """
    if template_name not in PROMPT_TEMPLATES:
        raise KeyError(f"Prompt template '{template_name}' not found.")

    return PROMPT_TEMPLATES[template_name].format(**kwargs)
