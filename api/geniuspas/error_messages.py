from __future__ import annotations

from geniuspas.exceptions import (
    ConfigurationError,
    EmptyResponseError,
    MalformedResponseError,
    ServiceError,
)

DEFAULT_GENERATION_MESSAGE = "Terjadi kesalahan saat membuat soal."

SERVICE_FAILURE_MESSAGE = (
    "Gagal membuat soal. Pastikan kuota API mencukupi atau coba kurangi jumlah soal."
)


def build_generation_error_message(error: BaseException) -> str:
    """Map a generation failure to the single message shown in the error banner."""
    if isinstance(error, ConfigurationError):
        return "API Key belum dikonfigurasi. Hubungi administrator untuk mengatur GEMINI_API_KEY."
    if isinstance(error, ServiceError):
        return SERVICE_FAILURE_MESSAGE
    if isinstance(error, (EmptyResponseError, MalformedResponseError)):
        return "Gagal membuat soal. Respons AI tidak lengkap atau tidak valid, silakan coba lagi."
    return DEFAULT_GENERATION_MESSAGE


def error_status_code(error: BaseException) -> int:
    """HTTP status used when a generation failure is reported to the client."""
    if isinstance(error, ConfigurationError):
        return 500
    return 502
