"""
Test Services
Tests the Muscle: Gemini client handling, plain-text export and DOCX rendering.
"""
import json
import os
from unittest.mock import MagicMock, patch

import pytest
from docx import Document

from geniuspas.config import MODEL_NAME, SYSTEM_INSTRUCTION
from geniuspas.error_messages import SERVICE_FAILURE_MESSAGE, build_generation_error_message
from geniuspas.exceptions import (
    ConfigurationError,
    EmptyResponseError,
    MalformedResponseError,
    ServiceError,
)
from geniuspas.services.ai_engine import generate_exam, parse_exam
from geniuspas.services.doc_generator import generate_docx
from geniuspas.services.prompt_builder import build_request
from geniuspas.services.text_export import export_plain_text


def _client_returning(text):
    client = MagicMock()
    client.models.generate_content.return_value = MagicMock(text=text)
    return client


def test_generate_exam_returns_payload_exactly(exam_config, mock_gemini_client, exam_payload):
    """Test that items and field sets match the payload with no drops or additions."""
    exam = generate_exam(exam_config, client=mock_gemini_client)

    assert len(exam.multiple_choice) == 2
    assert len(exam.essays) == 1
    assert exam.model_dump(mode="json", by_alias=True) == exam_payload


def test_generate_exam_request_settings(exam_config, mock_gemini_client):
    """Test the single call carries prompt, schema, system role and temperature."""
    generate_exam(exam_config, client=mock_gemini_client)

    mock_gemini_client.models.generate_content.assert_called_once()
    kwargs = mock_gemini_client.models.generate_content.call_args.kwargs
    request = build_request(exam_config)

    assert kwargs["model"] == MODEL_NAME
    assert kwargs["contents"] == request.prompt
    assert kwargs["config"].system_instruction == SYSTEM_INSTRUCTION
    assert kwargs["config"].response_mime_type == "application/json"
    assert kwargs["config"].response_schema == request.schema
    assert kwargs["config"].temperature == 0.7


@pytest.mark.parametrize("text", ["", "   ", None])
def test_generate_exam_empty_response(exam_config, text):
    with pytest.raises(EmptyResponseError):
        generate_exam(exam_config, client=_client_returning(text))


def test_generate_exam_invalid_json(exam_config):
    with pytest.raises(MalformedResponseError):
        generate_exam(exam_config, client=_client_returning('{"title": "PAS", "multipleChoice": ['))


def test_generate_exam_wrong_shape(exam_config, exam_payload):
    """Test that JSON missing a section is reported as malformed."""
    del exam_payload["essays"]
    with pytest.raises(MalformedResponseError):
        generate_exam(exam_config, client=_client_returning(json.dumps(exam_payload)))


def test_generate_exam_service_failure(exam_config):
    client = MagicMock()
    client.models.generate_content.side_effect = RuntimeError("429 RESOURCE_EXHAUSTED")

    with pytest.raises(ServiceError) as exc_info:
        generate_exam(exam_config, client=client)

    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert build_generation_error_message(exc_info.value) == SERVICE_FAILURE_MESSAGE


def test_generate_exam_missing_key_makes_no_call(exam_config):
    """Test that a missing credential fails before any client is created."""
    with patch.dict(os.environ, {}, clear=True):
        with patch("geniuspas.config.load_dotenv"):
            with patch("geniuspas.services.ai_engine.genai.Client") as mock_client_cls:
                with pytest.raises(ConfigurationError):
                    generate_exam(exam_config)

    mock_client_cls.assert_not_called()


def test_generate_exam_uses_explicit_key(exam_config, mock_gemini_client):
    with patch("geniuspas.services.ai_engine.genai.Client", return_value=mock_gemini_client) as mock_client_cls:
        generate_exam(exam_config, api_key=" header-key ")

    mock_client_cls.assert_called_once_with(api_key="header-key")


def test_parse_exam_does_not_check_key_range(exam_payload):
    exam_payload["multipleChoice"][0]["key"] = "Z"
    assert parse_exam(json.dumps(exam_payload)).multiple_choice[0].key == "Z"


def test_error_messages_are_user_facing():
    assert "GEMINI_API_KEY" in build_generation_error_message(ConfigurationError("x"))
    assert "tidak valid" in build_generation_error_message(MalformedResponseError("x"))
    assert "tidak valid" in build_generation_error_message(EmptyResponseError("x"))


def test_plain_text_export_layout(sample_exam):
    """Test the exact copy layout for 2 multiple-choice items and 1 essay."""
    text = export_plain_text(sample_exam, "X SMA")

    assert text == (
        "PAS Fisika Kelas X\n"
        "Kelas: X SMA\n"
        "\n"
        "A. PILIHAN GANDA\n"
        "1. Satuan kecepatan dalam SI adalah ...\n"
        "   A. m/s\n"
        "   B. km/jam\n"
        "   C. m/s²\n"
        "   D. cm/s\n"
        "\n"
        "2. Benda menempuh 100 m dalam 20 s. Kecepatan rata-ratanya adalah ...\n"
        "   A. 2 m/s\n"
        "   B. 5 m/s\n"
        "   C. 10 m/s\n"
        "   D. 20 m/s\n"
        "\n"
        "\n"
        "B. ESSAI\n"
        "1. Jelaskan perbedaan GLB dan GLBB beserta contohnya!\n"
        "\n"
    )


def test_plain_text_export_strips_key_material(sample_exam):
    text = export_plain_text(sample_exam, "X SMA")

    for item in sample_exam.multiple_choice:
        assert item.explanation not in text
    for item in sample_exam.essays:
        assert item.ideal_answer not in text
        assert item.rubric not in text
    assert "Kunci" not in text
    assert "Sulit" not in text


def test_plain_text_export_without_class(sample_exam):
    assert export_plain_text(sample_exam).splitlines()[1] == "Kelas: -"


def _docx_text(path):
    doc = Document(str(path))
    text = "\n".join(para.text for para in doc.paragraphs)
    for table in doc.tables:
        for row in table.rows:
            text += "\n" + "\n".join(cell.text for cell in row.cells)
    return doc, text


def test_docx_structure(sample_exam, tmp_path):
    """Test that generated DOCX has the exam paper structure."""
    output_path = tmp_path / "soal.docx"

    generate_docx(sample_exam, str(output_path), class_name="X SMA")

    assert output_path.exists()
    doc, text = _docx_text(output_path)

    assert "PENILAIAN AKHIR SEMESTER (PAS)" in text
    assert "PAS FISIKA KELAS X" in text
    assert "Kelas/Semester: X SMA" in text
    assert "Waktu: 90 Menit" in text
    assert "A. Pilihan Ganda" in text
    assert "B. Soal Uraian (Essai)" in text
    assert "1. Satuan kecepatan dalam SI adalah ..." in text
    assert "D. cm/s" in text
    assert "Kepala Sekolah" in text
    assert doc.core_properties.title == "PAS Fisika Kelas X"


def test_docx_hides_answer_key_by_default(sample_exam, tmp_path):
    output_path = tmp_path / "soal_siswa.docx"

    generate_docx(sample_exam, str(output_path))

    _, text = _docx_text(output_path)
    assert "Kunci" not in text
    assert sample_exam.multiple_choice[0].explanation not in text
    assert sample_exam.essays[0].rubric not in text
    assert "Kelas/Semester: _________________" in text


def test_docx_includes_answer_key_when_shown(sample_exam, tmp_path):
    output_path = tmp_path / "soal_guru.docx"

    generate_docx(sample_exam, str(output_path), show_key=True)

    _, text = _docx_text(output_path)
    assert "Kunci: A" in text
    assert "Kesulitan: Sulit" in text
    assert sample_exam.multiple_choice[1].explanation in text
    assert sample_exam.essays[0].ideal_answer in text
    assert sample_exam.essays[0].rubric in text
