"""
E2E Golden Path Test (Live).
Runs the full pipeline against the real Gemini API.
"""
from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient

from geniuspas.main import app


client = TestClient(app)


@pytest.mark.e2e
@pytest.mark.live
def test_e2e_golden_path_both_types():
    api_key = os.getenv("GEMINI_API_KEY")
    if not api_key:
        pytest.skip("GEMINI_API_KEY not set; skipping live E2E test.")

    session_id = client.post("/api/sessions").json()["sessionId"]
    response = client.post(
        f"/api/sessions/{session_id}/generate",
        json={
            "kd": "3.4 Menganalisis besaran-besaran fisis pada gerak lurus",
            "indicators": "Siswa dapat menghitung kecepatan rata-rata",
            "material": "Gerak Lurus Berubah Beraturan (GLBB)",
            "className": "X SMA",
            "pgCount": 5,
            "essayCount": 2,
            "questionType": "Keduanya",
        },
    )

    assert response.status_code == 200
    exam = response.json()["exam"]
    assert exam["title"]
    assert len(exam["multipleChoice"]) >= 1
    assert len(exam["essays"]) >= 1
    for item in exam["multipleChoice"]:
        assert 4 <= len(item["options"]) <= 5

    text = client.get(f"/api/sessions/{session_id}/export").text
    assert "A. PILIHAN GANDA" in text
    assert "B. ESSAI" in text
