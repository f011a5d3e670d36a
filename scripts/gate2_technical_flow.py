"""
Gate 2: Technical Flow (The Pipeline)
Validates the session endpoints end to end against the live Gemini API.
"""
from __future__ import annotations

import io
import json
import os
from typing import Any, Dict

from docx import Document
from dotenv import load_dotenv
from fastapi.testclient import TestClient

from geniuspas.main import app

DEFAULT_ORIGIN = "http://localhost:3000"

SAMPLE_FORM = {
    "kd": "3.4 Menganalisis besaran-besaran fisis pada gerak lurus",
    "indicators": "Siswa dapat menghitung kecepatan rata-rata",
    "material": "Gerak Lurus Berubah Beraturan (GLBB)",
    "className": "X SMA",
    "cognitiveLevel": "C1 - C6 (Campuran)",
    "pgCount": 5,
    "essayCount": 2,
    "questionType": "Keduanya",
}


def require_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise SystemExit(f"Missing required env: {name}")
    return value


def assert_json_response(response, label: str) -> Dict[str, Any]:
    if response.status_code not in (200, 201):
        raise SystemExit(f"{label} failed: {response.status_code} {response.text}")
    if "application/json" not in response.headers.get("content-type", ""):
        raise SystemExit(f"{label} did not return JSON")
    return response.json()


def main() -> None:
    load_dotenv()
    require_env("GEMINI_API_KEY")

    origin = os.getenv("GENIUSPAS_ORIGIN", DEFAULT_ORIGIN)
    client = TestClient(app)

    # Connectivity Check: /health
    health_body = assert_json_response(client.get("/health", headers={"Origin": origin}), "/health")
    if health_body.get("status") != "healthy":
        raise SystemExit("/health did not report healthy")

    # CORS Validation
    cors_response = client.options(
        "/health",
        headers={
            "Origin": origin,
            "Access-Control-Request-Method": "GET",
        },
    )
    cors_origin = cors_response.headers.get("access-control-allow-origin")
    if cors_origin not in ("*", origin):
        raise SystemExit(f"CORS header mismatch: {cors_origin}")

    # Flow Validation: session + generate
    session_id = assert_json_response(client.post("/api/sessions"), "/api/sessions")["sessionId"]
    generate_body = assert_json_response(
        client.post(f"/api/sessions/{session_id}/generate", json=SAMPLE_FORM),
        "/generate",
    )
    exam = generate_body.get("exam") or {}
    if not exam.get("multipleChoice") or not exam.get("essays"):
        raise SystemExit("/generate returned an incomplete exam")

    # Copy: plain text must not leak the answer key
    export_response = client.get(f"/api/sessions/{session_id}/export")
    if export_response.status_code != 200 or "B. ESSAI" not in export_response.text:
        raise SystemExit(f"/export failed: {export_response.status_code}")

    # Print with the key toggled on
    assert_json_response(client.post(f"/api/sessions/{session_id}/toggle-key"), "/toggle-key")
    print_response = client.get(f"/api/sessions/{session_id}/print")
    if print_response.status_code != 200:
        raise SystemExit(f"/print failed: {print_response.status_code}")
    paper = "\n".join(p.text for p in Document(io.BytesIO(print_response.content)).paragraphs)
    if "Kunci:" not in paper:
        raise SystemExit("/print did not include the answer key while shown")

    reset_body = assert_json_response(client.post(f"/api/sessions/{session_id}/reset"), "/reset")
    if reset_body.get("state") != "idle":
        raise SystemExit("/reset did not return the session to idle")

    report = {
        "health": "ok",
        "cors": "ok",
        "generate": "ok",
        "multiple_choice": len(exam["multipleChoice"]),
        "essays": len(exam["essays"]),
        "export": "ok",
        "print": "ok",
        "reset": "ok",
    }
    print(json.dumps(report, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
