"""
Main FastAPI Application
Controller layer that drives the exam form, generation session, and print/copy actions.
"""
import io
import logging
from functools import partial
from typing import Optional

from fastapi import Depends, FastAPI, Header, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, Response

from geniuspas import __version__
from geniuspas.config import (
    COGNITIVE_LEVELS,
    DEFAULT_ESSAY_COUNT,
    DEFAULT_PG_COUNT,
    MAX_ESSAY_COUNT,
    MAX_PG_COUNT,
    MIXED_COGNITIVE_LEVEL,
)
from geniuspas.error_messages import error_status_code
from geniuspas.exceptions import SessionBusyError
from geniuspas.schemas import CamelModel, ExamConfig, GeneratedExam, QuestionType, SessionView
from geniuspas.services.ai_engine import generate_exam
from geniuspas.services.doc_generator import generate_docx
from geniuspas.services.text_export import export_plain_text
from geniuspas.session import ExamSession, SessionStore

logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(levelname)s  %(message)s")
log = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

sessions = SessionStore()


class RenderRequest(CamelModel):
    exam: GeneratedExam
    class_name: Optional[str] = None
    show_key: bool = False


# Initialize FastAPI App
app = FastAPI(
    title="GeniusPAS API",
    description="AI-powered PAS exam generation from a competency blueprint",
    version=__version__,
)

# CORS Middleware (Allow all origins for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_api_key_header(
    x_gemini_api_key: Optional[str] = Header(default=None, alias="X-Gemini-API-Key"),
) -> Optional[str]:
    return x_gemini_api_key


def get_session(session_id: str) -> ExamSession:
    try:
        return sessions.get(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Session not found")


def require_exam(session: ExamSession) -> GeneratedExam:
    if session.exam is None:
        raise HTTPException(status_code=409, detail="No generated exam in this session")
    return session.exam


def docx_response(exam: GeneratedExam, filename: str, class_name: Optional[str], show_key: bool) -> Response:
    buffer = io.BytesIO()
    generate_docx(exam, buffer, class_name=class_name, show_key=show_key)
    return Response(
        content=buffer.getvalue(),
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.get("/")
async def read_root():
    """Return API status info (UI handled by the web front end)."""
    return {"message": "GeniusPAS API is running."}


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "GeniusPAS API"}


@app.get("/api/form-options")
async def form_options():
    """Choices and defaults for the exam configuration form."""
    return {
        "cognitiveLevels": list(COGNITIVE_LEVELS),
        "questionTypes": [question_type.value for question_type in QuestionType],
        "limits": {"pgCount": MAX_PG_COUNT, "essayCount": MAX_ESSAY_COUNT},
        "defaults": {
            "cognitiveLevel": MIXED_COGNITIVE_LEVEL,
            "pgCount": DEFAULT_PG_COUNT,
            "essayCount": DEFAULT_ESSAY_COUNT,
            "questionType": QuestionType.BOTH.value,
        },
    }


@app.post("/api/sessions", response_model=SessionView, status_code=201)
async def create_session():
    return sessions.create().view()


@app.get("/api/sessions/{session_id}", response_model=SessionView)
async def read_session(session: ExamSession = Depends(get_session)):
    return session.view()


@app.delete("/api/sessions/{session_id}", status_code=204)
async def delete_session(session_id: str):
    """Close a session, releasing the exam it holds."""
    try:
        sessions.delete(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Session not found")
    except SessionBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return Response(status_code=204)


@app.post("/api/sessions/{session_id}/generate", response_model=SessionView)
def generate(
    config: ExamConfig,
    session: ExamSession = Depends(get_session),
    api_key: Optional[str] = Depends(get_api_key_header),
):
    """
    Generate an exam for the session from the submitted blueprint.

    Runs in FastAPI's threadpool; the session rejects overlapping submits.
    """
    try:
        exam = session.submit(config, partial(generate_exam, api_key=api_key))
    except SessionBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception:
        log.exception("Error during exam generation")
        raise HTTPException(status_code=500, detail=session.error)

    if exam is None:
        raise HTTPException(status_code=error_status_code(session.failure), detail=session.error)
    return session.view()


@app.post("/api/sessions/{session_id}/toggle-key", response_model=SessionView)
async def toggle_key(session: ExamSession = Depends(get_session)):
    session.toggle_key()
    return session.view()


@app.post("/api/sessions/{session_id}/reset", response_model=SessionView)
async def reset_session(session: ExamSession = Depends(get_session)):
    try:
        session.reset()
    except SessionBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return session.view()


@app.get("/api/sessions/{session_id}/export", response_class=PlainTextResponse)
async def export_text(session: ExamSession = Depends(get_session)):
    """Plain-text copy of the exam without any answer-key material."""
    exam = require_exam(session)
    class_name = session.config.class_name if session.config else None
    return PlainTextResponse(export_plain_text(exam, class_name))


@app.get("/api/sessions/{session_id}/print")
async def print_exam(session: ExamSession = Depends(get_session)):
    """Printable .docx; includes the answer key only while it is toggled on."""
    exam = require_exam(session)
    class_name = session.config.class_name if session.config else None
    filename = f"soal_pas_{session.session_id[:8]}.docx"
    return docx_response(exam, filename, class_name, session.show_key)


@app.post("/api/export-text", response_class=PlainTextResponse)
async def export_text_payload(request: RenderRequest):
    """Plain-text export from an exam payload held by the client."""
    return PlainTextResponse(export_plain_text(request.exam, request.class_name))


@app.post("/api/render-docx")
async def render_docx(request: RenderRequest):
    """Render DOCX from an exam payload and return the file."""
    return docx_response(request.exam, "soal_pas.docx", request.class_name, request.show_key)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
