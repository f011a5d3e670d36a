"""
Exam Session
Session-scoped document lifecycle: Idle -> Generating -> Ready -> (reset) -> Idle.
"""
import logging
import threading
import uuid
from enum import Enum
from typing import Callable, Dict, Optional

from geniuspas.error_messages import build_generation_error_message
from geniuspas.exceptions import GenerationError, SessionBusyError
from geniuspas.schemas import ExamConfig, GeneratedExam, SessionView

log = logging.getLogger(__name__)

ExamGenerator = Callable[[ExamConfig], GeneratedExam]


class SessionState(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    READY = "ready"


class ExamSession:
    """
    Holds at most one generated exam plus its view state.

    The exam itself is never mutated: toggling the answer key only flips
    ``show_key``. A failed generation returns the session to Idle with the
    error message attached and keeps the submitted config for resubmission.
    """

    def __init__(self, session_id: Optional[str] = None) -> None:
        self.session_id = session_id or uuid.uuid4().hex
        self.state = SessionState.IDLE
        self.config: Optional[ExamConfig] = None
        self.exam: Optional[GeneratedExam] = None
        self.error: Optional[str] = None
        self.failure: Optional[GenerationError] = None
        self.show_key = False
        self._lock = threading.Lock()

    @property
    def is_generating(self) -> bool:
        return self.state == SessionState.GENERATING

    def begin(self, config: ExamConfig) -> None:
        with self._lock:
            if self.state == SessionState.GENERATING:
                raise SessionBusyError("A generation request is already in progress")
            if self.state == SessionState.READY:
                raise SessionBusyError("Session already holds an exam; reset before generating again")
            self.state = SessionState.GENERATING
            self.config = config
            self.error = None
            self.failure = None

    def complete(self, exam: GeneratedExam) -> None:
        with self._lock:
            self.exam = exam
            self.show_key = False
            self.state = SessionState.READY

    def fail(self, error: GenerationError) -> None:
        with self._lock:
            self.failure = error
            self.error = build_generation_error_message(error)
            self.exam = None
            self.state = SessionState.IDLE

    def submit(self, config: ExamConfig, generate: ExamGenerator) -> Optional[GeneratedExam]:
        """
        Run one generation for this session.

        Returns the exam on success. On failure the error is recorded on the
        session and None is returned.

        Raises:
            SessionBusyError: If another generation is still running, or the
                session already holds an exam and has not been reset.
        """
        self.begin(config)
        try:
            exam = generate(config)
        except GenerationError as e:
            log.warning("[Session %s] Generation failed: %s", self.session_id, e)
            self.fail(e)
            return None
        except Exception as e:
            self.fail(GenerationError(str(e)))
            raise
        self.complete(exam)
        return exam

    def toggle_key(self) -> bool:
        with self._lock:
            self.show_key = not self.show_key
            return self.show_key

    def reset(self) -> None:
        with self._lock:
            if self.state == SessionState.GENERATING:
                raise SessionBusyError("Cannot reset while a generation request is in progress")
            self.state = SessionState.IDLE
            self.config = None
            self.exam = None
            self.error = None
            self.failure = None
            self.show_key = False

    def view(self) -> SessionView:
        return SessionView(
            session_id=self.session_id,
            state=self.state.value,
            exam_config=self.config,
            exam=self.exam.to_view(self.show_key) if self.exam is not None else None,
            error=self.error,
            show_key=self.show_key,
        )


class SessionStore:
    """In-memory registry of sessions. Nothing is persisted."""

    def __init__(self) -> None:
        self._sessions: Dict[str, ExamSession] = {}
        self._lock = threading.Lock()

    def create(self) -> ExamSession:
        session = ExamSession()
        with self._lock:
            self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> ExamSession:
        """Raises KeyError for unknown sessions."""
        with self._lock:
            return self._sessions[session_id]

    def delete(self, session_id: str) -> None:
        """Drop a session and the exam it holds. Raises KeyError for unknown sessions."""
        with self._lock:
            session = self._sessions[session_id]
            if session.is_generating:
                raise SessionBusyError("Cannot close a session while a generation request is in progress")
            del self._sessions[session_id]
        log.info("[Session %s] Closed", session_id)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)
