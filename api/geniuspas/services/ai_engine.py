"""
AI Engine Service
Handles the single Gemini call that turns an exam configuration into a GeneratedExam.
"""
import json
import logging
from typing import Optional

from google import genai
from google.genai import types
from pydantic import ValidationError

from geniuspas.config import MODEL_NAME, SYSTEM_INSTRUCTION, TEMPERATURE, get_api_key
from geniuspas.exceptions import EmptyResponseError, MalformedResponseError, ServiceError
from geniuspas.schemas import ExamConfig, GeneratedExam
from geniuspas.services.prompt_builder import build_request

log = logging.getLogger(__name__)


def resolve_api_key(api_key: Optional[str] = None) -> str:
    """
    Returns the explicit API key when given, otherwise the configured one.

    Raises:
        ConfigurationError: If no key is available.
    """
    resolved_key = api_key.strip() if api_key else ""
    if not resolved_key:
        resolved_key = get_api_key()
    return resolved_key


def get_client(api_key: Optional[str] = None) -> genai.Client:
    """
    Creates and returns a configured Gemini API client.

    Returns:
        genai.Client: Authenticated Gemini client.

    Raises:
        ConfigurationError: If API key is not configured.
    """
    return genai.Client(api_key=resolve_api_key(api_key))


def parse_exam(text: Optional[str]) -> GeneratedExam:
    """
    Parse the raw JSON payload returned by Gemini.

    Raises:
        EmptyResponseError: If the payload is empty.
        MalformedResponseError: If the payload is not JSON or not shaped like an exam.
    """
    if not text or not text.strip():
        raise EmptyResponseError("Empty response from Gemini")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"Response is not valid JSON: {e}") from e

    try:
        return GeneratedExam.model_validate(data)
    except ValidationError as e:
        raise MalformedResponseError(
            f"Response does not match the exam schema ({e.error_count()} errors)"
        ) from e


def generate_exam(
    config: ExamConfig,
    client: Optional[genai.Client] = None,
    api_key: Optional[str] = None,
) -> GeneratedExam:
    """
    Generates a complete PAS exam for the given configuration.

    Exactly one Gemini call is made per invocation; there are no retries.

    Args:
        config: Validated exam configuration.
        client: Optional pre-built Gemini client (used by tests).
        api_key: Optional API key overriding GEMINI_API_KEY.

    Returns:
        GeneratedExam parsed from the model output.

    Raises:
        ConfigurationError: If no API key is configured (raised before any call).
        ServiceError: If the Gemini call fails.
        EmptyResponseError: If Gemini returns no content.
        MalformedResponseError: If the content is not a valid exam document.
    """
    if client is None:
        client = get_client(api_key)

    request = build_request(config)
    log.info(
        "[Generator] Requesting %d PG / %d essay items for %s",
        config.requested_pg_count,
        config.requested_essay_count,
        config.class_name,
    )

    try:
        response = client.models.generate_content(
            model=MODEL_NAME,
            contents=request.prompt,
            config=types.GenerateContentConfig(
                system_instruction=SYSTEM_INSTRUCTION,
                response_mime_type="application/json",
                response_schema=request.schema,
                temperature=TEMPERATURE,
            ),
        )
    except Exception as e:
        log.exception("[Generator] Gemini generation error")
        raise ServiceError(str(e)) from e

    exam = parse_exam(getattr(response, "text", None))
    log.info(
        "[Generator] Received '%s' with %d PG / %d essay items",
        exam.title,
        len(exam.multiple_choice),
        len(exam.essays),
    )
    return exam
