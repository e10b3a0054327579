"""Response decoder: turns a raw HTTP exchange into a DispatchResponse.

  - A body with an ``error`` object is a REMOTE_ERROR (code, status, message)
  - A non-2xx status with any other body is a REMOTE_ERROR carrying the body
  - A 2xx body that is not JSON or does not match the schema is a DECODE_FAILURE
  - Anything else is a SUCCESS with the parsed payload
"""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from comment_analyzer.gateway.types import DispatchResponse, ResponseStatus
from comment_analyzer.schemas import AnalyzeCommentResponse, ApiErrorBody

logger = logging.getLogger(__name__)


def decode_response(status_code: int, body: str, latency_ms: int = 0) -> DispatchResponse:
    """Decode an analyze response body. Never raises."""
    ok = 200 <= status_code < 300

    try:
        data = json.loads(body)
    except ValueError as e:
        if not ok:
            return _unstructured_error(status_code, body, latency_ms)
        return _decode_failure(status_code, body, latency_ms, f"response body is not valid JSON: {e}")

    if isinstance(data, dict) and "error" in data:
        try:
            error = ApiErrorBody.model_validate(data)
        except ValidationError:
            logger.debug("Unrecognized error body (HTTP %d)", status_code)
        else:
            return DispatchResponse(
                status=ResponseStatus.REMOTE_ERROR,
                error_code=error.error.status or str(error.error.code),
                error_message=str(error),
                http_status=error.error.code,
                raw_body=body,
                latency_ms=latency_ms,
            )

    if not ok:
        return _unstructured_error(status_code, body, latency_ms)

    try:
        payload = AnalyzeCommentResponse.model_validate(data)
    except ValidationError as e:
        return _decode_failure(status_code, body, latency_ms, f"unexpected response shape: {e.error_count()} error(s)")

    return DispatchResponse(
        status=ResponseStatus.SUCCESS,
        payload=payload,
        http_status=status_code,
        latency_ms=latency_ms,
    )


def _unstructured_error(status_code: int, body: str, latency_ms: int) -> DispatchResponse:
    # Error page without the API's error object (proxy HTML, empty 5xx, ...)
    return DispatchResponse(
        status=ResponseStatus.REMOTE_ERROR,
        error_code=str(status_code),
        error_message=f"HTTP {status_code}",
        http_status=status_code,
        raw_body=body,
        latency_ms=latency_ms,
    )


def _decode_failure(status_code: int, body: str, latency_ms: int, message: str) -> DispatchResponse:
    return DispatchResponse(
        status=ResponseStatus.DECODE_FAILURE,
        error_code="DECODE",
        error_message=message,
        http_status=status_code,
        raw_body=body,
        latency_ms=latency_ms,
    )
