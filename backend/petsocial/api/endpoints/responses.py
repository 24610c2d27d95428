"""Envelope to HTTP response mapping."""

from typing import Any, Awaitable

import structlog
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from ...services.lookups import ApiResponse

logger = structlog.get_logger()


def envelope_response(response: ApiResponse[Any]) -> JSONResponse:
    """Serialize the envelope with its own status code as the HTTP status."""
    return JSONResponse(
        status_code=response.status_code,
        content=response.model_dump(mode="json", by_alias=True),
    )


async def run_lookup_operation(
    operation: Awaitable[ApiResponse[Any]], action: str, **context: Any
) -> JSONResponse:
    """
    Await a service call and map database failures to a 500 envelope.

    Cache failures never reach this point; only store errors do.
    """
    try:
        response = await operation
    except SQLAlchemyError as e:
        logger.error(
            f"Failed to {action}",
            error=str(e),
            exc_info=True,
            **context,
        )
        response = ApiResponse.fail(f"Failed to {action}.", 500)
    return envelope_response(response)
