from fastapi.responses import JSONResponse


def error_response(exc: Exception, status_code: int = 500) -> JSONResponse:
    """Route-level failure body: ``{"error": <message>}``."""
    return JSONResponse(
        status_code=status_code,
        content={"error": str(exc) or "Unknown error occurred"},
    )
