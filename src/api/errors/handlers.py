"""
Exception handlers - per-exception-type rendering for the error pipeline.

Every handler exposes the same capability set:

- ajax_handler(request, exc): response for background (XHR) requests,
  shaped like the registration endpoint's {errors, successes, alerts}
- standard_handler(request, exc): HTML page for browser requests
- log_flag: whether the responder writes the exception to the error log

Handlers are instantiated per failure with the application settings.
"""

from html import escape

from fastapi import Request, status
from fastapi.responses import HTMLResponse, JSONResponse

from src.config.settings import Settings
from src.domain.alerts import Severity


class ExceptionHandler:
    """Default handler: generic 500 and always logged."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    title = "Server Error"
    log_flag = True

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def message(self, exc: Exception) -> str:
        """User-facing message; never includes exception details."""
        return "Oops, looks like our server might have goofed. Please try again later."

    def ajax_handler(self, request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=self.status_code,
            content={
                "errors": 1,
                "successes": 0,
                "alerts": [{"severity": Severity.DANGER.value, "message": self.message(exc)}],
            },
        )

    def standard_handler(self, request: Request, exc: Exception) -> HTMLResponse:
        return HTMLResponse(status_code=self.status_code, content=render_page(self.title, self.message(exc)))


class RegistrationExceptionHandler(ExceptionHandler):
    """Domain errors that escaped the registration flow: client error, not logged."""

    status_code = status.HTTP_400_BAD_REQUEST
    title = "Registration Error"
    log_flag = False

    def message(self, exc: Exception) -> str:
        return str(exc)


class StorageExceptionHandler(ExceptionHandler):
    """Database unavailable or a write failed."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    title = "Service Unavailable"

    def message(self, exc: Exception) -> str:
        return "The service is temporarily unavailable. Please try again later."


def render_page(title: str, body: str) -> str:
    return (
        "<!DOCTYPE html><html><head><meta charset=\"utf-8\">"
        f"<title>{escape(title)}</title></head>"
        f"<body><h1>{escape(title)}</h1><p>{escape(body)}</p></body></html>"
    )
