"""
Error responder - turns any unhandled exception into a rendered response.

Two routes:

- Debug: when error details are enabled (and the request is not XHR,
  unless debug_ajax is on), a diagnostic body with type, message and
  traceback is rendered as JSON, XML or HTML according to the Accept
  header. Status is always 500. Never use this in production: it exposes
  internals.
- Classify: the classifier picks a handler type, the handler renders the
  response, and the handler's log_flag decides whether the exception is
  written to the error log.

Debug rendering that cannot produce the negotiated type falls back to the
classify route, so no exception leaves the responder unrendered.
"""

import json
import logging
import traceback
from html import escape
from xml.etree import ElementTree

from fastapi import Request, status
from fastapi.responses import Response

from src.config.settings import Settings

from .classifier import ExceptionClassifier
from .negotiation import HTML, JSON, TEXT_XML, XML, AcceptNegotiator

logger = logging.getLogger(__name__)

TITLE = "Application Error"


class UnsupportedContentType(Exception):
    """The negotiated media type has no debug renderer."""

    def __init__(self, content_type: str) -> None:
        super().__init__(f"Cannot render unknown content type {content_type}")
        self.content_type = content_type


def is_xhr(request: Request) -> bool:
    """True for background requests (X-Requested-With: XMLHttpRequest)."""
    return request.headers.get("x-requested-with", "").lower() == "xmlhttprequest"


class ErrorResponder:
    """
    Application-wide handler for unhandled exceptions.

    Built once at startup; holds only read-only state.
    """

    def __init__(
        self,
        classifier: ExceptionClassifier,
        settings: Settings,
        negotiator: AcceptNegotiator | None = None,
        error_logger: logging.Logger | None = None,
    ) -> None:
        self.classifier = classifier
        self.settings = settings
        self.negotiator = negotiator or AcceptNegotiator()
        self.error_logger = error_logger or logging.getLogger("gatehouse.errors")

    async def __call__(self, request: Request, exc: Exception) -> Response:
        """Starlette exception handler entry point."""
        return self.respond(exc, request, self.settings.display_error_details)

    def respond(self, exc: Exception, request: Request, debug_enabled: bool) -> Response:
        xhr = is_xhr(request)

        if debug_enabled and (not xhr or self.settings.debug_ajax):
            try:
                return self.debug_response(request, exc)
            except UnsupportedContentType as e:
                logger.warning("%s; rendering %s through its handler", e, type(exc).__name__)

        handler = self.classifier.classify(exc)(self.settings)

        if not xhr or self.settings.debug_ajax:
            response = handler.standard_handler(request, exc)
        else:
            response = handler.ajax_handler(request, exc)

        if handler.log_flag:
            self.write_to_error_log(exc)

        return response

    def debug_response(self, request: Request, exc: Exception) -> Response:
        """
        Render diagnostics in the negotiated content type.

        Raises:
            UnsupportedContentType: If the negotiator picked a type with no renderer
        """
        content_type = self.negotiator.negotiate(request.headers.get("accept"))

        if content_type == JSON:
            output = render_json(exc)
        elif content_type in (XML, TEXT_XML):
            output = render_xml(exc)
        elif content_type == HTML:
            output = render_html(exc)
        else:
            raise UnsupportedContentType(content_type)

        return Response(
            content=output,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            media_type=content_type,
        )

    def write_to_error_log(self, exc: Exception) -> None:
        self.error_logger.error("%s", "".join(traceback.format_exception(exc)).rstrip())


def exception_chain(exc: BaseException) -> list[dict]:
    """Describe the exception and every cause/context behind it, outermost first."""
    chain = []
    seen = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        frames = traceback.extract_tb(current.__traceback__)
        last = frames[-1] if frames else None
        chain.append(
            {
                "type": f"{type(current).__module__}.{type(current).__qualname__}",
                "message": str(current),
                "file": last.filename if last else None,
                "line": last.lineno if last else None,
                "trace": [f"{frame.filename}:{frame.lineno} in {frame.name}" for frame in frames],
            }
        )
        current = current.__cause__ or current.__context__
    return chain


def render_json(exc: BaseException) -> str:
    return json.dumps({"message": TITLE, "exception": exception_chain(exc)}, indent=2)


def render_xml(exc: BaseException) -> str:
    root = ElementTree.Element("error")
    ElementTree.SubElement(root, "message").text = TITLE
    for entry in exception_chain(exc):
        node = ElementTree.SubElement(root, "exception")
        for key in ("type", "message", "file", "line"):
            ElementTree.SubElement(node, key).text = "" if entry[key] is None else str(entry[key])
        ElementTree.SubElement(node, "trace").text = "\n".join(entry["trace"])
    return ElementTree.tostring(root, encoding="unicode")


def render_html(exc: BaseException) -> str:
    sections = []
    for entry in exception_chain(exc):
        sections.append(
            "<div>"
            f"<div><strong>Type:</strong> {escape(entry['type'])}</div>"
            f"<div><strong>Message:</strong> {escape(entry['message'])}</div>"
            f"<div><strong>File:</strong> {escape(str(entry['file']))}</div>"
            f"<div><strong>Line:</strong> {escape(str(entry['line']))}</div>"
            f"<h3>Trace</h3><pre>{escape(chr(10).join(entry['trace']))}</pre>"
            "</div>"
        )
    return (
        "<!DOCTYPE html><html><head><meta charset=\"utf-8\">"
        f"<title>{TITLE}</title></head><body><h1>{TITLE}</h1>"
        "<p>The application could not run because of the following error:</p>"
        f"<h2>Details</h2>{''.join(sections)}</body></html>"
    )
