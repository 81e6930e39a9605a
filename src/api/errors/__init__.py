"""
Error pipeline - classification and rendering of unhandled exceptions.
"""

from .classifier import ExceptionClassifier
from .handlers import ExceptionHandler, RegistrationExceptionHandler, StorageExceptionHandler
from .negotiation import AcceptNegotiator
from .responder import ErrorResponder, UnsupportedContentType, is_xhr

__all__ = [
    "AcceptNegotiator",
    "ErrorResponder",
    "ExceptionClassifier",
    "ExceptionHandler",
    "RegistrationExceptionHandler",
    "StorageExceptionHandler",
    "UnsupportedContentType",
    "is_xhr",
]
