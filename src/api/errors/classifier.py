"""
Exception classifier - maps an exception to its handler type.

Selection rule: every binding is checked in registration order and each
isinstance match replaces the previous candidate, so the binding
registered LAST wins. Specificity is ignored: registering Exception after
ValueError sends ValueError to the Exception handler.
"""

from .handlers import ExceptionHandler

_REQUIRED_METHODS = ("ajax_handler", "standard_handler")


class ExceptionClassifier:
    """Ordered (exception type, handler type) bindings."""

    def __init__(self, default: type = ExceptionHandler) -> None:
        _check_handler(default)
        self.default = default
        self._bindings: list[tuple[type[BaseException], type]] = []

    @property
    def bindings(self) -> tuple[tuple[type[BaseException], type], ...]:
        return tuple(self._bindings)

    def register(self, exception_type: type[BaseException], handler_type: type) -> None:
        """
        Bind a handler type to an exception type (and its subclasses).

        Raises:
            TypeError: If handler_type lacks ajax_handler, standard_handler or log_flag
        """
        _check_handler(handler_type)
        self._bindings.append((exception_type, handler_type))

    def classify(self, exc: BaseException) -> type:
        handler_type = self.default
        for exception_type, candidate in self._bindings:
            if isinstance(exc, exception_type):
                handler_type = candidate
        return handler_type


def _check_handler(handler_type: type) -> None:
    missing = [name for name in _REQUIRED_METHODS if not callable(getattr(handler_type, name, None))]
    if not hasattr(handler_type, "log_flag"):
        missing.append("log_flag")
    if missing:
        raise TypeError(f"Exception handler {handler_type!r} is missing {', '.join(missing)}")
