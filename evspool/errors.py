"""
--------------
evspool.errors
--------------

Error reporting sink. The stores recover from every failure locally and report it here.
"""
from logging import getLogger


log = getLogger(__name__)


class ErrorReporter:
    """Dispatches error reports to the registered handlers.

    A handler has the following prototype:

    .. code-block:: python

        def handler(origin, message, exc):
            pass

    where ``origin`` (``str``) names the component that recovered from the error, ``message`` (``str``) describes it
    and ``exc`` is the underlying :class:`Exception`, or ``None``.

    By default the reports are logged.
    """
    def __init__(self):
        self.handlers = []
        self.add_handler(self._default_handler)

    def add_handler(self, handler):
        self.handlers.append(handler)

    def remove_handler(self, handler):
        if handler in self.handlers:
            self.handlers.remove(handler)

    def report(self, origin, message, exc=None):
        for handler in list(self.handlers):
            try:
                handler(origin, message, exc)
            except Exception as e:
                log.warning('Error while handling error report from %s: %s', origin, e)

    def _default_handler(self, origin, message, exc):
        log.error('[%s] %s', origin, message, exc_info=exc)
