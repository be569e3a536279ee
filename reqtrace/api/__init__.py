"""Public API — path-based operations and the :class:`ReqTrace` facade."""

from reqtrace.api.facade import ReqTrace

__all__ = ["ReqTrace"]
