"""HTTP error plumbing shared by the routers."""

from .errors import ApiError, register_error_handlers, to_api_error

__all__ = ["ApiError", "register_error_handlers", "to_api_error"]
