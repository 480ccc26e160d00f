"""Function listing for the emulated Lambda API."""

from .client import FunctionClient, FunctionError, create_function_client

__all__ = ["FunctionClient", "FunctionError", "create_function_client"]
