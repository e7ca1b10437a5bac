"""Errors raised while routing and dispatching NetSuite calls."""

from typing import Optional

import requests
from singer_sdk.exceptions import ConfigValidationError, FatalAPIError


class NetSuiteTBAError(Exception):
    """Base class for errors raised by this target."""


class MalformedInputError(NetSuiteTBAError, ValueError):
    """An input item could not be turned into a NetSuite request."""

    def __init__(self, message: str, field: Optional[str] = None, item_index: Optional[int] = None):
        super().__init__(message)
        self.field = field
        self.item_index = item_index


class UnsupportedOperationError(MalformedInputError):
    """The item names an operation the sink does not know."""


class MissingCredentialError(ConfigValidationError):
    """Required credential keys are absent from the target config."""

    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(f"Missing NetSuite credential settings: {', '.join(self.missing)}")


class NetSuiteAPIError(FatalAPIError):
    """NetSuite answered with an HTTP error status."""

    def __init__(self, message: str, response: Optional[requests.Response] = None):
        super().__init__(message)
        self.response = response
        self.status_code = response.status_code if response is not None else None


class NetSuiteAuthenticationError(NetSuiteAPIError):
    """NetSuite rejected the signed request (signature, timestamp or realm)."""
