"""Shared infrastructure used by services."""

from expensify.services.shared.http_client import HTTPClient, HTTPClientError

__all__ = ["HTTPClient", "HTTPClientError"]
