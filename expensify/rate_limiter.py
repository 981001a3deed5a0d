"""Rate limiter for upload endpoints.

Limits are keyed by client address. Counters live in process memory unless
``rate_limit_storage_uri`` points at a shared backend.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from expensify.config import settings

limiter = Limiter(key_func=get_remote_address, storage_uri=settings.rate_limit_storage_uri)
