"""
Description: 
Shared SlowAPI limiter. Clients are keyed by remote address. Routes that call a
model declare their own tighter limit with @limiter.limit; everything else gets
the default.

RATE_LIMIT_DEFAULT overrides the default limit (e.g. "60/minute").

Dependencies:
- slowapi: For rate limiting functionality.
- loguru: For logging.

Author: @kcaparas1630
"""
import os
from slowapi import Limiter
from slowapi.util import get_remote_address
from loguru import logger

DEFAULT_LIMIT = os.getenv("RATE_LIMIT_DEFAULT", "30/minute")

limiter = Limiter(key_func=get_remote_address, default_limits=[DEFAULT_LIMIT])
logger.info(f"Rate limiter initialized (default {DEFAULT_LIMIT})")
