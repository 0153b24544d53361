"""
Rate Limiter - SlowAPI configuration for API rate limiting
"""
from __future__ import annotations

from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import config

limiter = Limiter(key_func=get_remote_address, default_limits=[config.rate_limit])
