"""
Rate limiting configuration using slowapi.

Tiers:
  • strict       – 5/min  (OTP request – each call sends an email)
  • auth         – 10/min (OTP verify – prevents brute-force)
  • availability – 120/min (public, unauthenticated timeline reads)
  • default      – 60/min (everything else)

The limiter keys on client IP.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address, default_limits=["60/minute"])

STRICT = "5/minute"
AUTH = "10/minute"
# The selector re-fetches on every court/date change.
AVAILABILITY = "120/minute"
DEFAULT = "60/minute"
