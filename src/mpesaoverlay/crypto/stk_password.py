from __future__ import annotations

import base64
from datetime import datetime
from typing import Optional, Tuple

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


def generate_timestamp_and_password(
    short_code: int, pass_key: Optional[str], now: Optional[datetime] = None
) -> Tuple[str, str]:
    """Return the (timestamp, password) pair M-Pesa Express requests carry.

    The password is base64(short code + pass key + timestamp), the timestamp
    is local time formatted as YYYYMMDDHHMMSS.
    """
    timestamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    raw = f"{short_code}{pass_key or ''}{timestamp}"
    return timestamp, base64.b64encode(raw.encode("utf-8")).decode("utf-8")
