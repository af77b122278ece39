"""
Signed session tokens.

The cookie value is an itsdangerous timed signature over the account id, so
no server-side session table is needed to recognise a returning client.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from itsdangerous import BadSignature, BadTimeSignature, URLSafeTimedSerializer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionData:
    account_id: str


class SessionSigner:
    def __init__(self, secret_key: Optional[str], *, salt: str, max_age_seconds: int):
        if not secret_key:
            raise RuntimeError("SECRET_KEY is required to sign sessions")
        self.max_age_seconds = max_age_seconds
        self._serializer = URLSafeTimedSerializer(secret_key=secret_key, salt=salt)

    def issue(self, account_id: str) -> str:
        return self._serializer.dumps({"uid": account_id})

    def read(self, token: Optional[str]) -> Optional[SessionData]:
        if not token:
            return None
        try:
            data = self._serializer.loads(token, max_age=self.max_age_seconds)
        except (BadSignature, BadTimeSignature):
            logger.info("Rejected invalid or expired session token")
            return None
        uid = str((data or {}).get("uid") or "").strip() if isinstance(data, dict) else ""
        if not uid:
            return None
        return SessionData(account_id=uid)
