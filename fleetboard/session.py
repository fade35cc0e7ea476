"""
Access gate — passcode admission for starting the refresh lifecycle.

How the passcode is collected (login form, header, CLI flag) is up to the caller.
"""
from __future__ import annotations

import hmac
from dataclasses import dataclass

from fleetboard.config import DEFAULT_PASSCODE


@dataclass(frozen=True)
class Session:
    authenticated: bool = False


class AccessGate:
    def __init__(self, passcode: str = DEFAULT_PASSCODE) -> None:
        self._passcode = passcode

    def check(self, candidate: str | None) -> bool:
        if candidate is None:
            return False
        return hmac.compare_digest(candidate.encode("utf-8"), self._passcode.encode("utf-8"))

    def login(self, candidate: str | None) -> Session:
        return Session(authenticated=self.check(candidate))
