"""Request sequence tokens for insight flows.

Each flow (e.g. ``"summary"``) hands out monotonically increasing tokens.
A result may be applied only while its token is still the latest one
issued for that flow; anything older is stale and is discarded.
"""

from __future__ import annotations

import itertools


class RequestSequencer:
    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._latest: dict[str, int] = {}

    def issue(self, flow: str) -> int:
        token = next(self._counter)
        self._latest[flow] = token
        return token

    def is_current(self, flow: str, token: int) -> bool:
        return self._latest.get(flow) == token
