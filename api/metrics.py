"""
File-server hit counter.

One HitCounter lives on app.extensions["hit_counter"] for the life of the
process. It starts at zero, increments once per /app/ request, and can only
be reset when the platform is "dev".
"""
from __future__ import annotations

import threading

from flask import current_app

from api.config import DEV_PLATFORM
from utils.exceptions import ForbiddenError


def ensure_resettable(platform: str) -> None:
    if platform != DEV_PLATFORM:
        raise ForbiddenError("Reset is only allowed in dev")


class HitCounter:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._hits = 0

    def increment(self) -> int:
        with self._lock:
            self._hits += 1
            return self._hits

    @property
    def value(self) -> int:
        with self._lock:
            return self._hits

    def reset(self, platform: str) -> None:
        ensure_resettable(platform)
        with self._lock:
            self._hits = 0


def init_app(app) -> HitCounter:
    counter = HitCounter()
    app.extensions["hit_counter"] = counter
    return counter


def hit_counter() -> HitCounter:
    return current_app.extensions["hit_counter"]
