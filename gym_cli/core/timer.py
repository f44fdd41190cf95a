"""Rest timer countdown between sets."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from gym_cli.core.constants import DEFAULT_REST_INCREMENT, DEFAULT_REST_SECONDS


def format_timer(seconds: int) -> str:
    """Format seconds as MM:SS."""
    total = max(int(seconds), 0)
    minutes, secs = divmod(total, 60)
    return f"{minutes:02d}:{secs:02d}"


@dataclass
class RestTimer:
    """Countdown that decrements once per tick while running and stops at zero."""

    seconds: int = DEFAULT_REST_SECONDS
    running: bool = False
    default_seconds: int = DEFAULT_REST_SECONDS

    def reset(self, seconds: Optional[int] = None) -> None:
        self.seconds = max(int(seconds if seconds is not None else self.default_seconds), 0)

    def add(self, seconds: int = DEFAULT_REST_INCREMENT) -> None:
        self.seconds = max(self.seconds + int(seconds), 0)

    def start(self) -> None:
        self.running = self.seconds > 0

    def pause(self) -> None:
        self.running = False

    def toggle(self) -> None:
        if self.running:
            self.pause()
        else:
            self.start()

    def tick(self) -> bool:
        """Advance one second. Returns True when the countdown just reached zero."""
        if not self.running:
            return False
        if self.seconds <= 1:
            self.seconds = 0
            self.running = False
            return True
        self.seconds -= 1
        return False

    def run(
        self,
        on_tick: Optional[Callable[[int], None]] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        """Block until the countdown finishes or is paused by ``on_tick``."""
        pause_for = sleep or time.sleep
        self.start()
        while self.running:
            pause_for(1.0)
            self.tick()
            if on_tick is not None:
                on_tick(self.seconds)
