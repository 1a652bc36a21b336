"""
Console presentation of session snapshots.

One line per change, e.g.

    Hold  8s  cycle 1  [■■■■□]
    止める  8秒  サイクル: 1  [■■■■□]
"""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from .config import BreathConfig
from .decay import MAX_INTENSITY
from .session import SessionSnapshot

TITLES = {
    "en": "4-8-7 breathing",
    "ja": "4-8-7呼吸法",
}

_SECONDS = {"en": "{}s", "ja": "{}秒"}
_CYCLE = {"en": "cycle {}", "ja": "サイクル: {}"}


class ConsolePresenter:
    """Session observer that writes a status line whenever it changes."""

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        locale: str = "en",
        show_intensity: bool = True,
    ):
        self.stream = stream or sys.stdout
        self.locale = locale
        self.show_intensity = show_intensity
        self.lines_written = 0
        self._last_line: Optional[str] = None

    @classmethod
    def from_config(cls, config: BreathConfig, stream: Optional[TextIO] = None) -> "ConsolePresenter":
        return cls(
            stream=stream,
            locale=config.display.locale,
            show_intensity=config.display.show_intensity,
        )

    @property
    def title(self) -> str:
        return TITLES.get(self.locale, TITLES["en"])

    def render(self, snapshot: SessionSnapshot) -> str:
        parts = [snapshot.spec.label_for(self.locale)]

        if snapshot.active:
            parts.append(_SECONDS.get(self.locale, _SECONDS["en"]).format(snapshot.remaining))

        if snapshot.cycle_count > 0:
            parts.append(_CYCLE.get(self.locale, _CYCLE["en"]).format(snapshot.cycle_count))

        if self.show_intensity:
            filled = "■" * snapshot.intensity
            empty = "□" * (MAX_INTENSITY - snapshot.intensity)
            parts.append(f"[{filled}{empty}]")

        return "  ".join(parts)

    def __call__(self, snapshot: SessionSnapshot) -> None:
        line = self.render(snapshot)
        if line == self._last_line:
            return

        self._last_line = line
        self.stream.write(line + "\n")
        self.stream.flush()
        self.lines_written += 1
