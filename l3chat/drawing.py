"""Events and client-side state for the shared drawing canvas."""

from __future__ import annotations

import json
import logging
import random
import re
from dataclasses import asdict, dataclass
from typing import Any

log = logging.getLogger(__name__)

DEFAULT_ROOM = "default-room"
DEFAULT_COLOR = "#000000"
DEFAULT_BRUSH_SIZE = 5
LINE = "line"
CLEAR = "clear"

_U32_MAX = 2**32 - 1
_UNSIGNED = re.compile(r"\+?[0-9]+")


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _require_number(data: dict[str, Any], key: str) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"field {key!r} must be a number")
    return float(value)


def _optional_number(data: dict[str, Any], key: str) -> float | None:
    if data.get(key) is None:
        return None
    return _require_number(data, key)


def _require_brush_size(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _U32_MAX:
        raise ValueError("brush_size must be an unsigned 32-bit integer")
    return value


@dataclass(frozen=True)
class DrawEvent:
    """One drawing action broadcast to everyone in a room."""

    event_type: str
    x: float
    y: float
    prev_x: float | None
    prev_y: float | None
    color: str
    brush_size: int
    room_id: str
    user_id: str

    def __post_init__(self) -> None:
        _require_brush_size(self.brush_size)

    @classmethod
    def line(
        cls,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        color: str,
        brush_size: int,
        room_id: str,
        user_id: str,
    ) -> DrawEvent:
        """A stroke from (x1, y1) to (x2, y2)."""
        return cls(
            event_type=LINE,
            x=float(x2),
            y=float(y2),
            prev_x=float(x1),
            prev_y=float(y1),
            color=color,
            brush_size=brush_size,
            room_id=room_id,
            user_id=user_id,
        )

    @classmethod
    def clear(cls, color: str, brush_size: int, room_id: str, user_id: str) -> DrawEvent:
        """An instruction to wipe the canvas."""
        return cls(
            event_type=CLEAR,
            x=0.0,
            y=0.0,
            prev_x=None,
            prev_y=None,
            color=color,
            brush_size=brush_size,
            room_id=room_id,
            user_id=user_id,
        )

    def to_json(self) -> str:
        """Serialise to the compact JSON sent over the socket."""
        return json.dumps(asdict(self), separators=(",", ":"))

    @classmethod
    def from_json(cls, text: str) -> DrawEvent:
        """Parse an event; raises ValueError if the JSON or a field is invalid."""
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("draw event must be a JSON object")
        if "brush_size" not in data:
            raise ValueError("missing field 'brush_size'")
        return cls(
            event_type=_require_str(data, "event_type"),
            x=_require_number(data, "x"),
            y=_require_number(data, "y"),
            prev_x=_optional_number(data, "prev_x"),
            prev_y=_optional_number(data, "prev_y"),
            color=_require_str(data, "color"),
            brush_size=_require_brush_size(data["brush_size"]),
            room_id=_require_str(data, "room_id"),
            user_id=_require_str(data, "user_id"),
        )


def generate_user_id(rng: random.Random | None = None) -> str:
    """A random client identifier of the form ``user-N`` with N below 10000."""
    source = rng if rng is not None else random
    return f"user-{int(source.random() * 10000.0)}"


class DrawingSession:
    """Pointer state of one participant; produces the events to broadcast."""

    def __init__(
        self,
        room_id: str = DEFAULT_ROOM,
        user_id: str | None = None,
        color: str = DEFAULT_COLOR,
        brush_size: int = DEFAULT_BRUSH_SIZE,
    ) -> None:
        self.room_id = room_id
        self.user_id = user_id if user_id is not None else generate_user_id()
        self.color = color
        self.brush_size = _require_brush_size(brush_size)
        self.is_drawing = False
        self.last_x = 0.0
        self.last_y = 0.0

    def press(self, x: float, y: float) -> None:
        """Start a stroke at the given point."""
        self.is_drawing = True
        self.last_x = float(x)
        self.last_y = float(y)

    def move(self, x: float, y: float) -> DrawEvent | None:
        """Extend the stroke; returns the line to draw and send, or None if not drawing."""
        if not self.is_drawing:
            return None
        event = DrawEvent.line(
            self.last_x,
            self.last_y,
            x,
            y,
            self.color,
            self.brush_size,
            self.room_id,
            self.user_id,
        )
        self.last_x = float(x)
        self.last_y = float(y)
        return event

    def release(self) -> None:
        """End the current stroke."""
        self.is_drawing = False

    def clear(self) -> DrawEvent:
        """Return the event that clears every participant's canvas."""
        return DrawEvent.clear(self.color, self.brush_size, self.room_id, self.user_id)

    def set_brush_size(self, text: str) -> int:
        """Set the brush size from slider text, falling back to the default."""
        if _UNSIGNED.fullmatch(text) and int(text) <= _U32_MAX:
            self.brush_size = int(text)
        else:
            self.brush_size = DEFAULT_BRUSH_SIZE
        return self.brush_size

    def receive(self, text: str) -> DrawEvent | None:
        """Parse an incoming message; returns it only if another user sent it."""
        try:
            event = DrawEvent.from_json(text)
        except ValueError as exc:
            log.info("Failed to parse event: %s", exc)
            return None
        if event.user_id == self.user_id:
            return None
        return event