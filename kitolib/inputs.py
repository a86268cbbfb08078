"""Per-frame user input: keyboard, mouse and window events."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any

from kitolib.vecmath import Quat, Vec2

MOUSE_BUTTON_COUNT = 3


class MouseButtonEvent(str, Enum):
    NONE = ""
    DOWN = "DOWN"
    UP = "UP"


class KeyboardKey(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    G = "G"
    H = "H"
    I = "I"  # noqa: E741
    J = "J"
    K = "K"
    L = "L"
    M = "M"
    N = "N"
    O = "O"  # noqa: E741
    P = "P"
    Q = "Q"
    R = "R"
    S = "S"
    T = "T"
    U = "U"
    V = "V"
    W = "W"
    X = "X"
    Y = "Y"
    Z = "Z"

    UP = "Up"
    DOWN = "Down"
    LEFT = "Left"
    RIGHT = "Right"

    LSHIFT = "Left Shift"
    LCTRL = "Left Ctrl"
    LALT = "Left Alt"
    RSHIFT = "Right Shift"
    RCTRL = "Right Ctrl"
    RALT = "Right Alt"
    SPACE = "Space"
    ESCAPE = "Escape"

    TICK = "`"
    F1 = "F1"
    F2 = "F2"
    F3 = "F3"
    F4 = "F4"
    F5 = "F5"
    F6 = "F6"
    F7 = "F7"
    F8 = "F8"
    F9 = "F9"
    F10 = "F10"


class KeyboardEvent(IntEnum):
    UP = 49
    DOWN = 50
    NONE = 51


def _key_name(key: str | KeyboardKey) -> str:
    return key.value if isinstance(key, KeyboardKey) else str(key)


@dataclass(frozen=True)
class MouseMotionEvent:
    x_rel: float = 0.0
    y_rel: float = 0.0

    def is_zero(self) -> bool:
        return self.x_rel == 0 and self.y_rel == 0


@dataclass(frozen=True)
class MouseInput:
    position: Vec2 = field(default_factory=lambda: Vec2(0.0, 0.0))
    mouse_wheel_delta: int = 0
    mouse_motion_event: MouseMotionEvent = field(default_factory=MouseMotionEvent)
    mouse_button_event: tuple[MouseButtonEvent, ...] = (MouseButtonEvent.NONE,) * MOUSE_BUTTON_COUNT
    # left, right, middle
    mouse_button_state: tuple[bool, ...] = (False,) * MOUSE_BUTTON_COUNT


@dataclass(frozen=True)
class KeyState:
    key: str
    event: KeyboardEvent


@dataclass(frozen=True)
class QuitCommand:
    pass


@dataclass(frozen=True)
class FileDropCommand:
    file: str


@dataclass(frozen=True)
class WindowEvent:
    resized: bool = False


@dataclass(frozen=True)
class Input:
    """The input a user gave during one command frame; read, never written.

    The keyboard mapping is shared with the collector that produced it.
    """

    window_event: WindowEvent = field(default_factory=WindowEvent)
    keyboard_input: dict[str, KeyState] = field(default_factory=dict)
    mouse_input: MouseInput = field(default_factory=MouseInput)
    camera_rotation: Quat | None = None
    commands: list[Any] = field(default_factory=list)


InputPoller = Callable[[], Input]


def _check_button(index: int) -> None:
    if not 0 <= index < MOUSE_BUTTON_COUNT:
        raise IndexError(f"mouse button index {index} out of range")


class InputCollector:
    """Accumulates input events until they are gathered into an :class:`Input`."""

    def __init__(self) -> None:
        self.mouse_position: tuple[float, float] = (0.0, 0.0)
        self.mouse_button_state: list[bool] = [False] * MOUSE_BUTTON_COUNT
        self.keyboard_input: dict[str, KeyState] = {}
        self.mouse_wheel_delta = 0
        self.mouse_motion_event = MouseMotionEvent()
        self.mouse_button_event: list[MouseButtonEvent] = [MouseButtonEvent.NONE] * MOUSE_BUTTON_COUNT

    def set_mouse_position(self, x: float, y: float) -> None:
        self.mouse_position = (x, y)

    def set_mouse_button_event(self, index: int, down: bool) -> None:
        _check_button(index)
        self.mouse_button_event[index] = MouseButtonEvent.DOWN if down else MouseButtonEvent.UP

    def set_mouse_button_state(self, index: int, value: bool) -> None:
        _check_button(index)
        self.mouse_button_state[index] = value

    def set_key_state_enabled(self, key: str | KeyboardKey) -> None:
        """Mark a key as held, unless an event for it was already recorded."""
        name = _key_name(key)
        self.keyboard_input.setdefault(name, KeyState(name, KeyboardEvent.NONE))

    def add_key_event(self, key: str | KeyboardKey, down: bool) -> None:
        name = _key_name(key)
        event = KeyboardEvent.DOWN if down else KeyboardEvent.UP
        self.keyboard_input[name] = KeyState(name, event)

    def add_mouse_wheel_delta(self, x: float, y: float) -> None:
        self.mouse_wheel_delta += int(y)

    def add_mouse_motion(self, x: float, y: float) -> None:
        motion = self.mouse_motion_event
        self.mouse_motion_event = dataclasses.replace(
            motion, x_rel=motion.x_rel + x, y_rel=motion.y_rel + y
        )

    def get_input(self) -> Input:
        return Input(
            mouse_input=MouseInput(
                position=Vec2(*self.mouse_position),
                mouse_wheel_delta=self.mouse_wheel_delta,
                mouse_motion_event=self.mouse_motion_event,
                mouse_button_event=tuple(self.mouse_button_event),
                mouse_button_state=tuple(self.mouse_button_state),
            ),
            keyboard_input=self.keyboard_input,
        )


def null_input_poller() -> Input:
    """An input poller that reports no input at all."""
    return Input()