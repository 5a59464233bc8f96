import json
import random
import re

import pytest

from l3chat.drawing import DrawEvent, DrawingSession, generate_user_id


def _session(user_id="user-1"):
    return DrawingSession(room_id="default-room", user_id=user_id)


def test_line_event_fields():
    event = DrawEvent.line(1, 2, 3, 4, "#ff0000", 7, "room", "user-1")
    assert event.event_type == "line"
    assert (event.prev_x, event.prev_y, event.x, event.y) == (1.0, 2.0, 3.0, 4.0)
    assert event.color == "#ff0000"
    assert event.brush_size == 7


def test_clear_event_fields():
    event = DrawEvent.clear("#000000", 5, "room", "user-1")
    assert event.event_type == "clear"
    assert (event.x, event.y) == (0.0, 0.0)
    assert event.prev_x is None and event.prev_y is None


def test_json_round_trip():
    event = DrawEvent.line(1.5, 2.5, 3.5, 4.5, "#123456", 9, "room", "user-9")
    assert DrawEvent.from_json(event.to_json()) == event


def test_json_field_names_and_order():
    event = DrawEvent.clear("#000000", 5, "default-room", "user-1")
    data = json.loads(event.to_json())
    assert list(data) == [
        "event_type", "x", "y", "prev_x", "prev_y",
        "color", "brush_size", "room_id", "user_id",
    ]
    assert data["prev_x"] is None


def test_from_json_missing_optionals_are_none():
    text = json.dumps({
        "event_type": "clear", "x": 0, "y": 0, "color": "#000000",
        "brush_size": 5, "room_id": "r", "user_id": "u",
    })
    event = DrawEvent.from_json(text)
    assert event.prev_x is None and event.prev_y is None
    assert event.x == 0.0


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        "[]",
        json.dumps({"event_type": "line", "x": 1, "y": 1}),
        json.dumps({
            "event_type": "line", "x": "a", "y": 1, "color": "c",
            "brush_size": 5, "room_id": "r", "user_id": "u",
        }),
        json.dumps({
            "event_type": "line", "x": 1, "y": 1, "color": "c",
            "brush_size": -1, "room_id": "r", "user_id": "u",
        }),
    ],
)
def test_from_json_rejects_invalid(text):
    with pytest.raises(ValueError):
        DrawEvent.from_json(text)


def test_session_defaults():
    session = DrawingSession(user_id="user-1")
    assert session.room_id == "default-room"
    assert session.color == "#000000"
    assert session.brush_size == 5
    assert session.is_drawing is False


def test_move_without_press_draws_nothing():
    session = _session()
    assert session.move(10, 10) is None


def test_press_move_produces_connected_lines():
    session = _session()
    session.press(1, 2)
    first = session.move(3, 4)
    second = session.move(5, 6)
    assert (first.prev_x, first.prev_y, first.x, first.y) == (1.0, 2.0, 3.0, 4.0)
    assert (second.prev_x, second.prev_y) == (first.x, first.y)
    assert first.user_id == "user-1"
    assert first.room_id == "default-room"


def test_release_stops_drawing():
    session = _session()
    session.press(0, 0)
    session.release()
    assert session.move(1, 1) is None


def test_clear_uses_session_settings():
    session = _session()
    session.set_brush_size("12")
    event = session.clear()
    assert event.event_type == "clear"
    assert event.brush_size == 12
    assert event.user_id == "user-1"


@pytest.mark.parametrize(
    "text, expected",
    [("12", 12), ("+3", 3), ("abc", 5), ("-1", 5), ("", 5), (" 4", 5), ("4294967296", 5)],
)
def test_set_brush_size(text, expected):
    session = _session()
    assert session.set_brush_size(text) == expected
    assert session.brush_size == expected


def test_receive_from_other_user():
    session = _session("user-1")
    event = DrawEvent.line(0, 0, 5, 5, "#000000", 5, "default-room", "user-2")
    assert session.receive(event.to_json()) == event


def test_receive_own_event_is_ignored():
    session = _session("user-1")
    event = DrawEvent.clear("#000000", 5, "default-room", "user-1")
    assert session.receive(event.to_json()) is None


def test_receive_malformed_is_ignored():
    assert _session().receive("{broken") is None


def test_generate_user_id_format():
    for seed in range(20):
        user_id = generate_user_id(random.Random(seed))
        match = re.fullmatch(r"user-(\d+)", user_id)
        assert match
        assert 0 <= int(match.group(1)) < 10000


def test_generate_user_id_reproducible_with_seed():
    same_seed = {generate_user_id(random.Random(42)) for _ in range(5)}
    assert len(same_seed) == 1
    different_seeds = {generate_user_id(random.Random(seed)) for seed in range(50)}
    assert len(different_seeds) > 1