from typing import Any, Dict

import yaml

from .schema import RoomConfig


def room_config_from_dict(data: Dict[str, Any]) -> RoomConfig:
    """
    Accepts either the room mapping itself or a document with a top-level `room` key.
    Raises pydantic.ValidationError on bad values (e.g. a wall rotated by 45 degrees).
    """
    if data and 'room' in data:
        data = data['room']
    return RoomConfig(**(data or {}))


def load_room_config(file_path: str) -> RoomConfig:
    with open(file_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    return room_config_from_dict(data)
