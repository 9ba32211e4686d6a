"""
Where to put the window-area light. The lighting system itself lives outside
this package; it only needs a rectangle in room coordinates.
"""

from typing import Optional

from pydantic import BaseModel

from .room import RoomBuildResult
from .schema import Vec3
from .transforms import interior_side, to_world


class WindowLightPlacement(BaseModel):
    position: Vec3
    width: float
    height: float
    rotation_y: float = 0.0  # +X toward +Z, same sense as the wall; glTF yaw is -rotation_y
    from_opening: bool = True


# Used when the room has no window at all
WINDOW_LIGHT_FALLBACK = WindowLightPlacement(
    position=(0.5, 2.15, -1.4), width=1.2, height=1.5, from_opening=False
)


def window_light_placement(result: RoomBuildResult, wall_thickness: float,
                           fallback: Optional[WindowLightPlacement] = None) -> WindowLightPlacement:
    """
    Rectangle light filling the first window opening, flush with the wall face
    that looks into the room. Rooms without windows get `fallback`.
    """
    record = result.first_opening("window")
    if record is None:
        return fallback or WINDOW_LIGHT_FALLBACK

    side = interior_side(record.global_position, record.rotation_y)
    position = to_world((0.0, 0.0, side * wall_thickness / 2), record.global_position,
                        record.rotation_y)
    return WindowLightPlacement(
        position=position,
        width=record.size.width,
        height=record.size.height,
        rotation_y=record.rotation_y,
    )
