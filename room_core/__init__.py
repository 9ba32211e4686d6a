"""
Procedural room shell: floor, ceiling and walls with window/door openings.

Walls are split into solid rectangles around their openings and merged into
one textured trimesh per wall.
"""

from .config import load_room_config, room_config_from_dict
from .projector import apply_correction, project_front_opening, project_opening, project_side_opening
from .room import RoomBuilder, RoomBuildResult, global_opening_record
from .schema import (
    BoundingBox,
    GlobalOpeningRecord,
    Opening,
    OpeningCorrection,
    ProjectedOpening,
    RoomConfig,
    WallDescriptor,
)
from .wall import WallSlabBuilder, build_wall_mesh, compute_regions

__all__ = [
    'BoundingBox',
    'GlobalOpeningRecord',
    'Opening',
    'OpeningCorrection',
    'ProjectedOpening',
    'RoomBuilder',
    'RoomBuildResult',
    'RoomConfig',
    'WallDescriptor',
    'WallSlabBuilder',
    'apply_correction',
    'build_wall_mesh',
    'compute_regions',
    'global_opening_record',
    'load_room_config',
    'project_front_opening',
    'project_opening',
    'project_side_opening',
    'room_config_from_dict',
]
