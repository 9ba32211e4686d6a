import math
from typing import Any, Dict, List, Literal, Optional, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .transforms import is_supported_rotation

Vec3 = Tuple[float, float, float]
OpeningType = Literal["window", "door"]
RESERVED_NODE_NAMES = ("Floor", "Ceiling")


class Opening(BaseModel):
    """
    A rectangular hole cut through the full thickness of a wall slab.
    """
    model_config = ConfigDict(frozen=True)

    type: OpeningType = "window"
    center_offset_x: float = 0.0  # along the wall width, 0 = wall centre
    center_offset_y: float = 0.0  # relative to wall mid-height, not the floor
    width: float
    height: float
    depth_offset: float = 0.0     # local Z, only used for the global record

    @property
    def is_degenerate(self) -> bool:
        values = (self.center_offset_x, self.center_offset_y,
                  self.width, self.height, self.depth_offset)
        if not all(math.isfinite(v) for v in values):
            return True
        return not (self.width > 0 and self.height > 0)


class BoundingBox(BaseModel):
    """
    World-space axis-aligned box of an externally authored model.
    """
    min: Vec3
    max: Vec3

    @classmethod
    def from_points(cls, points) -> 'BoundingBox':
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        return cls(min=tuple(pts.min(axis=0)), max=tuple(pts.max(axis=0)))

    @property
    def center(self) -> Vec3:
        return tuple((a + b) / 2 for a, b in zip(self.min, self.max))

    @property
    def size(self) -> Vec3:
        return tuple(b - a for a, b in zip(self.min, self.max))


class ProjectedOpening(BaseModel):
    """Opening parameters derived from a bounding box, before any correction."""
    width: float
    height: float
    center_offset_x: float
    center_offset_y: float

    def to_opening(self, opening_type: OpeningType = "window", depth_offset: float = 0.0) -> Opening:
        return Opening(
            type=opening_type,
            center_offset_x=self.center_offset_x,
            center_offset_y=self.center_offset_y,
            width=self.width,
            height=self.height,
            depth_offset=depth_offset,
        )


class OpeningCorrection(BaseModel):
    """
    Post-projection adjustment for models whose bounding box is slightly larger
    than the hole they need (frames, hinges, trims).
    """
    width_margin: float = 0.0
    height_margin: float = 0.0
    center_y_shift: float = 0.0
    min_size: float = 0.01


class WallDescriptor(BaseModel):
    """
    One wall slab. Missing width/height/thickness are filled in by the room.
    """
    name: Optional[str] = None
    width: Optional[float] = None
    height: Optional[float] = None
    thickness: Optional[float] = None
    position: Vec3 = (0.0, 0.0, 0.0)
    rotation_y: float = 0.0  # radians, 0 or pi/2
    openings: List[Opening] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _degrees_alias(cls, data: Any) -> Any:
        if isinstance(data, dict) and "rotation_deg" in data:
            data = dict(data)
            data["rotation_y"] = math.radians(data.pop("rotation_deg"))
        return data

    @field_validator("rotation_y")
    @classmethod
    def _check_rotation(cls, value: float) -> float:
        if not is_supported_rotation(value):
            raise ValueError(
                f"unsupported wall rotation {value!r}: walls must be rotated by 0 or pi/2"
            )
        return value


class OpeningMetadata(BaseModel):
    """Where an opening sits on a finished wall mesh (wall-local, floor at Y=0)."""
    type: OpeningType
    center_x: float
    center_y: float
    width: float
    height: float
    bottom: float
    top: float


class OpeningSize(BaseModel):
    width: float
    height: float


class GlobalOpeningRecord(BaseModel):
    """An opening expressed in room coordinates, for lighting and model placement."""
    type: OpeningType
    global_position: Vec3
    size: OpeningSize
    rotation_y: float = 0.0  # wall rotation, +X toward +Z; glTF yaw is -rotation_y
    wall: Optional[str] = None


class ModelBounds(BaseModel):
    window: Optional[BoundingBox] = None
    door: Optional[BoundingBox] = None


class WindowFrameConfig(BaseModel):
    frame_width: float = 0.05
    frame_thickness: float = 0.06
    glass_offset: float = 0.0
    wall_gap: float = 0.005  # keeps the frame off the wall face


class RoomConfig(BaseModel):
    """
    Everything the room assembler needs. `depth` is the floor extent along Z.
    """
    width: float = Field(3.0, gt=0)
    depth: float = Field(3.0, gt=0)
    wall_height: float = Field(2.7, gt=0)
    wall_thickness: float = Field(0.2, gt=0)
    texture_scale: float = Field(2.0, gt=0)
    floor_margin: float = Field(0.05, ge=0)
    walls: List[WallDescriptor] = Field(default_factory=list)
    model_bounds: ModelBounds = Field(default_factory=ModelBounds)
    window_correction: OpeningCorrection = Field(default_factory=OpeningCorrection)
    door_correction: OpeningCorrection = Field(
        default_factory=lambda: OpeningCorrection(
            width_margin=0.10, height_margin=0.05, center_y_shift=-0.025
        )
    )
    window_frame: WindowFrameConfig = Field(default_factory=WindowFrameConfig)

    @model_validator(mode="after")
    def _check_wall_names(self) -> "RoomConfig":
        # Wall names become scene node names, so they must not collide
        seen = set()
        for index, wall in enumerate(self.walls):
            name = wall.name or f"Wall_{index}"
            if name in RESERVED_NODE_NAMES or name.startswith("Window_"):
                raise ValueError(f"wall name {name!r} is reserved for room geometry")
            if name in seen:
                raise ValueError(f"duplicate wall name {name!r}")
            seen.add(name)
        return self

    def correction_for(self, opening_type: OpeningType) -> OpeningCorrection:
        return self.door_correction if opening_type == "door" else self.window_correction

    def summary(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "depth": self.depth,
            "wall_height": self.wall_height,
            "wall_thickness": self.wall_thickness,
            "walls": len(self.walls) or "default",
        }
