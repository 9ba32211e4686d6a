"""
Room assembler: floor, ceiling and walls in one trimesh.Scene, plus the
openings expressed in room coordinates.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import trimesh

from .primitives import textured_plane
from .projector import apply_correction, project_opening
from .schema import (
    GlobalOpeningRecord,
    Opening,
    OpeningSize,
    OpeningType,
    RoomConfig,
    WallDescriptor,
)
from .transforms import QUARTER_TURN, to_world
from .wall import BuiltWall, WallSlabBuilder
from .window import WindowInsert

logger = logging.getLogger(__name__)

# Openings used when no window/door model was measured
DEFAULT_WINDOW = Opening(type="window", width=1.143, height=1.661,
                         center_offset_x=0.014, center_offset_y=0.167)
DEFAULT_DOOR = Opening(type="door", width=0.855, height=2.131,
                       center_offset_x=0.013, center_offset_y=-0.4345)


@dataclass
class RoomBuildResult:
    scene: trimesh.Scene
    walls: List[BuiltWall] = field(default_factory=list)
    openings: List[GlobalOpeningRecord] = field(default_factory=list)

    def first_opening(self, opening_type: OpeningType) -> Optional[GlobalOpeningRecord]:
        for record in self.openings:
            if record.type == opening_type:
                return record
        return None

    @property
    def window_opening(self) -> Optional[GlobalOpeningRecord]:
        return self.first_opening("window")

    @property
    def door_opening(self) -> Optional[GlobalOpeningRecord]:
        return self.first_opening("door")


def global_opening_record(opening: Opening, wall: WallDescriptor) -> GlobalOpeningRecord:
    """
    Place a wall-local opening in the room. The vertical reference is always
    the wall mid-height, never the floor.
    """
    local = (opening.center_offset_x,
             wall.height / 2 + opening.center_offset_y,
             opening.depth_offset)
    return GlobalOpeningRecord(
        type=opening.type,
        global_position=to_world(local, wall.position, wall.rotation_y),
        size=OpeningSize(width=opening.width, height=opening.height),
        rotation_y=wall.rotation_y,
        wall=wall.name,
    )


class RoomBuilder:
    """
    One-shot builder. Rebuilding means constructing a new RoomBuilder.

    `materials` may hold trimesh materials under 'floor', 'ceiling', 'wall',
    'window_frame' and 'glass'.
    """

    def __init__(self, config: RoomConfig, materials: Optional[Dict[str, Any]] = None):
        self.config = config
        self.materials = materials or {}

    def build(self) -> RoomBuildResult:
        result = RoomBuildResult(scene=trimesh.Scene())
        self._add_floor(result.scene)
        self._add_ceiling(result.scene)
        self._add_walls(result)
        logger.info("Built room %.2fx%.2f: %d walls, %d openings",
                    self.config.width, self.config.depth,
                    len(result.walls), len(result.openings))
        return result

    # ------------------------------------------------------------------
    # Floor / ceiling
    # ------------------------------------------------------------------

    def build_floor(self) -> trimesh.Trimesh:
        margin = self.config.floor_margin
        floor = textured_plane(self.config.width + margin, self.config.depth + margin,
                               texture_scale=self.config.texture_scale,
                               material=self.materials.get('floor'))
        floor.apply_transform(trimesh.transformations.rotation_matrix(-QUARTER_TURN, [1, 0, 0]))
        # Small offset hides the seam along the walls
        floor.apply_translation([-margin / 2, 0.0, -margin / 2])
        floor.metadata['is_floor'] = True
        return floor

    def build_ceiling(self) -> trimesh.Trimesh:
        ceiling = textured_plane(self.config.width, self.config.depth,
                                 texture_scale=self.config.texture_scale,
                                 material=self.materials.get('ceiling'))
        ceiling.apply_transform(trimesh.transformations.rotation_matrix(QUARTER_TURN, [1, 0, 0]))
        ceiling.apply_translation([0.0, self.config.wall_height, 0.0])
        ceiling.metadata['is_ceiling'] = True
        return ceiling

    def _add_floor(self, scene: trimesh.Scene):
        scene.add_geometry(self.build_floor(), node_name='Floor', geom_name='Floor')

    def _add_ceiling(self, scene: trimesh.Scene):
        scene.add_geometry(self.build_ceiling(), node_name='Ceiling', geom_name='Ceiling')

    # ------------------------------------------------------------------
    # Walls
    # ------------------------------------------------------------------

    def resolve_wall(self, wall: WallDescriptor, index: int) -> WallDescriptor:
        """Fill room defaults into a wall descriptor."""
        return wall.model_copy(update={
            'name': wall.name or f"Wall_{index}",
            'width': wall.width if wall.width is not None else self.config.width,
            'height': wall.height if wall.height is not None else self.config.wall_height,
            'thickness': wall.thickness if wall.thickness is not None else self.config.wall_thickness,
        })

    def default_walls(self) -> List[WallDescriptor]:
        """Front wall with a window, left wall with a door, plain right wall."""
        cfg = self.config
        front = WallDescriptor(name='FrontWall', width=cfg.width,
                               position=(0.0, 0.0, -cfg.depth / 2), rotation_y=0.0)
        left = WallDescriptor(name='LeftWall', width=cfg.depth,
                              position=(-cfg.width / 2, 0.0, 0.0), rotation_y=QUARTER_TURN)
        right = WallDescriptor(name='RightWall', width=cfg.depth,
                               position=(cfg.width / 2, 0.0, 0.0), rotation_y=QUARTER_TURN)

        front = front.model_copy(update={'openings': [self._default_opening('window', front)]})
        left = left.model_copy(update={'openings': [self._default_opening('door', left)]})
        return [front, left, right]

    def _default_opening(self, opening_type: OpeningType, wall: WallDescriptor) -> Opening:
        bounds = getattr(self.config.model_bounds, opening_type)
        if bounds is None:
            return DEFAULT_WINDOW if opening_type == 'window' else DEFAULT_DOOR

        projected = project_opening(bounds, wall.position, wall.rotation_y,
                                    self.config.wall_height, self.config.wall_thickness)
        corrected = apply_correction(projected, self.config.correction_for(opening_type))
        logger.debug("%s opening from model bounds: %s -> %s", opening_type, projected, corrected)
        return corrected.to_opening(opening_type)

    def _add_walls(self, result: RoomBuildResult):
        walls = self.config.walls or self.default_walls()
        procedural_windows = self.config.model_bounds.window is None

        window_count = 0
        for index, wall in enumerate(walls):
            wall = self.resolve_wall(wall, index)
            built = WallSlabBuilder(wall, material=self.materials.get('wall'),
                                    texture_scale=self.config.texture_scale).build()
            result.scene.add_geometry(built.mesh, node_name=built.name, geom_name=built.name,
                                      transform=built.transform)
            result.walls.append(built)

            for opening in wall.openings:
                if opening.is_degenerate:
                    continue
                record = global_opening_record(opening, wall)
                result.openings.append(record)
                if opening.type == 'window' and procedural_windows:
                    self._add_window_insert(result.scene, opening, record, wall, window_count)
                    window_count += 1

    def _add_window_insert(self, scene: trimesh.Scene, opening: Opening,
                           record: GlobalOpeningRecord, wall: WallDescriptor, index: int):
        insert = WindowInsert(opening.width, opening.height, self.config.window_frame)
        transform = insert.placement(record, wall.thickness)
        name = f"Window_{index}"
        scene.add_geometry(insert.build_frame(self.materials.get('window_frame')),
                           node_name=f"{name}_frame", geom_name=f"{name}_frame",
                           transform=transform)
        scene.add_geometry(insert.build_glass(self.materials.get('glass')),
                           node_name=f"{name}_glass", geom_name=f"{name}_glass",
                           transform=transform)
