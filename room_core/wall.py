"""
Wall slab builder.

A wall is a box of width x height x thickness. Openings are cut by splitting
the face into rectangles that avoid them, sweeping left to right:

    +------+---------+------+
    |      |   top   |      |
    | left +---------+ right|
    |      | opening |      |
    |      +---------+      |
    |      | bottom  |      |
    +------+---------+------+

Each rectangle becomes its own box (UVs tiled by its own size) and all boxes
are merged into a single mesh. Local origin is the floor centre of the slab.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
import trimesh

from .primitives import DEFAULT_TEXTURE_SCALE, merge_meshes, textured_box
from .schema import Opening, OpeningMetadata, WallDescriptor
from .transforms import placement_matrix

logger = logging.getLogger(__name__)

EPSILON = 0.01  # regions thinner than this are dropped


@dataclass(frozen=True)
class Region:
    """Solid rectangle of a wall face; Y runs from 0 at the floor to the wall height."""
    kind: str  # 'left', 'top', 'bottom', 'right', 'full'
    width: float
    height: float
    center_x: float
    center_y: float

    @property
    def area(self) -> float:
        return self.width * self.height


def sort_openings(openings: Sequence[Opening]) -> List[Opening]:
    """Usable openings ordered along the wall. sorted() is stable, ties keep input order."""
    usable = []
    for opening in openings:
        if opening.is_degenerate:
            logger.debug("Ignoring degenerate opening %s", opening)
            continue
        usable.append(opening)
    return sorted(usable, key=lambda o: o.center_offset_x)


def compute_regions(width: float, height: float,
                    openings: Sequence[Opening]) -> Tuple[List[Region], List[Opening]]:
    """
    Partition a wall face into solid rectangles around its openings.

    Openings must not overlap along X; that is not checked. Overlaps or
    openings sticking out of the wall give skipped or misplaced fillers.

    Returns:
        (regions, sorted_openings). regions is empty when there is nothing to cut.
    """
    ordered = sort_openings(openings)
    if not ordered:
        return [], ordered

    regions: List[Region] = []
    current_x = -width / 2

    for opening in ordered:
        center_x = opening.center_offset_x
        left = center_x - opening.width / 2
        right = center_x + opening.width / 2
        center_y = height / 2 + opening.center_offset_y
        bottom = center_y - opening.height / 2
        top = center_y + opening.height / 2

        if left - current_x > EPSILON:
            part_width = left - current_x
            regions.append(Region('left', part_width, height, current_x + part_width / 2, height / 2))

        if top < height - EPSILON:
            top_height = height - top
            regions.append(Region('top', opening.width, top_height, center_x, top + top_height / 2))

        if bottom > EPSILON:
            regions.append(Region('bottom', opening.width, bottom, center_x, bottom / 2))

        current_x = right

    if current_x < width / 2 - EPSILON:
        part_width = width / 2 - current_x
        regions.append(Region('right', part_width, height, current_x + part_width / 2, height / 2))

    return regions, ordered


def opening_metadata(opening: Opening, wall_height: float) -> OpeningMetadata:
    center_y = wall_height / 2 + opening.center_offset_y
    return OpeningMetadata(
        type=opening.type,
        center_x=opening.center_offset_x,
        center_y=center_y,
        width=opening.width,
        height=opening.height,
        bottom=center_y - opening.height / 2,
        top=center_y + opening.height / 2,
    )


def solid_wall(width: float, height: float, thickness: float,
               material=None, texture_scale: float = DEFAULT_TEXTURE_SCALE) -> trimesh.Trimesh:
    """Uncut slab, lifted so its local origin is the floor centre like cut walls."""
    mesh = textured_box(width, height, thickness, texture_scale=texture_scale, material=material)
    mesh.apply_translation([0.0, height / 2, 0.0])
    return mesh


def build_wall_mesh(width: float, height: float, thickness: float,
                    openings: Sequence[Opening] = (),
                    material=None,
                    texture_scale: float = DEFAULT_TEXTURE_SCALE) -> trimesh.Trimesh:
    """
    Build the wall mesh in wall-local space (floor centre at the origin).

    mesh.metadata gets `is_wall`, and for cut walls `openings` (one dict per
    cut opening, in sweep order) plus `region_count`.
    """
    regions, ordered = compute_regions(width, height, openings)

    if not regions:
        mesh = solid_wall(width, height, thickness, material, texture_scale)
        mesh.metadata['region_count'] = 1
    else:
        parts = []
        for region in regions:
            part = textured_box(region.width, region.height, thickness,
                                texture_scale=texture_scale, material=material)
            part.apply_translation([region.center_x, region.center_y, 0.0])
            parts.append(part)
        mesh = merge_meshes(parts, material)
        mesh.metadata['region_count'] = len(regions)
        logger.debug("Wall %.3fx%.3f split into %d regions around %d openings",
                     width, height, len(regions), len(ordered))

    if ordered:
        mesh.metadata['openings'] = [opening_metadata(o, height).model_dump() for o in ordered]
    mesh.metadata['is_wall'] = True
    return mesh


@dataclass
class BuiltWall:
    """Wall mesh plus the transform that places it in the room."""
    name: str
    mesh: trimesh.Trimesh
    transform: np.ndarray
    descriptor: WallDescriptor

    @property
    def openings(self) -> List[dict]:
        return self.mesh.metadata.get('openings', [])

    def world_mesh(self) -> trimesh.Trimesh:
        return self.mesh.copy().apply_transform(self.transform)


class WallSlabBuilder:
    """
    Builds one wall from a fully resolved descriptor (width/height/thickness set).
    """

    def __init__(self, descriptor: WallDescriptor, material=None,
                 texture_scale: float = DEFAULT_TEXTURE_SCALE):
        self.descriptor = descriptor
        self.material = material
        self.texture_scale = texture_scale

    def build(self, name: Optional[str] = None) -> BuiltWall:
        d = self.descriptor
        mesh = build_wall_mesh(d.width, d.height, d.thickness, d.openings,
                               material=self.material, texture_scale=self.texture_scale)
        # Same floor-centre origin for cut and uncut walls, so one placement rule
        transform = placement_matrix(d.position, d.rotation_y)
        return BuiltWall(name=name or d.name or "Wall", mesh=mesh,
                         transform=transform, descriptor=d)
