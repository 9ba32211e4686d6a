"""
Opening projection.

Turns the world-space bounding box of a loaded window/door model into the
wall-local parameters the wall builder cuts with. Corrections for models whose
box does not match the hole exactly are applied afterwards, by the caller.
"""

import logging
from typing import Optional, Sequence

from .schema import BoundingBox, OpeningCorrection, ProjectedOpening
from .transforms import QUARTER_TURN, rotate_y, to_local

logger = logging.getLogger(__name__)


def project_opening(bounds: BoundingBox,
                    wall_position: Sequence[float],
                    wall_rotation: float,
                    wall_height: float,
                    wall_thickness: Optional[float] = None) -> ProjectedOpening:
    """
    Project a bounding box onto a wall.

    Args:
        bounds: World-space box of the external model
        wall_position: Wall origin (floor centre of the slab)
        wall_rotation: Wall rotation about the vertical axis, radians
        wall_height: Wall height; center_offset_y is measured from its middle
        wall_thickness: Not used, openings always cut the full thickness

    Returns:
        ProjectedOpening with width, height and centre offsets
    """
    local_center = to_local(bounds.center, wall_position, wall_rotation)
    # Extents in the wall frame; a quarter turn only swaps X and Z
    local_size = [abs(v) for v in rotate_y(bounds.size, -wall_rotation)]

    projected = ProjectedOpening(
        width=local_size[0],
        height=local_size[1],
        center_offset_x=local_center[0],
        center_offset_y=local_center[1] - wall_height / 2,
    )
    logger.debug("Projected %s onto wall at %s (rot %.3f): %s",
                 bounds.center, tuple(wall_position), wall_rotation, projected)
    return projected


def project_front_opening(bounds: BoundingBox,
                          wall_position: Sequence[float],
                          wall_height: float,
                          wall_thickness: Optional[float] = None) -> ProjectedOpening:
    """Wall facing the room along Z (rotation 0): width is the world X extent."""
    return project_opening(bounds, wall_position, 0.0, wall_height, wall_thickness)


def project_side_opening(bounds: BoundingBox,
                         wall_position: Sequence[float],
                         wall_height: float,
                         wall_thickness: Optional[float] = None) -> ProjectedOpening:
    """Wall rotated a quarter turn: local X runs along world Z, width is the Z extent."""
    return project_opening(bounds, wall_position, QUARTER_TURN, wall_height, wall_thickness)


def apply_correction(projected: ProjectedOpening, correction: OpeningCorrection) -> ProjectedOpening:
    """Shrink and shift a projected opening; sizes never drop below `min_size`."""
    return ProjectedOpening(
        width=max(correction.min_size, projected.width - correction.width_margin),
        height=max(correction.min_size, projected.height - correction.height_margin),
        center_offset_x=projected.center_offset_x,
        center_offset_y=projected.center_offset_y + correction.center_y_shift,
    )
