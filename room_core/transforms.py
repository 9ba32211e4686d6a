"""
Wall-local <-> world transforms.

Walls are rotated about the vertical axis. The angle is measured from world +X
toward world +Z, so a wall with rotation pi/2 has its local width axis along
world +Z. The same rotation is used when projecting external bounding boxes
into a wall and when placing wall openings back into the room.
"""

import math
from typing import Sequence, Tuple

import numpy as np
import trimesh

Vec3 = Tuple[float, float, float]

QUARTER_TURN = math.pi / 2
SUPPORTED_ROTATIONS = (0.0, QUARTER_TURN)
ROTATION_TOLERANCE = 1e-6


def _is_quarter_multiple(angle: float) -> bool:
    turns = angle / QUARTER_TURN
    return abs(turns - round(turns)) < ROTATION_TOLERANCE


def _cos_sin(angle: float) -> Tuple[float, float]:
    # Exact values for multiples of 90 degrees, so axis swaps stay exact
    if _is_quarter_multiple(angle):
        return ((1.0, 0.0), (0.0, 1.0), (-1.0, 0.0), (0.0, -1.0))[round(angle / QUARTER_TURN) % 4]
    return math.cos(angle), math.sin(angle)


def rotate_y(vector: Sequence[float], angle: float) -> Vec3:
    """Rotate a wall-local vector into world orientation."""
    x, y, z = vector
    c, s = _cos_sin(angle)
    return (x * c - z * s, y, x * s + z * c)


def to_world(local_point: Sequence[float], origin: Sequence[float], angle: float) -> Vec3:
    """Wall-local point -> world point for a wall at `origin` rotated by `angle`."""
    rx, ry, rz = rotate_y(local_point, angle)
    return (origin[0] + rx, origin[1] + ry, origin[2] + rz)


def to_local(world_point: Sequence[float], origin: Sequence[float], angle: float) -> Vec3:
    """Inverse of :func:`to_world`."""
    delta = (world_point[0] - origin[0],
             world_point[1] - origin[1],
             world_point[2] - origin[2])
    return rotate_y(delta, -angle)


def rotation_matrix(angle: float) -> np.ndarray:
    """
    4x4 homogeneous matrix equivalent to :func:`rotate_y`.

    The angle turns +X toward +Z, which is the opposite sense of a right-handed
    rotation about +Y (glTF, three.js). The glTF yaw of a wall is `-angle`.
    """
    matrix = trimesh.transformations.rotation_matrix(-angle, [0, 1, 0])
    if _is_quarter_multiple(angle):
        matrix = np.round(matrix)
    return matrix


def placement_matrix(position: Sequence[float], angle: float) -> np.ndarray:
    """Translate to `position`, then rotate about the local vertical axis."""
    return trimesh.transformations.concatenate_matrices(
        trimesh.transformations.translation_matrix(position),
        rotation_matrix(angle),
    )


def is_supported_rotation(angle: float) -> bool:
    return any(abs(angle - r) < ROTATION_TOLERANCE for r in SUPPORTED_ROTATIONS)


def interior_side(point: Sequence[float], angle: float) -> float:
    """
    +1 if the wall's local +Z face at `point` looks toward the room's vertical
    axis (world X = Z = 0), -1 if it looks away from it.
    """
    nx, _, nz = rotate_y((0.0, 0.0, 1.0), angle)
    return -1.0 if nx * point[0] + nz * point[2] > 0 else 1.0
