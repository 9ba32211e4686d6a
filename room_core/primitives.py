"""
Textured primitives for room geometry.

trimesh.creation.box carries no texture coordinates, so boxes and planes are
built here with one UV quad per face, then tiled by the surface size.
"""

from typing import List, Optional, Sequence

import numpy as np
import trimesh

DEFAULT_TEXTURE_SCALE = 2.0  # metres per texture tile

# (normal, u direction, v direction) for each box face; u x v == normal
_BOX_FACES = (
    ((1, 0, 0), (0, 0, -1), (0, 1, 0)),
    ((-1, 0, 0), (0, 0, 1), (0, 1, 0)),
    ((0, 1, 0), (1, 0, 0), (0, 0, -1)),
    ((0, -1, 0), (1, 0, 0), (0, 0, 1)),
    ((0, 0, 1), (1, 0, 0), (0, 1, 0)),
    ((0, 0, -1), (-1, 0, 0), (0, 1, 0)),
)
_QUAD_UV = np.array([[0, 0], [1, 0], [0, 1], [1, 1]], dtype=np.float64)
_QUAD_FACES = np.array([[0, 1, 2], [2, 1, 3]], dtype=np.int64)


def default_material() -> trimesh.visual.material.PBRMaterial:
    return trimesh.visual.material.PBRMaterial(name="room_default",
                                               baseColorFactor=[230, 230, 230, 255])


def make_mesh(vertices, faces, uv, material=None) -> trimesh.Trimesh:
    """Wrap raw arrays; process=False keeps the per-face UV seams."""
    if material is None:
        material = default_material()
    visual = trimesh.visual.TextureVisuals(uv=uv, material=material)
    return trimesh.Trimesh(vertices=vertices, faces=faces, visual=visual, process=False)


def tile_uv(uv: np.ndarray, width: float, height: float,
            texture_scale: float = DEFAULT_TEXTURE_SCALE) -> np.ndarray:
    """Scale unit UVs so one texture tile covers `texture_scale` metres."""
    return uv * np.array([width / texture_scale, height / texture_scale])


def textured_box(width: float, height: float, depth: float,
                 uv_size: Optional[Sequence[float]] = None,
                 texture_scale: float = DEFAULT_TEXTURE_SCALE,
                 material=None) -> trimesh.Trimesh:
    """
    Box centred on the origin, 24 vertices so every face has its own UV quad.

    Args:
        width, height, depth: Extents along X, Y, Z
        uv_size: Surface size used for UV tiling, defaults to (width, height)
        texture_scale: Metres per texture tile
    """
    half = np.array([width, height, depth], dtype=np.float64) / 2
    vertices, faces = [], []
    for i, (normal, u_dir, v_dir) in enumerate(_BOX_FACES):
        n, u, v = (np.array(a, dtype=np.float64) for a in (normal, u_dir, v_dir))
        center = n * half
        hu = np.abs(u) @ half
        hv = np.abs(v) @ half
        for su, sv in ((-1, -1), (1, -1), (-1, 1), (1, 1)):
            vertices.append(center + su * hu * u + sv * hv * v)
        faces.append(_QUAD_FACES + 4 * i)

    uv_w, uv_h = uv_size if uv_size is not None else (width, height)
    uv = tile_uv(np.tile(_QUAD_UV, (len(_BOX_FACES), 1)), uv_w, uv_h, texture_scale)
    return make_mesh(np.array(vertices), np.vstack(faces), uv, material)


def textured_plane(width: float, height: float,
                   texture_scale: Optional[float] = DEFAULT_TEXTURE_SCALE,
                   material=None) -> trimesh.Trimesh:
    """
    Quad in the XY plane facing +Z, centred on the origin.
    texture_scale=None keeps plain 0..1 UVs.
    """
    hw, hh = width / 2, height / 2
    vertices = np.array([[-hw, -hh, 0], [hw, -hh, 0], [-hw, hh, 0], [hw, hh, 0]], dtype=np.float64)
    uv = _QUAD_UV.copy()
    if texture_scale is not None:
        uv = tile_uv(uv, width, height, texture_scale)
    return make_mesh(vertices, _QUAD_FACES.copy(), uv, material)


def merge_meshes(meshes: List[trimesh.Trimesh], material=None) -> trimesh.Trimesh:
    """
    Concatenate textured meshes into one buffer (one draw call).

    trimesh.util.concatenate falls back to ColorVisuals and drops the UVs when
    the parts carry distinct material instances, so the buffers are stacked here.
    """
    vertices, faces, uvs = [], [], []
    offset = 0
    for mesh in meshes:
        vertices.append(mesh.vertices)
        faces.append(mesh.faces + offset)
        uvs.append(mesh.visual.uv)
        offset += len(mesh.vertices)
    return make_mesh(np.vstack(vertices), np.vstack(faces), np.vstack(uvs), material)
