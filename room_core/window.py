"""
Procedural window insert: a four-bar frame and a glass pane, local origin at
the opening centre. Only used when no window model was loaded for the room.
"""

from typing import Optional

import numpy as np
import trimesh

from .primitives import merge_meshes, textured_box, textured_plane
from .schema import GlobalOpeningRecord, WindowFrameConfig
from .transforms import interior_side, placement_matrix, to_world


class WindowInsert:
    def __init__(self, width: float, height: float,
                 frame: Optional[WindowFrameConfig] = None):
        self.width = width
        self.height = height
        self.frame = frame or WindowFrameConfig()

    def build_frame(self, material=None) -> trimesh.Trimesh:
        fw = self.frame.frame_width
        ft = self.frame.frame_thickness
        outer_width = self.width + fw * 2

        bars = []
        for y in (self.height / 2 + fw / 2, -self.height / 2 - fw / 2):
            bar = textured_box(outer_width, fw, ft, material=material)
            bar.apply_translation([0.0, y, 0.0])
            bars.append(bar)
        for x in (-self.width / 2 - fw / 2, self.width / 2 + fw / 2):
            bar = textured_box(fw, self.height, ft, material=material)
            bar.apply_translation([x, 0.0, 0.0])
            bars.append(bar)

        mesh = merge_meshes(bars, material)
        mesh.metadata.update({'is_window': True, 'is_procedural': True, 'part': 'frame'})
        return mesh

    def build_glass(self, material=None) -> trimesh.Trimesh:
        front = textured_plane(self.width, self.height, texture_scale=None, material=material)
        # Second face with reversed winding so the pane shows from both sides
        back = textured_plane(self.width, self.height, texture_scale=None, material=material)
        back.faces = np.fliplr(back.faces)
        mesh = merge_meshes([front, back], material)
        mesh.apply_translation([0.0, 0.0, self.frame.glass_offset])
        mesh.metadata.update({'is_window': True, 'is_procedural': True, 'part': 'glass'})
        return mesh

    def placement(self, record: GlobalOpeningRecord, wall_thickness: float) -> np.ndarray:
        """Transform that puts the insert just off the wall face looking into the room."""
        side = interior_side(record.global_position, record.rotation_y)
        push = side * (wall_thickness / 2 + self.frame.wall_gap)
        position = to_world((0.0, 0.0, push), record.global_position, record.rotation_y)
        return placement_matrix(position, record.rotation_y)
