"""
Tests for the wall slab builder: region sweep, merged mesh, placement.
"""

import math

import numpy as np
import pytest

from room_core.schema import Opening, WallDescriptor
from room_core.transforms import QUARTER_TURN
from room_core.wall import (
    EPSILON,
    WallSlabBuilder,
    build_wall_mesh,
    compute_regions,
    sort_openings,
)

DEFAULT_WINDOW = Opening(type='window', center_offset_x=0.014, center_offset_y=0.167,
                         width=1.143, height=1.661)
LOW_WINDOW = Opening(type='window', center_offset_x=0.014, center_offset_y=-1.2,
                     width=1.143, height=1.661)
SIDE_DOOR = Opening(type='door', center_offset_x=0.013, center_offset_y=-0.4345,
                    width=0.855, height=2.131)


def total_area(regions):
    return sum(r.area for r in regions)


def kinds(regions):
    return [r.kind for r in regions]


class TestComputeRegions:
    def test_no_openings(self):
        regions, ordered = compute_regions(3.0, 2.7, [])
        assert regions == []
        assert ordered == []

    @pytest.mark.parametrize("W,H,w,h", [
        (3.0, 2.7, 1.0, 1.2),
        (4.0, 3.0, 0.5, 2.0),
        (2.5, 2.5, 2.0, 0.4),
    ])
    def test_centered_opening_area(self, W, H, w, h):
        regions, _ = compute_regions(W, H, [Opening(width=w, height=h)])
        assert total_area(regions) == pytest.approx(W * H - w * h)
        assert kinds(regions) == ['left', 'top', 'bottom', 'right']

    def test_default_window(self):
        regions, _ = compute_regions(3.0, 2.7, [DEFAULT_WINDOW])
        assert kinds(regions) == ['left', 'top', 'bottom', 'right']
        assert total_area(regions) == pytest.approx(3 * 2.7 - 1.143 * 1.661)
        assert total_area(regions) == pytest.approx(6.2015, abs=1e-3)

    def test_low_window_drops_bottom_filler(self):
        # Opening reaches below the floor: no bottom filler
        regions, _ = compute_regions(3.0, 2.7, [LOW_WINDOW])
        assert kinds(regions) == ['left', 'top', 'right']
        top = 2.7 / 2 - 1.2 + 1.661 / 2
        assert total_area(regions) == pytest.approx(3 * 2.7 - 1.143 * top)

    def test_side_wall_door(self):
        regions, _ = compute_regions(2.7, 2.7, [SIDE_DOOR])
        assert len(regions) == 3
        assert kinds(regions) == ['left', 'top', 'right']

    def test_filler_geometry(self):
        regions, _ = compute_regions(4.0, 3.0, [Opening(width=1.0, height=1.0)])
        left, top, bottom, right = regions
        assert (left.width, left.height, left.center_x, left.center_y) == pytest.approx((1.5, 3.0, -1.25, 1.5))
        assert (top.width, top.height, top.center_x, top.center_y) == pytest.approx((1.0, 1.0, 0.0, 2.5))
        assert (bottom.width, bottom.height, bottom.center_x, bottom.center_y) == pytest.approx((1.0, 1.0, 0.0, 0.5))
        assert (right.width, right.height, right.center_x, right.center_y) == pytest.approx((1.5, 3.0, 1.25, 1.5))

    def test_opening_flush_with_wall_edge(self):
        regions, _ = compute_regions(3.0, 2.7, [Opening(center_offset_x=-1.0, width=1.0, height=1.0)])
        assert 'left' not in kinds(regions)

    def test_opening_reaching_ceiling_has_no_top(self):
        # centre at 1.35 + 0.85 = 2.2, top at 2.7
        regions, _ = compute_regions(3.0, 2.7, [Opening(center_offset_y=0.85, width=1.0, height=1.0)])
        assert 'top' not in kinds(regions)

    def test_every_region_is_thicker_than_epsilon(self):
        openings = [
            Opening(center_offset_x=-1.0, width=0.8, height=1.0),
            Opening(center_offset_x=-0.195, width=0.8, height=2.695, center_offset_y=-0.0025),
            Opening(center_offset_x=1.0, width=0.9, height=1.5),
        ]
        regions, _ = compute_regions(3.0, 2.7, openings)
        assert regions
        for region in regions:
            assert region.width > EPSILON
            assert region.height > EPSILON

    def test_sweep_stays_inside_wall(self):
        openings = [
            Opening(center_offset_x=1.0, width=0.6, height=1.0),
            Opening(center_offset_x=-1.0, width=0.6, height=1.0),
            Opening(center_offset_x=0.0, width=0.6, height=2.0),
        ]
        regions, ordered = compute_regions(4.0, 3.0, openings)
        assert [o.center_offset_x for o in ordered] == [-1.0, 0.0, 1.0]
        lefts = [r.center_x - r.width / 2 for r in regions if r.kind in ('left', 'right')]
        assert lefts == sorted(lefts)
        for region in regions:
            assert region.center_x + region.width / 2 <= 2.0 + 1e-9
            assert region.center_x - region.width / 2 >= -2.0 - 1e-9


class TestSortOpenings:
    def test_ties_keep_input_order(self):
        door = Opening(type='door', width=0.5, height=1.0)
        window = Opening(type='window', width=0.5, height=1.0)
        assert sort_openings([door, window]) == [door, window]
        assert sort_openings([window, door]) == [window, door]

    def test_degenerate_openings_are_ignored(self):
        good = Opening(width=1.0, height=1.0)
        ordered = sort_openings([
            Opening(width=0.0, height=1.0),
            Opening(width=1.0, height=-2.0),
            Opening(width=math.nan, height=1.0),
            Opening(width=math.inf, height=1.0),
            Opening(center_offset_x=math.nan, width=1.0, height=1.0),
            Opening(center_offset_y=-math.inf, width=1.0, height=1.0),
            good,
        ])
        assert ordered == [good]


class TestBuildWallMesh:
    def test_solid_wall(self):
        mesh = build_wall_mesh(3.0, 2.7, 0.2, [])
        assert mesh.metadata['is_wall']
        assert mesh.metadata['region_count'] == 1
        assert 'openings' not in mesh.metadata
        assert len(mesh.vertices) == 24
        assert np.allclose(mesh.bounds, [[-1.5, 0.0, -0.1], [1.5, 2.7, 0.1]])

    def test_solid_wall_uv_scale(self):
        mesh = build_wall_mesh(3.0, 2.7, 0.2, [])
        assert np.allclose(mesh.visual.uv.min(axis=0), [0.0, 0.0])
        assert np.allclose(mesh.visual.uv.max(axis=0), [3.0 / 2, 2.7 / 2])

    def test_cut_wall_is_single_mesh(self):
        mesh = build_wall_mesh(3.0, 2.7, 0.2, [DEFAULT_WINDOW])
        assert mesh.metadata['region_count'] == 4
        assert len(mesh.vertices) == 4 * 24
        assert len(mesh.faces) == 4 * 12
        assert np.allclose(mesh.bounds, [[-1.5, 0.0, -0.1], [1.5, 2.7, 0.1]])

    def test_region_uvs_use_region_size(self):
        mesh = build_wall_mesh(3.0, 2.7, 0.2, [DEFAULT_WINDOW])
        # Widest region is the 1.143 top/bottom filler, tallest the 2.7 side fillers
        assert np.allclose(mesh.visual.uv.max(axis=0), [1.143 / 2, 2.7 / 2])

    def test_opening_metadata(self):
        mesh = build_wall_mesh(3.0, 2.7, 0.2, [DEFAULT_WINDOW])
        (meta,) = mesh.metadata['openings']
        assert meta['type'] == 'window'
        assert meta['center_x'] == pytest.approx(0.014)
        assert meta['center_y'] == pytest.approx(1.517)
        assert meta['bottom'] == pytest.approx(1.517 - 1.661 / 2)
        assert meta['top'] == pytest.approx(1.517 + 1.661 / 2)

    def test_metadata_in_sweep_order(self):
        right = Opening(type='door', center_offset_x=0.8, width=0.6, height=2.0)
        left = Opening(type='window', center_offset_x=-0.8, width=0.6, height=1.0)
        mesh = build_wall_mesh(3.0, 2.7, 0.2, [right, left])
        assert [m['type'] for m in mesh.metadata['openings']] == ['window', 'door']

    def test_no_cut_geometry_inside_opening(self):
        mesh = build_wall_mesh(4.0, 3.0, 0.2, [Opening(width=1.0, height=1.0)])
        vertices = mesh.vertices
        inside = ((vertices[:, 0] > -0.5 + 1e-9) & (vertices[:, 0] < 0.5 - 1e-9)
                  & (vertices[:, 1] > 1.0 + 1e-9) & (vertices[:, 1] < 2.0 - 1e-9))
        assert not inside.any()

    def test_degenerate_input_does_not_raise(self):
        mesh = build_wall_mesh(math.nan, 2.7, 0.2, [Opening(width=1.0, height=1.0)])
        assert mesh.metadata['is_wall']
        mesh = build_wall_mesh(3.0, 2.7, 0.2, [Opening(width=-1.0, height=1.0)])
        assert mesh.metadata['region_count'] == 1

    def test_infinite_opening_leaves_wall_uncut(self):
        mesh = build_wall_mesh(3.0, 2.7, 0.2, [Opening(width=math.inf, height=1.0)])
        assert mesh.metadata['region_count'] == 1
        assert 'openings' not in mesh.metadata
        assert np.isfinite(mesh.vertices).all()
        assert np.isfinite(mesh.visual.uv).all()


class TestWallSlabBuilder:
    def _descriptor(self, openings, rotation=0.0):
        return WallDescriptor(name='Test', width=3.0, height=2.7, thickness=0.2,
                              position=(1.0, 0.0, 2.0), rotation_y=rotation,
                              openings=openings)

    @pytest.mark.parametrize("openings", [[], [DEFAULT_WINDOW]])
    def test_front_placement_same_for_solid_and_cut(self, openings):
        built = WallSlabBuilder(self._descriptor(openings)).build()
        bounds = built.world_mesh().bounds
        assert np.allclose(bounds, [[-0.5, 0.0, 1.9], [2.5, 2.7, 2.1]])

    @pytest.mark.parametrize("openings", [[], [SIDE_DOOR]])
    def test_side_placement(self, openings):
        built = WallSlabBuilder(self._descriptor(openings, QUARTER_TURN)).build()
        bounds = built.world_mesh().bounds
        assert np.allclose(bounds, [[0.9, 0.0, 0.5], [1.1, 2.7, 3.5]])

    def test_world_mesh_leaves_local_mesh_alone(self):
        built = WallSlabBuilder(self._descriptor([])).build()
        built.world_mesh()
        assert np.allclose(built.mesh.bounds, [[-1.5, 0.0, -0.1], [1.5, 2.7, 0.1]])

    def test_name_and_openings(self):
        built = WallSlabBuilder(self._descriptor([DEFAULT_WINDOW])).build()
        assert built.name == 'Test'
        assert len(built.openings) == 1
