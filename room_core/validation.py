"""
Coverage check for a wall decomposition, done with shapely polygons:
regions must tile the wall face minus its openings, with no overlaps.
"""

from typing import List, Literal, Optional, Sequence

from pydantic import BaseModel
from shapely.geometry import box
from shapely.ops import unary_union

from .schema import Opening
from .wall import Region, compute_regions, sort_openings


class CoverageIssue(BaseModel):
    kind: Literal["gap", "overlap", "intrusion"]
    severity: Literal["critical", "warning", "info"]
    message: str
    area: float


def _region_box(region: Region):
    return box(region.center_x - region.width / 2, region.center_y - region.height / 2,
               region.center_x + region.width / 2, region.center_y + region.height / 2)


def _opening_box(opening: Opening, wall_height: float):
    center_y = wall_height / 2 + opening.center_offset_y
    return box(opening.center_offset_x - opening.width / 2, center_y - opening.height / 2,
               opening.center_offset_x + opening.width / 2, center_y + opening.height / 2)


def check_wall_coverage(width: float, height: float, openings: Sequence[Opening],
                        regions: Optional[Sequence[Region]] = None,
                        tolerance: float = 1e-6) -> List[CoverageIssue]:
    """
    Compare regions against the wall face minus its openings.

    Slivers thinner than the builder's epsilon are not emitted as regions; pass a
    tolerance above 0.01 * max(width, height) when openings sit that close to an edge.
    """
    if regions is None:
        regions, _ = compute_regions(width, height, openings)
    if not regions:
        # The builder falls back to the uncut slab
        regions = [Region('full', width, height, 0.0, height / 2)]

    wall = box(-width / 2, 0.0, width / 2, height)
    holes = unary_union([_opening_box(o, height) for o in sort_openings(openings)])
    expected = wall.difference(holes)

    shapes = [_region_box(r) for r in regions]
    covered = unary_union(shapes)

    issues: List[CoverageIssue] = []

    gap = expected.difference(covered).area
    if gap > tolerance:
        issues.append(CoverageIssue(kind="gap", severity="critical",
                                    message=f"{gap:.4f} m2 of wall not covered", area=gap))

    overlap = sum(s.area for s in shapes) - covered.area
    if overlap > tolerance:
        issues.append(CoverageIssue(kind="overlap", severity="critical",
                                    message=f"regions overlap by {overlap:.4f} m2", area=overlap))

    intrusion = covered.difference(expected).area
    if intrusion > tolerance:
        issues.append(CoverageIssue(kind="intrusion", severity="warning",
                                    message=f"{intrusion:.4f} m2 of regions outside the solid wall",
                                    area=intrusion))
    return issues
