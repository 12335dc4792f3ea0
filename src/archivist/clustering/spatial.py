"""Grid-based clustering of canvas activity.

This is a single-pass spatial hash over the bounding box of the
positions, not a density-based clustering algorithm.
"""

import math
from typing import Sequence

from ..models import ActivityRegion, HeatmapCell, Insight, Position


def _bounds(positions: Sequence[Position]) -> tuple[float, float, float, float]:
    xs = [p.x for p in positions]
    ys = [p.y for p in positions]
    return min(xs), min(ys), max(xs), max(ys)


def detect_regions(
    positions: Sequence[Position],
    compact_size: float = 500,
    grid_divisions: int = 3,
    min_events: int = 2,
) -> list[ActivityRegion]:
    """Bucket positions into regions of activity.

    If the bounding box is smaller than `compact_size` in both dimensions
    everything is one region. Otherwise the box is split into a
    `grid_divisions` x `grid_divisions` grid of square cells and only cells
    holding at least `min_events` positions are returned, busiest first.
    """
    if not positions:
        return []

    min_x, min_y, max_x, max_y = _bounds(positions)
    width = max_x - min_x
    height = max_y - min_y

    if width < compact_size and height < compact_size:
        return [ActivityRegion(
            x=min_x,
            y=min_y,
            width=width,
            height=height,
            event_count=len(positions),
            owner_ids=list(dict.fromkeys(p.owner_id for p in positions)),
        )]

    cell_size = max(width, height) / grid_divisions
    last = grid_divisions - 1
    cells: dict[tuple[int, int], ActivityRegion] = {}

    for pos in positions:
        # Points on the far edge belong to the last cell
        cell_x = min(math.floor((pos.x - min_x) / cell_size), last)
        cell_y = min(math.floor((pos.y - min_y) / cell_size), last)
        region = cells.get((cell_x, cell_y))
        if region is None:
            region = ActivityRegion(
                x=min_x + cell_x * cell_size,
                y=min_y + cell_y * cell_size,
                width=cell_size,
                height=cell_size,
                event_count=0,
            )
            cells[(cell_x, cell_y)] = region
        region.event_count += 1
        if pos.owner_id not in region.owner_ids:
            region.owner_ids.append(pos.owner_id)

    regions = [
        cells[key] for key in sorted(cells, key=lambda k: (k[1], k[0]))
        if cells[key].event_count >= min_events
    ]
    regions.sort(key=lambda r: r.event_count, reverse=True)
    return regions


def generate_heatmap(positions: Sequence[Position], grid_size: int = 20) -> list[HeatmapCell]:
    """Activity intensity per cell of a grid_size x grid_size grid.

    Cell coordinates are cell centres; intensity is the cell count divided
    by the busiest cell's count. Empty cells are omitted.
    """
    if not positions:
        return []

    min_x, min_y, max_x, max_y = _bounds(positions)
    width = (max_x - min_x) or 1
    height = (max_y - min_y) or 1
    cell_w = width / grid_size
    cell_h = height / grid_size

    counts: dict[tuple[int, int], int] = {}
    for pos in positions:
        cx = min(math.floor((pos.x - min_x) / cell_w), grid_size - 1)
        cy = min(math.floor((pos.y - min_y) / cell_h), grid_size - 1)
        counts[(cx, cy)] = counts.get((cx, cy), 0) + 1

    peak = max(counts.values())
    return [
        HeatmapCell(
            x=min_x + cx * cell_w + cell_w / 2,
            y=min_y + cy * cell_h + cell_h / 2,
            intensity=count / peak,
        )
        for (cx, cy), count in sorted(counts.items(), key=lambda kv: (kv[0][1], kv[0][0]))
    ]


def activity_insights(
    positions: Sequence[Position],
    compact_size: float = 500,
    grid_divisions: int = 3,
    min_events: int = 2,
    hotspot_events: int = 5,
) -> list[Insight]:
    """Summarise how activity spread over the canvas."""
    if len(positions) < 3:
        return []

    regions = detect_regions(positions, compact_size, grid_divisions, min_events)
    insights = []

    if len(regions) >= 2:
        insights.append(Insight(
            kind="cluster",
            title="Ideas Clustered",
            description=f"Your thinking organized into {len(regions)} distinct regions on the canvas",
            metric=len(regions),
        ))

    if regions and regions[0].event_count > hotspot_events:
        busiest = regions[0]
        insights.append(Insight(
            kind="cluster",
            title="Activity Hotspot",
            description=(
                f"One area had {busiest.event_count} interactions "
                f"involving {len(busiest.owner_ids)} notes"
            ),
            metric=busiest.event_count,
            owner_ids=list(busiest.owner_ids),
        ))

    return insights
