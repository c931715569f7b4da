from __future__ import annotations

from .model import BoxGeometry, DayLayout, GridConfig, InvalidInterval, LayoutItem, LayoutResult


DETAILS_MIN_HEIGHT_PX = 40.0


def box_geometry(item: LayoutItem, grid: GridConfig) -> BoxGeometry:
    """
    Place a laid-out appointment inside its day column.

    `top_px`/`height_px` are pixels from the top of the grid; `left`/`width` are fractions of
    the column width. An invalid appointment gets a full-width minimum box pinned to the top of
    the column instead of being dropped.
    """
    if isinstance(item, InvalidInterval):
        return BoxGeometry(
            event_id=item.event_id,
            top_px=0.0,
            height_px=grid.min_box_height_px,
            left=0.0,
            width=1.0,
            show_details=False,
            fallback=True,
        )

    # Boxes starting before the first visible hour are clipped to the top of the grid.
    bottom_px = (item.end - grid.start_minutes) * grid.px_per_minute
    top_px = max(0.0, (item.start - grid.start_minutes) * grid.px_per_minute)
    height_px = max(bottom_px - top_px, grid.min_box_height_px)
    return BoxGeometry(
        event_id=item.event_id,
        top_px=top_px,
        height_px=height_px,
        left=item.left,
        width=item.width,
        show_details=height_px > DETAILS_MIN_HEIGHT_PX,
    )


def day_geometry(layout: DayLayout, grid: GridConfig) -> list[BoxGeometry]:
    return [box_geometry(item, grid) for item in layout.items]


def is_on_grid(result: LayoutResult, grid: GridConfig) -> bool:
    """True when any part of the appointment falls within the visible hours."""
    return result.end > grid.start_minutes and result.start < grid.end_minutes
