"""
View Transform
==============
Maps pointer (screen) coordinates to world coordinates and back, and holds
the pan/zoom state of the canvas.

The canvas shows an axis-aligned window of "view space", which is world
space with the Y axis flipped (screen Y grows downward, world Y upward):

    view = (world.x, -world.y)
    screen = (view - window.origin) * canvas_size / window.size
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable
import logging

import numpy as np

from tracklayout.config import (
    DESIGN_WIDTH_CM, DESIGN_HEIGHT_CM, VIEW_MARGIN_CM, MIN_ZOOM, MAX_ZOOM, WHEEL_ZOOM_STEP
)
from tracklayout.model.geometry_primitives import Point

logger = logging.getLogger(__name__)

ScreenPoint = tuple[float, float]


@dataclass
class ViewWindow:
    """Visible rectangle in view space (flipped world units)."""
    x: float = -VIEW_MARGIN_CM
    y: float = -(DESIGN_HEIGHT_CM + VIEW_MARGIN_CM)
    width: float = DESIGN_WIDTH_CM + 2 * VIEW_MARGIN_CM
    height: float = DESIGN_HEIGHT_CM + 2 * VIEW_MARGIN_CM


@dataclass
class ViewTransform:
    """
    Pan/zoom state of one canvas. Created once per session, never persisted.

    `zoom` is relative to the initial window: 2.0 means the window is half as
    wide as at startup.
    """
    window: ViewWindow = field(default_factory=ViewWindow)
    zoom: float = 1.0
    canvas_width: float = DESIGN_WIDTH_CM + 2 * VIEW_MARGIN_CM
    canvas_height: float = DESIGN_HEIGHT_CM + 2 * VIEW_MARGIN_CM

    def reset(self) -> None:
        self.window = ViewWindow()
        self.zoom = 1.0
        logger.debug("View reset.")

    def resize(self, canvas_width: float, canvas_height: float) -> None:
        """Canvas widget resized; the visible window stays the same."""
        if canvas_width <= 0 or canvas_height <= 0:
            logger.debug(f"Ignoring degenerate canvas size {canvas_width}x{canvas_height}.")
            return
        self.canvas_width = float(canvas_width)
        self.canvas_height = float(canvas_height)

    # ---- mapping ----

    def screen_to_view(self, screen_point: ScreenPoint) -> tuple[float, float]:
        sx, sy = screen_point
        w = self.window
        return (
            w.x + sx * w.width / self.canvas_width,
            w.y + sy * w.height / self.canvas_height,
        )

    def screen_to_world(self, screen_point: ScreenPoint) -> Point:
        vx, vy = self.screen_to_view(screen_point)
        # Undo the vertical flip
        return Point(vx, -vy)

    def world_to_screen(self, point: Point) -> ScreenPoint:
        w = self.window
        return (
            (point.x - w.x) * self.canvas_width / w.width,
            (-point.y - w.y) * self.canvas_height / w.height,
        )

    def screen_distance_to_world(self, pixels: float) -> float:
        return pixels * self.window.width / self.canvas_width

    # ---- gestures ----

    def zoom_at(self, screen_point: ScreenPoint, factor: float) -> None:
        """
        Zoom by `factor` keeping the world point under `screen_point` fixed.

        The resulting zoom is clamped to [MIN_ZOOM, MAX_ZOOM]; a factor that
        would leave the range only zooms up to the limit.
        """
        if factor <= 0:
            logger.debug(f"Ignoring non-positive zoom factor {factor}.")
            return

        new_zoom = float(np.clip(self.zoom * factor, MIN_ZOOM, MAX_ZOOM))
        actual = new_zoom / self.zoom
        if actual == 1.0:
            return

        px, py = self.screen_to_view(screen_point)
        w = self.window
        self.window = ViewWindow(
            x=px - (px - w.x) / actual,
            y=py - (py - w.y) / actual,
            width=w.width / actual,
            height=w.height / actual,
        )
        self.zoom = new_zoom
        logger.debug(f"Zoom {self.zoom:.3f} at view ({px:.1f}, {py:.1f}).")

    def wheel(self, screen_point: ScreenPoint, delta_y: float) -> None:
        """One wheel step: scrolling up (negative delta) zooms in by 10%."""
        if delta_y == 0:
            return
        factor = 1.0 + WHEEL_ZOOM_STEP if delta_y < 0 else 1.0 - WHEEL_ZOOM_STEP
        self.zoom_at(screen_point, factor)

    def pan_by(self, screen_delta: ScreenPoint) -> None:
        """
        Drag the view with the pointer. The delta is scaled by the window
        width relative to the design width, so pan speed follows the pointer
        at any zoom level.
        """
        dx, dy = screen_delta
        move_scale = self.window.width / DESIGN_WIDTH_CM
        self.window.x -= dx * move_scale
        self.window.y -= dy * move_scale

    def fit_to(self, points: Iterable[Point], margin: float = VIEW_MARGIN_CM) -> None:
        """Frame the given world points, keeping the canvas aspect ratio."""
        pts = np.array([(p.x, -p.y) for p in points], dtype=float)
        if pts.size == 0:
            self.reset()
            return

        lo = pts.min(axis=0) - margin
        hi = pts.max(axis=0) + margin
        width, height = np.maximum(hi - lo, 1.0)
        aspect = self.canvas_width / self.canvas_height
        if width / height < aspect:
            width = height * aspect
        else:
            height = width / aspect

        initial_width = ViewWindow().width
        zoom = float(np.clip(initial_width / width, MIN_ZOOM, MAX_ZOOM))
        width = initial_width / zoom
        height = width / aspect

        center = (lo + hi) / 2.0
        self.window = ViewWindow(
            x=float(center[0] - width / 2.0),
            y=float(center[1] - height / 2.0),
            width=float(width),
            height=float(height),
        )
        self.zoom = zoom
        logger.debug(f"View fitted to {len(pts)} points, zoom {zoom:.3f}.")
