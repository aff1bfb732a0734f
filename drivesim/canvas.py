"""
Canvas collaborators that draw a body description
"""

from typing import TYPE_CHECKING, List, Optional, Protocol, Tuple

import numpy as np
import plotly.graph_objs as go

from drivesim.geometry import Point, Vector

if TYPE_CHECKING:
    from drivesim.body import Arrow, BodyDescription, Line


class Renderer(Protocol):
    """Anything that can draw a body at a world pose"""

    def render(self, body: "BodyDescription", position: Point, bearing: float) -> None:
        ...


def to_world(point: Point, position: Point, bearing: float) -> Point:
    """Map a robot-frame point into the world frame"""
    return position + Vector(point.x, point.y).rotated(bearing)


class RecordingRenderer:
    """Keeps every rendered frame, for headless runs and tests"""

    def __init__(self) -> None:
        self.frames: List[Tuple["BodyDescription", Point, float]] = []

    def render(self, body: "BodyDescription", position: Point, bearing: float) -> None:
        self.frames.append((body, position, bearing))

    @property
    def last(self) -> Optional[Tuple["BodyDescription", Point, float]]:
        return self.frames[-1] if self.frames else None

    def clear(self) -> None:
        self.frames.clear()


class PlotlyCanvas:
    """Draws the robot into a Plotly figure, world units on both axes"""

    def __init__(self, extent: float = 600.0, title: str = "Robot") -> None:
        """
        Args:
            extent: Half-size of the visible square around the world origin
            title: Figure title
        """
        self.extent = extent
        self.title = title
        self.body: Optional["BodyDescription"] = None
        self.position = Point.origin()
        self.bearing = 0.0

    def render(self, body: "BodyDescription", position: Point, bearing: float) -> None:
        self.body = body
        self.position = position
        self.bearing = bearing

    def _segment(self, points: List[Point]) -> Tuple[List[float], List[float]]:
        world = [to_world(p, self.position, self.bearing) for p in points]
        return [p.x for p in world], [p.y for p in world]

    def _line_trace(self, line: "Line") -> go.Scatter:
        xs, ys = self._segment([line.start, line.end])
        return go.Scatter(
            x=xs,
            y=ys,
            mode="lines",
            line=dict(color=line.color, width=line.width),
            hoverinfo="skip",
            showlegend=False,
        )

    def _arrow_trace(self, arrow: "Arrow") -> go.Scatter:
        left, right = arrow.head()
        shaft_x, shaft_y = self._segment([arrow.start, arrow.end])
        head_x, head_y = self._segment([left, arrow.end, right])
        # None breaks the polyline between shaft and head
        return go.Scatter(
            x=shaft_x + [None] + head_x,
            y=shaft_y + [None] + head_y,
            mode="lines",
            line=dict(color=arrow.color, width=arrow.width),
            hovertemplate=f"Speed: {arrow.vector.magnitude:.1f}<extra></extra>",
            showlegend=False,
        )

    def figure(self, trail: Optional[np.ndarray] = None) -> go.Figure:
        """
        Build a figure of the last rendered frame

        Args:
            trail: Optional [N x 2] array of past world positions

        Returns:
            plotly Figure
        """
        fig = go.Figure()
        if trail is not None and len(trail) > 1:
            fig.add_trace(
                go.Scatter(
                    x=trail[:, 0],
                    y=trail[:, 1],
                    mode="lines",
                    line=dict(color="lightgray", width=1, dash="dot"),
                    hoverinfo="skip",
                    showlegend=False,
                )
            )
        if self.body is not None:
            for line in self.body.lines:
                fig.add_trace(self._line_trace(line))
            for arrow in self.body.arrows:
                fig.add_trace(self._arrow_trace(arrow))

        fig.update_layout(
            title=self.title,
            xaxis=dict(range=[-self.extent, self.extent], zeroline=False),
            yaxis=dict(range=[-self.extent, self.extent], zeroline=False, scaleanchor="x"),
            height=700,
            template="plotly_white",
            uirevision="canvas",
        )
        return fig
