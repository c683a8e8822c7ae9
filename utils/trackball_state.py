"""
Drag session state for the virtual trackball.

A session is either Idle or Dragging. Dragging owns an immutable DragSnapshot
taken when the drag began; every update derives the live rotation from that
snapshot alone, so repeating an update with the same pointer gives the same
result. The last LiveResult is kept until something replaces it.
"""
from dataclasses import dataclass
from math import degrees, radians
from typing import Optional

from mathutils import Quaternion, Vector

from . import trackball_geometry as geometry
from .angle_snap import snap_angle
from .axis_constraints import axis_to_vector


# Live points closer than this to the start point do not change the rotation
NO_OP_EPSILON = 1e-6


class TrackballStateError(RuntimeError):
    """Raised when a session call is made without the state it needs."""


@dataclass(frozen=True)
class DragSnapshot:
    start_rotation: Quaternion
    radius: float
    start_point: Vector
    constrained_axis: Optional[Vector] = None


@dataclass(frozen=True)
class LiveResult:
    rotation: Quaternion
    angle: Optional[float] = None
    snap_active: bool = False


@dataclass(frozen=True)
class Idle:
    # True once a drag has begun in this session; updates are then no-ops instead of errors
    primed: bool = False


@dataclass(frozen=True)
class Dragging:
    snapshot: DragSnapshot


class DragSession:
    """Begin/update/end lifecycle of a single trackball drag."""

    def __init__(self, rotation=None):
        self.state = Idle()
        self.result = LiveResult(rotation.normalized() if rotation is not None else Quaternion())

    @property
    def is_dragging(self):
        return isinstance(self.state, Dragging)

    @property
    def snapshot(self):
        return self.state.snapshot if self.is_dragging else None

    def begin(self, start_rotation, radius, ray, pivot, view_normal, view_axis_held=False, axis=None, is_local=False):
        """
        Start a drag from the point under `ray`.

        Free rotation wins while the view-axis modifier is held, otherwise the
        given axis constrains the rotation. With neither, the session stays
        Idle and later updates do nothing.

        Args:
            start_rotation: mathutils.Quaternion orientation when the drag starts
            radius: float trackball radius, must be positive
            ray: Ray under the pointer at drag start
            pivot: mathutils.Vector world position being rotated around
            view_normal: mathutils.Vector camera backward direction
            view_axis_held: Whether the view-axis modifier is held
            axis: 'X', 'Y', 'Z' or None
            is_local: Resolve the axis in the object's local space

        Returns:
            LiveResult: the published result, rotation equal to start_rotation
        """
        if radius <= 0:
            raise ValueError(f"Trackball radius must be positive, got {radius}")

        start_rotation = start_rotation.normalized()

        if view_axis_held:
            hit, _ = geometry.intersect_ray_with_plane(ray, view_normal, pivot)
            start_point = geometry.project_onto_hemisphere(pivot, view_normal, radius, hit)
            constrained_axis = None
        elif axis is not None:
            # Resolve the axis once here so it does not drift towards the gizmo "poles" as the object turns
            constrained_axis = axis_to_vector(axis, is_local, start_rotation)
            hit, _ = geometry.intersect_ray_with_plane(ray, constrained_axis, pivot)
            start_point = geometry.project_onto_axis_circle(pivot, constrained_axis, radius, hit)
        else:
            start_point = None
            constrained_axis = None

        self.result = LiveResult(start_rotation.copy())
        if start_point is None:
            self.state = Idle(primed=True)
        else:
            self.state = Dragging(DragSnapshot(start_rotation, radius, start_point, constrained_axis))
        return self.result

    def update(self, ray, pivot, view_normal, snap_step=None):
        """
        Recompute the live rotation for the pointer ray.

        Args:
            ray: Ray under the pointer
            pivot: mathutils.Vector world position being rotated around
            view_normal: mathutils.Vector camera backward direction (free mode)
            snap_step: Angle snap step in degrees, or None when snapping is off

        Returns:
            LiveResult: the new result, or the previous one when nothing changed
        """
        if not self.is_dragging:
            if not self.state.primed:
                raise TrackballStateError("update called before a drag was begun")
            return self.result

        snapshot = self.state.snapshot
        start_vec = snapshot.start_point - pivot

        if snapshot.constrained_axis is not None:
            axis = snapshot.constrained_axis
            hit, _ = geometry.intersect_ray_with_plane(ray, axis, pivot)
            live_point = geometry.project_onto_axis_circle(pivot, axis, snapshot.radius, hit, start_vec)
            if (live_point - snapshot.start_point).length <= NO_OP_EPSILON:
                return self.result

            angle = geometry.signed_angle(start_vec, live_point - pivot, axis)
            if snap_step is not None:
                angle = snap_angle(angle, snap_step)
            delta = Quaternion(axis, radians(angle))
        else:
            hit, _ = geometry.intersect_ray_with_plane(ray, view_normal, pivot)
            live_point = geometry.project_onto_hemisphere(pivot, view_normal, snapshot.radius, hit)
            if (live_point - snapshot.start_point).length <= NO_OP_EPSILON:
                return self.result

            live_vec = live_point - pivot
            rotation_axis = start_vec.cross(live_vec)
            if rotation_axis.length <= 1e-9:
                # Opposite points on the rim: no unique axis to turn around
                angle = 0.0
                delta = Quaternion()
            else:
                angle = degrees(start_vec.angle(live_vec, 0.0))
                if snap_step is not None:
                    angle = snap_angle(angle, snap_step)
                delta = Quaternion(rotation_axis.normalized(), radians(angle))

        # Delta first, then the rotation the drag started from
        rotation = (delta @ snapshot.start_rotation).normalized()
        self.result = LiveResult(rotation, angle, snap_step is not None)
        return self.result

    def end(self):
        """Finish the drag, keeping the published result."""
        if self.is_dragging or self.state.primed:
            self.state = Idle(primed=True)
        return self.result

    def reset(self):
        """Drop the drag and go back to the rotation it started from."""
        if self.is_dragging:
            self.result = LiveResult(self.state.snapshot.start_rotation.copy())
            self.state = Idle(primed=True)
        elif self.result.angle is not None:
            self.result = LiveResult(self.result.rotation)
        return self.result
