"""
Trackball controller.

Ties the drag session, axis hit testing and angle snapping to the per-frame
state handed in by the caller. Collaborators are passed in explicitly:

    camera_provider()  -> camera with `forward` and `screen_point_to_ray(pos)`, or None
    input_provider()   -> InputState snapshot for the current tick
    pivot_provider()   -> mathutils.Vector world position being rotated around
    raycaster(ray)     -> name of the hit object, or None

The controller never touches the scene; callers read `rotation` and apply it.
"""
from dataclasses import dataclass
from typing import Tuple

from .axis_constraints import AXES
from .axis_hit_test import AxisHitTester
from .trackball_state import DragSession, TrackballStateError


@dataclass
class InputState:
    """Input snapshot read once per tick."""

    pointer: Tuple[float, float] = (0.0, 0.0)
    view_axis_held: bool = False
    local_rotation: bool = False
    trackball_mode: bool = True
    # Set for the one tick in which the angle snap hotkey was pressed
    angle_snap_toggled: bool = False


@dataclass
class TrackballSettings:
    """Trackball configuration, mirrored from the add-on preferences."""

    angle_snap_step: float = 15.0
    angle_snap_default: bool = False
    use_local_rotation: bool = False
    view_axis_modifier: str = 'SHIFT'
    angle_snap_key: str = 'S'
    min_hemisphere_radius: float = 0.1
    handle_name_x: str = 'TrackballTorusX'
    handle_name_y: str = 'TrackballTorusY'
    handle_name_z: str = 'TrackballTorusZ'

    def __post_init__(self):
        if self.angle_snap_step <= 0:
            raise ValueError(f"Angle snap step must be positive, got {self.angle_snap_step}")
        if self.min_hemisphere_radius <= 0:
            raise ValueError(f"Minimum trackball radius must be positive, got {self.min_hemisphere_radius}")
        if self.view_axis_modifier not in {'SHIFT', 'CTRL', 'ALT'}:
            raise ValueError(f"Unknown view axis modifier {self.view_axis_modifier!r}")

    @classmethod
    def from_prefs(cls, prefs):
        """Build settings from add-on preferences, keeping defaults for anything missing."""
        if prefs is None:
            return cls()
        defaults = cls()
        values = {name: getattr(prefs, name, getattr(defaults, name)) for name in cls.__dataclass_fields__}
        return cls(**values)

    def handle_names(self):
        """Map of handle object name to the axis it rotates around."""
        names = (self.handle_name_x, self.handle_name_y, self.handle_name_z)
        return {name: axis for name, axis in zip(names, AXES)}


class TrackballController:
    """Virtual trackball rotation controller."""

    def __init__(self, camera_provider, input_provider, pivot_provider, raycaster=None, settings=None, rotation=None):
        self.settings = settings if settings is not None else TrackballSettings()
        self._camera = camera_provider
        self._inputs = input_provider
        self._pivot = pivot_provider

        self.session = DragSession(rotation)
        self.hit_tester = AxisHitTester(self.settings.handle_names(), raycaster)
        self.angle_snap_active = self.settings.angle_snap_default

    @property
    def rotation(self):
        return self.session.result.rotation

    @property
    def angle(self):
        return self.session.result.angle

    @property
    def selected_axis(self):
        return self.hit_tester.selected_axis

    @property
    def is_dragging(self):
        return self.session.is_dragging

    def select_axis(self, axis):
        """Select an axis directly. Ignored while dragging."""
        if axis is not None and axis not in AXES:
            raise ValueError(f"Unknown axis {axis!r}, expected one of {AXES}")
        if self.is_dragging:
            return False
        self.hit_tester.selected_axis = axis
        return True

    def begin_drag(self, rotation, radius, screen_pos):
        camera = self._camera()
        if camera is None:
            raise TrackballStateError("Camera was not available")
        if radius <= 0:
            raise ValueError(f"Trackball radius must be positive, got {radius}")

        inputs = self._inputs()
        return self.session.begin(
            rotation,
            radius,
            camera.screen_point_to_ray(screen_pos),
            self._pivot(),
            -camera.forward,
            view_axis_held=inputs.view_axis_held,
            axis=self.selected_axis,
            is_local=inputs.local_rotation,
        )

    def update_drag(self, screen_pos):
        if not self.is_dragging:
            return self.session.update(None, None, None)

        camera = self._camera()
        if camera is None:
            # Nothing to cast from this tick; keep what we have
            return self.session.result

        snap_step = self.settings.angle_snap_step if self.angle_snap_active else None
        return self.session.update(
            camera.screen_point_to_ray(screen_pos),
            self._pivot(),
            -camera.forward,
            snap_step,
        )

    def end_drag(self):
        return self.session.end()

    def reset(self):
        self.session.reset()
        self.hit_tester.clear()

    def toggle_angle_snap(self):
        self.angle_snap_active = not self.angle_snap_active
        return self.angle_snap_active

    def poll(self):
        """
        Per-tick update while not dragging: consume the angle snap toggle and
        refresh the axis under the pointer.

        Returns:
            The selected axis ('X', 'Y', 'Z') or None
        """
        inputs = self._inputs()
        if inputs.angle_snap_toggled:
            self.toggle_angle_snap()

        if not inputs.trackball_mode or self.is_dragging:
            return self.selected_axis

        camera = self._camera()
        if camera is None:
            return self.selected_axis

        ray = camera.screen_point_to_ray(inputs.pointer)
        return self.hit_tester.update(ray, inputs.view_axis_held)
