import math
from types import SimpleNamespace

import pytest
from mathutils import Quaternion, Vector

from super_trackball.utils.trackball_controller import InputState, TrackballSettings
from super_trackball.utils.trackball_state import TrackballStateError

from conftest import FakeCamera, Rig, assert_rotations_close, assert_vectors_close


def test_initial_published_state(rig):
    controller = rig.controller
    assert_rotations_close(controller.rotation, Quaternion())
    assert controller.angle is None
    assert controller.selected_axis is None
    assert controller.angle_snap_active is False
    assert not controller.is_dragging


def test_initial_rotation_is_published():
    start = Quaternion((0, 1, 0), 0.4)
    rig = Rig(rotation=start)
    assert_rotations_close(rig.controller.rotation, start)


def test_y_axis_scenario(side_rig):
    """Pivot at origin, radius 10, axis Y, drag from (10, 0, 0) to (0, 0, 10)"""
    controller = side_rig.controller
    controller.select_axis('Y')
    start = Quaternion((1, 0, 0), math.radians(30))

    controller.begin_drag(start, 10.0, (10, 0, 0))
    assert_vectors_close(controller.session.snapshot.start_point, (10, 0, 0))

    controller.update_drag((0, 0, 10))

    # Quarter turn about Y; right-handed, so +X goes to +Z with a negative angle
    assert abs(controller.angle) == pytest.approx(90.0, abs=1e-2)
    assert controller.angle < 0
    expected = Quaternion((0, 1, 0), math.radians(controller.angle)) @ start
    assert_rotations_close(controller.rotation, expected)
    delta = controller.rotation @ start.inverted()
    assert_vectors_close(delta @ Vector((10, 0, 0)), (0, 0, 10), tolerance=1e-2)


def test_free_mode_same_point_is_noop(rig):
    controller = rig.controller
    rig.inputs.view_axis_held = True
    start = Quaternion((0, 0, 1), 1.0)

    controller.begin_drag(start, 10.0, (2, 1, 0))
    result = controller.update_drag((2, 1, 0))

    assert controller.is_dragging
    assert result.angle is None
    assert_rotations_close(controller.rotation, start)


def test_begin_then_update_same_position_is_identity(rig):
    controller = rig.controller
    controller.select_axis('Z')
    start = Quaternion((1, 1, 0), 0.7)

    controller.begin_drag(start, 5.0, (3, 4, 0))
    controller.update_drag((3, 4, 0))
    assert_rotations_close(controller.rotation, start)


def test_view_axis_modifier_wins_over_selected_axis(rig):
    controller = rig.controller
    controller.select_axis('X')
    rig.inputs.view_axis_held = True

    controller.begin_drag(Quaternion(), 10.0, (0, 0, 0))
    assert controller.session.snapshot.constrained_axis is None


def test_begin_without_target_is_inert(rig):
    controller = rig.controller
    result = controller.begin_drag(Quaternion(), 10.0, (5, 0, 0))

    assert not controller.is_dragging
    assert controller.update_drag((0, 5, 0)) is result


def test_begin_without_camera_fails_and_leaves_state():
    rig = Rig()
    rig.camera = None
    rig.controller.select_axis('Z')

    with pytest.raises(TrackballStateError):
        rig.controller.begin_drag(Quaternion(), 10.0, (10, 0, 0))
    assert not rig.controller.is_dragging
    assert rig.controller.selected_axis == 'Z'


def test_update_without_begin_fails(rig):
    with pytest.raises(TrackballStateError):
        rig.controller.update_drag((1, 0, 0))


@pytest.mark.parametrize("radius", [0.0, -3.0])
def test_begin_rejects_bad_radius(rig, radius):
    rig.controller.select_axis('Z')
    with pytest.raises(ValueError):
        rig.controller.begin_drag(Quaternion(), radius, (10, 0, 0))
    assert not rig.controller.is_dragging


def test_update_defers_when_camera_disappears(rig):
    controller = rig.controller
    controller.select_axis('Z')
    controller.begin_drag(Quaternion(), 10.0, (10, 0, 0))
    moved = controller.update_drag((0, 10, 0))

    rig.camera = None
    assert controller.update_drag((-10, 0, 0)) is moved
    assert controller.is_dragging


def test_update_twice_same_position_is_idempotent(rig):
    controller = rig.controller
    rig.inputs.view_axis_held = True
    controller.begin_drag(Quaternion(), 10.0, (1, 1, 0))

    first = controller.update_drag((6, -2, 0))
    second = controller.update_drag((6, -2, 0))
    assert first == second


def test_axis_frozen_during_drag(side_rig):
    rig = side_rig
    controller = rig.controller
    rig.inputs.local_rotation = True
    start = Quaternion((0, 0, 1), math.radians(90))
    controller.select_axis('X')
    controller.begin_drag(start, 10.0, (10, 0, 0))
    frozen = controller.session.snapshot.constrained_axis.copy()

    # The rotation moves and the locality flag flips mid-drag
    controller.update_drag((0, 0, 10))
    rig.inputs.local_rotation = False
    controller.update_drag((-10, 0, 0))
    assert abs(controller.angle) == pytest.approx(180.0, abs=1e-2)

    assert_vectors_close(controller.session.snapshot.constrained_axis, frozen)
    assert_vectors_close(frozen, (0, 1, 0))


def test_selection_cannot_change_while_dragging(rig):
    controller = rig.controller
    controller.select_axis('Z')
    controller.begin_drag(Quaternion(), 10.0, (10, 0, 0))

    assert controller.select_axis('X') is False
    rig.raycaster.hit_name = "TrackballTorusY"
    assert controller.poll() == 'Z'
    assert rig.raycaster.calls == 0


def test_angle_snap_applied_while_active(rig):
    controller = rig.controller
    controller.toggle_angle_snap()
    controller.select_axis('Z')
    controller.begin_drag(Quaternion(), 10.0, (10, 0, 0))

    a = math.radians(53)
    result = controller.update_drag((10 * math.cos(a), 10 * math.sin(a), 0))
    assert result.angle == pytest.approx(60.0)
    assert result.snap_active


def test_angle_snap_uses_configured_step():
    rig = Rig(settings=TrackballSettings(angle_snap_step=10.0, angle_snap_default=True))
    controller = rig.controller
    assert controller.angle_snap_active
    controller.select_axis('Z')
    controller.begin_drag(Quaternion(), 10.0, (10, 0, 0))

    a = math.radians(47)
    assert controller.update_drag((10 * math.cos(a), 10 * math.sin(a), 0)).angle == pytest.approx(50.0)


def test_reset_during_drag(rig):
    controller = rig.controller
    start = Quaternion((0, 1, 0), 0.3)
    controller.select_axis('Z')
    controller.begin_drag(start, 10.0, (10, 0, 0))
    controller.update_drag((0, 10, 0))

    controller.reset()

    assert not controller.is_dragging
    assert controller.selected_axis is None
    assert controller.angle is None
    assert_rotations_close(controller.rotation, start)

    controller.update_drag((0, -10, 0))
    assert_rotations_close(controller.rotation, start)
    assert controller.angle is None


def test_end_drag_keeps_result(rig):
    controller = rig.controller
    controller.select_axis('Z')
    controller.begin_drag(Quaternion(), 10.0, (10, 0, 0))
    controller.update_drag((0, 10, 0))

    controller.end_drag()
    assert not controller.is_dragging
    assert controller.angle == pytest.approx(90.0, abs=1e-2)
    assert controller.selected_axis == 'Z'
    assert_vectors_close(controller.rotation @ Vector((1, 0, 0)), (0, 1, 0))


def test_poll_selects_hovered_axis(rig):
    rig.raycaster.hit_name = "TrackballTorusX"
    assert rig.controller.poll() == 'X'

    rig.raycaster.hit_name = None
    assert rig.controller.poll() == 'X'


def test_poll_with_modifier_clears_axis(rig):
    rig.raycaster.hit_name = "TrackballTorusZ"
    rig.controller.poll()

    rig.inputs.view_axis_held = True
    assert rig.controller.poll() is None


def test_poll_casts_ray_from_default_pointer(rig):
    assert rig.inputs.pointer == (0.0, 0.0)

    rig.raycaster.hit_name = "TrackballTorusY"
    assert rig.controller.poll() == 'Y'
    assert rig.controller.selected_axis == 'Y'
    assert rig.raycaster.calls == 1

    # Unknown names and misses keep the last axis
    rig.raycaster.hit_name = "Cube"
    assert rig.controller.poll() == 'Y'
    rig.raycaster.hit_name = None
    assert rig.controller.poll() == 'Y'

    rig.inputs.view_axis_held = True
    assert rig.controller.poll() is None
    assert rig.controller.selected_axis is None


def test_fake_camera_lifts_screen_pointer_onto_plane():
    ray = FakeCamera().screen_point_to_ray((3.0, 4.0))
    assert_vectors_close(ray.origin, (0, 0, 30))
    assert_vectors_close(ray.direction, (3, 4, -30))


def test_poll_skipped_outside_trackball_mode(rig):
    rig.inputs.trackball_mode = False
    rig.raycaster.hit_name = "TrackballTorusX"
    assert rig.controller.poll() is None
    assert rig.raycaster.calls == 0


def test_poll_defers_without_camera(rig):
    rig.camera = None
    rig.raycaster.hit_name = "TrackballTorusX"
    assert rig.controller.poll() is None
    assert rig.raycaster.calls == 0


def test_poll_consumes_angle_snap_toggle(rig):
    rig.inputs.angle_snap_toggled = True
    rig.inputs.trackball_mode = False
    rig.controller.poll()
    assert rig.controller.angle_snap_active

    rig.inputs.angle_snap_toggled = False
    rig.controller.poll()
    assert rig.controller.angle_snap_active


def test_angle_snap_toggles_while_dragging(rig):
    controller = rig.controller
    controller.select_axis('Z')
    controller.begin_drag(Quaternion(), 10.0, (10, 0, 0))
    assert controller.toggle_angle_snap() is True
    assert controller.toggle_angle_snap() is False


def test_select_unknown_axis_raises(rig):
    with pytest.raises(ValueError):
        rig.controller.select_axis('Q')


def test_input_state_defaults():
    inputs = InputState()
    assert inputs.pointer == (0.0, 0.0)
    assert not inputs.view_axis_held
    assert not inputs.local_rotation
    assert inputs.trackball_mode
    assert not inputs.angle_snap_toggled


def test_settings_from_prefs():
    prefs = SimpleNamespace(angle_snap_step=5.0, use_local_rotation=True, handle_name_x="RingX")
    settings = TrackballSettings.from_prefs(prefs)

    assert settings.angle_snap_step == 5.0
    assert settings.use_local_rotation
    assert settings.view_axis_modifier == 'SHIFT'
    assert settings.handle_names() == {"RingX": 'X', "TrackballTorusY": 'Y', "TrackballTorusZ": 'Z'}


def test_settings_from_missing_prefs():
    assert TrackballSettings.from_prefs(None) == TrackballSettings()


@pytest.mark.parametrize("kwargs", [
    {"angle_snap_step": 0.0},
    {"min_hemisphere_radius": -1.0},
    {"view_axis_modifier": 'OSKEY'},
])
def test_settings_validation(kwargs):
    with pytest.raises(ValueError):
        TrackballSettings(**kwargs)
