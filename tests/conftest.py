"""
Shared fixtures for the Super Trackball tests.

The fake camera treats a "screen position" as the world point the pointer is
over, so each ray runs from the eye through that point. That keeps the
scenarios readable without a projection matrix.
"""
import pytest
from mathutils import Quaternion, Vector

from super_trackball.utils.trackball_controller import InputState, TrackballController, TrackballSettings
from super_trackball.utils.trackball_geometry import Ray


TOLERANCE = 1e-3


class FakeCamera:
    def __init__(self, eye=(0.0, 0.0, 30.0), forward=(0.0, 0.0, -1.0)):
        self.eye = Vector(eye)
        self.forward = Vector(forward).normalized()

    def screen_point_to_ray(self, target):
        # A 2D pointer is a point on the z=0 plane
        if len(target) == 2:
            target = (target[0], target[1], 0.0)
        return Ray(self.eye.copy(), Vector(target) - self.eye)


class FakeRaycaster:
    def __init__(self, hit_name=None):
        self.hit_name = hit_name
        self.calls = 0

    def __call__(self, ray):
        self.calls += 1
        return self.hit_name


class Rig:
    """Bundles the controller with the collaborators the tests poke at"""

    def __init__(self, camera=None, settings=None, rotation=None):
        self.camera = camera if camera is not None else FakeCamera()
        self.inputs = InputState()
        self.pivot = Vector((0.0, 0.0, 0.0))
        self.raycaster = FakeRaycaster()
        self.controller = TrackballController(
            camera_provider=lambda: self.camera,
            input_provider=lambda: self.inputs,
            pivot_provider=lambda: self.pivot,
            raycaster=self.raycaster,
            settings=settings,
            rotation=rotation,
        )


def assert_vectors_close(a, b, tolerance=TOLERANCE):
    assert (Vector(a) - Vector(b)).length < tolerance, f"{a} != {b}"


def assert_rotations_close(a, b, tolerance=TOLERANCE):
    # q and -q are the same rotation
    assert abs(abs(a.normalized().dot(b.normalized())) - 1.0) < tolerance, f"{a} != {b}"


@pytest.fixture
def rig():
    return Rig()


@pytest.fixture
def side_rig():
    """Camera above and in front of the pivot looking down -Z, as in the Y axis scenario"""
    return Rig(camera=FakeCamera(eye=(0.0, 5.0, 30.0)))


@pytest.fixture
def quarter_turn_z():
    return Quaternion((0.0, 0.0, 1.0), 1.5707963267948966)


@pytest.fixture
def default_settings():
    return TrackballSettings()
