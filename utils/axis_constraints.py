"""
Axis constraint utilities for the trackball.
Resolves the logical rotation axes to vectors and tracks keyboard axis selection.
"""

import mathutils


AXES = ('X', 'Y', 'Z')

_AXIS_VECTORS = {
    'X': (1.0, 0.0, 0.0),
    'Y': (0.0, 1.0, 0.0),
    'Z': (0.0, 0.0, 1.0),
}


def axis_to_vector(axis, is_local=False, rotation=None):
    """
    Get the unit vector for a rotation axis.

    Args:
        axis: 'X', 'Y' or 'Z'
        is_local: Use the object's local axis instead of the world axis
        rotation: mathutils.Quaternion orientation of the object (local mode only)

    Returns:
        mathutils.Vector: Unit vector of the axis in world space
    """
    if axis not in _AXIS_VECTORS:
        raise ValueError(f"Unknown axis {axis!r}, expected one of {AXES}")

    vector = mathutils.Vector(_AXIS_VECTORS[axis])
    if is_local and rotation is not None:
        vector = (rotation.normalized() @ vector).normalized()
    return vector


class AxisConstraintState:
    """Keyboard axis selection for the trackball modal operator"""

    def __init__(self):
        self.constraint_axis = None  # None, 'X', 'Y', 'Z'

    def handle_constraint_event(self, event, operator_name=""):
        """
        Handle axis selection keyboard events.

        Pressing the key of the active axis again clears the selection.

        Args:
            event: Blender event object
            operator_name: Name of the operator for debug output

        Returns:
            bool: True if event was handled, False otherwise
        """
        if event.type in _AXIS_VECTORS and event.value == 'PRESS':
            axis = event.type
            self.constraint_axis = axis if self.constraint_axis != axis else None
            print(f"{operator_name}: Axis constraint set to {self.constraint_axis}")
            return True
        return False

    def sync(self, axis):
        """Follow an axis picked some other way (e.g. by hovering a handle)"""
        self.constraint_axis = axis

    def clear_constraints(self):
        """Clear the active constraint"""
        self.constraint_axis = None

    def get_constraint_description(self):
        """Get human-readable description of current constraint"""
        if self.constraint_axis:
            return f"Axis: {self.constraint_axis}"
        return "Free"
