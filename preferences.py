import bpy


def get_prefs(context=None):
    """Get addon preferences, or None when the add-on is not enabled."""
    try:
        context = context or bpy.context
        addon_prefs = context.preferences.addons.get(__package__)
        if addon_prefs:
            return addon_prefs.preferences
    except AttributeError:
        pass
    return None


class SuperTrackballPreferences(bpy.types.AddonPreferences):
    bl_idname = __package__

    angle_snap_step: bpy.props.FloatProperty(
        name="Angle Snap Step",
        default=15.0,
        min=0.1,
        max=180.0,
        description="Rotation angle increment in degrees while angle snapping is on"
    )
    angle_snap_default: bpy.props.BoolProperty(
        name="Angle Snap On by Default",
        default=False,
        description="Start the trackball with angle snapping enabled"
    )
    angle_snap_key: bpy.props.StringProperty(
        name="Angle Snap Key",
        default='S',
        description="Event type that toggles angle snapping while the trackball is running"
    )
    use_local_rotation: bpy.props.BoolProperty(
        name="Local Axes",
        default=False,
        description="Constrain rotation to the object's local axes instead of the world axes"
    )
    view_axis_modifier: bpy.props.EnumProperty(
        name="Free Rotation Modifier",
        items=[
            ('SHIFT', "Shift", "Hold Shift for free trackball rotation"),
            ('CTRL', "Ctrl", "Hold Ctrl for free trackball rotation"),
            ('ALT', "Alt", "Hold Alt for free trackball rotation"),
        ],
        default='SHIFT',
        description="Modifier that switches from axis rotation to free rotation"
    )
    min_hemisphere_radius: bpy.props.FloatProperty(
        name="Minimum Radius",
        default=0.1,
        min=0.001,
        description="Smallest trackball radius used for tiny objects"
    )
    handle_name_x: bpy.props.StringProperty(
        name="X Handle",
        default="TrackballTorusX",
        description="Name of the object that selects the X axis when hovered"
    )
    handle_name_y: bpy.props.StringProperty(
        name="Y Handle",
        default="TrackballTorusY",
        description="Name of the object that selects the Y axis when hovered"
    )
    handle_name_z: bpy.props.StringProperty(
        name="Z Handle",
        default="TrackballTorusZ",
        description="Name of the object that selects the Z axis when hovered"
    )

    def draw(self, context):
        layout = self.layout
        col = layout.column()
        col.prop(self, "angle_snap_step")
        col.prop(self, "angle_snap_default")
        col.prop(self, "angle_snap_key")
        col.separator()
        col.prop(self, "use_local_rotation")
        col.prop(self, "view_axis_modifier")
        col.prop(self, "min_hemisphere_radius")
        col.separator()
        col.label(text="Axis Handles:")
        col.prop(self, "handle_name_x")
        col.prop(self, "handle_name_y")
        col.prop(self, "handle_name_z")


classes = (
    SuperTrackballPreferences,
)


def register():
    for cls in classes:
        bpy.utils.register_class(cls)


def unregister():
    for cls in reversed(classes):
        bpy.utils.unregister_class(cls)
