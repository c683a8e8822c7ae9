import bpy

from ..preferences import get_prefs
from ..utils import axis_constraints, view3d_utils
from ..utils.trackball_controller import InputState, TrackballController, TrackballSettings
from ..utils.trackball_state import TrackballStateError


class OBJECT_OT_super_trackball_modal(bpy.types.Operator):
    """Rotate the active object with a virtual trackball"""
    bl_idname = "object.super_trackball_modal"
    bl_label = "Super Trackball"
    bl_description = "Rotate the active object by dragging a virtual trackball around its origin"
    bl_options = {'REGISTER', 'UNDO'}

    @classmethod
    def poll(cls, context):
        return (context.mode == 'OBJECT' and
                context.active_object is not None)

    def invoke(self, context, event):
        obj = context.active_object
        if obj is None:
            self.report({'ERROR'}, "No active object")
            return {'CANCELLED'}

        if view3d_utils.camera_from_context(context) is None:
            self.report({'ERROR'}, "Super Trackball must be run from a 3D Viewport")
            return {'CANCELLED'}

        try:
            self.settings = TrackballSettings.from_prefs(get_prefs(context))
        except ValueError as e:
            self.report({'ERROR'}, f"Invalid trackball preferences: {e}")
            return {'CANCELLED'}

        # Remember the original rotation for cancel, then work in quaternions
        self.original_rotation_mode = obj.rotation_mode
        obj.rotation_mode = 'QUATERNION'
        self.original_rotation = obj.rotation_quaternion.copy()

        self._context = context
        self.inputs = InputState(local_rotation=self.settings.use_local_rotation)
        self.update_inputs(event)

        self.controller = TrackballController(
            camera_provider=lambda: view3d_utils.camera_from_context(self._context),
            input_provider=lambda: self.inputs,
            pivot_provider=lambda: obj.matrix_world.translation.copy(),
            raycaster=lambda ray: view3d_utils.raycast_handle_name(self._context, ray),
            settings=self.settings,
            rotation=self.original_rotation,
        )
        self.axis_constraints = axis_constraints.AxisConstraintState()

        print(f"Super Trackball: Rotating {obj.name} around {obj.matrix_world.translation}")
        print(f"Super Trackball: Angle snap step {self.settings.angle_snap_step}, "
              f"{'local' if self.settings.use_local_rotation else 'world'} axes")

        self.controller.poll()
        self.update_hud(context)

        context.window_manager.modal_handler_add(self)
        return {'RUNNING_MODAL'}

    def update_inputs(self, event):
        self.inputs.pointer = (event.mouse_region_x, event.mouse_region_y)
        self.inputs.view_axis_held = view3d_utils.modifier_held(event, self.settings.view_axis_modifier)

    def trackball_radius(self, obj):
        return max(max(obj.dimensions) * 0.5, self.settings.min_hemisphere_radius)

    def apply_rotation(self, obj):
        obj.rotation_quaternion = self.controller.rotation

    def update_hud(self, context):
        if context.area is None:
            return
        if self.controller.is_dragging:
            free = self.controller.session.snapshot.constrained_axis is None
            mode = "Free" if free else "Axis: " + self.controller.selected_axis
        elif self.inputs.view_axis_held:
            mode = "Free"
        else:
            mode = self.axis_constraints.get_constraint_description()
            if self.controller.selected_axis:
                mode = "Axis: " + self.controller.selected_axis
        text = f"Super Trackball | {mode}"
        if self.controller.angle is not None:
            text += f" | Angle: {self.controller.angle:.1f}°"
        text += f" | Snap: {'On' if self.controller.angle_snap_active else 'Off'} ({self.settings.angle_snap_step:g}°)"
        context.area.header_text_set(text)

    def finish(self, context):
        if context.area is not None:
            context.area.header_text_set(None)

    def cancel_rotation(self, context):
        obj = context.active_object
        self.controller.reset()
        self.axis_constraints.clear_constraints()
        obj.rotation_quaternion = self.original_rotation
        obj.rotation_mode = self.original_rotation_mode
        self.finish(context)

    def modal(self, context, event):
        self._context = context
        obj = context.active_object
        self.update_inputs(event)

        # Modifier changes switch between free and axis rotation
        if event.type in {'LEFT_SHIFT', 'RIGHT_SHIFT', 'LEFT_CTRL', 'RIGHT_CTRL', 'LEFT_ALT', 'RIGHT_ALT'}:
            self.controller.poll()
            self.update_hud(context)
            return {'PASS_THROUGH'}

        if event.type == self.settings.angle_snap_key and event.value == 'PRESS':
            self.inputs.angle_snap_toggled = True
            self.controller.poll()
            self.inputs.angle_snap_toggled = False
            print(f"Super Trackball: Angle snap {'on' if self.controller.angle_snap_active else 'off'}")
            self.update_hud(context)
            return {'RUNNING_MODAL'}

        # Axis keys only while idle so the axis stays frozen during a drag
        if not self.controller.is_dragging and \
                self.axis_constraints.handle_constraint_event(event, "Super Trackball"):
            self.controller.select_axis(self.axis_constraints.constraint_axis)
            self.update_hud(context)
            return {'RUNNING_MODAL'}

        elif event.type == 'MOUSEMOVE':
            if self.controller.is_dragging:
                self.controller.update_drag(self.inputs.pointer)
                self.apply_rotation(obj)
            else:
                self.controller.poll()
                self.axis_constraints.sync(self.controller.selected_axis)
            self.update_hud(context)

        elif event.type == 'LEFTMOUSE' and event.value == 'PRESS':
            try:
                self.controller.begin_drag(obj.rotation_quaternion.copy(), self.trackball_radius(obj), self.inputs.pointer)
            except TrackballStateError as e:
                self.report({'ERROR'}, str(e))
                self.cancel_rotation(context)
                return {'CANCELLED'}
            if self.controller.is_dragging:
                snapshot = self.controller.session.snapshot
                mode = "free" if snapshot.constrained_axis is None else f"axis {self.controller.selected_axis}"
                print(f"Super Trackball: Drag started ({mode}), radius {snapshot.radius:.3f}")
            else:
                self.report({'INFO'}, "Hover an axis handle, press X/Y/Z or hold the free rotation modifier")
            self.update_hud(context)

        elif event.type == 'LEFTMOUSE' and event.value == 'RELEASE':
            if self.controller.is_dragging:
                self.controller.end_drag()
                self.apply_rotation(obj)
                print(f"Super Trackball: Drag ended at {self.controller.rotation}")
            self.update_hud(context)

        elif event.type == 'RET' and event.value == 'PRESS':
            print("Super Trackball Modal: CONFIRMING operation")
            if self.controller.is_dragging:
                self.controller.end_drag()
            self.apply_rotation(obj)
            obj.rotation_mode = self.original_rotation_mode
            self.finish(context)
            return {'FINISHED'}

        elif (event.type == 'RIGHTMOUSE' and event.value == 'PRESS') or (event.type == 'ESC' and event.value == 'PRESS'):
            print("Super Trackball Modal: CANCELLING operation")
            self.cancel_rotation(context)
            return {'CANCELLED'}

        # Allow viewport navigation events to pass through
        elif view3d_utils.is_view_nav_event(event):
            return {'PASS_THROUGH'}

        return {'RUNNING_MODAL'}



def register():
    bpy.utils.register_class(OBJECT_OT_super_trackball_modal)


def unregister():
    bpy.utils.unregister_class(OBJECT_OT_super_trackball_modal)
