import bpy


addon_keymaps = []


def draw_trackball_menu(self, context):
    """Add the trackball operator to the Object > Transform menu"""
    self.layout.separator()
    # Modal operators need to be invoked properly from menus
    self.layout.operator_context = 'INVOKE_DEFAULT'
    self.layout.operator("object.super_trackball_modal", text="Super Trackball")


def register():
    bpy.types.VIEW3D_MT_transform_object.append(draw_trackball_menu)

    # Shift+Ctrl+R in Object Mode; keyconfigs.addon is None in background mode
    kc = bpy.context.window_manager.keyconfigs.addon
    if kc:
        km = kc.keymaps.new(name="Object Mode", space_type='EMPTY')
        kmi = km.keymap_items.new("object.super_trackball_modal", 'R', 'PRESS', shift=True, ctrl=True)
        addon_keymaps.append((km, kmi))


def unregister():
    for km, kmi in addon_keymaps:
        km.keymap_items.remove(kmi)
    addon_keymaps.clear()

    try:
        bpy.types.VIEW3D_MT_transform_object.remove(draw_trackball_menu)
    except (AttributeError, ValueError):
        pass
