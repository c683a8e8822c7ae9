bl_info = {
    "name": "Super Trackball",
    "author": "MattGPT",
    "version": (1, 0, 0),
    "blender": (4, 5, 0),
    "location": "View3D > Object > Transform > Super Trackball (Shift+Ctrl+R)",
    "description": "Virtual trackball rotation with free, view-axis and single-axis modes and angle snapping",
    "warning": "",
    "doc_url": "",
    "category": "Object",
}

import importlib

# List of modules to import
modules = [
    # Core
    "preferences",
    "keymaps",

    # Trackball core (no bpy)
    "utils.trackball_geometry",
    "utils.axis_constraints",
    "utils.angle_snap",
    "utils.trackball_state",
    "utils.axis_hit_test",
    "utils.trackball_controller",
    "utils.view3d_utils",

    # Operators
    "operators.trackball_modal",
]

# Store imported modules for reload
imported_modules = {}


def register():
    # Import and register modules
    for module_name in modules:
        # Import module
        full_name = f"{__name__}.{module_name}"
        if full_name in imported_modules:
            importlib.reload(imported_modules[full_name])
            module = imported_modules[full_name]
        else:
            module = importlib.import_module(full_name)
            imported_modules[full_name] = module

        # Register if module has register function
        if hasattr(module, "register"):
            module.register()


def unregister():
    # Unregister modules in reverse order
    for module_name in reversed(modules):
        full_name = f"{__name__}.{module_name}"
        if full_name in imported_modules:
            module = imported_modules[full_name]
            if hasattr(module, "unregister"):
                module.unregister()


if __name__ == "__main__":
    register()
