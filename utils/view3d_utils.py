from mathutils import Vector

from .trackball_geometry import Ray


class ViewportCamera:
    """Camera collaborator for the trackball backed by a 3D viewport region"""

    def __init__(self, region, rv3d):
        self.region = region
        self.rv3d = rv3d

    @property
    def forward(self):
        return (self.rv3d.view_rotation @ Vector((0, 0, -1))).normalized()

    def screen_point_to_ray(self, coord):
        """Convert region 2D coordinates to a world space ray"""
        from bpy_extras import view3d_utils
        origin = view3d_utils.region_2d_to_origin_3d(self.region, self.rv3d, coord)
        direction = view3d_utils.region_2d_to_vector_3d(self.region, self.rv3d, coord)
        return Ray(origin, direction)


def camera_from_context(context):
    """Get a ViewportCamera for the active 3D viewport, or None outside of one"""
    region = context.region
    space = context.space_data
    rv3d = space.region_3d if space and space.type == 'VIEW_3D' else None
    if region is None or rv3d is None:
        return None
    return ViewportCamera(region, rv3d)


def raycast_handle_name(context, ray):
    """Ray cast the evaluated scene and return the name of the first object hit"""
    depsgraph = context.evaluated_depsgraph_get()
    success, location, normal, face_index, obj, matrix = context.scene.ray_cast(
        depsgraph, ray.origin, ray.direction.normalized()
    )
    if success and obj is not None:
        return obj.name
    return None


def is_view_nav_event(event) -> bool:
    # Middle mouse and mouse wheel zoom
    if event.type in {'MIDDLEMOUSE', 'WHEELUPMOUSE', 'WHEELDOWNMOUSE', 'WHEELINMOUSE', 'WHEELOUTMOUSE'}:
        return True
    # Trackpad navigation
    if event.type in {'TRACKPADPAN', 'TRACKPADZOOM'}:
        return True
    # 3D mouse (NDOF)
    if event.type == 'NDOF_MOTION' or event.type.startswith('NDOF_BUTTON_'):
        return True
    return False


def modifier_held(event, modifier):
    """Check a modifier by preference name ('SHIFT', 'CTRL', 'ALT')"""
    return bool(getattr(event, modifier.lower(), False))
