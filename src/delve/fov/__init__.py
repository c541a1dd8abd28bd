from .octants import OCTANTS
from .fov import compute_fov, effective_radius, is_blocking, mark_visible, reset_visibility, scan_octant

__all__ = [
    "OCTANTS",
    "compute_fov",
    "effective_radius",
    "is_blocking",
    "mark_visible",
    "reset_visibility",
    "scan_octant",
]
