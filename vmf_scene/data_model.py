import enum
from dataclasses import dataclass

# Source brightness (the 4th `_light` component) is in the 0..~800 range;
# host light intensity is ~1.0 for a "normal" light.
BRIGHTNESS_DIVISOR = 200.0
COLOR_DIVISOR = 255.0

# Named constants
LIGHT_RANGE = 25.0                   # falloff range applied to every light
PLACEHOLDER_MATERIAL = 'Assets/dev_measuregeneric01b.mat'
MIN_GROUP_TRANSFORMS = 3             # placeholder + at least two members
PLANE_EPSILON = 1e-3                 # point-on-plane tolerance (map units)
DETERMINANT_EPSILON = 1e-9           # near-parallel plane triples are skipped

# Class-name prefix selecting light entities
LIGHT_CLASS_PREFIX = 'light'


class LightType(enum.IntEnum):
    POINT = 0
    SPOT = 1
    DIRECTIONAL = 2
    AREA = 3


# Light class name → kind. Other `light*` class names keep the default kind.
LIGHT_CLASS_MAP = {
    'light': LightType.POINT,
    'light_spot': LightType.SPOT,
}


@dataclass
class ImportSettings:
    import_brushes: bool = True
    import_world_brushes: bool = True
    import_detail_brushes: bool = True
    import_lights: bool = True
    material_path: str = PLACEHOLDER_MATERIAL
