"""
Document tree for parsed map files.

Every brace-delimited block becomes a Node. Blocks whose name matches a known
variant (world, entity, solid, side, group, editor) get a subclass that
interprets its keys into typed fields; everything else stays a plain Node.
"""
from typing import Dict, Iterator, List, Optional, Tuple


Vec3 = Tuple[float, float, float]


def parse_vec3(value):
    """Parse 'x y z' into a float triple."""
    parts = value.split()
    if len(parts) != 3:
        raise ValueError(f"Expected 3 components, got {len(parts)}: '{value}'")
    return tuple(float(p) for p in parts)


def parse_plane(value):
    """Parse '(x1 y1 z1) (x2 y2 z2) (x3 y3 z3)' into three points."""
    body = value.strip()
    if not (body.startswith('(') and body.endswith(')')):
        raise ValueError(f"Malformed plane: '{value}'")
    points = body[1:-1].split(') (')
    if len(points) != 3:
        raise ValueError(f"Wrong number of plane points in '{value}'")
    return tuple(parse_vec3(p) for p in points)


# ── Generic node ──────────────────────────────────────────────────────

class Node:
    """One block of the document, or the implicit root."""

    def __init__(self, key=''):
        self.key = key
        self.children: List['Node'] = []
        self.properties: Dict[str, str] = {}
        self._parent: Optional['Node'] = None

    @property
    def parent(self):
        return self._parent

    @parent.setter
    def parent(self, node):
        if self._parent is not None:
            self._parent.children.remove(self)
        self._parent = node
        if node is not None:
            node.children.append(self)

    def parse(self, key, value):
        """Handle one `"key" "value"` line of this block."""
        self.properties[key] = value

    def __getitem__(self, key):
        return self.properties[key]

    def __contains__(self, key):
        return key in self.properties

    def get(self, key, default=None):
        return self.properties.get(key, default)

    def children_of_type(self, cls):
        return [c for c in self.children if isinstance(c, cls)]

    def first_child_of_type(self, cls):
        """Return the first child of `cls` in insertion order, or None."""
        for c in self.children:
            if isinstance(c, cls):
                return c
        return None

    def walk(self) -> Iterator['Node']:
        """Pre-order traversal, self first."""
        yield self
        for c in self.children:
            yield from c.walk()

    def __repr__(self):
        return f"{type(self).__name__}({self.key!r}, children={len(self.children)})"


# ── Variants ──────────────────────────────────────────────────────────

class World(Node):
    def __init__(self, key=''):
        super().__init__(key)
        self.identifier = 0
        self.class_name = ''

    def parse(self, key, value):
        super().parse(key, value)
        if key == 'id':
            self.identifier = int(value)
        elif key == 'classname':
            self.class_name = value


class Entity(Node):
    def __init__(self, key=''):
        super().__init__(key)
        self.identifier = 0
        self.class_name = ''
        self.origin: Vec3 = (0.0, 0.0, 0.0)
        self.angles: Vec3 = (0.0, 0.0, 0.0)   # pitch, yaw, roll (degrees)

    def parse(self, key, value):
        super().parse(key, value)
        if key == 'id':
            self.identifier = int(value)
        elif key == 'classname':
            self.class_name = value
        elif key == 'origin':
            self.origin = parse_vec3(value)
        elif key == 'angles':
            self.angles = parse_vec3(value)


class Solid(Node):
    def __init__(self, key=''):
        super().__init__(key)
        self.identifier = 0

    def parse(self, key, value):
        super().parse(key, value)
        if key == 'id':
            self.identifier = int(value)

    @property
    def sides(self):
        return self.children_of_type(Side)


class Side(Node):
    def __init__(self, key=''):
        super().__init__(key)
        self.identifier = 0
        self.plane: Optional[Tuple[Vec3, Vec3, Vec3]] = None
        self.material = ''

    def parse(self, key, value):
        super().parse(key, value)
        if key == 'id':
            self.identifier = int(value)
        elif key == 'plane':
            self.plane = parse_plane(value)
        elif key == 'material':
            self.material = value


class Group(Node):
    def __init__(self, key=''):
        super().__init__(key)
        self.identifier = 0

    def parse(self, key, value):
        super().parse(key, value)
        if key == 'id':
            self.identifier = int(value)


class Editor(Node):
    def __init__(self, key=''):
        super().__init__(key)
        self.group_identifier: Optional[int] = None

    def parse(self, key, value):
        super().parse(key, value)
        if key == 'groupid':
            self.group_identifier = int(value)


# Block name (first letter capitalised) → node class
NODE_TYPES = {
    'World': World,
    'Entity': Entity,
    'Solid': Solid,
    'Side': Side,
    'Group': Group,
    'Editor': Editor,
}
