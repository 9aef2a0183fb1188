"""Shared test fixtures and constants for vmf-scene tests."""
import os

MAPS_DIR = os.path.join(os.path.dirname(__file__), 'maps')
GROUPED_ROOM = os.path.join(MAPS_DIR, 'grouped_room.vmf')


def box_planes(mins, maxs):
    """Plane strings for an axis-aligned box, wound the way Hammer writes them."""
    x0, y0, z0 = mins
    x1, y1, z1 = maxs
    faces = [
        ((x0, y1, z1), (x1, y1, z1), (x1, y0, z1)),   # top
        ((x0, y0, z0), (x1, y0, z0), (x1, y1, z0)),   # bottom
        ((x1, y1, z1), (x1, y1, z0), (x1, y0, z0)),   # +x
        ((x0, y0, z1), (x0, y0, z0), (x0, y1, z0)),   # -x
        ((x0, y1, z1), (x0, y1, z0), (x1, y1, z0)),   # +y
        ((x1, y0, z1), (x1, y0, z0), (x0, y0, z0)),   # -y
    ]
    return [' '.join('(%g %g %g)' % p for p in face) for face in faces]


def solid_block(ident, mins, maxs, groupid=None):
    """VMF text for a box solid, optionally linked to a group."""
    lines = ['solid', '{', f'"id" "{ident}"']
    for i, plane in enumerate(box_planes(mins, maxs)):
        lines += ['side', '{', f'"id" "{ident * 100 + i}"', f'"plane" "{plane}"',
                  '"material" "TOOLS/TOOLSNODRAW"', '}']
    if groupid is not None:
        lines += ['editor', '{', f'"groupid" "{groupid}"', '}']
    lines.append('}')
    return '\n'.join(lines)


def group_block(ident):
    return '\n'.join(['group', '{', f'"id" "{ident}"', 'editor', '{', '"color" "0 100 0"', '}', '}'])


def world_block(*blocks):
    return '\n'.join(['world', '{', '"id" "1"', '"classname" "worldspawn"', *blocks, '}'])


def entity_block(ident, classname, *blocks, **props):
    lines = ['entity', '{', f'"id" "{ident}"', f'"classname" "{classname}"']
    lines += [f'"{k}" "{v}"' for k, v in props.items()]
    lines += list(blocks)
    lines.append('}')
    return '\n'.join(lines)
