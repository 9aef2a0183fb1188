#!/usr/bin/env python
"""
Parse a .vmf map and print its node tree and the assembled scene hierarchy.

Usage:
    python scripts/dump_scene.py maps/room.vmf                 # tree + scene
    python scripts/dump_scene.py maps/room.vmf --tree-only     # skip assembly
    python scripts/dump_scene.py maps/room.vmf --no-lights     # brushes only
    python scripts/dump_scene.py maps/room.vmf --no-detail     # world brushes only
"""

import argparse
import sys
import warnings

from vmf_scene.data_model import ImportSettings
from vmf_scene.importer import VMFImporter
from vmf_scene.parser import ParseError, parse_vmf_file
from vmf_scene.scene import Light, MeshFilter


# ── Printing ─────────────────────────────────────────────────────────────────


def _print_tree(node, depth=0, max_depth=None):
    if node.parent is not None:
        label = node.key
        ident = getattr(node, 'identifier', None)
        if ident is not None:
            label += f" #{ident}"
        print("  " * depth + label)
        depth += 1
    if max_depth is not None and depth > max_depth:
        return
    for child in node.children:
        _print_tree(child, depth, max_depth)


def _describe(obj):
    mf = obj.get_component(MeshFilter)
    if mf is not None:
        return f"{len(mf.mesh.vertices)} verts, {len(mf.mesh.triangles)} tris"
    light = obj.get_component(Light)
    if light is not None:
        r, g, b = light.color
        return (f"{light.kind.name.lower()} intensity={light.intensity:.2f} "
                f"color=({r:.2f}, {g:.2f}, {b:.2f})")
    return "group"


def _print_scene(transform, depth=0):
    obj = transform.owner
    x, y, z = transform.world_position()
    print("  " * depth + f"{obj.name}  @({x:.1f}, {y:.1f}, {z:.1f})  {_describe(obj)}")
    for child in transform.children:
        _print_scene(child, depth + 1)


# ── Main ─────────────────────────────────────────────────────────────────────


def main():
    parser = argparse.ArgumentParser(description="Dump a .vmf map's tree and scene")
    parser.add_argument("path", help="path to the .vmf file")
    parser.add_argument("--tree-only", action="store_true",
                        help="print the node tree without assembling a scene")
    parser.add_argument("--depth", type=int, default=None,
                        help="limit node tree depth")
    parser.add_argument("--no-brushes", action="store_true")
    parser.add_argument("--no-world", action="store_true",
                        help="skip world brushes")
    parser.add_argument("--no-detail", action="store_true",
                        help="skip brushes owned by entities")
    parser.add_argument("--no-lights", action="store_true")
    args = parser.parse_args()

    settings = ImportSettings(
        import_brushes=not args.no_brushes,
        import_world_brushes=not args.no_world,
        import_detail_brushes=not args.no_detail,
        import_lights=not args.no_lights,
    )

    try:
        if args.tree_only:
            _print_tree(parse_vmf_file(args.path), max_depth=args.depth)
            return 0

        importer = VMFImporter(settings)
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            root = importer.parse(args.path)
    except ParseError as e:
        print(f"{args.path}: {e}", file=sys.stderr)
        return 1

    print("=== Tree ===")
    _print_tree(root, max_depth=args.depth)
    print("\n=== Scene ===")
    for obj in importer.scene.roots():
        _print_scene(obj.transform)

    assembly = importer.assembly
    print(f"\n{len(assembly.solids)} solids, {len(assembly.lights)} lights, "
          f"{len(assembly.groups)} groups")
    for w in caught:
        print(f"warning: {w.message}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
