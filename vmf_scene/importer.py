"""
Map importer: parse a .vmf file and assemble its scene in one call.
"""
from vmf_scene.assembler import assemble_scene
from vmf_scene.data_model import ImportSettings
from vmf_scene.parser import parse_vmf_file, parse_vmf_text
from vmf_scene.scene import Scene, MaterialLibrary
from vmf_scene.tasks import TaskRegistry


class VMFImporter:
    """
    Parses map files and populates a Scene.

    The scene accumulates objects across calls; `assembly` only ever holds
    the result of the latest call, and is None if that call failed.

    Usage:
        importer = VMFImporter(ImportSettings(import_lights=False))
        root = importer.parse('maps/room.vmf')
        importer.scene.roots()          # created objects
        importer.assembly.groups        # surviving group placeholders
    """

    def __init__(self, settings=None, scene=None, assets=None,
                 mesh_builder=None, tasks=None):
        self.settings = settings if settings is not None else ImportSettings()
        self.scene = scene if scene is not None else Scene()
        self.assets = assets if assets is not None else MaterialLibrary.with_placeholder()
        self.mesh_builder = mesh_builder
        self.tasks = tasks if tasks is not None else TaskRegistry()
        self.assembly = None

    def parse(self, path):
        """Parse the file at `path`, assemble its scene, return the root Node."""
        self.assembly = None
        return self._assemble(parse_vmf_file(path))

    def parse_text(self, text):
        """Same as `parse`, from map text already in memory."""
        self.assembly = None
        return self._assemble(parse_vmf_text(text))

    def _assemble(self, root):
        self.assembly = assemble_scene(
            root, self.scene, self.settings,
            assets=self.assets, mesh_builder=self.mesh_builder)
        return root
