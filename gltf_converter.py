#!/usr/bin/env python3
"""
glTF to Angular Three Converter - Main Orchestrator Module
Coordinates reading a glTF/GLB asset and compiling it into an Angular Three
component using the readers and exporters modules.
"""

import traceback
from pathlib import Path, PurePosixPath

from readers import create_reader, get_file_type
from exporters.ngt_exporter import AngularThreeExporter
from core.options import CompilerOptions


def asset_url(input_file, root=None):
    """URL the component loads the asset from

    A leading "public" directory is treated as the web root.

    Args:
        input_file: Path of the asset on disk
        root: Directory the asset is served from, overrides the on-disk path

    Returns:
        str: e.g. "/models/robot.glb"
    """
    path = PurePosixPath(Path(input_file).as_posix())
    if root:
        return root.rstrip('/') + '/' + path.name
    parts = [p for p in path.parts if p not in ('/', '.')]
    if parts and parts[0] == 'public':
        parts = parts[1:]
    return '/' + '/'.join(parts)


class GltfToNgtConverter:
    """glTF to Angular Three converter (orchestrator/facade)

    This class coordinates the conversion process:
    1. Read input file ONCE (via readers module)
    2. Compile the scene graph (via AngularThreeExporter)
    3. Write the component file, or return the source for console output
    """

    def __init__(self, options=None, progress_callback=None):
        """Initialize converter

        Args:
            options: CompilerOptions, defaults used when None
            progress_callback: Optional function to call for progress updates
                              Signature: callback(message: str) -> None
        """
        self.options = options or CompilerOptions()
        self.progress_callback = progress_callback

    def log(self, message):
        """Send progress updates to callback"""
        if self.progress_callback:
            self.progress_callback(message)
        print(message)

    def read(self, input_file):
        """Read the input asset into a SceneGraph

        Raises:
            ValueError: If the file is missing or has an unsupported format
        """
        reader = create_reader(input_file, progress_callback=self.progress_callback)
        return reader.extract_scene_graph()

    def render(self, input_file):
        """Compile the input asset and return the component source"""
        scene_graph = self.read(input_file)
        exporter = AngularThreeExporter(self.options, self.progress_callback)
        return exporter.render(scene_graph, asset_url(input_file, self.options.root))

    def convert(self, input_file, output_file):
        """Convert a glTF/GLB file to an Angular Three component file

        Args:
            input_file: Path to .gltf or .glb file
            output_file: Path to the .ts file to write

        Returns:
            dict: Results with keys:
                - 'success': bool
                - 'ts_file': Path to the written component (on success)
                - 'files': List of created files
                - 'message': Summary message
        """
        try:
            file_type = get_file_type(str(input_file))

            self.log(f"\n{'='*60}")
            self.log("glTF -> Angular Three Converter")
            self.log(f"{'='*60}")
            self.log(f"Input: {input_file} ({file_type})")
            self.log(f"Output: {output_file}")
            self.log(f"Component: {self.options.name} <{self.options.selector}>")
            self.log(f"{'='*60}\n")

            self.log("Step 1/2: Reading scene...")
            scene_graph = self.read(input_file)
            nodes = scene_graph.all_nodes()
            self.log(f"  - Objects: {len(nodes)}")
            self.log(f"  - Animations: {len(scene_graph.animations)}")

            self.log("\nStep 2/2: Compiling component...")
            exporter = AngularThreeExporter(self.options, self.progress_callback)
            output_path = Path(output_file)
            result = exporter.export(scene_graph, output_path, output_path.stem,
                                     url=asset_url(input_file, self.options.root))

            if result.get('success'):
                self.log("\n" + exporter.get_export_summary(result))
            return result

        except Exception as e:
            self.log(f"\nERROR: {str(e)}")
            self.log(traceback.format_exc())
            return {
                'success': False,
                'files': [],
                'message': f"Conversion failed: {str(e)}"
            }
