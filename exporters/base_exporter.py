#!/usr/bin/env python3
"""
Base Exporter Module
Abstract base class for exporters writing compiled component files

Exporters receive a SceneGraph, never a reader, which keeps them
independent of the input format.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.scene_data import SceneGraph


class BaseExporter(ABC):
    """Abstract base class for component file exporters

    An exporter compiles a SceneGraph into one source file. Subclasses
    define the format, the shared logging and output path handling live here.
    """

    def __init__(self, progress_callback=None):
        """Initialize exporter

        Args:
            progress_callback: Optional function to call for progress updates
                              Signature: callback(message: str) -> None
        """
        self.progress_callback = progress_callback

    def log(self, message):
        """Send progress/status message

        Args:
            message: Message to log
        """
        if self.progress_callback:
            self.progress_callback(message)
        print(message)

    @abstractmethod
    def export(self, scene_graph: 'SceneGraph', output_path, name):
        """Export a scene graph to a specific format

        Args:
            scene_graph: SceneGraph produced by a reader
            output_path: Output directory, or output file path
            name: Base name for the created file

        Returns:
            dict: Export results with format-specific keys
                  Should include at least:
                  - 'success': bool
                  - 'files': list of created file paths
                  - 'message': str status message
        """
        pass

    @abstractmethod
    def get_format_name(self):
        """Return human-readable format name"""
        pass

    @abstractmethod
    def get_file_extension(self):
        """Return primary file extension for this format (without dot)"""
        pass

    def resolve_output_file(self, output_path, name):
        """Resolve the file to write

        Args:
            output_path: Directory, or a path already ending with the format extension
            name: Base name used when output_path is a directory

        Returns:
            Path: File path, parent directory created if needed

        Raises:
            ValueError: If the directory can not be created
        """
        path = Path(output_path)
        if path.suffix.lower() == f".{self.get_file_extension()}":
            directory, target = path.parent, path
        else:
            directory, target = path, path / f"{name}.{self.get_file_extension()}"

        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ValueError(f"Cannot create output directory {directory}: {e}")

        if not directory.is_dir():
            raise ValueError(f"Output path is not a directory: {directory}")

        return target

    def get_export_summary(self, result):
        """Generate human-readable summary of export results

        Args:
            result: Export result dict from export() method

        Returns:
            str: Formatted summary text
        """
        lines = []
        lines.append(f"✓ {self.get_format_name()} Export Complete")

        if 'files' in result:
            files = result['files']
            lines.append(f"  Files created: {len(files)}")
            for file_path in files:
                lines.append(f"    - {Path(file_path).name}")

        if 'message' in result:
            lines.append(f"  {result['message']}")

        return "\n".join(lines)
