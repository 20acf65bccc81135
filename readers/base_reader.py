#!/usr/bin/env python3
"""
Base Reader Module
Abstract interface for reading 3D scene files into a SceneGraph
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.scene_data import SceneGraph


class BaseReader(ABC):
    """Abstract base class for scene file readers

    Provides a consistent interface for reading different 3D file formats.
    Readers build the whole SceneGraph once; the compiler never goes back
    to the file.
    """

    def __init__(self, file_path: str, progress_callback=None):
        """Initialize reader with file path

        Args:
            file_path: Path to the scene file
            progress_callback: Optional function receiving warnings and progress messages
        """
        self.file_path = Path(file_path)
        self.progress_callback = progress_callback
        self._scene_graph_cache = None

    def log(self, message):
        """Send progress/status message"""
        if self.progress_callback:
            self.progress_callback(message)
        print(message)

    @abstractmethod
    def get_format_name(self) -> str:
        """Return human-readable format name (e.g., 'glTF')"""
        pass

    @abstractmethod
    def build_scene_graph(self) -> 'SceneGraph':
        """Read the file and build a fresh SceneGraph"""
        pass

    def extract_scene_graph(self) -> 'SceneGraph':
        """Get the SceneGraph of the file (cached)

        Returns:
            SceneGraph: Root node, animation clips and asset metadata
        """
        if self._scene_graph_cache is None:
            self._scene_graph_cache = self.build_scene_graph()
        return self._scene_graph_cache
