#!/usr/bin/env python3
"""
Readers Module
Scene file readers (glTF / GLB)
"""

from pathlib import Path

from .base_reader import BaseReader
from .gltf_reader import GltfReader

# Supported file extensions
GLTF_EXTENSIONS = {'.gltf', '.glb'}
SUPPORTED_EXTENSIONS = GLTF_EXTENSIONS


def create_reader(input_file, progress_callback=None):
    """Factory function to create appropriate reader based on file extension

    Args:
        input_file: Path to input scene file
        progress_callback: Optional function receiving reader messages

    Returns:
        BaseReader: GltfReader instance

    Raises:
        ValueError: If file extension is not supported
    """
    ext = Path(input_file).suffix.lower()

    if ext in GLTF_EXTENSIONS:
        return GltfReader(input_file, progress_callback=progress_callback)
    raise ValueError(
        f"Unsupported file format: {ext}\n"
        f"Supported formats: {', '.join(sorted(SUPPORTED_EXTENSIONS))}"
    )


def get_file_type(input_file):
    """Get the file type string for a given file

    Returns:
        str: 'gltf', 'glb', or 'unknown'
    """
    ext = Path(input_file).suffix.lower()
    if ext in GLTF_EXTENSIONS:
        return ext[1:]
    return 'unknown'


def is_supported_format(input_file):
    """Check if a file has a supported format"""
    return Path(input_file).suffix.lower() in SUPPORTED_EXTENSIONS


__all__ = [
    'BaseReader',
    'GltfReader',
    'create_reader',
    'get_file_type',
    'is_supported_format',
    'GLTF_EXTENSIONS',
    'SUPPORTED_EXTENSIONS',
]
