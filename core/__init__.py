#!/usr/bin/env python3
"""
Core Module
Format-agnostic scene data structures and the compiler passes
(deduplication, numeric canonicalization, attribute projection,
structural pruning, type inference).
"""

from .errors import PipelineInvariantError
from .options import CompilerOptions
from .scene_data import (
    SceneGraph,
    SceneNode,
    NodeType,
    Geometry,
    Material,
    AnimationClip,
    AnimationTrack,
    Attribute,
    DuplicateEntry,
    DuplicateRegistry,
    TypeDescriptor,
    OutputDocument,
)
from .duplicates import collect_duplicates
from .attributes import AttributeProjector
from .pruner import StructuralPruner, PruneResult
from .type_inference import infer_types

__all__ = [
    'PipelineInvariantError',
    'CompilerOptions',
    'SceneGraph',
    'SceneNode',
    'NodeType',
    'Geometry',
    'Material',
    'AnimationClip',
    'AnimationTrack',
    'Attribute',
    'DuplicateEntry',
    'DuplicateRegistry',
    'TypeDescriptor',
    'OutputDocument',
    'collect_duplicates',
    'AttributeProjector',
    'StructuralPruner',
    'PruneResult',
    'infer_types',
]
