#!/usr/bin/env python3
"""
Type Inference Module
Collects the type surface of the final (pruned) tree: three.js classes to
import and register, loader node and material names for the GLTFResult
type, and animation action names.
"""

from typing import List, Iterable

from .scene_data import SceneNode, NodeType, TypeDescriptor, AnimationClip


def infer_types(nodes: Iterable[SceneNode], animations: List[AnimationClip], options) -> TypeDescriptor:
    """Build the TypeDescriptor of the final forest

    Only objects that survived pruning are visited, so types of removed
    groups never leak into imports.

    Args:
        nodes: Top-level nodes of the final tree
        animations: Animation clips of the scene
        options: CompilerOptions (bones layout changes what gets emitted)

    Returns:
        TypeDescriptor: Types, node/material names, actions and flags
    """
    descriptor = TypeDescriptor(
        actions=[clip.name for clip in animations],
        has_animations=len(animations) > 0,
    )

    def add_type(type_name):
        if type_name not in descriptor.types:
            descriptor.types.append(type_name)

    def visit(node, emitted):
        if NodeType.is_mesh(node.type) and node.name:
            descriptor.nodes.setdefault(node.name, node.type)
        if NodeType.is_bone(node.type) and node.name and not (node.parent and NodeType.is_bone(node.parent.type)):
            descriptor.nodes.setdefault(node.name, node.type)
        if node.material is not None and node.material.name:
            descriptor.materials.setdefault(node.material.name, node.material.type)

        if emitted:
            if NodeType.is_bone(node.type) and not options.bones:
                # Rendered as an opaque primitive, children come along natively
                descriptor.has_args = True
                emitted = False
            elif node.type == NodeType.PERSPECTIVE_CAMERA:
                descriptor.perspective_camera = True
            elif node.type == NodeType.ORTHOGRAPHIC_CAMERA:
                descriptor.orthographic_camera = True
            elif node.type == NodeType.OBJECT3D:
                add_type(NodeType.GROUP)
            else:
                add_type(node.type)
            if node.type == NodeType.INSTANCED_MESH:
                descriptor.has_args = True

        for child in node.children:
            visit(child, emitted)

    for node in nodes:
        visit(node, True)
    return descriptor
