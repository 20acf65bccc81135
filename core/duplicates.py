#!/usr/bin/env python3
"""
Resource Deduplicator Module
Finds geometries and materials shared by several mesh nodes
"""

import re
from typing import List, Iterable

from .scene_data import SceneNode, NodeType, DuplicateEntry, DuplicateRegistry, geometry_key
from .naming import nodes_accessor

DEFAULT_PART_NAME = "Part"


def readable_name(node_name):
    """Letters-only, capitalized name derived from a node name

    Args:
        node_name: Original node name, may be empty

    Returns:
        str: e.g. "chair_01" -> "Chair", "" -> "Part"
    """
    name = re.sub(r'[^a-zA-Z]', '', node_name or DEFAULT_PART_NAME)
    if not name:
        name = DEFAULT_PART_NAME
    return name[0].upper() + name[1:]


def unique_name(attempt, taken):
    """Append 1, 2, ... to attempt until it is not in taken"""
    candidate = attempt
    index = 0
    while candidate in taken:
        index += 1
        candidate = f"{attempt}{index}"
    return candidate


def collect_duplicates(nodes: Iterable[SceneNode]) -> DuplicateRegistry:
    """Scan mesh nodes once and build the duplicate registry

    Single-use resources are dropped after the scan, only resources
    referenced by two or more nodes are kept.

    Args:
        nodes: All nodes of the scene, in pre-order

    Returns:
        DuplicateRegistry: Shared geometries (with unique names) and material counts
    """
    registry = DuplicateRegistry()
    meshes: List[SceneNode] = [n for n in nodes if NodeType.is_mesh(n.type)]

    for node in meshes:
        if node.material is not None:
            name = node.material.name
            registry.materials[name] = registry.materials.get(name, 0) + 1

    taken = set()
    for node in meshes:
        if node.geometry is None:
            continue
        key = geometry_key(node)
        entry = registry.geometries.get(key)
        if entry is None:
            name = unique_name(readable_name(node.name), taken)
            taken.add(name)
            registry.geometries[key] = DuplicateEntry(count=1, name=name, node=nodes_accessor(node.name))
        else:
            entry.count += 1

    registry.geometries = {k: e for k, e in registry.geometries.items() if e.count > 1}
    registry.materials = {k: c for k, c in registry.materials.items() if c > 1}
    return registry
