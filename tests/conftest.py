import math

import pytest

from core.scene_data import SceneNode, SceneGraph, NodeType, Geometry, Material, AnimationClip, AnimationTrack
from core.options import CompilerOptions
from core.attributes import AttributeProjector, element_name, render_attributes

HALF_PI = math.pi / 2

WOOD = Material(uid="material:0", name="Wood")


def node(uid, type=NodeType.GROUP, children=(), **kwargs):
    n = SceneNode(uid=uid, type=type, name=kwargs.pop("name", uid), **kwargs)
    for child in children:
        n.add(child)
    return n


def group(uid, children=(), **kwargs):
    return node(uid, NodeType.GROUP, children, **kwargs)


def mesh(uid, geometry=None, material=WOOD, type=NodeType.MESH, **kwargs):
    return node(uid, type, geometry=Geometry(geometry or f"geo:{uid}"), material=material, **kwargs)


def names(nodes):
    """Nested (name, children) structure of a forest"""
    return [(n.name, names(n.children)) for n in nodes]


def snapshot(nodes, projector):
    """Nested (element, attributes, children) structure of a forest"""
    return [(element_name(n), render_attributes(projector.project(n)), snapshot(n.children, projector))
            for n in nodes]


@pytest.fixture
def options():
    return CompilerOptions()


@pytest.fixture
def projector(options):
    return AttributeProjector(options)


@pytest.fixture
def chair_scene():
    """Scene root wrapping an empty group around a mesh, next to a light"""
    root = group("Scene", [
        group("wrapper", [mesh("Chair")]),
        node("Lamp", NodeType.POINT_LIGHT, intensity=2.0, decay=2.0, color="ffcc00", position=(0.0, 3.0, 0.0)),
    ])
    return SceneGraph(
        root=root,
        extras={"author": "Jane Doe"},
        source_path="public/models/chair.glb",
    )


@pytest.fixture
def animated_chair_scene(chair_scene):
    """The chair scene with a clip flickering the lamp"""
    chair_scene.animations.append(
        AnimationClip(name="Flicker", duration=1.0, tracks=[AnimationTrack(node_name="Lamp", path="intensity")]))
    return chair_scene
