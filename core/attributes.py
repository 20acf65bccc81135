#!/usr/bin/env python3
"""
Attribute Projector Module
Computes the minimal attribute set that reproduces an object's visual state.

Values equal to the three.js defaults of the object type are omitted, so a
node with an identity transform and no resources projects to nothing.
"""

import json
import math
from typing import List, Optional

from .scene_data import SceneNode, NodeType, Attribute, DuplicateRegistry
from .numeric import (round_scalar, round_angle, format_number, format_vector,
                      format_angles, vector_length, is_default)
from .naming import nodes_accessor, materials_accessor, kebab_case, quote, property_key

TRANSFORM_KINDS = frozenset({"position", "rotation", "scale"})

WORLD_UP = (0.0, 1.0, 0.0)
DEFAULT_COLOR = "ffffff"
DEFAULT_SPOT_ANGLE = math.pi / 3

# Cameras rendered through angular-three-soba components
CAMERA_ELEMENTS = {
    NodeType.PERSPECTIVE_CAMERA: "ngts-perspective-camera",
    NodeType.ORTHOGRAPHIC_CAMERA: "ngts-orthographic-camera",
}


def resolved_type(node: SceneNode) -> str:
    """Type used for element naming and type comparisons

    Object3D is rendered as a group, cameras keep their class name, every
    other type starts with a lowercase letter ("SkinnedMesh" -> "skinnedMesh").
    """
    if node.type == NodeType.OBJECT3D:
        return "group"
    if NodeType.is_camera(node.type):
        return node.type
    return node.type[:1].lower() + node.type[1:]


def element_name(node: SceneNode) -> str:
    """Template element of a node: "ngt-mesh", "ngts-perspective-camera", ..."""
    if node.type in CAMERA_ELEMENTS:
        return CAMERA_ELEMENTS[node.type]
    return "ngt-" + kebab_case(resolved_type(node))


def js_literal(value) -> str:
    """Object literal usable inside a double-quoted template attribute"""
    if isinstance(value, dict):
        return "{" + ", ".join(f"{property_key(str(k))}: {js_literal(v)}" for k, v in value.items()) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(js_literal(v) for v in value) + "]"
    if isinstance(value, str):
        return quote(value).replace('"', '&quot;')
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (int, float)):
        return format_number(value)
    return quote(json.dumps(value, default=str)).replace('"', '&quot;')


def render_attributes(attributes: List[Attribute]) -> str:
    return " ".join(attribute.render() for attribute in attributes)


class AttributeProjector:
    """Projects scene nodes onto template attributes

    Holds everything the projection depends on besides the node itself, so
    one instance serves a whole compiler run.
    """

    def __init__(self, options, registry: Optional[DuplicateRegistry] = None, has_animations: bool = False):
        """Initialize projector

        Args:
            options: CompilerOptions
            registry: Duplicate registry of the scene (shared geometry accessors)
            has_animations: True when the scene carries animation clips, every
                named object is then treated as an animation target
        """
        self.options = options
        self.precision = options.precision
        self.registry = registry or DuplicateRegistry()
        self.has_animations = has_animations

    def name_attribute(self, node: SceneNode) -> Optional[Attribute]:
        """Name attribute, needed for animation binding and morph target lookup"""
        if node.name and (self.options.keep_names or node.morph_targets or self.has_animations):
            return Attribute("name", node.name.replace('"', '&quot;'), bound=False)
        return None

    def project(self, node: SceneNode) -> List[Attribute]:
        """Compute the attribute list of a node

        Args:
            node: Scene node

        Returns:
            list: Attributes in emission order (name excluded)
        """
        attrs = []
        add = attrs.append
        r = self._number
        accessor = "gltf." + nodes_accessor(node.name)

        if NodeType.is_camera(node.type):
            add(Attribute("makeDefault", "false"))
            if not is_default(node.zoom, 1, self.precision):
                add(Attribute("zoom", r(node.zoom)))
            if not is_default(node.far, 2000, self.precision):
                add(Attribute("far", r(node.far)))
            if not is_default(node.near, 0.1, self.precision):
                add(Attribute("near", r(node.near)))
            if node.type == NodeType.PERSPECTIVE_CAMERA and not is_default(node.fov, 50, self.precision):
                add(Attribute("fov", r(node.fov)))

        shadows = self.options.shadows and node.type in (NodeType.MESH, NodeType.SKINNED_MESH)
        if shadows:
            add(Attribute("castShadow", "true"))
            add(Attribute("receiveShadow", "true"))

        if node.type == NodeType.INSTANCED_MESH:
            add(Attribute("*args", f"[{accessor}.geometry, {accessor}.material, {node.instance_count or 0}]"))
            add(Attribute("instanceMatrix", f"{accessor}.instanceMatrix"))
            if node.instance_color:
                add(Attribute("instanceColor", f"{accessor}.instanceColor"))
        else:
            if node.geometry is not None:
                entry = self.registry.geometry_entry(node)
                source = f"gltf.{entry.node}" if entry else accessor
                add(Attribute("geometry", f"{source}.geometry"))

            if node.material is not None:
                if node.material.name:
                    add(Attribute("material", "gltf." + materials_accessor(node.material.name)))
                else:
                    add(Attribute("material", f"{accessor}.material"))

        if node.skeleton:
            add(Attribute("skeleton", f"{accessor}.skeleton"))
        if not node.visible:
            add(Attribute("visible", "false"))
        if node.cast_shadow and not shadows:
            add(Attribute("castShadow", "true"))
        if node.receive_shadow and not shadows:
            add(Attribute("receiveShadow", "true"))
        if node.morph_targets:
            add(Attribute("morphTargetDictionary", f"{accessor}.morphTargetDictionary"))
            add(Attribute("morphTargetInfluences", f"{accessor}.morphTargetInfluences"))

        if node.intensity and round_scalar(node.intensity, self.precision):
            add(Attribute("intensity", r(node.intensity)))
        if node.angle and round_angle(node.angle, self.precision) != round_angle(DEFAULT_SPOT_ANGLE, self.precision):
            add(Attribute("angle", round_angle(node.angle, self.precision)))
        if node.penumbra and round_scalar(node.penumbra, self.precision) != 0:
            add(Attribute("penumbra", r(node.penumbra)))
        if node.decay and round_scalar(node.decay, self.precision) != 1:
            add(Attribute("decay", r(node.decay)))
        if node.distance and round_scalar(node.distance, self.precision) != 0:
            add(Attribute("distance", r(node.distance)))

        if tuple(node.up) != WORLD_UP:
            add(Attribute("up", format_vector(node.up, self.precision)))
        if node.color is not None and node.color.lower() != DEFAULT_COLOR:
            add(Attribute("color", f"#{node.color.lower()}", bound=False))

        attrs.extend(self.project_transform(node))

        if self.options.meta and node.user_data:
            add(Attribute("userData", js_literal(node.user_data)))

        return attrs

    def project_transform(self, node: SceneNode) -> List[Attribute]:
        """Position, rotation and scale attributes, each omitted at identity"""
        attrs = []
        p = self.precision
        if round_scalar(vector_length(node.position), p):
            attrs.append(Attribute("position", format_vector(node.position, p)))
        if round_scalar(vector_length(node.rotation), p):
            attrs.append(Attribute("rotation", format_angles(node.rotation, p)))
        sx, sy, sz = (round_scalar(v, p) for v in node.scale)
        if not (sx == 1 and sy == 1 and sz == 1):
            if sx == sy == sz:
                attrs.append(Attribute("scale", format_number(sx)))
            else:
                attrs.append(Attribute("scale", format_vector(node.scale, p)))
        return attrs

    def _number(self, value):
        return format_number(round_scalar(value, self.precision))
