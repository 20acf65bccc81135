#!/usr/bin/env python3
"""
Scene Data Module
Format-agnostic data structures for scene representation.

This module defines the intermediate data structures that decouple
readers (glTF) from exporters (Angular Three). Readers build a SceneGraph
out of these structures, and the compiler passes and exporters consume
them without knowledge of the source format.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Tuple, Any, Iterator

from .errors import PipelineInvariantError


Vector3 = Tuple[float, float, float]


class NodeType:
    """three.js object class names produced by the loader

    The set is closed for the purposes of projection and pruning. Any other
    string is treated as an "other" type and rendered with a generic
    kebab-cased element name.
    """
    GROUP = "Group"
    SCENE = "Scene"
    OBJECT3D = "Object3D"
    MESH = "Mesh"
    SKINNED_MESH = "SkinnedMesh"
    INSTANCED_MESH = "InstancedMesh"
    BONE = "Bone"
    POINT_LIGHT = "PointLight"
    SPOT_LIGHT = "SpotLight"
    DIRECTIONAL_LIGHT = "DirectionalLight"
    AMBIENT_LIGHT = "AmbientLight"
    HEMISPHERE_LIGHT = "HemisphereLight"
    RECT_AREA_LIGHT = "RectAreaLight"
    PERSPECTIVE_CAMERA = "PerspectiveCamera"
    ORTHOGRAPHIC_CAMERA = "OrthographicCamera"

    GROUP_LIKE = frozenset({GROUP, SCENE, OBJECT3D})
    MESH_LIKE = frozenset({MESH, SKINNED_MESH, INSTANCED_MESH})
    LIGHTS = frozenset({POINT_LIGHT, SPOT_LIGHT, DIRECTIONAL_LIGHT, AMBIENT_LIGHT,
                        HEMISPHERE_LIGHT, RECT_AREA_LIGHT})
    CAMERAS = frozenset({PERSPECTIVE_CAMERA, ORTHOGRAPHIC_CAMERA})

    @classmethod
    def is_group_like(cls, type_name: str) -> bool:
        return type_name in cls.GROUP_LIKE

    @classmethod
    def is_mesh(cls, type_name: str) -> bool:
        return type_name in cls.MESH_LIKE

    @classmethod
    def is_light(cls, type_name: str) -> bool:
        return type_name in cls.LIGHTS

    @classmethod
    def is_camera(cls, type_name: str) -> bool:
        return type_name in cls.CAMERAS

    @classmethod
    def is_bone(cls, type_name: str) -> bool:
        return type_name == cls.BONE


@dataclass(frozen=True)
class Geometry:
    """Shared geometry reference

    Attributes:
        uid: Content identity key. Nodes built from the same glTF primitive
             share the same uid, like the loader's primitive cache.
    """
    uid: str


@dataclass(frozen=True)
class Material:
    """Shared material reference

    Attributes:
        uid: Identity key (one per glTF material)
        name: Material name, may be empty
        type: three.js material class (e.g. "MeshStandardMaterial")
    """
    uid: str
    name: str = ""
    type: str = "MeshStandardMaterial"


@dataclass(eq=False)
class SceneNode:
    """Single object of the scene tree

    Defaults mirror three.js object defaults so that a freshly constructed
    node projects to no attributes at all.

    Attributes:
        uid: Stable identity, unique within one graph
        type: three.js object class (see NodeType)
        name: Object name, possibly empty
        position / rotation / scale: Local transform (rotation is XYZ Euler, radians)
        up: Up vector (world-up by default)
        geometry / material: Shared resource references (mesh types only)
        skeleton: True when a skinned mesh is bound to a skeleton
        morph_targets: True when the geometry carries morph attributes
        instance_count: Instance count for instanced meshes
        instance_color: True when per-instance colors are present
        visible / cast_shadow / receive_shadow: Render flags
        intensity / angle / penumbra / decay / distance: Light parameters
        color: Light color as 6-digit sRGB hex, None for non-lights
        fov / near / far / zoom: Camera parameters
        user_data: Free-form metadata (glTF extras)
        children: Ordered children
        parent: Back reference, never used for ownership
    """
    uid: str
    type: str = NodeType.GROUP
    name: str = ""
    position: Vector3 = (0.0, 0.0, 0.0)
    rotation: Vector3 = (0.0, 0.0, 0.0)
    scale: Vector3 = (1.0, 1.0, 1.0)
    up: Vector3 = (0.0, 1.0, 0.0)
    geometry: Optional[Geometry] = None
    material: Optional[Material] = None
    skeleton: bool = False
    morph_targets: bool = False
    instance_count: Optional[int] = None
    instance_color: bool = False
    visible: bool = True
    cast_shadow: bool = False
    receive_shadow: bool = False
    intensity: Optional[float] = None
    angle: Optional[float] = None
    penumbra: Optional[float] = None
    decay: Optional[float] = None
    distance: Optional[float] = None
    color: Optional[str] = None
    fov: float = 50.0
    near: float = 0.1
    far: float = 2000.0
    zoom: float = 1.0
    user_data: Dict[str, Any] = field(default_factory=dict)
    children: List['SceneNode'] = field(default_factory=list)
    parent: Optional['SceneNode'] = field(default=None, repr=False)

    def add(self, child: 'SceneNode') -> 'SceneNode':
        """Append a child, detaching it from its previous parent

        Returns:
            SceneNode: self, for chaining
        """
        if child is self:
            raise PipelineInvariantError(f"Cannot add node {self.uid} to itself")
        if child.parent is not None and child.parent is not self:
            child.parent.children = [c for c in child.parent.children if c is not child]
        child.parent = self
        self.children.append(child)
        return self

    def traverse(self) -> Iterator['SceneNode']:
        """Pre-order traversal including this node

        Raises:
            PipelineInvariantError: If a node is reached twice (cycle or shared child)
        """
        seen = set()
        stack = [self]
        while stack:
            node = stack.pop()
            if id(node) in seen:
                raise PipelineInvariantError(f"Node {node.uid} reached twice, the tree has a cycle")
            seen.add(id(node))
            yield node
            stack.extend(reversed(node.children))

    def copy_tree(self) -> 'SceneNode':
        """Copy this subtree into fresh node objects

        Identity (uid) and shared resources are preserved, transforms and
        child lists are not shared with the original.
        """
        memo = {}

        def _copy(node, parent):
            if id(node) in memo:
                raise PipelineInvariantError(f"Node {node.uid} reached twice, the tree has a cycle")
            clone = SceneNode(**{
                name: getattr(node, name)
                for name in self.__dataclass_fields__
                if name not in ('children', 'parent', 'user_data')
            })
            clone.user_data = dict(node.user_data)
            clone.parent = parent
            memo[id(node)] = clone
            clone.children = [_copy(child, clone) for child in node.children]
            return clone

        return _copy(self, None)


@dataclass(frozen=True)
class AnimationTrack:
    """Single animated property

    Attributes:
        node_name: Name of the targeted object
        path: Animated property ("translation", "rotation", "scale", "weights")
    """
    node_name: str
    path: str


@dataclass
class AnimationClip:
    """Animation clip (read-only input)

    Attributes:
        name: Clip name, used as action name
        duration: Length in seconds (-1 when unknown)
        tracks: Animated properties
    """
    name: str
    duration: float = -1.0
    tracks: List[AnimationTrack] = field(default_factory=list)


@dataclass
class SceneGraph:
    """Complete input for the compiler

    Attributes:
        root: Root of the scene tree
        animations: Animation clips, possibly empty
        extras: Source asset metadata (free-form key/value pairs)
        source_path: Path of the file the graph was read from, if any
    """
    root: SceneNode
    animations: List[AnimationClip] = field(default_factory=list)
    extras: Dict[str, Any] = field(default_factory=dict)
    source_path: Optional[str] = None

    @property
    def has_animations(self) -> bool:
        return len(self.animations) > 0

    def all_nodes(self) -> List[SceneNode]:
        return list(self.root.traverse())

    def get_node_by_name(self, name: str) -> Optional[SceneNode]:
        """Find node by name

        Args:
            name: Node name to find

        Returns:
            SceneNode if found, None otherwise
        """
        for node in self.root.traverse():
            if node.name == name:
                return node
        return None


@dataclass
class DuplicateEntry:
    """Shared geometry entry of the duplicate registry

    Attributes:
        count: Number of mesh nodes referencing the geometry/material pair
        name: Unique readable name assigned on first sighting
        node: Loader accessor of the first node using it (e.g. "nodes.Chair")
    """
    count: int
    name: str
    node: str


@dataclass
class DuplicateRegistry:
    """Resources referenced by two or more nodes

    Attributes:
        geometries: Composite key (geometry uid + material name) -> entry
        materials: Material name -> reference count, listed in the debug dump
    """
    geometries: Dict[str, DuplicateEntry] = field(default_factory=dict)
    materials: Dict[str, int] = field(default_factory=dict)

    def geometry_entry(self, node: SceneNode) -> Optional[DuplicateEntry]:
        if node.geometry is None:
            return None
        return self.geometries.get(geometry_key(node))


def geometry_key(node: SceneNode) -> str:
    """Composite identity key of a mesh node's geometry/material pair"""
    material_name = node.material.name if node.material else ""
    return node.geometry.uid + material_name


@dataclass(frozen=True)
class Attribute:
    """Single output attribute of an element

    Attributes:
        kind: Attribute name ("position", "geometry", "*args", ...)
        value: Rendered value text
        bound: Property binding ("[kind]=") vs. plain attribute ("kind=")
    """
    kind: str
    value: str
    bound: bool = True

    def render(self) -> str:
        if self.kind.startswith('*') or not self.bound:
            return f'{self.kind}="{self.value}"'
        return f'[{self.kind}]="{self.value}"'


@dataclass
class TypeDescriptor:
    """Inferred type and import surface of the final tree

    Attributes:
        types: three.js classes to import and register, in first-seen order
        nodes: Loader node name -> three.js type (meshes and top-level bones)
        materials: Material name -> three.js type
        actions: Animation clip names
        has_args: True when any element uses the *args directive
        has_animations: True when the graph carries animation clips
        perspective_camera / orthographic_camera: Camera components in use
    """
    types: List[str] = field(default_factory=list)
    nodes: Dict[str, str] = field(default_factory=dict)
    materials: Dict[str, str] = field(default_factory=dict)
    actions: List[str] = field(default_factory=list)
    has_args: bool = False
    has_animations: bool = False
    perspective_camera: bool = False
    orthographic_camera: bool = False


@dataclass
class OutputDocument:
    """Generated component source, section by section"""
    header: str = ""
    imports: str = ""
    preload: str = ""
    types: str = ""
    component: str = ""

    def render(self) -> str:
        sections = [self.header, self.imports, self.preload, self.types, self.component]
        return "\n\n".join(section for section in sections if section) + "\n"
