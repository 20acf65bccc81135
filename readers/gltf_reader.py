#!/usr/bin/env python3
"""
glTF Reader Module
Builds a SceneGraph from .gltf / .glb files with pygltflib.

The object tree is shaped the way the three.js GLTFLoader shapes it, since
the generated component accesses the loaded objects by name:
- nodes without content become Object3D, skin joints become Bone
- a node holding a single object becomes that object (Mesh, camera, light)
- multi-primitive meshes and nodes holding several objects become a Group
- names are sanitized and made unique ("name", "name_1", ...)
"""

import json
import math
import re

import numpy as np
from pygltflib import GLTF2

from core.scene_data import (SceneGraph, SceneNode, NodeType, Geometry, Material,
                             AnimationClip, AnimationTrack)
from .base_reader import BaseReader

DEFAULT_MATERIAL = Material(uid="material:default", name="", type="MeshStandardMaterial")

# Material extensions that make the loader create a MeshPhysicalMaterial
PHYSICAL_EXTENSIONS = {
    'KHR_materials_clearcoat', 'KHR_materials_ior', 'KHR_materials_sheen',
    'KHR_materials_specular', 'KHR_materials_transmission', 'KHR_materials_iridescence',
    'KHR_materials_anisotropy', 'KHR_materials_volume', 'KHR_materials_dispersion',
}

_RESERVED_NAME_CHARS = re.compile(r'[\[\]\.:/]')


def sanitize_node_name(name):
    """Same rules as PropertyBinding.sanitizeNodeName"""
    return _RESERVED_NAME_CHARS.sub('', re.sub(r'\s', '_', name or ''))


def quaternion_to_matrix(q):
    """Rotation matrix (3x3) of a unit quaternion [x, y, z, w]"""
    x, y, z, w = q
    return np.array([
        [1 - 2 * (y * y + z * z), 2 * (x * y - z * w), 2 * (x * z + y * w)],
        [2 * (x * y + z * w), 1 - 2 * (x * x + z * z), 2 * (y * z - x * w)],
        [2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x * x + y * y)],
    ])


def matrix_to_euler(rot):
    """XYZ Euler angles (radians) of a 3x3 rotation matrix"""
    m13 = float(np.clip(rot[0][2], -1.0, 1.0))
    y = math.asin(m13)
    if abs(m13) < 0.9999999:
        x = math.atan2(-rot[1][2], rot[2][2])
        z = math.atan2(-rot[0][1], rot[0][0])
    else:
        x = math.atan2(rot[2][1], rot[1][1])
        z = 0.0
    return (float(x), float(y), float(z))


def decompose_matrix(values):
    """Split a column-major 4x4 glTF matrix into position, rotation and scale

    Args:
        values: 16 floats, column-major

    Returns:
        tuple: (position, euler rotation, scale)
    """
    m = np.array(values, dtype=float).reshape(4, 4).T
    sx = np.linalg.norm(m[0:3, 0])
    sy = np.linalg.norm(m[0:3, 1])
    sz = np.linalg.norm(m[0:3, 2])
    if np.linalg.det(m[0:3, 0:3]) < 0:
        sx = -sx
    position = tuple(float(v) for v in m[0:3, 3])
    scale = np.array([sx, sy, sz])
    safe = np.where(scale == 0, 1.0, scale)
    rot = m[0:3, 0:3] / safe
    return position, matrix_to_euler(rot), tuple(float(v) for v in scale)


def linear_to_srgb_hex(color):
    """Hex string of a linear RGB color, as three's Color.getHexString()"""
    c = np.clip(np.asarray(color[:3], dtype=float), 0.0, 1.0)
    srgb = np.where(c < 0.0031308, c * 12.92, 1.055 * np.power(c, 1.0 / 2.4) - 0.055)
    return "".join(f"{int(v):02x}" for v in np.clip(np.floor(srgb * 255 + 0.5), 0, 255))


class GltfReader(BaseReader):
    """glTF 2.0 reader

    Only the JSON structure is used: the compiler needs names, transforms,
    resource identities and counts, never vertex data.
    """

    def __init__(self, file_path, gltf=None, progress_callback=None):
        """Open a glTF file

        Args:
            file_path: Path to .gltf or .glb file
            gltf: Already loaded GLTF2 document (skips loading file_path)
            progress_callback: Optional function receiving warnings
        """
        super().__init__(file_path, progress_callback)
        if gltf is None:
            if not self.file_path.exists():
                raise ValueError(f"Input file not found: {self.file_path}")
            gltf = GLTF2().load(str(self.file_path))
            if gltf is None:
                raise ValueError(f"Could not parse glTF file: {self.file_path}")
        self.gltf = gltf
        self._names_used = {}
        self._materials = {}
        self._joints = set()
        self._built = {}

    def get_format_name(self):
        return "glTF"

    def build_scene_graph(self):
        """Build the SceneGraph of the default scene

        Returns:
            SceneGraph: Root group, animations and asset extras
        """
        gltf = self.gltf
        self._names_used = {}
        self._materials = {}

        scene_index = gltf.scene if gltf.scene is not None else 0
        root = SceneNode(uid=f"scene:{scene_index}", type=NodeType.GROUP)
        if scene_index < len(gltf.scenes):
            scene_def = gltf.scenes[scene_index]
            if scene_def.name:
                root.name = self._unique_name(scene_def.name)
            root.user_data = self._extras(scene_def)
            roots = scene_def.nodes or []
        else:
            roots = []

        self._joints = {j for skin in gltf.skins for j in (skin.joints or [])}
        self._built = {}
        for index in roots:
            node = self._build_node(index, set())
            if node is not None:
                root.add(node)

        return SceneGraph(
            root=root,
            animations=self._build_animations(),
            extras=self._extras(gltf.asset) if gltf.asset else {},
            source_path=str(self.file_path),
        )

    def _build_node(self, index, ancestors):
        gltf = self.gltf
        if index in ancestors or index in self._built:
            self.log(f"WARNING: node {index} is referenced more than once, skipped")
            return None
        if index < 0 or index >= len(gltf.nodes):
            self.log(f"WARNING: node index {index} out of range, skipped")
            return None
        node_def = gltf.nodes[index]
        uid = f"node:{index}"
        # The node claims its name before the objects it holds
        name = self._unique_name(node_def.name) if node_def.name else None

        objects = []
        if node_def.mesh is not None:
            objects.extend(self._build_mesh(node_def, uid))
        if node_def.camera is not None:
            camera = self._build_camera(node_def.camera, uid)
            if camera is not None:
                objects.append(camera)
        light_index = (node_def.extensions or {}).get('KHR_lights_punctual', {}).get('light')
        if light_index is not None:
            light = self._build_light(light_index, uid)
            if light is not None:
                objects.append(light)

        if index in self._joints or len(objects) > 1:
            node_type = NodeType.BONE if index in self._joints else NodeType.GROUP
            node = SceneNode(uid=uid, type=node_type)
            for k, obj in enumerate(objects):
                if obj.uid == uid:
                    obj.uid = f"{uid}/object:{k}"
        elif len(objects) == 1:
            node = objects[0]
            objects = []
        else:
            node = SceneNode(uid=uid, type=NodeType.OBJECT3D)
        for obj in objects:
            node.add(obj)

        if name is not None:
            node.name = name
        node.user_data.update(self._extras(node_def))
        self._apply_transform(node, node_def)
        self._built[index] = node

        for child_index in node_def.children or []:
            child = self._build_node(child_index, ancestors | {index})
            if child is not None:
                node.add(child)
        return node

    def _apply_transform(self, node, node_def):
        if node_def.matrix:
            node.position, node.rotation, node.scale = decompose_matrix(node_def.matrix)
            return
        if node_def.translation:
            node.position = tuple(float(v) for v in node_def.translation)
        if node_def.rotation:
            node.rotation = matrix_to_euler(quaternion_to_matrix(node_def.rotation))
        if node_def.scale:
            node.scale = tuple(float(v) for v in node_def.scale)

    def _build_mesh(self, node_def, uid):
        gltf = self.gltf
        mesh_index = node_def.mesh
        if mesh_index >= len(gltf.meshes):
            self.log(f"WARNING: mesh index {mesh_index} out of range, ignored")
            return []
        mesh_def = gltf.meshes[mesh_index]
        primitives = mesh_def.primitives or []

        instancing = (node_def.extensions or {}).get('EXT_mesh_gpu_instancing')
        meshes = []
        for j, primitive in enumerate(primitives):
            if instancing:
                mesh_type = NodeType.INSTANCED_MESH
            elif node_def.skin is not None:
                mesh_type = NodeType.SKINNED_MESH
            else:
                mesh_type = NodeType.MESH
            mesh = SceneNode(
                uid=uid if len(primitives) == 1 else f"{uid}/primitive:{j}",
                type=mesh_type,
                # One unique name per primitive: "Wheels", "Wheels_1", ...
                name=self._unique_name(mesh_def.name or f"mesh_{mesh_index}"),
                geometry=Geometry(uid=self._primitive_key(primitive)),
                material=self._material(primitive.material),
                skeleton=mesh_type == NodeType.SKINNED_MESH,
                morph_targets=bool(primitive.targets),
            )
            if instancing:
                attributes = instancing.get('attributes', {})
                accessor_index = next((attributes[k] for k in ('TRANSLATION', 'ROTATION', 'SCALE')
                                       if k in attributes), None)
                mesh.instance_count = self._accessor_count(accessor_index)
                mesh.instance_color = '_COLOR_0' in attributes
            meshes.append(mesh)

        if len(meshes) > 1:
            group = SceneNode(uid=f"{uid}/mesh", type=NodeType.GROUP)
            for mesh in meshes:
                group.add(mesh)
            return [group]
        return meshes

    def _primitive_key(self, primitive):
        # Same primitive definition -> same cached geometry in the loader
        def plain(attributes):
            values = attributes if isinstance(attributes, dict) else vars(attributes)
            return {k: v for k, v in values.items() if v is not None}

        key = {
            'attributes': plain(primitive.attributes),
            'indices': primitive.indices,
            'mode': primitive.mode,
            'targets': [plain(t) for t in (primitive.targets or [])],
        }
        return json.dumps(key, sort_keys=True, default=str)

    def _material(self, material_index):
        gltf = self.gltf
        if material_index is None:
            return DEFAULT_MATERIAL
        if material_index >= len(gltf.materials):
            self.log(f"WARNING: material index {material_index} out of range, default material used")
            return DEFAULT_MATERIAL
        if material_index not in self._materials:
            material_def = gltf.materials[material_index]
            extensions = set((material_def.extensions or {}).keys())
            if 'KHR_materials_unlit' in extensions:
                material_type = "MeshBasicMaterial"
            elif extensions & PHYSICAL_EXTENSIONS:
                material_type = "MeshPhysicalMaterial"
            else:
                material_type = "MeshStandardMaterial"
            self._materials[material_index] = Material(
                uid=f"material:{material_index}",
                name=material_def.name or "",
                type=material_type,
            )
        return self._materials[material_index]

    def _build_camera(self, camera_index, uid):
        gltf = self.gltf
        if camera_index >= len(gltf.cameras):
            self.log(f"WARNING: camera index {camera_index} out of range, ignored")
            return None
        camera_def = gltf.cameras[camera_index]
        name = self._unique_name(camera_def.name) if camera_def.name else ""

        if camera_def.type == 'orthographic' and camera_def.orthographic is not None:
            params = camera_def.orthographic
            return SceneNode(uid=uid, type=NodeType.ORTHOGRAPHIC_CAMERA, name=name,
                             near=params.znear, far=params.zfar)

        params = camera_def.perspective
        if params is None:
            self.log(f"WARNING: camera {camera_index} has no projection, ignored")
            return None
        return SceneNode(uid=uid, type=NodeType.PERSPECTIVE_CAMERA, name=name,
                         fov=math.degrees(params.yfov),
                         near=params.znear or 1.0,
                         far=params.zfar or 2e6)

    def _build_light(self, light_index, uid):
        lights = (self.gltf.extensions or {}).get('KHR_lights_punctual', {}).get('lights', [])
        if light_index >= len(lights):
            self.log(f"WARNING: light index {light_index} out of range, ignored")
            return None
        light_def = lights[light_index]
        light_type = light_def.get('type')
        types = {
            'directional': NodeType.DIRECTIONAL_LIGHT,
            'point': NodeType.POINT_LIGHT,
            'spot': NodeType.SPOT_LIGHT,
        }
        if light_type not in types:
            self.log(f"WARNING: unknown light type {light_type!r}, ignored")
            return None

        light = SceneNode(
            uid=uid,
            type=types[light_type],
            name=self._unique_name(light_def.get('name') or f"light_{light_index}"),
            color=linear_to_srgb_hex(light_def.get('color', [1.0, 1.0, 1.0])),
            intensity=float(light_def.get('intensity', 1.0)),
        )
        if light_type != 'directional':
            light.distance = float(light_def.get('range', 0.0))
            light.decay = 2.0
        if light_type == 'spot':
            spot = light_def.get('spot', {})
            outer = float(spot.get('outerConeAngle', math.pi / 4))
            inner = float(spot.get('innerConeAngle', 0.0))
            light.angle = outer
            light.penumbra = 1.0 - inner / outer if outer else 0.0
        return light

    def _build_animations(self):
        clips = []
        for index, animation in enumerate(self.gltf.animations):
            durations = []
            for sampler in animation.samplers or []:
                accessor = self._accessor(sampler.input)
                if accessor is not None and accessor.max:
                    durations.append(float(accessor.max[0]))

            tracks = []
            for channel in animation.channels or []:
                target = channel.target
                node = self._built.get(target.node) if target is not None else None
                if node is not None and node.name:
                    tracks.append(AnimationTrack(node_name=node.name, path=target.path or ""))

            clips.append(AnimationClip(
                name=animation.name or f"animation_{index}",
                duration=max(durations) if durations else -1.0,
                tracks=tracks,
            ))
        return clips

    def _accessor(self, index):
        if index is None or index >= len(self.gltf.accessors):
            return None
        return self.gltf.accessors[index]

    def _accessor_count(self, index):
        accessor = self._accessor(index)
        return int(accessor.count) if accessor is not None else 0

    def _extras(self, prop):
        extras = getattr(prop, 'extras', None)
        return dict(extras) if isinstance(extras, dict) else {}

    def _unique_name(self, name):
        sanitized = sanitize_node_name(name)
        if sanitized in self._names_used:
            self._names_used[sanitized] += 1
            return f"{sanitized}_{self._names_used[sanitized]}"
        self._names_used[sanitized] = 0
        return sanitized
