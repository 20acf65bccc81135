import math

from core.attributes import AttributeProjector, element_name, render_attributes, js_literal
from core.duplicates import collect_duplicates
from core.options import CompilerOptions
from core.scene_data import SceneNode, NodeType, Material

from conftest import mesh, node, group, HALF_PI


def rendered(projector, n):
    return render_attributes(projector.project(n))


def test_default_node_projects_to_nothing(projector):
    assert projector.project(SceneNode(uid="n")) == []


def test_mesh_resources(projector):
    assert rendered(projector, mesh("Chair")) == \
        '[geometry]="gltf.nodes.Chair.geometry" [material]="gltf.materials.Wood"'


def test_unnamed_material_uses_node_accessor(projector):
    n = mesh("Chair", material=Material(uid="m"))
    assert '[material]="gltf.nodes.Chair.material"' in rendered(projector, n)


def test_non_identifier_names_use_bracket_access(projector):
    n = mesh("my chair")
    assert "gltf.nodes['my chair'].geometry" in rendered(projector, n)


def test_shared_geometry_uses_first_sighting():
    a = mesh("A", geometry="g")
    b = mesh("B", geometry="g")
    projector = AttributeProjector(CompilerOptions(), collect_duplicates([a, b]))
    assert '[geometry]="gltf.nodes.A.geometry"' in rendered(projector, b)


def test_uniform_scale_collapses(projector):
    assert rendered(projector, group("g", scale=(2.0, 2.0, 2.0))) == '[scale]="2"'
    assert rendered(projector, group("g", scale=(1.0, 2.0, 3.0))) == '[scale]="[1, 2, 3]"'


def test_rotation_is_symbolic(projector):
    assert rendered(projector, group("g", rotation=(HALF_PI, 0.0, 0.0))) == '[rotation]="[Math.PI / 2, 0, 0]"'


def test_tiny_transforms_are_omitted(projector):
    n = group("g", position=(0.0001, 0.0, 0.0), scale=(1.0002, 1.0, 1.0))
    assert projector.project(n) == []


def test_transform_order(projector):
    n = group("g", position=(1.0, 0.0, 0.0), rotation=(0.5, 0.0, 0.0), scale=(3.0, 3.0, 3.0))
    assert [a.kind for a in projector.project(n)] == ["position", "rotation", "scale"]


def test_perspective_camera(projector):
    n = node("Cam", NodeType.PERSPECTIVE_CAMERA, fov=75.0)
    assert rendered(projector, n) == '[makeDefault]="false" [fov]="75"'


def test_orthographic_camera_skips_fov(projector):
    n = node("Cam", NodeType.ORTHOGRAPHIC_CAMERA, fov=75.0, zoom=2.0)
    assert rendered(projector, n) == '[makeDefault]="false" [zoom]="2"'


def test_spot_light(projector):
    n = node("Spot", NodeType.SPOT_LIGHT, intensity=2.0, angle=math.pi / 4, penumbra=0.5,
             decay=2.0, distance=10.0, color="FF0000")
    assert rendered(projector, n) == (
        '[intensity]="2" [angle]="Math.PI / 4" [penumbra]="0.5" [decay]="2" '
        '[distance]="10" color="#ff0000"'
    )


def test_light_defaults_are_omitted(projector):
    n = node("Spot", NodeType.SPOT_LIGHT, angle=math.pi / 3, decay=1.0, color="ffffff")
    assert projector.project(n) == []


def test_shadow_flags_are_not_duplicated():
    projector = AttributeProjector(CompilerOptions(shadows=True))
    kinds = [a.kind for a in projector.project(mesh("Chair", cast_shadow=True, receive_shadow=True))]
    assert kinds.count("castShadow") == 1
    assert kinds.count("receiveShadow") == 1
    assert kinds[:2] == ["castShadow", "receiveShadow"]


def test_shadows_option_only_affects_meshes():
    projector = AttributeProjector(CompilerOptions(shadows=True))
    assert projector.project(group("g")) == []


def test_instanced_mesh(projector):
    n = node("Trees", NodeType.INSTANCED_MESH, instance_count=12, instance_color=True)
    assert rendered(projector, n) == (
        '*args="[gltf.nodes.Trees.geometry, gltf.nodes.Trees.material, 12]" '
        '[instanceMatrix]="gltf.nodes.Trees.instanceMatrix" '
        '[instanceColor]="gltf.nodes.Trees.instanceColor"'
    )


def test_skinned_mesh_with_morph_targets(projector):
    n = mesh("Body", type=NodeType.SKINNED_MESH, skeleton=True, morph_targets=True)
    kinds = [a.kind for a in projector.project(n)]
    assert kinds == ["geometry", "material", "skeleton", "morphTargetDictionary", "morphTargetInfluences"]


def test_user_data_only_with_meta(projector):
    n = group("g", user_data={"id": 7, "label": "it's"})
    assert projector.project(n) == []

    meta = AttributeProjector(CompilerOptions(meta=True))
    assert rendered(meta, n) == "[userData]=\"{id: 7, label: 'it\\'s'}\""


def test_js_literal_escapes_double_quotes():
    assert js_literal({"title": 'say "hi"', "tags": ["a", True, None]}) == \
        "{title: 'say &quot;hi&quot;', tags: ['a', true, null]}"


def test_name_attribute():
    n = mesh("Robot")
    assert AttributeProjector(CompilerOptions()).name_attribute(n) is None
    assert AttributeProjector(CompilerOptions(keep_names=True)).name_attribute(n).render() == 'name="Robot"'
    assert AttributeProjector(CompilerOptions(), has_animations=True).name_attribute(n).render() == \
        'name="Robot"'


def test_element_names():
    assert element_name(node("a", NodeType.SKINNED_MESH)) == "ngt-skinned-mesh"
    assert element_name(node("a", NodeType.OBJECT3D)) == "ngt-group"
    assert element_name(node("a", NodeType.POINT_LIGHT)) == "ngt-point-light"
    assert element_name(node("a", NodeType.PERSPECTIVE_CAMERA)) == "ngts-perspective-camera"
    assert element_name(node("a", "LineSegments")) == "ngt-line-segments"
