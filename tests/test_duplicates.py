from core.duplicates import collect_duplicates, readable_name, unique_name
from core.scene_data import Material, NodeType

from conftest import mesh, group, node, WOOD

METAL = Material(uid="material:1", name="Metal")


def test_readable_name():
    assert readable_name("chair_01") == "Chair"
    assert readable_name("") == "Part"
    assert readable_name("123") == "Part"
    assert readable_name("leftArm") == "LeftArm"


def test_unique_name_appends_counter():
    assert unique_name("Part", set()) == "Part"
    assert unique_name("Part", {"Part", "Part1"}) == "Part2"


def test_shared_geometry_is_registered_once():
    nodes = [
        mesh("chair_01", geometry="g1"),
        mesh("chair_02", geometry="g1"),
        mesh("table", geometry="g2", material=METAL),
    ]
    registry = collect_duplicates(nodes)

    assert list(registry.geometries) == ["g1Wood"]
    entry = registry.geometries["g1Wood"]
    assert entry.count == 2
    assert entry.name == "Chair"
    assert entry.node == "nodes.chair_01"


def test_single_use_resources_are_dropped():
    registry = collect_duplicates([mesh("a", geometry="g1"), mesh("b", geometry="g2", material=METAL)])
    assert registry.geometries == {}
    assert registry.materials == {}


def test_material_counts():
    registry = collect_duplicates([
        mesh("a", geometry="g1"),
        mesh("b", geometry="g2"),
        mesh("c", geometry="g3"),
        mesh("d", geometry="g4", material=METAL),
    ])
    assert registry.materials == {"Wood": 3}


def test_same_geometry_with_other_material_is_a_different_entry():
    registry = collect_duplicates([
        mesh("a", geometry="g1"),
        mesh("b", geometry="g1", material=METAL),
    ])
    assert registry.geometries == {}


def test_entry_names_are_unique():
    registry = collect_duplicates([
        mesh("Chair", geometry="g1"),
        mesh("Chair_b", geometry="g1"),
        mesh("chair2", geometry="g2"),
        mesh("x", geometry="g2"),
    ])
    assert sorted(e.name for e in registry.geometries.values()) == ["Chair", "Chair1"]


def test_ignores_non_mesh_nodes():
    registry = collect_duplicates([
        group("g"),
        node("light", NodeType.POINT_LIGHT),
        mesh("a", geometry="g1"),
    ])
    assert registry.geometries == {}
    assert WOOD.name not in registry.materials
