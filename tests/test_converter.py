import pytest
from pygltflib import GLTF2, Scene, Node, Mesh, Primitive, Attributes, Material, Accessor

import g2n
from core.options import CompilerOptions
from gltf_converter import GltfToNgtConverter, asset_url


@pytest.fixture
def chair_file(tmp_path):
    gltf = GLTF2()
    gltf.scene = 0
    gltf.scenes = [Scene(name="Scene", nodes=[0])]
    gltf.nodes = [Node(name="Wrapper", children=[1]), Node(name="Chair", mesh=0, translation=[0.0, 0.5, 0.0])]
    gltf.meshes = [Mesh(name="ChairMesh", primitives=[Primitive(attributes=Attributes(POSITION=0), material=0)])]
    gltf.materials = [Material(name="Wood")]
    gltf.accessors = [Accessor(componentType=5126, count=3, type="VEC3")]

    path = tmp_path / "public" / "models" / "chair.gltf"
    path.parent.mkdir(parents=True)
    gltf.save(str(path))
    return path


@pytest.mark.parametrize("input_file, root, expected", [
    ("public/models/robot.glb", None, "/models/robot.glb"),
    ("robot.glb", None, "/robot.glb"),
    ("./assets/robot.glb", None, "/assets/robot.glb"),
    ("public/models/robot.glb", "/static/", "/static/robot.glb"),
    ("robot.glb", "/static", "/static/robot.glb"),
])
def test_asset_url(input_file, root, expected):
    assert asset_url(input_file, root) == expected


def test_convert_writes_component(chair_file, tmp_path):
    messages = []
    converter = GltfToNgtConverter(CompilerOptions(name="Chair", root="/models"), messages.append)
    result = converter.convert(str(chair_file), str(tmp_path / "src" / "chair.ts"))

    assert result['success'], result['message']
    source = (tmp_path / "src" / "chair.ts").read_text(encoding='utf-8')
    assert "export class Chair {" in source
    assert "injectGLTF(() => '/models/chair.gltf')" in source
    assert ('<ngt-mesh [geometry]="gltf.nodes.Chair.geometry" [material]="gltf.materials.Wood" '
            '[position]="[0, 0.5, 0]" />') in source
    assert any("Step 2/2" in m for m in messages)


def test_convert_reports_failure(tmp_path):
    result = GltfToNgtConverter().convert(str(tmp_path / "missing.glb"), str(tmp_path / "out.ts"))
    assert not result['success']
    assert result['files'] == []


def test_render_matches_written_file(chair_file, tmp_path):
    converter = GltfToNgtConverter(CompilerOptions(root="/models"))
    converter.convert(str(chair_file), str(tmp_path / "Model.ts"))
    assert (tmp_path / "Model.ts").read_text(encoding='utf-8') == converter.render(str(chair_file))


class TestCommandLine:
    def test_writes_component_into_directory(self, chair_file, tmp_path):
        out = tmp_path / "out"
        assert g2n.main([str(chair_file), "-o", str(out), "--preload", "-r", "/models"]) == 0

        source = (out / "chair.ts").read_text(encoding='utf-8')
        assert "export class Chair {" in source
        assert "injectGLTF.preload(() => '/models/chair.gltf');" in source
        assert " * Command: g2n " in source

    def test_console_output(self, chair_file, capsys):
        assert g2n.main([str(chair_file), "--console", "--name", "Seat", "--selector", "app-seat"]) == 0
        out = capsys.readouterr().out
        assert "export class Seat {" in out
        assert "selector: 'app-seat'," in out

    def test_missing_input(self, tmp_path):
        assert g2n.main([str(tmp_path / "missing.glb")]) == 1

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "model.obj"
        path.write_text("o cube\n")
        assert g2n.main([str(path)]) == 1

    def test_invalid_component_name(self, chair_file):
        assert g2n.main([str(chair_file), "--name", "1up", "--console"]) == 1

    def test_draco_flag(self, chair_file):
        parser = g2n.build_parser()
        assert parser.parse_args([str(chair_file), "-d"]).draco is True
        assert parser.parse_args([str(chair_file), "-d", "/draco/"]).draco == "/draco/"
        assert parser.parse_args([str(chair_file)]).draco is None

    def test_default_name_from_file_stem(self, chair_file):
        argv = [str(chair_file)]
        options = g2n.options_from_args(g2n.build_parser().parse_args(argv), argv)
        assert options.name == "Chair"
        assert options.precision == 3
