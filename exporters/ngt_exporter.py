#!/usr/bin/env python3
"""
Angular Three Exporter Module
Compiles a SceneGraph into a standalone Angular Three component (TypeScript)

Pipeline, per render() call:
    1. Duplicate scan (shared geometries / materials)
    2. Structural pruning to a fixpoint
    3. Type inference over the surviving objects
    4. Emission of header, imports, types and the component
"""

from pathlib import Path
from typing import List, Optional

from core.scene_data import SceneGraph, SceneNode, NodeType, OutputDocument, TypeDescriptor
from core.options import CompilerOptions, DEFAULT_HEADER
from core.duplicates import collect_duplicates
from core.attributes import AttributeProjector, element_name, render_attributes
from core.pruner import prune_tree
from core.type_inference import infer_types
from core.numeric import round_scalar, format_number
from core.naming import nodes_accessor, property_key, quote
from core.errors import PipelineInvariantError

from .base_exporter import BaseExporter

INDENT = "  "

OBJECT_EVENTS = [
    'click', 'dblclick', 'contextmenu', 'pointerup', 'pointerdown', 'pointerover',
    'pointerout', 'pointerenter', 'pointerleave', 'pointermove', 'pointermissed',
    'pointercancel', 'wheel',
]


def escape_template(text):
    """Escape text for embedding in a TypeScript template literal"""
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


class AngularThreeExporter(BaseExporter):
    """Angular Three component exporter

    Exports:
    - Single .ts file with the component, its GLTFResult type and imports
    """

    def __init__(self, options: Optional[CompilerOptions] = None, progress_callback=None):
        """Initialize exporter

        Args:
            options: CompilerOptions, defaults used when None
            progress_callback: Optional function to call for progress updates
        """
        super().__init__(progress_callback)
        self.options = options or CompilerOptions()

    def get_format_name(self):
        return "Angular Three component"

    def get_file_extension(self):
        return "ts"

    def export(self, scene_graph, output_path, name, url=None):
        """Compile the scene and write the component file

        Args:
            scene_graph: SceneGraph to compile
            output_path: Output directory or .ts file path
            name: Base file name when output_path is a directory
            url: Asset URL used by the component (defaults to the source file name)

        Returns:
            dict: Export results with keys:
                - 'success': bool
                - 'ts_file': Path to the created file
                - 'files': List of created files
                - 'message': Status message
        """
        try:
            target = self.resolve_output_file(output_path, name)
            source = self.render(scene_graph, url)

            with open(target, 'w', encoding='utf-8') as f:
                f.write(source)

            self.log(f"✓ Component written to: {target}")
            return {
                'success': True,
                'ts_file': str(target),
                'files': [str(target)],
                'message': f"Exported component {self.options.name} ({len(source.splitlines())} lines)",
            }

        except PipelineInvariantError:
            raise
        except (OSError, ValueError) as e:
            self.log(f"ERROR: {str(e)}")
            return {
                'success': False,
                'message': f"Export failed: {str(e)}",
                'files': [],
            }

    def render(self, scene_graph: SceneGraph, url=None) -> str:
        """Compile the scene into component source text"""
        return self.compile(scene_graph, url).render()

    def compile(self, scene_graph: SceneGraph, url=None) -> OutputDocument:
        """Run the full pipeline and return the document sections

        Args:
            scene_graph: SceneGraph to compile
            url: Asset URL used by injectGLTF

        Returns:
            OutputDocument: Header, imports, preload, types and component sections

        Raises:
            PipelineInvariantError: On cycles or pruning failures
        """
        options = self.options.validate()
        if url is None:
            url = "/" + Path(scene_graph.source_path or "model.glb").name

        nodes = scene_graph.all_nodes()
        registry = collect_duplicates(nodes)
        projector = AttributeProjector(options, registry, scene_graph.has_animations)

        if options.debug:
            for line in self._describe_tree(scene_graph.root, 0):
                self.log(line)
            for entry in registry.geometries.values():
                self.log(f"shared geometry {entry.name}: {entry.count} uses ({entry.node})")
            for material, count in registry.materials.items():
                self.log(f"shared material {material or '<unnamed>'}: {count} uses")

        pruned = prune_tree(scene_graph.root, projector, log=self.log)
        if options.debug:
            self.log(f"pruning: {len(pruned.removed)} groups removed in {pruned.passes} passes")

        descriptor = infer_types(pruned.nodes, scene_graph.animations, options)

        scene_lines = []
        for node in pruned.nodes:
            scene_lines.extend(self._print_node(node, projector, 4))

        return OutputDocument(
            header=self._generate_header(scene_graph.extras),
            imports=self._generate_imports(descriptor),
            preload=f"injectGLTF.preload(() => {quote(url)});" if options.preload else "",
            types=self._generate_types(descriptor),
            component=self._generate_component(descriptor, scene_lines, url),
        )

    def _print_node(self, node: SceneNode, projector: AttributeProjector, depth: int) -> List[str]:
        """Serialize a node and its children as template lines"""
        pad = INDENT * depth

        if NodeType.is_bone(node.type) and not self.options.bones:
            return [f'{pad}<ngt-primitive *args="[gltf.{nodes_accessor(node.name)}]" />']

        attrs = projector.project(node)
        name_attr = projector.name_attribute(node)
        if name_attr is not None:
            attrs.insert(0, name_attr)

        tag = element_name(node)
        opening = f"<{tag} {render_attributes(attrs)}" if attrs else f"<{tag}"

        children = []
        for child in node.children:
            children.extend(self._print_node(child, projector, depth + 1))

        if not children:
            return [f"{pad}{opening} />"]
        return [f"{pad}{opening}>"] + children + [f"{pad}</{tag}>"]

    def _generate_header(self, extras):
        """Generate the provenance comment"""
        header = self.options.header or DEFAULT_HEADER
        body = header.splitlines()
        for key, value in (extras or {}).items():
            key = str(key)
            body.append(f"{key[:1].upper() + key[1:]}: {value}")

        lines = ["/**"]
        for line in body:
            # A stray "*/" would close the comment early
            lines.append(f" * {line.replace('*/', '* /')}".rstrip())
        lines.append(" */")
        return "\n".join(lines)

    def _generate_imports(self, descriptor: TypeDescriptor):
        """Generate import statements for referenced symbols only"""
        lines = []
        if descriptor.nodes or descriptor.materials:
            lines.append("import type * as THREE from 'three';")

        three_types = ["Group"] + [t for t in descriptor.types if t != NodeType.GROUP]
        lines.append(f"import {{ {', '.join(three_types)} }} from 'three';")

        ngt = ["extend", "NgtGroup", "NgtObjectEvents"]
        if descriptor.has_args:
            ngt.append("NgtArgs")
        lines.append(f"import {{ {', '.join(ngt)} }} from 'angular-three';")

        core = ["Component", "ChangeDetectionStrategy", "CUSTOM_ELEMENTS_SCHEMA", "Signal", "input",
                "viewChild", "ElementRef", "inject", "effect"]
        if descriptor.has_animations:
            core.extend(["computed", "model"])
        lines.append(f"import {{ {', '.join(core)} }} from '@angular/core';")

        lines.append("import { injectGLTF } from 'angular-three-soba/loaders';")
        lines.append("import type { GLTF } from 'three-stdlib';")
        if descriptor.has_animations:
            lines.append("import { injectAnimations } from 'angular-three-soba/misc';")

        cameras = [name for name in self._component_imports(descriptor) if name.startswith("Ngts")]
        if cameras:
            lines.append(f"import {{ {', '.join(cameras)} }} from 'angular-three-soba/cameras';")
        return "\n".join(lines)

    def _component_imports(self, descriptor: TypeDescriptor):
        imports = []
        if descriptor.has_args:
            imports.append("NgtArgs")
        if descriptor.perspective_camera:
            imports.append("NgtsPerspectiveCamera")
        if descriptor.orthographic_camera:
            imports.append("NgtsOrthographicCamera")
        return imports

    def _generate_types(self, descriptor: TypeDescriptor):
        """Generate ActionName and GLTFResult type declarations"""
        lines = []
        if descriptor.actions:
            union = " | ".join(quote(name) for name in descriptor.actions)
            lines.append(f"export type ActionName = {union};")
            lines.append("")

        lines.append("type GLTFResult = GLTF & {")
        lines.append("  nodes: {")
        for name, type_name in descriptor.nodes.items():
            lines.append(f"    {property_key(name)}: THREE.{type_name};")
        lines.append("  };")
        lines.append("  materials: {")
        for name, type_name in descriptor.materials.items():
            lines.append(f"    {property_key(name)}: THREE.{type_name};")
        lines.append("  };")
        lines.append("};")
        return "\n".join(lines)

    def _generate_component(self, descriptor: TypeDescriptor, scene_lines: List[str], url: str):
        """Generate the component declaration wrapping the element tree"""
        options = self.options
        lines = []
        lines.append("@Component({")
        lines.append(f"  selector: {quote(options.selector)},")
        lines.append("  standalone: true,")
        lines.append("  template: `")
        lines.append("    @if (gltf(); as gltf) {")
        lines.append('      <ngt-group #model [parameters]="options()">')
        lines.extend(escape_template(line) for line in scene_lines)
        lines.append("        <ng-content />")
        lines.append("      </ngt-group>")
        lines.append("    }")
        lines.append("  `,")

        component_imports = self._component_imports(descriptor)
        if component_imports:
            lines.append(f"  imports: [{', '.join(component_imports)}],")

        lines.append("  hostDirectives: [")
        lines.append("    {")
        lines.append("      directive: NgtObjectEvents,")
        lines.append("      inputs: ['ngtObjectEvents'],")
        lines.append(f"      outputs: [{', '.join(quote(e) for e in OBJECT_EVENTS)}],")
        lines.append("    },")
        lines.append("  ],")
        lines.append("  schemas: [CUSTOM_ELEMENTS_SCHEMA],")
        lines.append("  changeDetection: ChangeDetectionStrategy.OnPush,")
        lines.append("})")

        lines.append(f"export class {options.name} {{")
        lines.append("  protected readonly Math = Math;")
        lines.append("")
        lines.append("  options = input({} as Partial<NgtGroup>);")
        if descriptor.has_animations:
            lines.append("  animations = model<any>();")
        lines.append("  modelRef = viewChild<ElementRef<Group>>('model');")
        lines.append("")

        loader_options = self._loader_options()
        loader_args = quote(url) + (f", {loader_options}" if loader_options else "")
        lines.append(f"  protected gltf = injectGLTF(() => {loader_args}) as unknown as Signal<GLTFResult | null>;")

        if descriptor.has_animations:
            lines.append("  private scene = computed(() => {")
            lines.append("    const gltf = this.gltf();")
            lines.append("    if (!gltf) return null;")
            lines.append("    return gltf.scene;")
            lines.append("  });")
        lines.append("  private objectEvents = inject(NgtObjectEvents, { host: true });")
        lines.append("")

        three_types = ["Group"] + [t for t in descriptor.types if t != NodeType.GROUP]
        lines.append("  constructor() {")
        lines.append(f"    extend({{ {', '.join(three_types)} }});")
        lines.append("")
        if descriptor.has_animations:
            lines.append("    const animations = injectAnimations(this.gltf, this.scene);")
            lines.append("    effect(() => {")
            lines.append("      if (animations.ready()) {")
            lines.append("        this.animations.set(animations);")
            lines.append("      }")
            lines.append("    });")
            lines.append("")
        lines.append("    effect(() => {")
        lines.append("      const modelRef = this.modelRef()?.nativeElement;")
        lines.append("      if (!modelRef) return;")
        lines.append("      this.objectEvents.ngtObjectEvents.set(modelRef);")
        lines.append("    });")
        lines.append("  }")
        lines.append("}")
        return "\n".join(lines)

    def _loader_options(self):
        draco = self.options.draco
        if draco is None or draco is False:
            return ""
        if draco is True:
            return "{ useDraco: true }"
        return f"{{ useDraco: {quote(str(draco))} }}"

    def _describe_tree(self, node: SceneNode, depth: int) -> List[str]:
        """Debug dump of the scene before pruning"""
        p = self.options.precision
        fmt = lambda vector: "[" + ", ".join(format_number(round_scalar(v, p)) for v in vector) + "]"
        material = f"{node.material.name}-{node.material.uid[:8]}" if node.material else ""
        lines = [f"{INDENT * depth}{node.type} {node.name} pos: {fmt(node.position)} "
                 f"scale: {fmt(node.scale)} rot: {fmt(node.rotation)} mat: {material}"]
        for child in node.children:
            lines.extend(self._describe_tree(child, depth + 1))
        return lines
