#!/usr/bin/env python3
"""
glTF to Angular Three - Command Line Version
Turns a .gltf/.glb asset into a declarative Angular Three component
"""

import argparse
import sys
from pathlib import Path

from gltf_converter import GltfToNgtConverter
from core.options import CompilerOptions, DEFAULT_HEADER
from core.naming import pascal_case

# Supported file extensions
VALID_EXTENSIONS = {'.gltf', '.glb'}


def build_parser():
    parser = argparse.ArgumentParser(
        prog='g2n',
        description='Convert glTF (.gltf/.glb) assets into Angular Three components',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Write Model.ts next to the current directory
  python g2n.py public/Model.glb

  # Custom output, component name and selector
  python g2n.py robot.glb -o src/app/robot.ts --name Robot --selector app-robot

  # Keep every group and name, print to the console
  python g2n.py robot.glb -K -k --console
        """
    )

    parser.add_argument('input', type=str, help='Input asset (.gltf, .glb)')
    parser.add_argument('-o', '--output', type=str,
                        help='Output file name/path (default: <input stem>.ts)')
    parser.add_argument('--selector', type=str, default='app-model',
                        help='Selector for the component (default: app-model)')
    parser.add_argument('-n', '--name', type=str,
                        help='Name of the component class (default: derived from input filename)')
    parser.add_argument('-k', '--keepnames', action='store_true', help='Keep original names')
    parser.add_argument('-K', '--keepgroups', action='store_true',
                        help='Keep (empty) groups, disable pruning')
    parser.add_argument('-b', '--bones', action='store_true',
                        help='Lay out bones declaratively (default: false)')
    parser.add_argument('-m', '--meta', action='store_true', help='Include metadata (as userData)')
    parser.add_argument('-s', '--shadows', action='store_true',
                        help='Let meshes cast and receive shadows')
    parser.add_argument('-p', '--precision', type=int, default=3,
                        help='Number of fractional digits (default: 3)')
    parser.add_argument('-d', '--draco', type=str, nargs='?', const=True,
                        help='Draco decoder path (flag alone: default decoder)')
    parser.add_argument('-P', '--preload', action='store_true', help='Add preload statement')
    parser.add_argument('-r', '--root', type=str,
                        help='Sets directory from which the asset is served')
    parser.add_argument('-c', '--console', action='store_true',
                        help="Print component to console, won't produce a file")
    parser.add_argument('-D', '--debug', action='store_true', help='Debug output')
    return parser


def options_from_args(args, argv):
    """Build CompilerOptions from parsed arguments"""
    input_path = Path(args.input)
    header = f"{DEFAULT_HEADER}\nCommand: g2n {' '.join(argv)}"
    return CompilerOptions(
        precision=args.precision,
        keep_names=args.keepnames,
        keep_groups=args.keepgroups,
        bones=args.bones,
        shadows=args.shadows,
        meta=args.meta,
        selector=args.selector,
        name=args.name or pascal_case(input_path.stem),
        debug=args.debug,
        preload=args.preload,
        draco=args.draco,
        header=header,
        root=args.root,
    )


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    args = build_parser().parse_args(argv)

    # Validate input file exists
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    # Validate file extension
    file_ext = input_path.suffix.lower()
    if file_ext not in VALID_EXTENSIONS:
        print(f"Error: Unsupported file format: {file_ext}", file=sys.stderr)
        print(f"Supported formats: {', '.join(sorted(VALID_EXTENSIONS))}", file=sys.stderr)
        return 1

    try:
        options = options_from_args(args, argv).validate()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    output = args.output or f"{input_path.stem}.ts"
    if not output.endswith('.ts'):
        output = str(Path(output) / f"{input_path.stem}.ts")

    if args.console:
        converter = GltfToNgtConverter(options, progress_callback=None)
        try:
            print(converter.render(str(input_path)))
        except Exception as e:
            print(f"\n✗ Conversion failed: {e}", file=sys.stderr)
            return 1
        return 0

    converter = GltfToNgtConverter(options)
    result = converter.convert(str(input_path), output)

    if not result.get('success'):
        print("\n✗ Conversion failed", file=sys.stderr)
        print(f"   {result.get('message', 'Check log above')}", file=sys.stderr)
        return 1

    print("\n" + "=" * 60)
    print("✓ Conversion completed successfully!")
    print(f"✓ Component: {result['ts_file']}")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
