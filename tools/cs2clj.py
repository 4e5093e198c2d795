#!/usr/bin/env python3
"""C# → Clojure translator.

Converts .cs files into .clj Clojure equivalents.

Usage:
    python tools/cs2clj.py FILE.cs                     # single file → stdout
    python tools/cs2clj.py FILE.cs -o FILE.clj         # single file → file
    python tools/cs2clj.py --dir src/input/ -o src/output/
    python tools/cs2clj.py FILE.cs --indent-char tab --indent-width 1
"""

from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path

from cs_clojure import DEFAULT_INDENT_WIDTH, TranslationError, Translator

INDENT_CHARS = {'space': ' ', 'tab': '\t'}


# ---------------------------------------------------------------------------
# File conversion
# ---------------------------------------------------------------------------

def convert_file(input_path: str, translator: Translator = None) -> str:
    """Read a .cs file and return its Clojure equivalent."""
    translator = translator or Translator()
    return translator.load(input_path)


def write_output(output_path: Path, text: str):
    """Write translated text, creating the destination directory first."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(text)


def convert_directory(input_dir: str, output_dir: str, recursive: bool = True,
                      translator: Translator = None) -> list:
    """Convert all .cs files in a directory. Returns (path, error) pairs."""
    translator = translator or Translator()
    input_path = Path(input_dir)
    output_path = Path(output_dir)
    count = 0
    errors = []

    pattern = '**/*.cs' if recursive else '*.cs'

    for src_file in sorted(input_path.glob(pattern)):
        rel = src_file.relative_to(input_path)
        dst_file = output_path / rel.with_suffix('.clj')

        try:
            result = convert_file(str(src_file), translator)
        except TranslationError as e:
            errors.append((str(rel), str(e)))
            print(f"  ERROR {rel}: {e}", file=sys.stderr)
            continue

        write_output(dst_file, result)
        count += 1
        print(f"  {rel} → {rel.with_suffix('.clj')}", file=sys.stderr)

    print(f"\nConverted {count} files, {len(errors)} errors.", file=sys.stderr)
    if errors:
        print("Errors:", file=sys.stderr)
        for path, err in errors:
            print(f"  {path}: {err}", file=sys.stderr)
    return errors


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert C# (.cs) sources to Clojure (.clj)"
    )
    parser.add_argument('input', nargs='?', help='Input file path')
    parser.add_argument('-o', '--output', help='Output file or directory')
    parser.add_argument('--dir', help='Convert entire directory')
    parser.add_argument('--no-recursive', action='store_true',
                        help='Do not recurse into subdirectories')
    parser.add_argument('--indent-char', choices=sorted(INDENT_CHARS),
                        default='space',
                        help='Indentation character (default: space)')
    parser.add_argument('--indent-width', type=int, default=DEFAULT_INDENT_WIDTH,
                        help=f'Indentation characters per nesting level (default: {DEFAULT_INDENT_WIDTH})')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log each pipeline stage')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    try:
        translator = Translator(INDENT_CHARS[args.indent_char], args.indent_width)
    except ValueError as e:
        parser.error(str(e))

    if args.dir:
        if not args.output:
            print("Error: --dir requires -o OUTPUT_DIR", file=sys.stderr)
            sys.exit(1)
        errors = convert_directory(args.dir, args.output,
                                   recursive=not args.no_recursive, translator=translator)
        if errors:
            sys.exit(1)
    elif args.input:
        try:
            result = convert_file(args.input, translator)
        except FileNotFoundError:
            print(f"Error: File '{args.input}' not found", file=sys.stderr)
            sys.exit(1)
        except TranslationError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        if args.output:
            write_output(Path(args.output), result)
            print(f"Written to {args.output}", file=sys.stderr)
        else:
            print(result, end='')
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == '__main__':
    main()
