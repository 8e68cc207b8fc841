#!/usr/bin/env python3
"""
Markdown to DOCX CLI - Convert a Markdown file into a Word document

Supports the common Markdown set: headings, emphasis, strikethrough, inline
code, links, images (as placeholders), block quotes, nested ordered/bullet
lists, task lists, code blocks, tables and horizontal rules.

Usage:
    python convert_markdown.py notes.md
    python convert_markdown.py notes.md --output report.docx
    python convert_markdown.py notes.md --font-size 12

Examples:
    # Basic usage (will create notes.docx next to notes.md)
    python convert_markdown.py notes.md

    # Installed entry point
    md2docx README.md -o readme.docx
"""

import argparse
import sys
from pathlib import Path

from config.constants import MAX_FONT_SIZE_PT, MIN_FONT_SIZE_PT
from core.converter import convert_markdown
from core.errors import ConverterError


def get_default_output(input_path: str) -> str:
    """Generate default output filename."""
    input_file = Path(input_path)
    return str(input_file.with_name(f"{input_file.stem}.docx"))


def font_size_arg(value: str) -> float:
    size = float(value)
    if not MIN_FONT_SIZE_PT <= size <= MAX_FONT_SIZE_PT:
        raise argparse.ArgumentTypeError(
            f"font size must be between {MIN_FONT_SIZE_PT} and {MAX_FONT_SIZE_PT}"
        )
    return size


def convert_file(input_path: str, output_path: str = None, font_size: float = None) -> Path:
    """
    Convert one Markdown file and write the DOCX.

    Args:
        input_path: Path to the .md file
        output_path: Path for the DOCX (default: <input stem>.docx)
        font_size: Optional base body font size in points

    Returns:
        Path of the written DOCX
    """
    source = Path(input_path)
    if not source.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")

    markdown = source.read_text(encoding="utf-8")
    data = convert_markdown(markdown, font_size=font_size)

    output = Path(output_path or get_default_output(input_path))
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(data)
    return output


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Convert Markdown files to Word (DOCX) documents",
        epilog="""
Examples:
  %(prog)s notes.md
  %(prog)s notes.md --output report.docx
  %(prog)s notes.md --font-size 12
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        'input',
        help='Input Markdown file'
    )

    parser.add_argument(
        '-o', '--output',
        help='Output DOCX file (default: <input>.docx)'
    )

    parser.add_argument(
        '--font-size',
        type=font_size_arg,
        help=f'Base body font size in points ({MIN_FONT_SIZE_PT}-{MAX_FONT_SIZE_PT})'
    )

    args = parser.parse_args(argv)

    try:
        output = convert_file(args.input, args.output, args.font_size)
        print(f"✅ Saved: {output}")
        return 0

    except FileNotFoundError as e:
        print(f"\n❌ Error: {e}", file=sys.stderr)
        return 1
    except UnicodeDecodeError:
        print(f"\n❌ Error: {args.input} is not valid UTF-8", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"\n❌ Error: {e}", file=sys.stderr)
        return 1
    except ConverterError as e:
        print(f"\n❌ Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
