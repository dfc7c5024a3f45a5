#!/usr/bin/env python3
"""
Dump the contents of GVAS '.sav' files.

Usage:
    gvas-dump slot1.sav                  # Property summary
    gvas-dump slot1.sav --json           # Write output/slot1.json
    gvas-dump *.sav --json out/ --quiet  # Write JSON only
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from . import config
from .errors import GvasError
from .parser import parse_gvas_file
from .types import gvas_to_string


def format_value(value, limit: int = 60) -> str:
    """Short single-line rendering of a property value."""
    if isinstance(value, list):
        return f"[{len(value)} entries]"
    if value is None or isinstance(value, str):
        text = gvas_to_string(value).replace("\n", " ")
        # Lone UTF-16 surrogates cannot be printed to a strict stream
        text = text.encode("utf-8", "backslashreplace").decode("utf-8")
    else:
        text = str(value)
    if len(text) > limit:
        text = text[: limit - 3] + "..."
    return text


def print_summary(path, gvas):
    header = gvas.header
    ev = header.engine_version
    print("\n" + "=" * 60)
    print(f"{path}")
    print("=" * 60)
    print(f"   GVAS version: {header.gvas_version} (structure {header.structure_version})")
    print(f"   Engine: {ev.major}.{ev.minor}.{ev.patch}-{ev.build} {gvas_to_string(ev.build_id)}")
    print(f"   Save type: {gvas_to_string(header.save_type)}")
    print(f"   Custom data: {len(header.custom_data)} entries")
    print(f"   Properties: {len(gvas)}")
    print()
    for prop in gvas:
        print(f"   {prop.name:<32} {str(prop.type):<40} {format_value(prop.value)}")
    for message in gvas.diagnostics:
        print(f"   ⚠ {message}")


def json_path(source: Path, target: str) -> Path:
    """Resolve where the JSON for ``source`` goes."""
    target = Path(target)
    if target.suffix.lower() == ".json":
        return target
    return target / f"{source.stem}.json"


def write_json(source: Path, gvas, target: str) -> Path:
    """Write the JSON rendering of ``gvas``, replacing ``out`` only on success."""
    out = json_path(source, target)
    os.makedirs(out.parent, exist_ok=True)
    tmp = out.with_name(out.name + ".tmp")
    try:
        # ensure_ascii escapes lone UTF-16 surrogates kept by the string reader
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(gvas.to_dict(), f, indent=config.JSON_INDENT, allow_nan=False)
        os.replace(tmp, out)
    except BaseException:
        if tmp.exists():
            tmp.unlink()
        raise
    return out


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Dump GVAS save files")
    parser.add_argument("files", nargs="+", help="GVAS .sav files")
    parser.add_argument(
        "--json", nargs="?", const=config.OUTPUT_DIR, default=None,
        help="Write JSON to this file or directory (default: %(const)s)",
    )
    parser.add_argument("--quiet", action="store_true", help="Suppress the property summary")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format="%(levelname)s %(name)s: %(message)s",
    )

    failed = 0
    for name in args.files:
        path = Path(name)
        try:
            gvas = parse_gvas_file(path)
        except (GvasError, OSError) as e:
            print(f"❌ {path}: {e}", file=sys.stderr)
            failed += 1
            continue

        try:
            if not args.quiet:
                print_summary(path, gvas)
            if args.json:
                out = write_json(path, gvas, args.json)
                print(f"   ✓ Wrote {out}")
        except (ValueError, OSError) as e:
            # UnicodeEncodeError from a strict stdout is a ValueError
            print(f"❌ {path}: {e!r}", file=sys.stderr)
            failed += 1

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
