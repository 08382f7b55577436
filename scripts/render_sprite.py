#!/usr/bin/env python3
"""Render a sprite to a raw RGBA buffer.

CLI tool that renders either a sprite document (sprite.v1 YAML) through the
layered canvas, or a plain rounded box through the symmetric fast path, and
writes the raw buffer plus a metadata sidecar.

Usage:
    # From a sprite document
    python scripts/render_sprite.py --sprite spriteforge/configs/examples/icon.yaml

    # Symmetric box, explicit output path
    python scripts/render_sprite.py --box 64 32 --radius 6 --border 2 --out outputs/box.rgba

    # Parity check of the legacy mirror walk
    python scripts/render_sprite.py --box 32 32 --algorithm incremental

Outputs:
    - <out>: width * height * 4 bytes, row-major RGBA
    - <out>.yaml: name, width, height, byte length, sha256 (unless disabled
      in render.yaml)

Exit codes:
    0 success, 1 render or input error, 2 configuration error
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from spriteforge.configs.loader import ConfigError, load_config
from spriteforge.raster.symmetry import MIRROR_ALGORITHMS, BoxSettings, render_box_mirrored
from spriteforge.utils import fs, hashing, logging_config, validators

logger = logging.getLogger("render_sprite")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a sprite to a raw RGBA buffer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    # Input sources (mutually exclusive)
    input_group = parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument(
        '--sprite',
        type=str,
        help='Path to a sprite.v1 YAML document'
    )
    input_group.add_argument(
        '--box',
        type=int,
        nargs=2,
        metavar=('WIDTH', 'HEIGHT'),
        help='Render a rounded box of WIDTH x HEIGHT via the symmetric path'
    )

    # Box options
    parser.add_argument('--radius', type=int, default=3, help='Box corner radius (default: 3)')
    parser.add_argument('--border', type=int, default=1, help='Box border thickness (default: 1)')
    parser.add_argument(
        '--algorithm',
        choices=MIRROR_ALGORITHMS,
        default=None,
        help='Mirror algorithm (default: from render.yaml)'
    )

    # Output / config
    parser.add_argument(
        '--out',
        type=str,
        default=None,
        help='Output buffer path (default: <output.directory>/<name>.rgba)'
    )
    parser.add_argument('--config', type=str, default=None, help='Path to render.yaml')
    parser.add_argument(
        '--log-level',
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help='Override logging.level from the config'
    )

    return parser.parse_args(argv)


def render(args: argparse.Namespace, algorithm: str):
    """Render the requested sprite.

    Returns
    -------
    tuple
        ``(name, width, height, buffer)``
    """
    if args.sprite:
        doc = validators.load_sprite_doc(args.sprite)
        logging_config.push_context(sprite=doc.name)
        canvas = validators.build_canvas(doc)
        logger.info(
            "Rendering %s: %dx%d, %d operations",
            args.sprite, canvas.width, canvas.height, len(canvas.operations),
        )
        return doc.name, canvas.width, canvas.height, canvas.finalize()

    width, height = args.box
    settings = BoxSettings(
        width=width,
        height=height,
        corner_radius=args.radius,
        border_thickness=args.border,
    )
    name = f"box_{width}x{height}"
    logging_config.push_context(sprite=name)
    logger.info("Rendering %dx%d box (r=%d, b=%d, %s)", width, height, args.radius, args.border, algorithm)
    return name, width, height, render_box_mirrored(settings, algorithm)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        cfg = load_config(args.config)
    except (ConfigError, FileNotFoundError) as e:
        logging_config.setup_logging(log_level=args.log_level or "INFO")
        logger.error("Configuration error: %s", e)
        return 2

    logging_config.setup_logging(
        log_level=args.log_level or cfg.logging.level,
        log_file=cfg.logging.file,
        json=cfg.logging.json,
        color=cfg.logging.color,
        context={"app": "render"},
    )

    algorithm = args.algorithm or cfg.symmetry.algorithm
    try:
        name, width, height, buffer = render(args, algorithm)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Render failed: %s", e)
        return 1
    finally:
        logging_config.pop_context(keys=["sprite"])

    out_path = Path(args.out) if args.out else Path(cfg.output.directory) / f"{name}.rgba"
    data = buffer.tobytes()
    fs.atomic_write_bytes(out_path, data)
    logger.info("Saved buffer: %s (%d bytes)", out_path, len(data))

    if cfg.output.write_metadata:
        meta_path = out_path.with_name(out_path.name + ".yaml")
        metadata = {
            'name': name,
            'width': int(width),
            'height': int(height),
            'format': 'rgba8',
            'bytes': len(data),
            'sha256': hashing.sha256_bytes(data),
            'source': args.sprite if args.sprite else 'box',
        }
        if args.box:
            metadata['algorithm'] = algorithm
        fs.atomic_yaml_dump(metadata, meta_path)
        logger.info("Saved metadata: %s", meta_path)

    return 0


if __name__ == '__main__':
    sys.exit(main())
