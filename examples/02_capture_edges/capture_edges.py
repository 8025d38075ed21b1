#!/usr/bin/env python3
"""Arm a single-shot capture, wait for the trigger, and dump D0-D7 edges."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add parent directories to path for direct execution
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from _common import add_connection_args, make_scope, print_edges, setup_logging, timed
from rigol_mso import (
    CaptureConfig,
    ScopeError,
    load_config,
    save_capture,
    save_config,
)


def parse_args():
    p = argparse.ArgumentParser()
    add_connection_args(p)
    p.add_argument("--outdir", default=".")
    p.add_argument("--config", default=None,
                   help="Capture config JSON (created with defaults if missing)")
    p.add_argument("--source", default=None, help="D0 for bottom 8 bits, D8 for upper")
    return p.parse_args()


def load_or_create_config(config_file: Path) -> CaptureConfig:
    if config_file.exists():
        print(f"Loading config from {config_file}")
        return load_config(config_file)
    config = CaptureConfig()
    save_config(config, config_file)
    print(f"Default config saved to {config_file}")
    return config


def main() -> None:
    args = parse_args()
    setup_logging(args.verbose)
    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)
    config_file = Path(args.config) if args.config else outdir / "capture.json"

    config = load_or_create_config(config_file)
    if args.source:
        config.source = args.source

    try:
        with make_scope(args) as scope:
            scope.identify()
            with timed("capture"):
                result = scope.capture(config)

            print_edges(result)

            data_file = outdir / f"capture_{config.source}.npz"
            save_capture(result, data_file)
            print(f"Saved data: {data_file.name}")

    except ScopeError as e:
        print(f"Capture failed: {e}")
        raise


if __name__ == "__main__":
    main()
