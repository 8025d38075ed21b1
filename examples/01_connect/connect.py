#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add parent directories to path for direct execution
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from _common import add_connection_args, make_scope, setup_logging
from rigol_mso import ScopeConnectionError, TransportError


def parse_args():
    p = argparse.ArgumentParser()
    add_connection_args(p)
    return p.parse_args()


def main() -> None:
    args = parse_args()
    setup_logging(args.verbose)
    try:
        with make_scope(args) as scope:
            idn = scope.identify()
            print(f"Connected -> {idn}")
    except (ScopeConnectionError, TransportError) as e:
        print(f"Connection failed: {e}")
        raise


if __name__ == "__main__":
    main()
