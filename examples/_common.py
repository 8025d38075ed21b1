from __future__ import annotations

import argparse
import logging
import time
from contextlib import contextmanager

from rigol_mso import (
    DEFAULT_USB_PRODUCT_ID,
    DEFAULT_USB_VENDOR_ID,
    CaptureResult,
    RigolScope,
)


def add_connection_args(p: argparse.ArgumentParser) -> None:
    g = p.add_mutually_exclusive_group()
    g.add_argument("--visa", metavar="ADDRESS", default="192.168.1.70",
                   help="VISA resource or host (TCPIP::<host>::INSTR)")
    g.add_argument("--usb", action="store_true",
                   help="Use raw USB bulk endpoints instead of VISA")
    p.add_argument("--vid", type=lambda s: int(s, 0), default=DEFAULT_USB_VENDOR_ID)
    p.add_argument("--pid", type=lambda s: int(s, 0), default=DEFAULT_USB_PRODUCT_ID)
    p.add_argument("-v", "--verbose", action="store_true")


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def make_scope(args: argparse.Namespace) -> RigolScope:
    if args.usb:
        return RigolScope.over_usb(args.vid, args.pid)
    return RigolScope.over_visa(args.visa)


def print_edges(result: CaptureResult) -> None:
    log = result.log
    preamble = result.preamble
    print(f"Points: {preamble.points}")
    print(f"Xincrement: {preamble.x_increment:.9f}")
    print(f"Header: {result.frame.header.hex(' ')}")
    print(f"Data: ({len(result.frame)} samples)")
    print(f"Transitions: {len(log.transitions)}")
    for name in log.signals:
        edges = log.edges[name]
        last = log.last_change.get(name)
        print(f"  {name:>6}: {len(edges):6d} edges, last change at {last}")


@contextmanager
def timed(name: str):
    """Print how long the block took."""
    start = time.perf_counter()
    try:
        yield
    finally:
        print(f"  [{name}] {(time.perf_counter() - start) * 1000:.1f} ms")
