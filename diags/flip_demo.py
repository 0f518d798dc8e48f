#!/usr/bin/env python3
"""
Fault-injection demo: flip random bits in a small buffer and watch bitflip report them.
"""

from __future__ import annotations

import argparse
import random

from bitflip.checker import PatternChecker
from bitflip.reporting import ConsoleReporter


def main() -> None:
    parser = argparse.ArgumentParser(description="bitflip fault-injection demo")
    parser.add_argument("--size-kb", type=int, default=256, help="Buffer size in KiB")
    parser.add_argument("--flips", type=int, default=3, help="Bits to flip before the first pass")
    parser.add_argument("--passes", type=int, default=2, help="Passes to run")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible flips")
    args = parser.parse_args()

    if args.seed is not None:
        random.seed(args.seed)

    checker = PatternChecker(max(args.size_kb, 1) * 1024, reporter=ConsoleReporter())
    for _ in range(max(args.flips, 0)):
        offset = random.randrange(checker.size)
        bit = random.randrange(8)
        checker.buffer[offset] ^= 1 << bit
        print(f"[flip-demo] flipped bit {bit} at index {offset}", flush=True)

    for _ in range(max(args.passes, 1)):
        result = checker.check_pass()
        print(
            f"[flip-demo] pass {result.number}: {result.status} "
            f"({result.mismatch_count} mismatches)",
            flush=True,
        )

    print("flip-demo completed.", flush=True)


if __name__ == "__main__":
    main()
