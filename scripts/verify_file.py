#!/usr/bin/env python3
"""Verify every address line in a text file and write the results as JSON lines."""
import argparse
import json
import sys
from pathlib import Path

from address_verifier.core.config import LOG_LEVEL
from address_verifier.core.pipeline import ResolutionPipeline
from address_verifier.utils.error_tracking import setup_error_tracking
from address_verifier.utils.logging import setup_logging


def main():
    parser = argparse.ArgumentParser(description="Resolve address lines from a file")
    parser.add_argument("input", type=Path, help="Text file, one address per line")
    parser.add_argument("-o", "--output", type=Path, help="Output JSONL file (default: stdout)")
    args = parser.parse_args()

    setup_logging(LOG_LEVEL)
    setup_error_tracking()

    lines = args.input.read_text(encoding="utf-8").splitlines()
    results = ResolutionPipeline.from_config().verify_lines(lines)

    out = args.output.open("w", encoding="utf-8") if args.output else sys.stdout
    try:
        for result in results:
            out.write(json.dumps(result.to_dict()) + "\n")
    finally:
        if args.output:
            out.close()

    print(f"Verified {len(results)} lines", file=sys.stderr)


if __name__ == "__main__":
    main()
