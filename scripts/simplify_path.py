#!/usr/bin/env python3
"""
Path Simplification Script
==========================

Standalone script to simplify a recorded path dump.

This script:
    1. Loads a YAML path dump (as written on teardown)
    2. Runs the waypoint simplifier over it
    3. Reports the simplification statistics
    4. Optionally writes the simplified dump

Usage:
    python scripts/simplify_path.py path.yaml
    python scripts/simplify_path.py path.yaml --output simplified.yaml
    python scripts/simplify_path.py path.yaml --max-distance 20 --deviation 2.0
"""

import argparse
import logging
import os
import sys

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from shoal_tracker.models.path import PathExport
from shoal_tracker.observability import analyze_path
from shoal_tracker.path.simplifier import SimplifierThresholds, simplify


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger(__name__)


def run(
    input_path: str,
    output_path: str,
    thresholds: SimplifierThresholds,
) -> dict:
    """
    Simplify one path dump.

    Args:
        input_path: YAML dump to read
        output_path: Where to write the simplified dump ("" to skip)
        thresholds: Simplifier thresholds

    Returns:
        Analysis dictionary
    """
    with open(input_path, "r") as f:
        export = PathExport.from_yaml(f.read())

    waypoints = export.to_waypoints()
    logger.info(f"Loaded {len(waypoints)} waypoints from {input_path}")

    analysis = analyze_path(waypoints, thresholds)

    if output_path:
        simplified = simplify(waypoints, thresholds)
        result = PathExport(
            category=export.category,
            waypoints=[w.to_tuple() for w in simplified],
            stop_indices=[i for i, w in enumerate(simplified) if w.is_stop_point],
            area=export.area,
        )
        with open(output_path, "w") as f:
            f.write(result.to_yaml())
        logger.info(f"Wrote {len(simplified)} waypoints to {output_path}")

    return analysis.to_dict()


def main():
    parser = argparse.ArgumentParser(description="Simplify a recorded path dump")
    parser.add_argument("input", help="YAML path dump")
    parser.add_argument("--output", "-o", default="", help="Write simplified dump here")
    parser.add_argument("--max-distance", type=float, default=30.0,
                        help="Segments at least this long are always kept")
    parser.add_argument("--collinear", type=float, default=1.0,
                        help="Cross-product magnitude below which points are collinear")
    parser.add_argument("--deviation", type=float, default=1.5,
                        help="Perpendicular distance below which points are dropped")
    parser.add_argument("--slope-tolerance", type=float, default=0.05,
                        help="Absolute tolerance for slope equality")

    args = parser.parse_args()

    thresholds = SimplifierThresholds(
        max_waypoint_distance=args.max_distance,
        collinear_threshold=args.collinear,
        deviation_threshold=args.deviation,
        slope_tolerance=args.slope_tolerance,
    )

    try:
        summary = run(args.input, args.output, thresholds)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to simplify {args.input}: {e}")
        sys.exit(1)

    print("\n" + "=" * 50)
    print("SIMPLIFICATION SUMMARY")
    print("=" * 50)
    for key, value in summary.items():
        print(f"  {key:20s}: {value}")
    print("=" * 50)


if __name__ == "__main__":
    main()
