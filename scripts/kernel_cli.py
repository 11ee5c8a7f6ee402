#!/usr/bin/env python3
"""Compute cutter poses or rotate a box selection from JSON snapshots."""

from __future__ import annotations

import argparse
import json
import logging
import math
import sys
from pathlib import Path
from typing import Any, List

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from box_model import Box
from cutters import box_cutter_poses
from group_rotation import rotate_boxes

logger = logging.getLogger("kernel_cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Box/cut geometry kernel: cutter poses and group rotation"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logs"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    cutters = sub.add_parser("cutters", help="Cutter poses for every cut")
    cutters.add_argument(
        "--boxes", required=True, help="JSON file: list of box snapshots"
    )
    cutters.add_argument("--out", default=None, help="Output JSON (default: stdout)")

    rotate = sub.add_parser("rotate", help="Rotate boxes rigidly about a pivot")
    rotate.add_argument(
        "--boxes", required=True, help="JSON file: list of box snapshots"
    )
    rotate.add_argument("--axis", choices=["x", "y", "z"], required=True)
    rotate.add_argument("--degrees", type=float, required=True)
    rotate.add_argument(
        "--pivot",
        type=float,
        nargs=3,
        default=None,
        metavar=("X", "Y", "Z"),
        help="Rotation center (default: centroid of visual centers)",
    )
    rotate.add_argument("--out", default=None, help="Output JSON (default: stdout)")
    return parser


def _load_boxes(path: str) -> List[Box]:
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    if isinstance(payload, dict):
        # Full project export: {"project": {"boxes": [...]}}
        payload = payload.get("project", payload).get("boxes", [])
    return [Box.from_dict(item) for item in payload]


def _emit(payload: Any, out: str | None) -> None:
    text = json.dumps(payload, indent=2)
    if out is None:
        print(text)
        return
    path = Path(out)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text + "\n", encoding="utf-8")
    logger.info("Wrote %s", path)


def _check(boxes: List[Box]) -> bool:
    ok = True
    for box in boxes:
        is_valid, errors = box.validate()
        if not is_valid:
            ok = False
            for error in errors:
                print(f"ERROR: {error}", file=sys.stderr)
    return ok


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    boxes = _load_boxes(args.boxes)
    if not _check(boxes):
        return 1

    if args.command == "cutters":
        payload = []
        for box in boxes:
            payload.append({
                "box_id": box.box_id,
                "cutters": [
                    {"cut_id": cut.cut_id, **pose.to_dict()}
                    for cut, pose in box_cutter_poses(box)
                ],
            })
        _emit(payload, args.out)
        return 0

    rotated = rotate_boxes(
        boxes,
        axis=args.axis,
        angle=math.radians(args.degrees),
        pivot=args.pivot,
    )
    _emit([box.to_dict() for box in rotated], args.out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
