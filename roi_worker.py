#!/usr/bin/env python3
"""Saliency ROI export worker.

Contract:
- Input: ``--input-json '<json>'`` or ``--input-json-file <path>``; flags
  ``--image-path``/``--output-path``/``--debug-dir`` override payload keys.
- Output: one JSON object to stdout:
  {
    "roi": [x, y, w, h],
    "source": "candidates",
    "size": [512, 384],
    "confidence": 0.71,
    "centroid": [x, y],
    "report": ["..."],
    "out_path": "..."
  }
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Any

from PIL import Image, ImageOps

from smart_roi import NoSalientRegion, RoiConfig, SaliencyGrid, SpectralResidualDetector, extract_roi
from smart_roi.overlay import combined_overlay, saliency_heatmap

JPEG_QUALITY = 95


def log_err(message: str) -> None:
    print(message, file=sys.stderr)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Saliency ROI crop worker")
    parser.add_argument("--input-json", default="", help="JSON payload as string")
    parser.add_argument("--input-json-file", default="", help="Path to JSON payload")
    parser.add_argument("--image-path", default="", help="Source image")
    parser.add_argument("--output-path", default="", help="Where to write the exported crop")
    parser.add_argument("--debug-dir", default="", help="Folder for saliency.png and overlay.png")
    parser.add_argument("--verbose", action="store_true", help="Debug logging on stderr")
    return parser.parse_args(argv)


def parse_payload(args: argparse.Namespace) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    if args.input_json:
        payload = json.loads(args.input_json)
    elif args.input_json_file:
        with open(args.input_json_file, "r", encoding="utf-8") as fh:
            payload = json.load(fh)

    if args.image_path:
        payload["image_path"] = args.image_path
    if args.output_path:
        payload["output_path"] = args.output_path
    if args.debug_dir:
        payload["debug_dir"] = args.debug_dir
    return payload


def load_image(path: str) -> Image.Image:
    with Image.open(path) as img:
        return ImageOps.exif_transpose(img).convert("RGB")


def save_image(img: Image.Image, out_path: str) -> str:
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    img.save(out_path, quality=JPEG_QUALITY)
    return out_path


def write_debug_images(image: Image.Image, grid: SaliencyGrid, debug_dir: str) -> list[str]:
    os.makedirs(debug_dir, exist_ok=True)
    heatmap_path = os.path.join(debug_dir, "saliency.png")
    overlay_path = os.path.join(debug_dir, "overlay.png")
    Image.fromarray(saliency_heatmap(grid)).save(heatmap_path)
    Image.fromarray(combined_overlay(image, grid)).save(overlay_path)
    return [heatmap_path, overlay_path]


def run(payload: dict[str, Any]) -> dict[str, Any]:
    image_path = str(payload.get("image_path") or "").strip()
    if not image_path:
        raise RuntimeError("image_path is required.")
    if not os.path.isfile(image_path):
        raise RuntimeError(f"input image not found: {image_path}")

    config = RoiConfig.from_payload(payload)
    image = load_image(image_path)
    detection = SpectralResidualDetector(analysis_size=config.analysis_size).produce(image)

    debug_dir = str(payload.get("debug_dir") or "").strip()
    debug_files = write_debug_images(image, detection.grid, debug_dir) if debug_dir else []

    try:
        result = extract_roi(image, detection, config)
    except NoSalientRegion as err:
        if not payload.get("allow_empty"):
            raise
        log_err(f"no roi: {err}")
        return {"roi": None, "source": None, "size": None, "confidence": float(detection.confidence)}

    info = result.to_dict()
    out_path = str(payload.get("output_path") or "").strip()
    if out_path:
        info["out_path"] = save_image(result.export.to_pil(), out_path)
    if debug_files:
        info["debug_files"] = debug_files
    return info


def main(argv: list[str] | None = None) -> int:
    try:
        args = parse_args(argv)
        if args.verbose:
            logging.basicConfig(level=logging.DEBUG, format="%(asctime)s | %(levelname)s | %(message)s")
        info = run(parse_payload(args))
        print(json.dumps(info, separators=(",", ":")))
        return 0
    except Exception as err:  # noqa: BLE001
        log_err(f"roi_worker failed: {err}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
