"""CLI entry point for FridgeAI."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime

from dotenv import load_dotenv

from .camera import CaptureError, FridgeCamera
from .config import load_config
from .db import HistoryStore, KeyValueStore
from .models import EncodedImage
from .pipeline import AnalysisError, AnalysisPipeline
from .scanner import FridgeScanner
from .vision import create_backend


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="fridgeai",
        description="Photograph your fridge and get recipe suggestions",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="path to a TOML config file",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="enable debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    # cameras
    sub.add_parser("cameras", help="list available cameras")

    # scan
    scan_parser = sub.add_parser("scan", help="capture a photo and analyze it")
    scan_parser.add_argument(
        "--image", type=str, default=None, help="use an existing image file"
    )
    scan_parser.add_argument("--json", action="store_true", help="print JSON")

    # history
    history_parser = sub.add_parser("history", help="list past scans")
    history_parser.add_argument(
        "--limit", type=int, default=None, help="show at most N scans"
    )
    history_parser.add_argument("--json", action="store_true", help="print JSON")

    # show
    show_parser = sub.add_parser("show", help="show one past scan in full")
    show_parser.add_argument("id", type=str, help="scan id")
    show_parser.add_argument("--json", action="store_true", help="print JSON")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    load_dotenv()
    config = load_config(args.config)

    match args.command:
        case "cameras":
            _cmd_cameras()
        case "scan":
            _cmd_scan(config, args)
        case "history":
            _cmd_history(config, args)
        case "show":
            _cmd_show(config, args)


def _open_history(config) -> tuple[KeyValueStore, HistoryStore]:
    kv = KeyValueStore(db_path=config.history.db_path)
    history = HistoryStore(kv, key=config.history.key)
    history.load()
    return kv, history


def _format_time(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp / 1000).strftime("%Y-%m-%d %H:%M:%S")


def _cmd_cameras() -> None:
    cameras = FridgeCamera.list_cameras()
    if not cameras:
        print("No cameras found.")
        return
    print(f"Available cameras: {len(cameras)}")
    for idx in cameras:
        print(f"  camera {idx}")


def _cmd_scan(config, args) -> None:
    # Get image
    try:
        if args.image:
            image = EncodedImage.from_path(args.image)
        else:
            camera = FridgeCamera(
                camera_index=config.camera.index,
                save_dir=config.camera.save_dir,
            )
            print("Capturing photo...", file=sys.stderr)
            image = camera.capture().image
    except (CaptureError, OSError, ValueError) as e:
        print(f"Capture failed: {e}", file=sys.stderr)
        sys.exit(1)

    backend = create_backend(config)
    pipeline = AnalysisPipeline(
        backend,
        max_tokens=config.vision.max_tokens,
        timeout=config.vision.timeout,
    )

    kv, history = _open_history(config)
    try:
        scanner = FridgeScanner(pipeline, history)
        print("Analyzing your fridge...", file=sys.stderr)
        try:
            entry = asyncio.run(scanner.scan(image))
        except AnalysisError as e:
            print(f"Analysis failed: {e}", file=sys.stderr)
            sys.exit(1)
    finally:
        kv.close()

    if args.json:
        print(json.dumps(entry.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(entry.result.display())
        print(f"\nSaved as {entry.id}")


def _cmd_history(config, args) -> None:
    kv, history = _open_history(config)
    kv.close()

    entries = history.list()
    if args.limit is not None:
        entries = entries[: args.limit]

    if args.json:
        print(json.dumps([e.to_dict() for e in entries], ensure_ascii=False, indent=2))
        return

    if not entries:
        print("No scans yet.")
        return
    for e in entries:
        titles = ", ".join(r.title for r in e.recipes) or "-"
        print(
            f"{e.id}  {_format_time(e.timestamp)}  "
            f"{len(e.found_ingredients)} ingredients  recipes: {titles}"
        )


def _cmd_show(config, args) -> None:
    kv, history = _open_history(config)
    kv.close()

    entry = history.get(args.id)
    if entry is None:
        print(f"No scan with id {args.id!r}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps(entry.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(f"Scanned {_format_time(entry.timestamp)}")
        print(entry.result.display())
