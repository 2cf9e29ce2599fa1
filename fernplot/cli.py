from __future__ import annotations

import argparse
import logging
import os
from typing import Optional

from fernplot.config import load_config, normalise_config
from fernplot.pipeline import render_sequence, render_still
from fernplot.themes import THEME_NAMES
from fernplot.util.logging_setup import configure_root_logging, get_logger, shutdown_logging
from fernplot.util.manifest import build_manifest, git_commit, write_manifest
from fernplot.video.opencv_writer import encode_with_opencv

def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="fernplot", description="Barnsley fern IFS renderer (interactive window or headless frames).")
    p.add_argument("--config", type=str, default=None, help="Path to config JSON. If omitted, built-in defaults are used.")
    p.add_argument("--theme", type=str, default=None, choices=list(THEME_NAMES), help="Override the colour theme.")
    p.add_argument("--throughput", type=int, default=None, help="Override points generated per frame.")
    p.add_argument("--seed", type=int, default=None, help="Seed for the random source.")
    p.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Log level.")
    p.add_argument("--log-file", type=str, default="fernplot.log", help="Log file path (rotating). Set empty to disable file logging.")
    sub = p.add_subparsers(dest="cmd", required=True)

    v = sub.add_parser("view", help="Open an interactive window.")
    v.add_argument("--autostart", action="store_true", help="Start drawing immediately.")

    r = sub.add_parser("render", help="Render a frame sequence to the frames directory.")
    r.add_argument("--frames-dir", type=str, default=None, help="Override frames_dir from config.")
    r.add_argument("--no-progress", action="store_true", help="Disable the progress bar.")

    s = sub.add_parser("still", help="Render a single image.")
    s.add_argument("--output", type=str, required=True, help="Output PNG path.")
    s.add_argument("--points", type=int, default=None, help="Points to plot (defaults to config.still_points).")
    s.add_argument("--no-progress", action="store_true", help="Disable the progress bar.")

    e = sub.add_parser("encode", help="Encode frames into an MP4 video using OpenCV.")
    e.add_argument("--input-dir", type=str, default=None, help="Frames directory (defaults to config.frames_dir).")
    e.add_argument("--output", type=str, default=None, help="Output MP4 file (defaults to config.output_video).")
    e.add_argument("--fps", type=int, default=None, help="Frames per second (defaults to config.fps).")

    return p

def main(argv: Optional[list] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    log_level = getattr(logging, args.log_level.upper(), logging.INFO)
    log_file = args.log_file if args.log_file and args.log_file.strip() else None
    configure_root_logging(level=log_level, console=True, log_file=log_file)

    logger = get_logger()

    try:
        cfg = load_config(args.config)
        for key in ("theme", "throughput", "seed"):
            value = getattr(args, key)
            if value is not None:
                cfg[key] = value
        cfg = normalise_config(cfg)

        if args.cmd == "view":
            from fernplot.app import FernApp

            FernApp(cfg).run(autostart=args.autostart)
            return 0

        if args.cmd == "render":
            if args.frames_dir:
                cfg["frames_dir"] = args.frames_dir

            result = render_sequence(cfg=cfg, progress=not args.no_progress)

            manifest = build_manifest(config=cfg, result=result, git_commit=git_commit())
            write_manifest(os.path.join("artifacts", "run.json"), manifest)
            logger.info("Run manifest written: artifacts/run.json")
            return 0

        if args.cmd == "still":
            render_still(cfg=cfg, output=args.output, points=args.points, progress=not args.no_progress)
            return 0

        if args.cmd == "encode":
            input_dir = args.input_dir or str(cfg["frames_dir"])
            output = args.output or str(cfg["output_video"])
            fps = args.fps or int(cfg["fps"])

            encode_with_opencv(input_dir=input_dir, output_file=output, fps=fps)
            return 0

        raise RuntimeError("Unknown command.")
    finally:
        shutdown_logging()
