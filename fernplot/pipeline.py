from __future__ import annotations

import os
from typing import Any, Dict, Optional

from tqdm import tqdm

from fernplot.controller import RenderController
from fernplot.ifs import PointGenerator, default_random_source
from fernplot.scheduling import FrameScheduler
from fernplot.surface import ImageSurface
from fernplot.util.logging_setup import get_logger
from fernplot.viewport import compute_viewport

# Ticks allowed per requested point before render_still gives up.
STILL_TICK_FACTOR = 4

def _ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)

def _frame_path(frames_dir: str, frame_index: int) -> str:
    return os.path.join(frames_dir, f"frame_{frame_index:06d}.png")

def build_controller(cfg: Dict[str, Any], scheduler: Optional[FrameScheduler] = None) -> RenderController:
    viewport = compute_viewport(int(cfg["width"]), int(cfg["height"]), compact=True if cfg.get("compact") else None)
    surface = ImageSurface(viewport.width, viewport.height)
    generator = PointGenerator(random_source=default_random_source(cfg.get("seed")))
    return RenderController(
        surface,
        scheduler if scheduler is not None else FrameScheduler(),
        generator=generator,
        viewport=viewport,
        throughput=int(cfg["throughput"]),
        theme=str(cfg["theme"]),
    )

def render_sequence(*, cfg: Dict[str, Any], progress: bool = True) -> Dict[str, Any]:
    logger = get_logger("pipeline")

    total_frames = int(cfg["total_frames"])
    save_every_n = int(cfg.get("save_every_n", 1))
    frames_dir = str(cfg["frames_dir"])

    _ensure_dir(frames_dir)

    scheduler = FrameScheduler()
    controller = build_controller(cfg, scheduler)
    surface = controller.surface
    vp = controller.viewport

    logger.info("Render start total_frames=%s size=%sx%s throughput=%s theme=%s every_n=%s seed=%s",
                total_frames, vp.width, vp.height, controller.throughput, controller.theme.name,
                save_every_n, cfg.get("seed"))

    saved = 0
    controller.start()
    for i in tqdm(range(total_frames), desc="frames", unit="frame", disable=not progress):
        scheduler.run_frame()
        if save_every_n <= 1 or i % save_every_n == 0 or i == total_frames - 1:
            path = surface.save(_frame_path(frames_dir, saved))
            saved += 1
            logger.debug("Saved frame %s -> %s (points=%s)", i, path, controller.point_count)
    controller.stop()

    logger.info("Render complete frames_dir=%s saved=%s points=%s", frames_dir, saved, controller.point_count)
    return {
        "frames_dir": frames_dir,
        "total_frames": total_frames,
        "saved": saved,
        "point_count": controller.point_count,
        "width": vp.width,
        "height": vp.height,
    }

def render_still(*, cfg: Dict[str, Any], output: str, points: Optional[int] = None, progress: bool = True) -> Dict[str, Any]:
    logger = get_logger("pipeline")
    target = int(points if points is not None else cfg["still_points"])
    if target <= 0:
        raise ValueError("points must be positive.")

    scheduler = FrameScheduler()
    controller = build_controller(cfg, scheduler)
    max_ticks = max(1, STILL_TICK_FACTOR * -(-target // controller.throughput))

    logger.info("Still render target=%s throughput=%s output=%s", target, controller.throughput, output)
    controller.start()
    ticks = 0
    with tqdm(total=target, desc="points", unit="pt", disable=not progress) as bar:
        while controller.point_count < target and ticks < max_ticks:
            before = controller.point_count
            scheduler.run_frame()
            ticks += 1
            bar.update(controller.point_count - before)
    controller.stop()

    if controller.point_count < target:
        logger.warning("Stopped after %s ticks with %s/%s points in view", ticks, controller.point_count, target)

    controller.surface.save(output)
    logger.info("Saved still %s (points=%s ticks=%s)", output, controller.point_count, ticks)
    vp = controller.viewport
    return {"output": output, "point_count": controller.point_count, "ticks": ticks, "width": vp.width, "height": vp.height}
