"""
zoomreel: render click-zoomed screen recordings.

Run:
    python -m zoomreel render capture.mp4 events.json out.mp4 --settings style.json
    python -m zoomreel frame  capture.mp4 events.json frame.png --at 1500
"""

import argparse
import dataclasses
import logging
import sys

import numpy as np
from PIL import Image

from .compositor import Compositor
from .config import load_events, load_settings
from .errors import SourceVideoError, ZoomReelError
from .exporter import Exporter, probe_video, read_frames
from .logging_setup import setup_logging
from .models import ExportFormat

log = logging.getLogger("zoomreel")


def build_parser():
    ap = argparse.ArgumentParser(prog="zoomreel", description=__doc__.splitlines()[1].strip())
    ap.add_argument("--quiet", action="store_true", help="only log warnings and errors")
    ap.add_argument("--debug", action="store_true", help="verbose logging")
    sub = ap.add_subparsers(dest="command", required=True)

    def common(p):
        p.add_argument("video", help="captured source video")
        p.add_argument("events", help="RecordedEvents JSON")
        p.add_argument("output", help="output file")
        p.add_argument("--settings", help="render settings JSON")
        p.add_argument("--draw-cursor", action="store_true", help="draw cursor and click ripples")

    r = sub.add_parser("render", help="export the whole recording")
    common(r)
    r.add_argument("--workers", type=int, default=None, help="compositing threads")
    r.add_argument("--format", choices=["mp4", "gif"], default=None,
                   help="override the export format from settings")

    f = sub.add_parser("frame", help="render a single frame to an image")
    common(f)
    f.add_argument("--at", type=int, required=True, help="timestamp in ms")
    return ap


def _prepare(args):
    settings = load_settings(args.settings)
    w, h, fps, count = probe_video(args.video)
    events = load_events(args.events).scaled_to(w, h)
    comp = Compositor(settings.style, settings.zoom, events, w, h)
    log.info("source %dx%d @ %.2f fps, %d frames, %d zoom keyframes",
             w, h, fps, count, len(comp.zoom_keyframes))
    return settings, comp, fps, count


def cmd_render(args):
    settings, comp, fps, count = _prepare(args)
    export = dataclasses.replace(settings.export, output_path=args.output)
    if args.format:
        export = dataclasses.replace(export, format=ExportFormat(args.format.capitalize()))

    def progress(v):
        log.info("%3d%%", int(v * 100))

    exporter = Exporter(comp, export, fps=fps,
                        cursor_config=settings.cursor,
                        draw_cursor=args.draw_cursor or settings.draw_cursor,
                        workers=args.workers)
    exporter.render(read_frames(args.video, fps), total=count, progress_cb=progress)
    return 0


def cmd_frame(args):
    settings, comp, fps, _ = _prepare(args)
    frame = None
    for t_ms, rgba in read_frames(args.video, fps):
        if t_ms > args.at and frame is not None:
            break
        frame = rgba
    if frame is None:
        raise SourceVideoError(f"{args.video} has no frames")

    exporter = Exporter(comp, settings.export, fps=fps, cursor_config=settings.cursor,
                        draw_cursor=args.draw_cursor or settings.draw_cursor)
    out = exporter.compose(frame, args.at)
    Image.fromarray(np.ascontiguousarray(out)).save(args.output)
    log.info("frame at %d ms -> %s", args.at, args.output)
    return 0


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args)
    try:
        if args.command == "render":
            return cmd_render(args)
        return cmd_frame(args)
    except ZoomReelError as e:
        log.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
