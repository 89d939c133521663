"""
Exporter: source video + compositor -> MP4 / GIF.

Frames are independent, so composition runs on a thread pool with a
bounded number of frames in flight; results are written strictly in
source order.
"""

import logging
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import cv2
import numpy as np
from PIL import Image

from .errors import ConfigError, EncoderError, SourceVideoError
from .models import CursorConfig, ExportFormat
from .overlay import draw_cursor, frame_offset

log = logging.getLogger(__name__)

GIF_MAX_FPS = 15

# ════════════════════════════════════════════════════════════════
#  SOURCE VIDEO
# ════════════════════════════════════════════════════════════════

def probe_video(path):
    """(width, height, fps, frame_count) of a video file."""
    cap = cv2.VideoCapture(str(path))
    if not cap.isOpened():
        raise SourceVideoError(f"cannot open source video {path}")
    try:
        w   = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        h   = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        fps = cap.get(cv2.CAP_PROP_FPS) or 30.0
        n   = int(cap.get(cv2.CAP_PROP_FRAME_COUNT))
    finally:
        cap.release()
    return w, h, fps, n


def read_frames(path, fps=None):
    """Yield ``(timestamp_ms, rgba)`` for every frame of the source video."""
    cap = cv2.VideoCapture(str(path))
    if not cap.isOpened():
        raise SourceVideoError(f"cannot open source video {path}")
    fps = fps or cap.get(cv2.CAP_PROP_FPS) or 30.0
    try:
        i = 0
        while True:
            ok, bgr = cap.read()
            if not ok:
                break
            yield int(round(i * 1000.0 / fps)), cv2.cvtColor(bgr, cv2.COLOR_BGR2RGBA)
            i += 1
    finally:
        cap.release()


def fit_to_resolution(raster, width, height):
    """Letterbox ``raster`` into an even-sized ``width`` x ``height`` frame."""
    width  -= width % 2
    height -= height % 2
    h, w = raster.shape[:2]
    if (w, h) == (width, height):
        return raster
    out = np.zeros((height, width, 4), dtype=np.uint8)
    out[..., 3] = 255
    if w == 0 or h == 0 or width == 0 or height == 0:
        return out
    scale = min(width / w, height / h)
    nw = max(1, min(width,  int(round(w * scale))))
    nh = max(1, min(height, int(round(h * scale))))
    scaled = np.array(Image.fromarray(np.ascontiguousarray(raster)).resize((nw, nh), Image.LANCZOS))
    x0, y0 = (width - nw) // 2, (height - nh) // 2
    out[y0:y0 + nh, x0:x0 + nw] = scaled
    return out

# ════════════════════════════════════════════════════════════════
#  WRITERS
# ════════════════════════════════════════════════════════════════

class Mp4Writer:
    def __init__(self, path, fps, size):
        self.path    = Path(path)
        fourcc       = cv2.VideoWriter_fourcc(*"mp4v")
        self._writer = cv2.VideoWriter(str(path), fourcc, fps, size)
        if not self._writer.isOpened():
            raise EncoderError(f"cannot open MP4 writer for {path}")

    def write(self, rgba):
        try:
            self._writer.write(cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGR))
        except cv2.error as e:
            raise EncoderError(f"MP4 writer rejected frame: {e}") from e

    def close(self):
        self._writer.release()

    def abort(self):
        self._writer.release()
        self.path.unlink(missing_ok=True)


class GifWriter:
    def __init__(self, path, fps, quality):
        self.path    = path
        self.stride  = max(1, int(round(fps / GIF_MAX_FPS)))
        self.fps     = fps / self.stride
        self.colors  = max(2, min(256, int(64 + quality * 192)))
        self._frames = []
        self._index  = 0

    def write(self, rgba):
        if self._index % self.stride == 0:
            rgb = Image.fromarray(np.ascontiguousarray(rgba)).convert("RGB")
            self._frames.append(rgb.quantize(colors=self.colors))
        self._index += 1

    def abort(self):
        self._frames = []

    def close(self):
        if not self._frames:
            return
        first, rest = self._frames[0], self._frames[1:]
        try:
            first.save(str(self.path), format="GIF", save_all=True, append_images=rest,
                       duration=int(round(1000 / self.fps)), loop=0)
        except (OSError, ValueError) as e:
            raise EncoderError(f"GIF encoding failed for {self.path}: {e}") from e

# ════════════════════════════════════════════════════════════════
#  EXPORTER
# ════════════════════════════════════════════════════════════════

class Exporter:
    def __init__(self, compositor, export_config, fps=30.0,
                 cursor_config=None, draw_cursor=False, workers=None):
        self.compositor    = compositor
        self.export_config = export_config
        self.fps           = fps
        self.cursor_config = cursor_config or CursorConfig()
        self.draw_cursor   = draw_cursor
        self.workers       = workers or 4

    @property
    def output_size(self):
        w, h = self.export_config.resolution.dimensions()
        return w - w % 2, h - h % 2

    def render_frame(self, source_frame, time_ms):
        """Composed frame fitted to the export resolution."""
        return fit_to_resolution(self.compose(source_frame, time_ms), *self.output_size)

    def compose(self, source_frame, time_ms):
        """Compositor output at canvas size, with the cursor layer if enabled."""
        comp = self.compositor
        out  = comp.compose_frame(source_frame, time_ms)
        if self.draw_cursor:
            viewport = comp.get_viewport(time_ms)
            state    = comp.cursor_state(time_ms, self.cursor_config)
            offset   = frame_offset(comp.output_width, comp.output_height,
                                    comp.source_width, comp.source_height)
            out = draw_cursor(out, state, viewport, self.cursor_config,
                              (comp.source_width, comp.source_height), offset)
        return out

    def _open_writer(self):
        path = self.export_config.output_path
        if not path:
            raise ConfigError("export output_path is empty")
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        fmt = self.export_config.format
        if fmt is ExportFormat.MP4:
            return Mp4Writer(path, self.fps, self.output_size)
        if fmt is ExportFormat.GIF:
            return GifWriter(path, self.fps, self.export_config.quality)
        raise ConfigError(f"unknown export format {fmt!r}")

    def render(self, frames, total=None, progress_cb=None):
        """Render ``(timestamp_ms, rgba)`` frames to the configured output."""
        writer  = self._open_writer()
        window  = self.workers * 2
        written = 0
        log.info("exporting %s at %dx%d, %.1f fps, %d workers (quality %.2f)",
                 self.export_config.output_path, *self.output_size, self.fps,
                 self.workers, self.export_config.quality)

        def flush_one(pending):
            nonlocal written
            writer.write(pending.popleft().result())
            written += 1
            if progress_cb and total and written % 15 == 0:
                progress_cb(min(1.0, written / total))

        try:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                pending = deque()
                for t_ms, frame in frames:
                    pending.append(pool.submit(self.render_frame, frame, t_ms))
                    if len(pending) >= window:
                        flush_one(pending)
                while pending:
                    flush_one(pending)
        except BaseException:
            writer.abort()
            raise

        if written == 0:
            writer.abort()
            raise SourceVideoError("source video produced no frames")
        writer.close()
        if progress_cb:
            progress_cb(1.0)
        log.info("export finished: %d frames -> %s", written, self.export_config.output_path)
        return written
