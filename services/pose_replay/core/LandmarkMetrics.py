import math
from typing import Callable, List, Optional, Tuple

from services.pose_replay.core.config import VISIBILITY_THRESHOLD
from services.pose_replay.core.joints import KEYPOINT_LABELS
from services.pose_replay.core.KeypointNormalizer import CanonicalFrame
from services.pose_replay.recording.TimerQueue import monotonic_ms

LandmarkRow = Tuple[str, str, str, str, str]


def count_visible_keypoints(landmarks: CanonicalFrame, threshold: float = VISIBILITY_THRESHOLD) -> int:
    return sum(1 for lm in landmarks if (lm.score or 0.0) >= threshold)


def format_number(value: Optional[float]) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "—"
    return f"{float(value):.3f}"


def landmark_rows(landmarks: CanonicalFrame) -> List[LandmarkRow]:
    """Label, score, x, y, z per landmark, formatted for a table view."""
    rows = []
    for index, lm in enumerate(landmarks):
        if index < len(KEYPOINT_LABELS):
            label = KEYPOINT_LABELS[index]
        else:
            label = lm.name or f"Point {index + 1}"
        rows.append((label, format_number(lm.score), format_number(lm.x), format_number(lm.y), format_number(lm.z)))
    return rows


class FrameRateMeter:
    """Instantaneous frame rate from the gap between consecutive ticks."""

    def __init__(self, clock: Callable[[], float] = monotonic_ms):
        self._clock = clock
        self._last = clock()
        self.fps: Optional[float] = None

    def tick(self) -> Optional[float]:
        now = self._clock()
        delta = now - self._last
        if delta > 0:
            self.fps = round((1000.0 / delta) * 10) / 10
        self._last = now
        return self.fps

    @property
    def label(self) -> str:
        if self.fps is None:
            return "— fps"
        return f"{self.fps:.1f} fps"
