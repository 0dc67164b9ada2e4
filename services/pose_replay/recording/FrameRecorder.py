from dataclasses import dataclass
from typing import Callable, List, Sequence

from services.pose_replay.core.KeypointNormalizer import CanonicalFrame, clone_frame
from services.pose_replay.recording.TimerQueue import monotonic_ms
from services.pose_replay.utils.logger import logger


@dataclass
class RecordedFrame:
    timestamp: float  # milliseconds, monotonic
    landmarks: CanonicalFrame


class FrameRecorder:
    """In-memory recording of normalized landmark frames.

    States: idle -> start() -> recording -> stop() -> idle. ``clear()`` is
    allowed from any state. Frames are only accepted while recording, and
    each one is copied so the caller can keep reusing its live frame.
    """

    def __init__(self, clock: Callable[[], float] = monotonic_ms):
        self._clock = clock
        self._frames: List[RecordedFrame] = []
        self._is_recording = False
        self._clear_listeners: List[Callable[[], None]] = []

    @property
    def frames(self) -> Sequence[RecordedFrame]:
        return tuple(self._frames)

    @property
    def is_recording(self) -> bool:
        return self._is_recording

    def __len__(self) -> int:
        return len(self._frames)

    def __getitem__(self, index: int) -> RecordedFrame:
        return self._frames[index]

    def add_clear_listener(self, listener: Callable[[], None]) -> None:
        """Called whenever stored frames are dropped (start or clear)."""
        self._clear_listeners.append(listener)

    def _drop_frames(self) -> None:
        # listeners first, so nothing is still reading the frames we drop
        for listener in self._clear_listeners:
            listener()
        self._frames.clear()

    def start(self) -> bool:
        if self._is_recording:
            logger.debug("start() ignored: already recording")
            return False
        self._drop_frames()
        self._is_recording = True
        logger.info("Recording started")
        return True

    def stop(self) -> bool:
        if not self._is_recording:
            return False
        self._is_recording = False
        if self._frames:
            logger.info(f"Recording stopped: {len(self._frames)} frames")
        else:
            logger.info("Recording canceled: no frames captured")
        return True

    def clear(self) -> None:
        self._is_recording = False
        self._drop_frames()
        logger.info("Recording cleared")

    def push(self, landmarks: CanonicalFrame) -> bool:
        """Append a snapshot of ``landmarks``. Ignored unless recording."""
        if not self._is_recording:
            return False
        timestamp = self._clock()
        if self._frames and timestamp < self._frames[-1].timestamp:
            timestamp = self._frames[-1].timestamp
        self._frames.append(RecordedFrame(timestamp=timestamp, landmarks=clone_frame(landmarks)))
        return True
