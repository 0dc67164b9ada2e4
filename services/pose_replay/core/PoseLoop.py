import threading
from typing import Callable, Optional
import cv2

from services.pose_replay.core.BackendInterface import PoseBackend
from services.pose_replay.core.SessionController import SessionController
from services.pose_replay.core.VideoFrameSource import VideoFrameSource
from services.pose_replay.utils.logger import logger


class PoseLoop:
    """Per-frame detect -> normalize -> record/draw cycle.

    ``run()`` keeps stepping until the stop token is set or the source runs
    dry. Playback timers are pumped on the same thread at the start and end
    of every step, so the two never touch the recording at the same time.
    """

    def __init__(
        self,
        source: VideoFrameSource,
        backend: PoseBackend,
        controller: SessionController,
        display: Optional[Callable[[SessionController], None]] = None,
    ):
        self.source = source
        self.backend = backend
        self.controller = controller
        self.display = display
        self.stop_event = threading.Event()
        self.frames_processed = 0

    def step(self) -> bool:
        """Run one tick. Returns False when the source has no more frames."""
        self.controller.timers.run_due()

        ok, frame_bgr = self.source.read()
        if not ok:
            logger.warning("Failed to grab frame")
            return False

        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        raw_points = self.backend.process(frame_rgb)
        self.controller.process_pose(raw_points, frame_bgr)
        self.frames_processed += 1

        if self.display is not None:
            self.display(self.controller)
        # the display may have waited for a timer; fire it before the next read
        self.controller.timers.run_due()
        return True

    def run(self, stop_event: Optional[threading.Event] = None) -> int:
        if stop_event is not None:
            self.stop_event = stop_event
        try:
            while not self.stop_event.is_set():
                if not self.step():
                    break
        finally:
            self.controller.shutdown()
        logger.info(f"Pose loop stopped after {self.frames_processed} frames")
        return self.frames_processed

    def stop(self) -> None:
        self.stop_event.set()
