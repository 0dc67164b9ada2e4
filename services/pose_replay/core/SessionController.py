"""State behind the capture / record / replay controls.

The controller owns the recorder, the playback scheduler and the drawing
surface, and exposes the values a front end shows: status text, visible
landmark count, the landmark table and which controls are enabled. It
also keeps recording and playback apart: starting a recording pauses
playback, and playback cannot start while a recording is running.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence
import numpy as np

from services.pose_replay.core.config import LIVE_THEME, PLAYBACK_THEME, Theme
from services.pose_replay.core.joints import NUM_KEYPOINTS
from services.pose_replay.core.KeypointNormalizer import CanonicalFrame, normalize_keypoints
from services.pose_replay.core.LandmarkMetrics import (
    FrameRateMeter,
    LandmarkRow,
    count_visible_keypoints,
    landmark_rows,
)
from services.pose_replay.core.SkeletonRenderer import DrawingSurface, draw_live_overlay, draw_playback_frame
from services.pose_replay.recording.FrameRecorder import FrameRecorder, RecordedFrame
from services.pose_replay.recording.PlaybackScheduler import PlaybackScheduler
from services.pose_replay.recording.TimerQueue import TimerQueue
from services.pose_replay.utils.logger import logger

CAMERA_UNAVAILABLE = "Camera permission denied or unavailable."


@dataclass(frozen=True)
class ControlState:
    is_recording: bool
    is_playing: bool
    frame_count: int
    record_enabled: bool
    record_label: str
    stop_enabled: bool
    play_enabled: bool
    pause_enabled: bool
    clear_enabled: bool
    slider_enabled: bool
    slider_max: int
    slider_value: int


class SessionController:
    def __init__(
        self,
        timers: Optional[TimerQueue] = None,
        surface: Optional[DrawingSurface] = None,
        live_theme: Theme = LIVE_THEME,
        playback_theme: Theme = PLAYBACK_THEME,
    ):
        self.timers = timers if timers is not None else TimerQueue()
        self.surface = surface if surface is not None else DrawingSurface()
        self.live_theme = live_theme
        self.playback_theme = playback_theme

        self.recorder = FrameRecorder(clock=self.timers.clock)
        self.playback = PlaybackScheduler(
            self.recorder,
            self.timers,
            on_render=self._render_playback_frame,
            on_finish=self._on_playback_finished,
        )
        self.frame_rate = FrameRateMeter(clock=self.timers.clock)

        self.source_size = (0, 0)
        self.live_frame: Optional[CanonicalFrame] = None
        self.displayed_frame: Optional[CanonicalFrame] = None
        self.visible_count = 0
        self.total_count = NUM_KEYPOINTS
        self.rows: List[LandmarkRow] = []
        self.status = "No recording yet."
        self.on_change: Optional[Callable[["SessionController"], None]] = None

    # ------------------------------------------------------------------
    # live path
    # ------------------------------------------------------------------

    def process_pose(self, raw_points: Optional[Sequence], image_bgr: np.ndarray) -> Optional[CanonicalFrame]:
        """Handle one detector result for ``image_bgr``.

        Returns the canonical frame, or None if nobody was detected.
        """
        self.frame_rate.tick()
        height, width = image_bgr.shape[:2]
        self.source_size = (width, height)

        if raw_points is None or len(raw_points) == 0:
            self.live_frame = None
            if not self.playback.is_playing:
                self._show_empty()
            return None

        landmarks = normalize_keypoints(raw_points, width, height)
        self.live_frame = landmarks

        if self.recorder.push(landmarks):
            self.status = f"Recording… {len(self.recorder)} frames captured."

        if not self.playback.is_playing:
            self.surface.sync_size(width, height)
            draw_live_overlay(self.surface, landmarks, image_bgr, self.live_theme)
            self._show_landmarks(landmarks)
        return landmarks

    def _show_landmarks(self, landmarks: CanonicalFrame) -> None:
        self.displayed_frame = landmarks
        self.visible_count = count_visible_keypoints(landmarks)
        self.rows = landmark_rows(landmarks)

    def _show_empty(self) -> None:
        self.displayed_frame = None
        self.visible_count = 0
        self.rows = []
        self.surface.clear()

    # ------------------------------------------------------------------
    # recording
    # ------------------------------------------------------------------

    def toggle_recording(self) -> None:
        if self.recorder.is_recording:
            self.stop_recording()
        else:
            self.start_recording()

    def start_recording(self) -> bool:
        if self.recorder.is_recording:
            return False
        if self.playback.is_playing:
            self.playback.pause_playback()
        self.recorder.start()
        self.status = "Recording landmarks…"
        self._changed()
        return True

    def stop_recording(self) -> bool:
        if not self.recorder.stop():
            return False
        count = len(self.recorder)
        self.status = f"Captured {count} frames." if count else "Recording canceled."
        self._changed()
        return True

    def clear_recording(self) -> None:
        self.playback.clear_recording()
        self._show_empty()
        self.status = "Recording cleared."
        self._changed()

    # ------------------------------------------------------------------
    # playback
    # ------------------------------------------------------------------

    def start_playback(self) -> bool:
        if self.recorder.is_recording:
            logger.debug("Playback unavailable while recording")
            return False
        started = self.playback.start_playback()
        self._changed()
        return started

    def pause_playback(self) -> None:
        self.playback.pause_playback()
        self._changed()

    def seek(self, index: int) -> bool:
        if self.recorder.is_recording:
            return False
        moved = self.playback.seek(int(index))
        self._changed()
        return moved

    def _render_playback_frame(self, index: int, recorded: RecordedFrame) -> None:
        self.surface.sync_size(*self.source_size)
        draw_playback_frame(self.surface, recorded.landmarks, self.playback_theme)
        self._show_landmarks(recorded.landmarks)
        self.status = f"Frame {index + 1} of {len(self.recorder)}"
        self._changed()

    def _on_playback_finished(self) -> None:
        self.status = "Playback finished."
        self._changed()

    # ------------------------------------------------------------------
    # misc
    # ------------------------------------------------------------------

    def report_camera_failure(self, exc: Exception) -> None:
        logger.error(f"Unable to start camera: {exc}")
        self.status = CAMERA_UNAVAILABLE
        self._changed()

    def shutdown(self) -> None:
        """Stop playback and drop every pending timer."""
        self.playback.pause_playback()
        self.timers.cancel_all()

    def controls(self) -> ControlState:
        recording = self.recorder.is_recording
        playing = self.playback.is_playing
        count = len(self.recorder)
        idle = not recording and not playing
        return ControlState(
            is_recording=recording,
            is_playing=playing,
            frame_count=count,
            record_enabled=idle,
            record_label="Recording…" if recording else "Start Recording",
            stop_enabled=recording,
            play_enabled=idle and count > 0,
            pause_enabled=playing,
            clear_enabled=idle and count > 0,
            slider_enabled=count > 0 and not recording,
            slider_max=max(0, count - 1),
            slider_value=self.playback.index if count and not recording else 0,
        )

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self)
