"""Real-time replay of a FrameRecorder recording.

Frame i is due at playback start plus (timestamp[i] - timestamp[0]), so
jitter and dropped-frame pauses replay as they happened. Only one advance is ever pending: pause, seek, clear and start
all cancel it before touching the cursor, otherwise a stale advance
could fire later and overwrite the frame the user picked.
"""

from typing import Callable, Optional

from services.pose_replay.recording.FrameRecorder import FrameRecorder, RecordedFrame
from services.pose_replay.recording.TimerQueue import TimerHandle, TimerQueue
from services.pose_replay.utils.logger import logger

RenderCallback = Callable[[int, RecordedFrame], None]


class PlaybackScheduler:
    def __init__(
        self,
        recorder: FrameRecorder,
        timers: TimerQueue,
        on_render: RenderCallback,
        on_finish: Optional[Callable[[], None]] = None,
    ):
        self.recorder = recorder
        self.timers = timers
        self.on_render = on_render
        self.on_finish = on_finish

        self.index = 0
        self.is_playing = False
        self._pending: Optional[TimerHandle] = None
        # clock time that corresponds to recording timestamp 0
        self._origin = 0.0

        recorder.add_clear_listener(self._on_recording_dropped)

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _render(self, index: int) -> None:
        self.index = index
        self.on_render(index, self.recorder[index])

    def start_playback(self) -> bool:
        if not len(self.recorder):
            logger.debug("start_playback() ignored: recording is empty")
            return False
        if self.recorder.is_recording:
            logger.debug("start_playback() ignored: still recording")
            return False
        self._cancel_pending()
        self.is_playing = True
        self._origin = self.timers.clock() - self.recorder[0].timestamp
        self._render(0)
        self._schedule_next()
        return True

    def _schedule_next(self) -> None:
        self._cancel_pending()
        if not self.is_playing:
            return

        next_index = self.index + 1
        if next_index >= len(self.recorder):
            self._finish()
            return

        # Deadlines hang off the recording, not off when the last advance ran,
        # so a late pump delays one frame instead of every frame after it.
        deadline = self._origin + self.recorder[next_index].timestamp
        self._pending = self.timers.call_at(deadline, lambda: self._advance(next_index))

    def _advance(self, next_index: int) -> None:
        self._pending = None
        if not self.is_playing or next_index >= len(self.recorder):
            return
        self._render(next_index)
        self._schedule_next()

    def _finish(self) -> None:
        self.pause_playback()
        if len(self.recorder):
            # last frame is already on screen; only the cursor needs pinning
            self.index = len(self.recorder) - 1
        logger.debug("Playback finished")
        if self.on_finish is not None:
            self.on_finish()

    def pause_playback(self) -> None:
        self._cancel_pending()
        self.is_playing = False

    def seek(self, index: int) -> bool:
        """Jump to ``index`` and stay paused there. Out-of-range is ignored."""
        if not 0 <= index < len(self.recorder):
            logger.debug(f"seek({index}) ignored: {len(self.recorder)} frames recorded")
            return False
        self.pause_playback()
        self._render(index)
        return True

    def clear_recording(self) -> None:
        self.recorder.clear()

    def _on_recording_dropped(self) -> None:
        self.pause_playback()
        self.index = 0
