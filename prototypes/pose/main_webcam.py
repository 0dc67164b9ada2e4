import argparse
import cv2

from services.pose_replay.core.config import PoseConfig, SessionConfig
from services.pose_replay.core.PoseLoop import PoseLoop
from services.pose_replay.core.SessionController import SessionController
from services.pose_replay.core.VideoFrameSource import CameraUnavailableError, VideoFrameSource
from services.pose_replay.utils.logger import logger, set_verbose

TRACKBAR = "frame"
KEY_HELP = "r: record  s: stop  p: play  space: pause  c: clear  q: quit"
# Longest waitKey spent waiting for a playback timer before the next camera read.
MAX_TIMER_WAIT_MS = 15


def build_backend(config: SessionConfig):
    if config.backend == "mediapipe":
        from services.pose_replay.core.MediaPipePoseBackend import MediaPipePoseBackend
        return MediaPipePoseBackend(config.pose)
    elif config.backend == "movenet":
        from services.pose_replay.core.MoveNetPoseBackend import MoveNetPoseBackend
        return MoveNetPoseBackend(config.pose)
    raise ValueError(f"Unknown backend: {config.backend}")


class WebcamWindow:
    """OpenCV window standing in for the buttons, labels and scrub slider."""

    def __init__(self, name: str, controller: SessionController):
        self.name = name
        self.controller = controller
        self.loop = None
        self._syncing = False
        cv2.namedWindow(self.name)
        cv2.createTrackbar(TRACKBAR, self.name, 0, 1, self._on_trackbar)

    def _on_trackbar(self, position: int) -> None:
        if self._syncing:
            return
        controls = self.controller.controls()
        if controls.slider_enabled:
            self.controller.seek(position)

    def _sync_trackbar(self) -> None:
        controls = self.controller.controls()
        self._syncing = True
        try:
            cv2.setTrackbarMax(TRACKBAR, self.name, max(1, controls.slider_max))
            cv2.setTrackbarPos(TRACKBAR, self.name, controls.slider_value)
        finally:
            self._syncing = False

    def _draw_labels(self, image) -> None:
        c = self.controller
        lines = [
            c.status,
            f"Visible: {c.visible_count} / {c.total_count}   {c.frame_rate.label}",
            KEY_HELP,
        ]
        for i, text in enumerate(lines):
            cv2.putText(image, text, (10, 24 + 22 * i), cv2.FONT_HERSHEY_SIMPLEX, 0.55, (255, 255, 255), 1, cv2.LINE_AA)

    def _handle_key(self, key: int) -> None:
        c = self.controller
        controls = c.controls()
        if key == ord("q"):
            if self.loop is not None:
                self.loop.stop()
        elif key == ord("r") and (controls.record_enabled or controls.stop_enabled):
            c.toggle_recording()
        elif key == ord("s") and controls.stop_enabled:
            c.stop_recording()
        elif key == ord("p") and controls.play_enabled:
            c.start_playback()
        elif key == ord(" ") and controls.pause_enabled:
            c.pause_playback()
        elif key == ord("c") and controls.clear_enabled:
            c.clear_recording()

    def _wait_ms(self) -> int:
        delay = self.controller.timers.next_delay_ms()
        if delay is None or delay > MAX_TIMER_WAIT_MS:
            return 1
        return max(1, int(round(delay)))

    def __call__(self, controller: SessionController) -> None:
        self._sync_trackbar()
        image = controller.surface.image.copy()
        self._draw_labels(image)
        cv2.imshow(self.name, image)
        self._handle_key(cv2.waitKey(self._wait_ms()) & 0xFF)

    def close(self) -> None:
        cv2.destroyWindow(self.name)


def main(config: SessionConfig) -> int:
    controller = SessionController(live_theme=config.live_theme, playback_theme=config.playback_theme)
    backend = build_backend(config)
    source = VideoFrameSource(config.source, config.width, config.height)

    try:
        source.open()
    except CameraUnavailableError as exc:
        controller.report_camera_failure(exc)
        backend.close()
        return 1

    window = WebcamWindow(config.window_name, controller)
    loop = PoseLoop(source, backend, controller, display=window)
    window.loop = loop
    logger.info(KEY_HELP)

    try:
        loop.run()
    finally:
        source.release()
        backend.close()
        window.close()
    return 0


def build_argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Live pose skeleton with record / replay")
    parser.add_argument("--source", default="0", help="webcam index or video file path")
    parser.add_argument("--width", type=int, default=960)
    parser.add_argument("--height", type=int, default=720)
    parser.add_argument("--backend", choices=("mediapipe", "movenet"), default="mediapipe")
    parser.add_argument("--model-complexity", type=int, default=1)
    parser.add_argument("--movenet-model", default=PoseConfig.movenet_model_path)
    parser.add_argument("--verbose", action="store_true")
    return parser


def config_from_args(args: argparse.Namespace) -> SessionConfig:
    source = int(args.source) if args.source.isdigit() else args.source
    return SessionConfig(
        source=source,
        width=args.width,
        height=args.height,
        backend=args.backend,
        pose=PoseConfig(model_complexity=args.model_complexity, movenet_model_path=args.movenet_model),
    )


if __name__ == "__main__":
    args = build_argparser().parse_args()
    set_verbose(args.verbose)
    raise SystemExit(main(config_from_args(args)))
