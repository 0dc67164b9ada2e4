"""Shared configuration for the live capture and replay session."""

from dataclasses import dataclass, field
from typing import Tuple, Union

# Landmarks at or above this score are drawn and counted as visible.
VISIBILITY_THRESHOLD = 0.5


def hex_to_bgr(color: str) -> Tuple[int, int, int]:
    """Convert ``#rrggbb`` into the BGR tuple OpenCV draws with."""
    value = color.lstrip("#")
    if len(value) != 6:
        raise ValueError(f"Expected a #rrggbb color, got {color!r}")
    r, g, b = (int(value[i:i + 2], 16) for i in (0, 2, 4))
    return (b, g, r)


@dataclass(frozen=True)
class Theme:
    """Colors and sizes for one skeleton drawing style.

    Attributes:
        line_color: Bone color as ``#rrggbb``.
        point_color: Landmark dot color as ``#rrggbb``.
        point_radius: Landmark dot radius in pixels.
        line_width: Bone thickness in pixels.
    """

    line_color: str
    point_color: str
    point_radius: int
    line_width: int = 4

    @property
    def line_bgr(self) -> Tuple[int, int, int]:
        return hex_to_bgr(self.line_color)

    @property
    def point_bgr(self) -> Tuple[int, int, int]:
        return hex_to_bgr(self.point_color)


LIVE_THEME = Theme(line_color="#22d3ee", point_color="#f97316", point_radius=4)
PLAYBACK_THEME = Theme(line_color="#a855f7", point_color="#facc15", point_radius=5)

# rgba(15, 23, 42, 0.9) behind the playback skeleton.
PLAYBACK_BACKGROUND = "#0f172a"
PLAYBACK_BACKGROUND_ALPHA = 0.9
CAMERA_ALPHA = 0.9


@dataclass(frozen=True)
class PoseConfig:
    """Detector settings, shared by the MediaPipe and MoveNet backends."""

    model_complexity: int = 1
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    movenet_model_path: str = "models/movenet_single_pose_lightning.tflite"


@dataclass(frozen=True)
class SessionConfig:
    """Settings for one webcam session.

    Attributes:
        source: Webcam index or a video file path.
        width: Ideal capture width requested from the camera.
        height: Ideal capture height requested from the camera.
        backend: ``"mediapipe"`` or ``"movenet"``.
        window_name: Title of the OpenCV preview window.
    """

    source: Union[int, str] = 0
    width: int = 960
    height: int = 720
    backend: str = "mediapipe"
    window_name: str = "Pose Replay"
    pose: PoseConfig = field(default_factory=PoseConfig)
    live_theme: Theme = LIVE_THEME
    playback_theme: Theme = PLAYBACK_THEME
