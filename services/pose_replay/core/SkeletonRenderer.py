from typing import Optional, Sequence, Tuple
import cv2
import numpy as np

from services.pose_replay.core.config import (
    CAMERA_ALPHA,
    LIVE_THEME,
    PLAYBACK_BACKGROUND,
    PLAYBACK_BACKGROUND_ALPHA,
    PLAYBACK_THEME,
    VISIBILITY_THRESHOLD,
    Theme,
    hex_to_bgr,
)
from services.pose_replay.core.KeypointNormalizer import CanonicalFrame, CanonicalLandmark
from services.pose_replay.core.SkeletonGraph import SKELETON_CONNECTIONS, SkeletonEdge


class DrawingSurface:
    """BGR image the overlay is drawn onto, sized to match the source video."""

    def __init__(self, width: int = 640, height: int = 480):
        self.image = np.zeros((height, width, 3), dtype=np.uint8)

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        return int(self.image.shape[0])

    def sync_size(self, width: int, height: int) -> bool:
        """Resize to (width, height) if it changed. Returns True on resize."""
        if not width or not height:
            return False
        if self.width == width and self.height == height:
            return False
        self.image = np.zeros((int(height), int(width), 3), dtype=np.uint8)
        return True

    def clear(self) -> None:
        self.image[:] = 0


def is_keypoint_visible(landmark: Optional[CanonicalLandmark], threshold: float = VISIBILITY_THRESHOLD) -> bool:
    return landmark is not None and (landmark.score or 0.0) >= threshold


def _to_pixel(landmark: CanonicalLandmark, width: int, height: int) -> Tuple[int, int]:
    return int(round(landmark.x * width)), int(round(landmark.y * height))


def draw_skeleton(
    surface: DrawingSurface,
    landmarks: CanonicalFrame,
    theme: Theme,
    threshold: float = VISIBILITY_THRESHOLD,
    connections: Sequence[SkeletonEdge] = SKELETON_CONNECTIONS,
) -> None:
    """Draw bones, then landmark dots, for everything at or above ``threshold``.

    Coordinates are unit-square and get scaled to the surface size here;
    ``landmarks`` itself is left untouched.
    """
    width, height = surface.width, surface.height
    line_color = theme.line_bgr
    point_color = theme.point_bgr

    for start, end in connections:
        if start >= len(landmarks) or end >= len(landmarks):
            continue
        kp1, kp2 = landmarks[start], landmarks[end]
        if not is_keypoint_visible(kp1, threshold) or not is_keypoint_visible(kp2, threshold):
            continue
        cv2.line(
            surface.image,
            _to_pixel(kp1, width, height),
            _to_pixel(kp2, width, height),
            line_color,
            theme.line_width,
            cv2.LINE_AA,
        )

    for lm in landmarks:
        if not is_keypoint_visible(lm, threshold):
            continue
        cv2.circle(surface.image, _to_pixel(lm, width, height), theme.point_radius, point_color, -1, cv2.LINE_AA)


def draw_live_overlay(
    surface: DrawingSurface,
    landmarks: CanonicalFrame,
    camera_bgr: np.ndarray,
    theme: Theme = LIVE_THEME,
) -> None:
    """Camera image at reduced opacity with the live skeleton on top."""
    surface.clear()
    if camera_bgr is not None:
        if camera_bgr.shape[:2] != surface.image.shape[:2]:
            camera_bgr = cv2.resize(camera_bgr, (surface.width, surface.height))
        cv2.addWeighted(camera_bgr, CAMERA_ALPHA, surface.image, 1.0 - CAMERA_ALPHA, 0.0, dst=surface.image)
    draw_skeleton(surface, landmarks, theme)


def draw_playback_frame(
    surface: DrawingSurface,
    landmarks: CanonicalFrame,
    theme: Theme = PLAYBACK_THEME,
) -> None:
    """Recorded skeleton over a solid dark background."""
    surface.clear()
    background = tuple(int(round(c * PLAYBACK_BACKGROUND_ALPHA)) for c in hex_to_bgr(PLAYBACK_BACKGROUND))
    surface.image[:] = background
    draw_skeleton(surface, landmarks, theme)
