from typing import List, Optional
import numpy as np

from services.pose_replay.core.BackendInterface import PoseBackend, RawKeypoint
from services.pose_replay.core.config import PoseConfig
from services.pose_replay.core.joints import KEYPOINT_LABELS


class MediaPipePoseBackend(PoseBackend):
    """MediaPipe Pose (BlazePose, 33 landmarks).

    MediaPipe reports normalized coordinates; they are converted back to
    pixels so every backend hands the normalizer the same kind of input.
    """

    def __init__(self, config: Optional[PoseConfig] = None):
        config = config or PoseConfig()
        try:
            import mediapipe as mp  # type: ignore
        except ImportError as exc:
            raise RuntimeError("MediaPipe is not installed. Install it with: pip install mediapipe") from exc

        self._pose = mp.solutions.pose.Pose(
            static_image_mode=False,
            model_complexity=config.model_complexity,
            enable_segmentation=False,
            min_detection_confidence=config.min_detection_confidence,
            min_tracking_confidence=config.min_tracking_confidence,
        )

    def name(self) -> str:
        return "mediapipe_pose"

    def process(self, frame_rgb: np.ndarray) -> List[RawKeypoint]:
        height, width = frame_rgb.shape[:2]
        results = self._pose.process(frame_rgb)
        keypoints: List[RawKeypoint] = []

        if getattr(results, "pose_landmarks", None):
            for index, lm in enumerate(results.pose_landmarks.landmark):
                keypoints.append(
                    RawKeypoint(
                        name=KEYPOINT_LABELS[index] if index < len(KEYPOINT_LABELS) else None,
                        index=index,
                        x=lm.x * width,
                        y=lm.y * height,
                        z=lm.z,
                        visibility=lm.visibility,
                    )
                )

        return keypoints

    def close(self) -> None:
        if self._pose is not None:
            self._pose.close()
            self._pose = None
