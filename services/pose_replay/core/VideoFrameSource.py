import cv2
from typing import Optional, Tuple, Union
import numpy as np


class CameraUnavailableError(RuntimeError):
    """Raised when the webcam or video file cannot be opened."""


class VideoFrameSource:
    def __init__(self, source: Union[int, str] = 0, width: Optional[int] = 960, height: Optional[int] = 720):
        """
        source: webcam index or path to a video file
        width/height: ideal capture size requested from a webcam (ignored for files)
        """
        self.source = source
        self.width = width
        self.height = height
        self._cap = None

    def open(self) -> "VideoFrameSource":
        cap = cv2.VideoCapture(self.source)
        if not cap.isOpened():
            cap.release()
            raise CameraUnavailableError(f"Cannot open video source: {self.source!r}")

        if isinstance(self.source, int):
            if self.width:
                cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
            if self.height:
                cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)

        self._cap = cap
        return self

    def read(self) -> Tuple[bool, Optional[np.ndarray]]:
        if self._cap is None:
            return False, None
        ok, frame_bgr = self._cap.read()
        if not ok:
            return False, None
        return True, frame_bgr

    def release(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None

    def __enter__(self) -> "VideoFrameSource":
        return self.open()

    def __exit__(self, *exc) -> None:
        self.release()
