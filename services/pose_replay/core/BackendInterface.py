from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional
import numpy as np


@dataclass
class RawKeypoint:
    """One detector keypoint before normalization.

    Every field is optional; detectors fill in what they have. ``x``/``y``
    are in pixel space of the frame the detector saw. ``score`` and
    ``visibility`` are alternative names for the same confidence value.
    """

    name: Optional[str] = None
    index: Optional[int] = None
    x: Optional[float] = None
    y: Optional[float] = None
    z: Optional[float] = None
    score: Optional[float] = None
    visibility: Optional[float] = None

    @classmethod
    def coerce(cls, point: Any) -> "RawKeypoint":
        """Resolve a mapping, a RawKeypoint or any landmark-like object.

        Missing keys / attributes become None so the normalizer can apply
        its defaults in one place.
        """
        if isinstance(point, RawKeypoint):
            return point
        if isinstance(point, Mapping):
            get = point.get
        else:
            def get(field, default=None):
                return getattr(point, field, default)

        return cls(
            name=get("name"),
            index=get("index"),
            x=get("x"),
            y=get("y"),
            z=get("z"),
            score=get("score"),
            visibility=get("visibility"),
        )


class PoseBackend(ABC):
    """Abstract base for any pose model (MediaPipe, MoveNet, etc.)."""

    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def process(self, frame_rgb: np.ndarray) -> List[RawKeypoint]:
        """Run pose estimation on one RGB frame and return pixel-space keypoints.

        An empty list means no person was found.
        """
        ...

    def close(self) -> None:
        """Release model resources. Default is a no-op."""
