"""Map detector output onto the fixed 33-point canonical frame.

Whatever the detector returns (empty, partial, reordered, extra or unknown
names) the result always has one entry per canonical label, in label
order, with x/y scaled into the unit square.
"""

from dataclasses import dataclass, replace
from typing import Dict, Iterable, List

from services.pose_replay.core.BackendInterface import RawKeypoint
from services.pose_replay.core.joints import KEYPOINT_INDEX, KEYPOINT_LABELS


@dataclass
class CanonicalLandmark:
    name: str
    index: int
    x: float
    y: float
    z: float
    score: float


CanonicalFrame = List[CanonicalLandmark]


def _resolve_name(point: RawKeypoint, position: int) -> str:
    if point.name is not None:
        return point.name
    fallback_index = point.index if point.index is not None else position
    if 0 <= fallback_index < len(KEYPOINT_LABELS):
        return KEYPOINT_LABELS[fallback_index]
    return f"point_{fallback_index}"


def _scale(value, size) -> float:
    value = float(value) if value is not None else 0.0
    # A zero-sized frame leaves coordinates as they are instead of dividing by it.
    if not size or size <= 0:
        return value
    return value / float(size)


def _confidence(point: RawKeypoint) -> float:
    if point.score is not None:
        return float(point.score)
    if point.visibility is not None:
        return float(point.visibility)
    return 0.0


def normalize_keypoints(raw_points: Iterable, width: float, height: float) -> CanonicalFrame:
    """Build a canonical frame from raw detector keypoints.

    Args:
        raw_points: RawKeypoint instances, mappings or landmark-like objects.
        width: Pixel width of the frame the points were detected on.
        height: Pixel height of that frame.
    """
    by_name: Dict[str, CanonicalLandmark] = {}

    if raw_points is None:
        raw_points = ()

    for position, item in enumerate(raw_points):
        point = RawKeypoint.coerce(item)
        name = _resolve_name(point, position)
        by_name[name] = CanonicalLandmark(
            name=name,
            index=KEYPOINT_INDEX.get(name, position),
            x=_scale(point.x, width),
            y=_scale(point.y, height),
            z=float(point.z) if point.z is not None else 0.0,
            score=_confidence(point),
        )

    frame: CanonicalFrame = []
    for index, label in enumerate(KEYPOINT_LABELS):
        landmark = by_name.get(label)
        if landmark is None:
            landmark = CanonicalLandmark(name=label, index=index, x=0.0, y=0.0, z=0.0, score=0.0)
        frame.append(landmark)
    return frame


def clone_frame(frame: CanonicalFrame) -> CanonicalFrame:
    """Independent copy of a frame; later edits to ``frame`` do not leak into it."""
    return [replace(landmark) for landmark in frame]
