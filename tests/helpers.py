from services.pose_replay.core.joints import KEYPOINT_LABELS
from services.pose_replay.core.KeypointNormalizer import CanonicalLandmark


class ManualClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


def make_frame(score: float = 0.9, x: float = 0.5, y: float = 0.5):
    return [
        CanonicalLandmark(name=label, index=i, x=x, y=y, z=0.0, score=score)
        for i, label in enumerate(KEYPOINT_LABELS)
    ]
