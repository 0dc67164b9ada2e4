from typing import Iterable, Mapping, Tuple

from services.pose_replay.core.joints import KEYPOINT_INDEX

SkeletonEdge = Tuple[int, int]

SKELETON_LABEL_CONNECTIONS: Tuple[Tuple[str, str], ...] = (
    # face
    ("nose", "left_eye_inner"),
    ("nose", "right_eye_inner"),
    ("left_eye_inner", "left_eye"),
    ("left_eye", "left_eye_outer"),
    ("right_eye_inner", "right_eye"),
    ("right_eye", "right_eye_outer"),
    ("left_eye_outer", "left_ear"),
    ("right_eye_outer", "right_ear"),
    ("nose", "mouth_left"),
    ("nose", "mouth_right"),
    ("mouth_left", "mouth_right"),
    # arms
    ("left_shoulder", "right_shoulder"),
    ("left_shoulder", "left_elbow"),
    ("left_elbow", "left_wrist"),
    ("left_wrist", "left_pinky"),
    ("left_wrist", "left_index"),
    ("left_wrist", "left_thumb"),
    ("right_shoulder", "right_elbow"),
    ("right_elbow", "right_wrist"),
    ("right_wrist", "right_pinky"),
    ("right_wrist", "right_index"),
    ("right_wrist", "right_thumb"),
    # torso
    ("left_shoulder", "left_hip"),
    ("right_shoulder", "right_hip"),
    ("left_hip", "right_hip"),
    # legs
    ("left_hip", "left_knee"),
    ("left_knee", "left_ankle"),
    ("left_ankle", "left_heel"),
    ("left_heel", "left_foot_index"),
    ("right_hip", "right_knee"),
    ("right_knee", "right_ankle"),
    ("right_ankle", "right_heel"),
    ("right_heel", "right_foot_index"),
)


def build_skeleton_edges(
    label_pairs: Iterable[Tuple[str, str]],
    index: Mapping[str, int] = KEYPOINT_INDEX,
) -> Tuple[SkeletonEdge, ...]:
    """Resolve named bone pairs to index pairs, dropping any unknown name."""
    edges = []
    for start, end in label_pairs:
        start_index = index.get(start)
        end_index = index.get(end)
        if start_index is None or end_index is None:
            continue
        edges.append((start_index, end_index))
    return tuple(edges)


SKELETON_CONNECTIONS: Tuple[SkeletonEdge, ...] = build_skeleton_edges(SKELETON_LABEL_CONNECTIONS)
