import pytest

from services.pose_replay.core.BackendInterface import RawKeypoint
from services.pose_replay.core.joints import COCO17_LABELS, KEYPOINT_INDEX, KEYPOINT_LABELS, NUM_KEYPOINTS
from services.pose_replay.core.KeypointNormalizer import clone_frame, normalize_keypoints

from helpers import make_frame


def test_empty_input_gives_full_zeroed_frame():
    frame = normalize_keypoints([], 640, 480)
    assert len(frame) == NUM_KEYPOINTS == 33
    assert [lm.name for lm in frame] == KEYPOINT_LABELS
    assert [lm.index for lm in frame] == list(range(33))
    assert all((lm.x, lm.y, lm.z, lm.score) == (0.0, 0.0, 0.0, 0.0) for lm in frame)


def test_none_input_is_treated_as_empty():
    assert len(normalize_keypoints(None, 640, 480)) == 33


def test_named_points_are_scaled_and_reordered():
    raw = [
        {"name": "right_knee", "x": 320, "y": 240, "z": -0.2, "score": 0.8},
        {"name": "nose", "x": 64, "y": 48, "visibility": 0.6},
    ]
    frame = normalize_keypoints(raw, 640, 480)

    knee = frame[KEYPOINT_INDEX["right_knee"]]
    assert knee.name == "right_knee"
    assert knee.index == 26
    assert knee.x == pytest.approx(0.5)
    assert knee.y == pytest.approx(0.5)
    assert knee.z == pytest.approx(-0.2)
    assert knee.score == pytest.approx(0.8)

    nose = frame[0]
    assert (nose.x, nose.y) == (pytest.approx(0.1), pytest.approx(0.1))
    assert nose.score == pytest.approx(0.6)


def test_score_wins_over_visibility():
    frame = normalize_keypoints([RawKeypoint(name="nose", score=0.3, visibility=0.9)], 10, 10)
    assert frame[0].score == pytest.approx(0.3)


def test_unnamed_points_fall_back_to_position():
    raw = [{"x": 10, "y": 20, "score": 1.0}, {"x": 30, "y": 40, "score": 1.0}]
    frame = normalize_keypoints(raw, 100, 100)
    assert frame[0].x == pytest.approx(0.1)
    assert frame[1].name == "left_eye_inner"
    assert frame[1].y == pytest.approx(0.4)


def test_explicit_index_is_used_for_unnamed_points():
    frame = normalize_keypoints([RawKeypoint(index=11, x=50, y=50, score=0.7)], 100, 100)
    assert frame[11].name == "left_shoulder"
    assert frame[11].score == pytest.approx(0.7)
    assert frame[0].score == 0.0


def test_unknown_names_and_extra_points_are_ignored():
    raw = [{"name": "tail", "x": 1, "y": 1, "score": 1.0}] + [
        {"x": i, "y": i, "score": 1.0} for i in range(40)
    ]
    frame = normalize_keypoints(raw, 100, 100)
    assert len(frame) == 33
    assert all(lm.name != "tail" and not lm.name.startswith("point_") for lm in frame)


def test_coco_names_land_on_canonical_slots():
    raw = [RawKeypoint(name=label, x=1.0, y=1.0, score=0.9) for label in COCO17_LABELS]
    frame = normalize_keypoints(raw, 2, 2)
    filled = {lm.name for lm in frame if lm.score > 0}
    assert filled == set(COCO17_LABELS)
    assert frame[KEYPOINT_INDEX["left_hip"]].x == pytest.approx(0.5)


def test_missing_fields_default_to_zero():
    frame = normalize_keypoints([{"name": "left_wrist"}], 640, 480)
    wrist = frame[KEYPOINT_INDEX["left_wrist"]]
    assert (wrist.x, wrist.y, wrist.z, wrist.score) == (0.0, 0.0, 0.0, 0.0)


def test_zero_sized_frame_does_not_raise():
    frame = normalize_keypoints([{"name": "nose", "x": 0.25, "y": 0.75, "score": 1.0}], 0, 0)
    assert frame[0].x == pytest.approx(0.25)
    assert frame[0].y == pytest.approx(0.75)


def test_renormalizing_canonical_frame_is_a_no_op():
    original = make_frame(score=0.7, x=0.3, y=0.6)
    original[5].score = 0.1
    assert normalize_keypoints(original, 1, 1) == original


def test_clone_frame_is_independent():
    frame = make_frame()
    copy = clone_frame(frame)
    frame[0].x = 0.99
    assert copy[0].x == pytest.approx(0.5)
    assert copy is not frame


def test_coerce_reads_attribute_objects():
    class Landmark:
        def __init__(self):
            self.x, self.y, self.z, self.visibility = 0.1, 0.2, 0.3, 0.4

    point = RawKeypoint.coerce(Landmark())
    assert point.name is None and point.score is None
    assert (point.x, point.y, point.z, point.visibility) == (0.1, 0.2, 0.3, 0.4)


def test_movenet_full_frame_region_pads_short_side():
    from services.pose_replay.core.MoveNetPoseBackend import MoveNetPoseBackend

    region = MoveNetPoseBackend.full_frame_region(480, 640)
    assert region["width"] == pytest.approx(1.0)
    assert region["height"] == pytest.approx(640 / 480)
    assert region["y_min"] == pytest.approx(-80 / 480)
    assert region["x_min"] == 0.0
