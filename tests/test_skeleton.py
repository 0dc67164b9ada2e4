import numpy as np
import pytest

from services.pose_replay.core.config import LIVE_THEME, PLAYBACK_THEME, Theme, hex_to_bgr
from services.pose_replay.core.joints import KEYPOINT_INDEX, NUM_KEYPOINTS
from services.pose_replay.core.SkeletonGraph import (
    SKELETON_CONNECTIONS,
    SKELETON_LABEL_CONNECTIONS,
    build_skeleton_edges,
)
from services.pose_replay.core.SkeletonRenderer import (
    DrawingSurface,
    draw_live_overlay,
    draw_playback_frame,
    draw_skeleton,
    is_keypoint_visible,
)

from helpers import make_frame

THEME = Theme(line_color="#00ff00", point_color="#0000ff", point_radius=4)


def test_edges_reference_valid_indices():
    assert len(SKELETON_CONNECTIONS) == len(SKELETON_LABEL_CONNECTIONS) == 33
    for start, end in SKELETON_CONNECTIONS:
        assert 0 <= start < NUM_KEYPOINTS
        assert 0 <= end < NUM_KEYPOINTS
    assert (KEYPOINT_INDEX["left_hip"], KEYPOINT_INDEX["left_knee"]) in SKELETON_CONNECTIONS


def test_unresolved_pairs_are_dropped():
    edges = build_skeleton_edges([("left_hip", "left_knee"), ("left_hip", "tail"), ("wing", "nose")])
    assert edges == ((23, 25),)


def test_edges_are_immutable():
    assert isinstance(SKELETON_CONNECTIONS, tuple)


def test_hex_to_bgr():
    assert hex_to_bgr("#22d3ee") == (0xEE, 0xD3, 0x22)
    with pytest.raises(ValueError):
        hex_to_bgr("#fff")


def test_visibility_threshold_is_inclusive():
    frame = make_frame(score=0.5)
    assert is_keypoint_visible(frame[0])
    frame[0].score = 0.499
    assert not is_keypoint_visible(frame[0])
    assert not is_keypoint_visible(None)


def test_surface_sync_size():
    surface = DrawingSurface(320, 240)
    assert surface.sync_size(640, 480)
    assert surface.image.shape == (480, 640, 3)
    assert not surface.sync_size(640, 480)
    assert not surface.sync_size(0, 480)
    assert surface.width == 640


def test_visible_point_is_drawn_and_hidden_point_is_not():
    surface = DrawingSurface(100, 100)
    frame = make_frame(score=0.0)
    frame[0].x, frame[0].y, frame[0].score = 0.5, 0.5, 0.9
    frame[1].x, frame[1].y, frame[1].score = 0.2, 0.2, 0.49

    draw_skeleton(surface, frame, THEME)

    assert tuple(surface.image[50, 50]) == THEME.point_bgr
    assert not surface.image[20, 20].any()


def test_bone_is_drawn_between_visible_endpoints():
    surface = DrawingSurface(100, 100)
    frame = make_frame(score=0.0)
    left, right = KEYPOINT_INDEX["left_shoulder"], KEYPOINT_INDEX["right_shoulder"]
    frame[left].x, frame[left].y, frame[left].score = 0.2, 0.5, 1.0
    frame[right].x, frame[right].y, frame[right].score = 0.8, 0.5, 1.0

    draw_skeleton(surface, frame, THEME)

    midpoint = surface.image[50, 50].astype(int)
    assert np.abs(midpoint - np.array(THEME.line_bgr)).max() <= 2


def test_bone_is_skipped_when_one_endpoint_is_hidden():
    surface = DrawingSurface(100, 100)
    frame = make_frame(score=0.0)
    left, right = KEYPOINT_INDEX["left_shoulder"], KEYPOINT_INDEX["right_shoulder"]
    frame[left].x, frame[left].y, frame[left].score = 0.2, 0.5, 1.0
    frame[right].x, frame[right].y, frame[right].score = 0.8, 0.5, 0.2

    draw_skeleton(surface, frame, THEME)

    assert not surface.image[50, 50].any()


def test_drawing_does_not_mutate_frame():
    frame = make_frame(x=0.25, y=0.75)
    draw_skeleton(DrawingSurface(64, 48), frame, THEME)
    assert frame[3].x == 0.25 and frame[3].y == 0.75


def test_playback_frame_clears_to_background():
    surface = DrawingSurface(40, 30)
    surface.image[:] = 255
    draw_playback_frame(surface, make_frame(score=0.0), PLAYBACK_THEME)
    assert tuple(surface.image[0, 0]) == (38, 21, 14)


def test_live_overlay_dims_camera_image():
    surface = DrawingSurface(40, 30)
    camera = np.full((30, 40, 3), 200, dtype=np.uint8)
    draw_live_overlay(surface, make_frame(score=0.0), camera, LIVE_THEME)
    assert tuple(surface.image[5, 5]) == (180, 180, 180)


def test_live_overlay_resizes_camera_image():
    surface = DrawingSurface(40, 30)
    camera = np.full((60, 80, 3), 100, dtype=np.uint8)
    draw_live_overlay(surface, make_frame(score=0.0), camera)
    assert surface.image.shape == (30, 40, 3)
    assert tuple(surface.image[10, 10]) == (90, 90, 90)
