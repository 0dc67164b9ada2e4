import argparse

from services.pose_replay.core.config import PoseConfig, SessionConfig
from services.pose_replay.core.PoseLoop import PoseLoop
from services.pose_replay.core.SessionController import SessionController
from services.pose_replay.core.VideoFrameSource import VideoFrameSource
from prototypes.pose.main_webcam import build_backend


def main(*, video_path: str, backend: str = "mediapipe"):
    config = SessionConfig(source=video_path, backend=backend, pose=PoseConfig())
    controller = SessionController()
    pose_backend = build_backend(config)

    with VideoFrameSource(video_path, width=None, height=None) as source:
        controller.start_recording()
        loop = PoseLoop(source, pose_backend, controller)
        processed = loop.run()
        controller.stop_recording()
    pose_backend.close()

    frames = controller.recorder.frames
    print(f"Processed {processed} frames")
    print(controller.status)
    if frames:
        duration = (frames[-1].timestamp - frames[0].timestamp) / 1000.0
        print(f"Recording spans {duration:.2f} s of capture time")
        first = frames[0].landmarks
        print("Landmarks per frame:", len(first))
        visible = [sum(1 for lm in f.landmarks if lm.score >= 0.5) for f in frames]
        print(f"Mean visible landmarks: {sum(visible) / len(visible):.1f}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Record landmarks from a video file")
    parser.add_argument("video_path")
    parser.add_argument("--backend", choices=("mediapipe", "movenet"), default="mediapipe")
    args = parser.parse_args()
    main(video_path=args.video_path, backend=args.backend)
