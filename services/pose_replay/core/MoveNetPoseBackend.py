from typing import Dict, List, Optional
import numpy as np

from services.pose_replay.core.BackendInterface import PoseBackend, RawKeypoint
from services.pose_replay.core.config import PoseConfig
from services.pose_replay.core.joints import COCO17_LABELS
# Most suitable for detecting the pose of a single person who is 3ft ~ 6ft away from a
# device's webcam that captures the video stream.

INPUT_SIZE = (192, 192)


class MoveNetPoseBackend(PoseBackend):
    """MoveNet single-pose (TFLite), 17 COCO keypoints.

    Keypoints come out named, so the normalizer places them at their
    BlazePose positions and fills the 16 landmarks MoveNet lacks with
    zero-score placeholders.
    """

    def __init__(self, config: Optional[PoseConfig] = None):
        config = config or PoseConfig()
        try:
            import tensorflow as tf  # type: ignore
        except ImportError as exc:
            raise RuntimeError("TensorFlow is not installed. Install it with: pip install tensorflow") from exc

        self._tf = tf
        self.interpreter = tf.lite.Interpreter(model_path=config.movenet_model_path)
        self.interpreter.allocate_tensors()
        self.input_details = self.interpreter.get_input_details()
        self.output_details = self.interpreter.get_output_details()

    def name(self) -> str:
        return "movenet_lightning"

    @staticmethod
    def full_frame_region(image_height: int, image_width: int) -> Dict[str, float]:
        """Square crop covering the whole image, padded on the short side.

        Values are normalized to the image size, so the padded side extends
        past [0, 1].
        """
        if image_width > image_height:
            box_height = image_width / image_height
            box_width = 1.0
            y_min = (image_height / 2 - image_width / 2) / image_height
            x_min = 0.0
        else:
            box_height = 1.0
            box_width = image_height / image_width
            y_min = 0.0
            x_min = (image_width / 2 - image_height / 2) / image_width

        return {
            "y_min": y_min,
            "x_min": x_min,
            "height": box_height,
            "width": box_width,
        }

    def _infer(self, frame_rgb: np.ndarray, region: Dict[str, float]) -> np.ndarray:
        tf = self._tf
        box = [[
            region["y_min"],
            region["x_min"],
            region["y_min"] + region["height"],
            region["x_min"] + region["width"],
        ]]
        model_input = tf.image.crop_and_resize(
            tf.expand_dims(frame_rgb, axis=0), boxes=box, box_indices=[0], crop_size=INPUT_SIZE
        )
        model_input = tf.cast(model_input, dtype=tf.float32)

        self.interpreter.set_tensor(self.input_details[0]["index"], model_input.numpy())
        self.interpreter.invoke()
        # [1, 1, 17, 3] as (y, x, score) relative to the crop
        return self.interpreter.get_tensor(self.output_details[0]["index"])[0, 0]

    def process(self, frame_rgb: np.ndarray) -> List[RawKeypoint]:
        image_height, image_width = frame_rgb.shape[:2]
        region = self.full_frame_region(image_height, image_width)
        output = self._infer(frame_rgb, region)

        keypoints = []
        for index, label in enumerate(COCO17_LABELS):
            y_rel, x_rel, score = (float(v) for v in output[index])
            x_norm = region["x_min"] + region["width"] * x_rel
            y_norm = region["y_min"] + region["height"] * y_rel
            keypoints.append(
                RawKeypoint(
                    name=label,
                    x=x_norm * image_width,
                    y=y_norm * image_height,
                    z=0.0,  # MoveNet doesn't provide z
                    score=score,
                )
            )
        return keypoints
