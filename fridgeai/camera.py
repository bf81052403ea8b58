"""USB camera capture using OpenCV."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from .models import EncodedImage


class CaptureError(RuntimeError):
    """The camera could not be opened or did not return a frame."""


@dataclass
class CameraCapture:
    camera_index: int
    image: EncodedImage
    image_path: str | None
    captured_at: str  # ISO8601


class FridgeCamera:
    """Grab one still frame from a USB camera and encode it as JPEG."""

    def __init__(self, camera_index: int = 0, save_dir: str | None = "/tmp/fridgeai") -> None:
        self._camera_index = camera_index
        self._save_dir = Path(save_dir) if save_dir else None
        if self._save_dir is not None:
            self._save_dir.mkdir(parents=True, exist_ok=True)

    def capture(self) -> CameraCapture:
        """Capture a single frame, releasing the device before returning."""
        try:
            import cv2
        except ImportError:
            raise ImportError(
                "opencv-python is required: pip install opencv-python"
            ) from None

        cap = cv2.VideoCapture(self._camera_index)
        if not cap.isOpened():
            raise CaptureError(
                f"camera {self._camera_index} could not be opened. "
                f"Check that it is connected and not in use."
            )

        try:
            ret, frame = cap.read()
            if not ret or frame is None:
                raise CaptureError(
                    f"camera {self._camera_index} did not return a frame"
                )
        finally:
            cap.release()

        ok, buf = cv2.imencode(".jpg", frame)
        if not ok:
            raise CaptureError("frame could not be encoded as JPEG")
        image = EncodedImage.from_bytes(buf.tobytes(), "image/jpeg")

        now = datetime.now(timezone.utc)
        image_path = None
        if self._save_dir is not None:
            timestamp = now.strftime("%Y%m%d_%H%M%S")
            filepath = self._save_dir / f"cam{self._camera_index}_{timestamp}.jpg"
            filepath.write_bytes(image.data)
            image_path = str(filepath)

        return CameraCapture(
            camera_index=self._camera_index,
            image=image,
            image_path=image_path,
            captured_at=now.isoformat(),
        )

    @staticmethod
    def list_cameras(max_check: int = 10) -> list[int]:
        """List available USB camera indices by probing."""
        try:
            import cv2
        except ImportError:
            raise ImportError(
                "opencv-python is required: pip install opencv-python"
            ) from None

        available: list[int] = []
        for i in range(max_check):
            cap = cv2.VideoCapture(i)
            if cap.isOpened():
                available.append(i)
                cap.release()
        return available
