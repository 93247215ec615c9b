from __future__ import annotations

from typing import Any, Optional, Protocol

from ..core.exceptions import TransportError


class FrameSource(Protocol):
    def open(self) -> None:
        raise NotImplementedError

    def read(self) -> Optional[Any]:
        """Next frame, or None when no frame is ready."""

        raise NotImplementedError

    def release(self) -> None:
        raise NotImplementedError


class CameraFrameSource(FrameSource):
    """OpenCV camera; frames come out as grayscale arrays ready for pyzbar."""

    def __init__(self, index: int = 0):
        self._index = int(index)
        self._cap = None

    def open(self) -> None:
        import cv2

        cap = cv2.VideoCapture(self._index)
        if not cap.isOpened():
            cap.release()
            raise TransportError(f"Camera {self._index} unavailable. Check that camera access is allowed.")
        self._cap = cap

    def read(self) -> Optional[Any]:
        import cv2

        if self._cap is None:
            return None
        ok, frame = self._cap.read()
        if not ok:
            return None
        return cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)

    def release(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
