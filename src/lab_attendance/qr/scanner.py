from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..attendance.model import ScanResult
from ..attendance.resolver import AttendanceResolver
from ..core.constants import DEFAULT_SCAN_REPEAT_COOLDOWN
from ..core.enums import ScanRejection, ScanState
from ..core.exceptions import DomainError, InvalidPayloadError, ScanRejected, TransportError
from .camera import FrameSource
from .decoder import decode_payloads

logger = logging.getLogger(__name__)

_UNREADABLE = "\x00unreadable"


@dataclass(frozen=True)
class ScanOutcome:
    payload: str
    result: Optional[ScanResult] = None
    error: Optional[DomainError] = None

    @property
    def success(self) -> bool:
        return self.result is not None

    @property
    def reason(self) -> Optional[ScanRejection]:
        return self.error.reason if isinstance(self.error, ScanRejected) else None

    @property
    def message(self) -> str:
        if self.result is not None:
            return f"Attendance marked for {self.result.name}"
        if isinstance(self.error, TransportError):
            return f"{self.error} (please try again)"
        return str(self.error)


class QRScanner:
    """Camera scanning loop feeding decoded payloads to the resolver.

    Payloads are resolved one at a time: a new frame is not processed until the
    resolution for the previous payload has returned. A payload seen again within
    `repeat_cooldown` seconds (a code held in front of the camera) is ignored.
    """

    def __init__(
        self,
        frame_source: FrameSource,
        resolver: AttendanceResolver,
        *,
        operator_id: Optional[int],
        decode: Callable[[Any], list[str]] = decode_payloads,
        on_result: Optional[Callable[[ScanOutcome], None]] = None,
        repeat_cooldown: float = DEFAULT_SCAN_REPEAT_COOLDOWN,
        idle_delay: float = 0.05,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        self._frames = frame_source
        self._resolver = resolver
        self._operator_id = operator_id
        self._decode = decode
        self._on_result = on_result
        self._repeat_cooldown = float(repeat_cooldown)
        self._idle_delay = float(idle_delay)
        self._monotonic = monotonic

        self._lock = threading.Lock()
        self._running = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._state = ScanState.IDLE
        self._last_seen: dict[str, float] = {}

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def running(self) -> bool:
        return self._running.is_set()

    def start(self) -> None:
        if self._running.is_set():
            return

        # TransportError here (camera missing / permission denied) goes to the caller.
        self._frames.open()
        self._running.set()
        self._thread = threading.Thread(target=self._worker, name="qr-scanner", daemon=True)
        self._thread.start()
        logger.info("Scanner started")

    def stop(self, *, timeout: float = 5.0) -> None:
        self._running.clear()
        thread = self._thread
        if thread and thread is not threading.current_thread():
            thread.join(timeout)
            if thread.is_alive():
                logger.warning("Scanner worker did not stop within %.1fs", timeout)
        self._thread = None
        logger.info("Scanner stopped")

    def process_frame(self, frame: Any) -> list[ScanOutcome]:
        try:
            payloads = self._decode(frame)
        except InvalidPayloadError as e:
            # Unreadable symbol: reported once per cooldown like any other code.
            if self._is_repeat(_UNREADABLE):
                return []
            logger.info("Unreadable QR symbol: %s", e)
            with self._lock:
                return [self._report(ScanOutcome(payload="", error=e), ScanState.REJECTED)]

        outcomes: list[ScanOutcome] = []
        for payload in payloads:
            if self._is_repeat(payload):
                continue
            outcomes.append(self.handle_payload(payload))
        return outcomes

    def handle_payload(self, payload: str) -> ScanOutcome:
        with self._lock:
            try:
                result = self._resolver.resolve(payload, operator_id=self._operator_id, on_state=self._set_state)
                outcome = ScanOutcome(payload=payload, result=result)
                self._set_state(ScanState.SUCCESS)
            except TransportError as e:
                logger.warning("Scan of %r failed: %s", payload, e, exc_info=True)
                outcome = ScanOutcome(payload=payload, error=e)
                self._set_state(ScanState.REJECTED)
            except DomainError as e:
                logger.info("Scan of %r rejected: %s", payload, e)
                outcome = ScanOutcome(payload=payload, error=e)
                self._set_state(ScanState.REJECTED)

            return self._report(outcome)

    def _report(self, outcome: ScanOutcome, state: Optional[ScanState] = None) -> ScanOutcome:
        if state is not None:
            self._set_state(state)
        if self._on_result:
            self._on_result(outcome)
        self._set_state(ScanState.IDLE)
        return outcome

    def _is_repeat(self, payload: str) -> bool:
        now = self._monotonic()
        # Forget codes that have been out of view for a full cooldown.
        for seen_payload, seen_at in list(self._last_seen.items()):
            if now - seen_at >= self._repeat_cooldown:
                del self._last_seen[seen_payload]

        repeat = payload in self._last_seen
        self._last_seen[payload] = now
        return repeat

    def _set_state(self, state: ScanState) -> None:
        self._state = state

    def _worker(self) -> None:
        try:
            while self._running.is_set():
                frame = self._frames.read()
                if frame is None:
                    time.sleep(self._idle_delay)
                    continue
                try:
                    self.process_frame(frame)
                except Exception:
                    logger.exception("Scanner frame processing failed")
                    self._set_state(ScanState.IDLE)
        finally:
            self._frames.release()
