"""Run a camera scan station in the terminal.

Each decoded code is resolved against the database and the outcome printed.
Stop with Ctrl+C.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import time

from dotenv import load_dotenv

from lab_attendance.config import get_settings_module
from lab_attendance.container import build_container
from lab_attendance.qr.camera import CameraFrameSource
from lab_attendance.qr.scanner import QRScanner, ScanOutcome


def print_outcome(outcome: ScanOutcome) -> None:
    if outcome.success:
        r = outcome.result
        print(f"OK   {r.enrollment:<12} {r.name:<30} lab={r.lab_no} system={r.system_no}")
    else:
        print(f"FAIL {outcome.payload:<12} {outcome.message}")


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())

    parser = argparse.ArgumentParser(description="QR attendance scan station")
    parser.add_argument("--operator-id", type=int, default=None)
    parser.add_argument("--camera", type=int, default=int(getattr(settings, "CAMERA_INDEX", 0)))
    args = parser.parse_args()

    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(db_config=dict(settings.DB_CONFIG))
    scanner = QRScanner(
        CameraFrameSource(args.camera),
        container.resolver,
        operator_id=args.operator_id,
        on_result=print_outcome,
        repeat_cooldown=float(getattr(settings, "SCAN_REPEAT_COOLDOWN", 2.0)),
    )

    scanner.start()
    print("Scanning... press Ctrl+C to stop")
    try:
        while scanner.running:
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass
    finally:
        scanner.stop()


if __name__ == "__main__":
    main()
