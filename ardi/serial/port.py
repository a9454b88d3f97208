"""Serial port utilities for ardi."""

from __future__ import annotations

import serial


class SerialError(Exception):
    """Structured serial error with exit code."""

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


def open_serial(device: str, baud_rate: int, timeout: float | None = None) -> serial.Serial:
    """Open a serial port with structured error handling.

    Reads on the returned port block until data arrives unless a
    timeout is given.

    Exit codes:
        2: port not found / device disconnected
        3: port busy
        4: permission denied
    """
    try:
        return serial.Serial(device, baud_rate, timeout=timeout)
    except PermissionError as e:
        raise SerialError(str(e), exit_code=4) from e
    except serial.SerialException as e:
        msg = str(e).lower()
        if "busy" in msg or "resource" in msg:
            raise SerialError(str(e), exit_code=3) from e
        if "permission" in msg:
            raise SerialError(str(e), exit_code=4) from e
        raise SerialError(str(e), exit_code=2) from e
    except ValueError as e:
        # pyserial rejects bad baud rates and port settings before opening
        raise SerialError(str(e), exit_code=2) from e
