"""Raw serial log streaming for ardi."""

from __future__ import annotations

import click
import serial

from ardi.serial.port import SerialError

DEFAULT_CHUNK_SIZE = 128


def read_chunk(ser, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """Block for at least one byte, then return up to chunk_size bytes."""
    waiting = ser.in_waiting
    return ser.read(max(1, min(waiting, chunk_size)))


def watch_logs(ser, out=None, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
    """Copy bytes from the port to ``out`` until a read fails.

    ``out`` defaults to the binary stdout stream. A read failure raises
    SerialError; there is no reconnect. Ctrl+C returns quietly.
    """
    if out is None:
        out = click.get_binary_stream("stdout")

    try:
        while True:
            try:
                data = read_chunk(ser, chunk_size)
            except (serial.SerialException, OSError) as e:
                raise SerialError(str(e), exit_code=2) from e
            if data:
                out.write(data)
                out.flush()
    except KeyboardInterrupt:
        pass
