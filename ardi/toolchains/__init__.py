"""Toolchain implementations for ardi."""

from ardi.toolchains.arduino import ArduinoCliToolchain

__all__ = ["ArduinoCliToolchain"]
