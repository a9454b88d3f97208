"""Toolchain abstraction for ardi."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class TargetBoard:
    """A connected board resolved from the toolchain's board listing."""
    device: str
    fqbn: str


class ToolchainError(Exception):
    """Raised when an external toolchain command fails."""

    def __init__(self, message: str, command: list[str] | None = None, returncode: int | None = None, output: str = ""):
        super().__init__(message)
        self.message = message
        self.command = command or []
        self.returncode = returncode
        self.output = output


class Toolchain(ABC):
    """Abstract base class for an external build/upload toolchain."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable toolchain name (e.g., 'arduino-cli')."""

    @abstractmethod
    def update_index(self) -> None:
        """Refresh the toolchain's package index."""

    @abstractmethod
    def install_core(self, core: str) -> None:
        """Install (or confirm) the platform core used to build sketches."""

    @abstractmethod
    def board_list(self) -> str:
        """Return the raw text table of connected boards."""

    @abstractmethod
    def compile(self, target: TargetBoard, sketch: Path) -> None:
        """Compile the sketch for the target's FQBN."""

    @abstractmethod
    def upload(self, target: TargetBoard, sketch: Path) -> None:
        """Upload the compiled sketch to the target's device."""

    def setup(self, core: str) -> None:
        """Update the index and install the core, in that order."""
        self.update_index()
        self.install_core(core)

    def compile_and_upload(self, target: TargetBoard, sketch: Path) -> None:
        self.compile(target, sketch)
        self.upload(target, sketch)
