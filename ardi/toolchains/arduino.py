"""Arduino toolchain for ardi, driven through the arduino-cli executable."""

import logging
import subprocess
from pathlib import Path

from ardi.toolchain import TargetBoard, Toolchain, ToolchainError

logger = logging.getLogger(__name__)

_INSTALL_HINT = "Install from https://arduino.github.io/arduino-cli/"

# Subcommands that take a second word (e.g. "core install").
_GROUPED_SUBCOMMANDS = {"core", "board"}


def _verb(command: list[str]) -> str:
    """Return the subcommand portion of an arduino-cli argument list."""
    if len(command) > 2 and command[1] in _GROUPED_SUBCOMMANDS:
        return f"{command[1]} {command[2]}"
    return command[1] if len(command) > 1 else ""


class ArduinoCliToolchain(Toolchain):
    """Arduino toolchain using arduino-cli."""

    def __init__(self, cli: str = "arduino-cli", additional_urls: list[str] | tuple[str, ...] = ()) -> None:
        self.cli = cli
        self.additional_urls = list(additional_urls)

    # -- Toolchain interface --------------------------------------------------

    @property
    def name(self) -> str:
        return "arduino-cli"

    def update_index(self) -> None:
        self._run(self.update_index_command())

    def install_core(self, core: str) -> None:
        self._run(self.install_core_command(core))

    def board_list(self) -> str:
        """Return the `board list` table as text, captured from the subprocess."""
        result = self._run(self.board_list_command(), capture=True)
        return result.stdout

    def compile(self, target: TargetBoard, sketch: Path) -> None:
        self._run(self.compile_command(target, sketch))

    def upload(self, target: TargetBoard, sketch: Path) -> None:
        self._run(self.upload_command(target, sketch))

    # -- Command builders -----------------------------------------------------

    def update_index_command(self) -> list[str]:
        return [self.cli, "core", "update-index", *self._url_args()]

    def install_core_command(self, core: str) -> list[str]:
        return [self.cli, "core", "install", core, *self._url_args()]

    def board_list_command(self) -> list[str]:
        return [self.cli, "board", "list"]

    def compile_command(self, target: TargetBoard, sketch: Path) -> list[str]:
        return [self.cli, "compile", "--fqbn", target.fqbn, str(sketch)]

    def upload_command(self, target: TargetBoard, sketch: Path) -> list[str]:
        return [self.cli, "upload", "-p", target.device, "--fqbn", target.fqbn, str(sketch)]

    # -- Private helpers ------------------------------------------------------

    def _url_args(self) -> list[str]:
        if not self.additional_urls:
            return []
        return ["--additional-urls", ",".join(self.additional_urls)]

    def _run(self, command: list[str], capture: bool = False) -> subprocess.CompletedProcess:
        """Run a toolchain command to completion. Raises ToolchainError on failure."""
        logger.debug("Running %s", " ".join(command))
        try:
            if capture:
                result = subprocess.run(command, capture_output=True, text=True)
            else:
                result = subprocess.run(command)
        except FileNotFoundError as e:
            raise ToolchainError(f"{self.cli} not found. {_INSTALL_HINT}", command=command) from e

        if result.returncode != 0:
            output = (result.stderr or "").strip() if capture else ""
            raise ToolchainError(
                f"{self.cli} {_verb(command)} exited with status {result.returncode}",
                command=command,
                returncode=result.returncode,
                output=output,
            )
        return result
