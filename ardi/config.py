"""Project configuration for ardi (``ardi.toml``)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]

CONFIG_FILENAME = "ardi.toml"
DEFAULT_BAUD_RATE = 9600


class ConfigError(Exception):
    """Raised when ardi.toml exists but cannot be used."""


@dataclass
class SketchConfig:
    dir: str = "sketches"


@dataclass
class SerialConfig:
    baud_rate: int = DEFAULT_BAUD_RATE


@dataclass
class ToolchainConfig:
    cli: str = "arduino-cli"
    core: str = "arduino:avr"
    additional_urls: list[str] = field(default_factory=list)


@dataclass
class ProjectConfig:
    sketch: SketchConfig = field(default_factory=SketchConfig)
    serial: SerialConfig = field(default_factory=SerialConfig)
    toolchain: ToolchainConfig = field(default_factory=ToolchainConfig)


def _section(data: dict, name: str) -> dict:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] must be a table, got: {section!r}")
    return section


def _string(section: dict, table: str, key: str, default: str) -> str:
    value = section.get(key, default)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{table}.{key} must be a non-empty string, got: {value!r}")
    return value


def load_project_config(project_dir: Path | str) -> ProjectConfig:
    """Parse ardi.toml and return a typed ProjectConfig.

    A missing file yields the defaults.
    """
    project_dir = Path(project_dir)
    toml_path = project_dir / CONFIG_FILENAME
    if not toml_path.exists():
        return ProjectConfig()

    try:
        with open(toml_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid {CONFIG_FILENAME}: {e}") from e

    sketch_data = _section(data, "sketch")
    serial_data = _section(data, "serial")
    toolchain_data = _section(data, "toolchain")

    baud_rate = serial_data.get("baud_rate", DEFAULT_BAUD_RATE)
    if isinstance(baud_rate, bool) or not isinstance(baud_rate, int) or baud_rate <= 0:
        raise ConfigError(f"serial.baud_rate must be a positive integer, got: {baud_rate!r}")

    urls = toolchain_data.get("additional_urls", [])
    if isinstance(urls, str):
        urls = [urls]
    if not isinstance(urls, list) or not all(isinstance(u, str) for u in urls):
        raise ConfigError(f"toolchain.additional_urls must be a string or a list of strings, got: {urls!r}")

    return ProjectConfig(
        sketch=SketchConfig(dir=_string(sketch_data, "sketch", "dir", "sketches")),
        serial=SerialConfig(baud_rate=baud_rate),
        toolchain=ToolchainConfig(
            cli=_string(toolchain_data, "toolchain", "cli", "arduino-cli"),
            core=_string(toolchain_data, "toolchain", "core", "arduino:avr"),
            additional_urls=list(urls),
        ),
    )
