"""CLI entry point for ardi."""

from pathlib import Path

import click

from ardi.boards import (
    BoardSelectionError,
    InvalidSelectionError,
    filter_board_list,
    format_board_menu,
    select_target,
)
from ardi.config import ConfigError, load_project_config
from ardi.log import configure_logging, get_logger
from ardi.serial.port import SerialError, open_serial
from ardi.serial.watch import watch_logs
from ardi.sketch import detect_baud_rate, resolve_baud, resolve_sketch_path
from ardi.toolchain import ToolchainError
from ardi.toolchains import ArduinoCliToolchain


def _fatal(log, message, error, exit_code=1):
    """Log an error with its context fields and stop the process."""
    output = getattr(error, "output", "")
    extra = {"fields": {"output": output}} if output else None
    log.with_error(error).error(message, extra=extra)
    raise SystemExit(exit_code)


def _prompt_for_board(raw_list):
    """Return a chooser that shows the numbered menu and reads one answer."""

    def choose(boards):
        click.echo()
        for line in format_board_menu(raw_list, boards):
            click.echo(line)
        click.echo()
        try:
            return click.prompt("Enter number of board to upload to", type=str,
                                default="", show_default=False)
        except click.Abort:
            raise InvalidSelectionError() from None

    return choose


@click.command()
@click.argument("sketch", required=False)
@click.option("--watch/--no-watch", "-w/-W", default=True, show_default=True,
              help="Watch serial port logs after uploading sketch.")
@click.option("--baud", "-b", type=click.IntRange(min=1), default=None,
              help="Sketch baud rate. Defaults to serial.baud_rate in ardi.toml, else 9600.")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
def main(sketch, watch, baud, verbose):
    """Upload a sketch and print its logs for a variety of Arduino boards.

    A light wrapper around arduino-cli that offers a quick way to upload
    sketches and watch logs from the command line. SKETCH is a directory;
    a bare name is looked up under the sketches/ directory.
    """
    configure_logging(verbose)
    log = get_logger()

    try:
        config = load_project_config(Path.cwd())
    except ConfigError as e:
        _fatal(log, "Failed to load configuration", e)

    if not sketch:
        _fatal(log, "Must provide a sketch name as an argument to upload", "Missing sketch argument")

    sketch_path = resolve_sketch_path(sketch, config.sketch.dir)
    if baud is None:
        baud = config.serial.baud_rate

    if watch:
        detected = detect_baud_rate(sketch_path)
        resolved = resolve_baud(baud, detected)
        if resolved != baud:
            log.info("Detected a different baud rate from sketch file")
            log.info("Using detected baud rate", extra={"fields": {"detected baud": detected}})
            baud = resolved

    log = log.bind(watch=watch, baud=baud, sketch=str(sketch_path))
    toolchain = ArduinoCliToolchain(
        cli=config.toolchain.cli,
        additional_urls=config.toolchain.additional_urls,
    )

    log.info("Updating arduino core")
    try:
        toolchain.setup(config.toolchain.core)
    except ToolchainError as e:
        _fatal(log, "Failed to update core", e)

    log.info("Getting board list")
    try:
        raw_list = toolchain.board_list()
    except ToolchainError as e:
        _fatal(log, "Failed to get board list", e)

    log.info("Filtering board list")
    boards = filter_board_list(raw_list)

    log.info("Parsing target board")
    try:
        target = select_target(boards, choose=_prompt_for_board(raw_list))
    except BoardSelectionError as e:
        _fatal(log, "Failed to get target board", e)

    log = log.bind(device=target.device, fqbn=target.fqbn)
    log.info("Found target")

    log.info("Compiling and uploading")
    try:
        toolchain.compile_and_upload(target, sketch_path)
    except ToolchainError as e:
        _fatal(log, "Failed to compile or upload to board", e)

    if not watch:
        return

    try:
        ser = open_serial(target.device, baud)
    except SerialError as e:
        _fatal(log, "Failed to open device", e.message, e.exit_code)

    try:
        watch_logs(ser)
    except SerialError as e:
        _fatal(log, "Failed to read from serial port", e.message, e.exit_code)
    finally:
        ser.close()
