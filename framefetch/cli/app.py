"""
Defines the command-line interface for the application using Typer.
"""

import logging
import os
import time
from pathlib import Path
from typing import Callable

import typer
from rich.console import Console
from rich.logging import RichHandler

from framefetch import __version__
from framefetch.api.downloader import Downloader
from framefetch.models.config import ClientConfig
from framefetch.models.packet import Packet
from framefetch.storage.config_manager import ConfigManager
from framefetch.utils.formatting import payload_filename
from framefetch.utils.structured_logger import create_structured_logger

from .formatters import print_config, print_media_info, print_packet_table

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=False,
        )
    ],
)
log = logging.getLogger("framefetch")

app = typer.Typer(
    name="framefetch",
    help=(
        "Fetch frames and media info from a frame-serving media endpoint. Use"
        " 'framefetch <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "framefetch"


CONFIG_FILE = get_config_dir() / "config.ini"

URL_OPTION_HELP = "Stream base URL (overrides base_url from the config file)."
OUT_OPTION_HELP = "Directory to write each packet payload to."


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    config_file: Path = typer.Option(
        CONFIG_FILE, "--config", "-c", help="Path to the INI configuration file."
    ),
):
    """Frame Server CLI"""
    if version:
        console.print(f"[bold]framefetch[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("framefetch").setLevel(log_level)

    ctx.obj = {"config_file": config_file}

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


def _load_config(ctx: typer.Context, url: str | None) -> ClientConfig:
    config_manager = ConfigManager(ctx.obj["config_file"])
    config = config_manager.load_config({"base_url": url})
    if not config.base_url:
        console.print(
            "[red]✗ No stream URL.[/red] Pass [cyan]--url[/cyan] or run"
            " [cyan]framefetch init <URL>[/cyan] first."
        )
        raise typer.Exit(code=1)
    return config


def _write_payloads(packets: list[Packet], out_dir: Path) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)
    seen: dict[int, int] = {}
    for packet in packets:
        index = seen.get(packet.frame_no, 0)
        seen[packet.frame_no] = index + 1
        (out_dir / payload_filename(packet.frame_no, index)).write_bytes(packet.data)
    console.print(f"[green]✓ Wrote {len(packets)} payload(s) to '{out_dir}'.[/green]")


def _create_loggers(config: ClientConfig):
    log_dir = Path(config.json_log_dir) if config.json_log_dir else None
    return create_structured_logger(log_dir=log_dir, enable_json=log_dir is not None)


def _run_fetch(
    ctx: typer.Context,
    url: str | None,
    out_dir: Path | None,
    label: str,
    fetch: Callable[[Downloader, bytearray | None], list[Packet] | None],
) -> None:
    """Runs one frame request and reports the packets, or 'no data'."""
    config = _load_config(ctx, url)
    base_logger, fetch_logger = _create_loggers(config)
    target = None
    if config.buffer_size:
        target = bytearray(config.buffer_size)
        log.debug(f"Reading the response into a {config.buffer_size}-byte buffer.")

    start_time = time.monotonic()
    try:
        with Downloader.from_config(config, events=fetch_logger) as downloader:
            packets = fetch(downloader, target)
    finally:
        base_logger.close()
    duration = time.monotonic() - start_time

    if packets is None:
        console.print(f"[yellow]⚠️  No data for {label}.[/yellow]")
        raise typer.Exit(code=1)

    print_packet_table(packets, duration, f"{config.base_url} · {label}")
    if out_dir is not None:
        _write_payloads(packets, out_dir)


@app.command()
def init(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Base URL of the stream."),
    buffer_size: int = typer.Option(
        0, "--buffer-size", help="Reusable response buffer size in bytes (0 = off)."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration file."
    ),
):
    """Write a configuration file for a stream."""
    config_file: Path = ctx.obj["config_file"]
    if (
        config_file.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    ConfigManager(config_file).save_new_config(
        {"base_url": url, "buffer_size": buffer_size}
    )
    console.print(
        f"\n[bold green]✓ Configuration saved to '{config_file}'[/bold green]"
    )


@app.command(name="show-config")
def show_config(ctx: typer.Context):
    """Display the effective configuration."""
    config = ConfigManager(ctx.obj["config_file"]).load_config()
    print_config(ctx.obj["config_file"], config.model_dump(exclude={"config_path"}))


@app.command()
def info(
    ctx: typer.Context,
    url: str | None = typer.Option(None, "--url", "-u", help=URL_OPTION_HELP),
):
    """Show the media info of a stream."""
    config = _load_config(ctx, url)
    base_logger, fetch_logger = _create_loggers(config)
    try:
        with Downloader.from_config(config, events=fetch_logger) as downloader:
            media_info = downloader.download_media_info()
    finally:
        base_logger.close()
    if media_info is None:
        console.print("[yellow]⚠️  No media info available.[/yellow]")
        raise typer.Exit(code=1)
    print_media_info(media_info)


@app.command()
def frame(
    ctx: typer.Context,
    frame_no: int = typer.Argument(..., help="Frame number."),
    url: str | None = typer.Option(None, "--url", "-u", help=URL_OPTION_HELP),
    out_dir: Path | None = typer.Option(None, "--out", "-o", help=OUT_OPTION_HELP),
):
    """Fetch a single frame by number."""
    _run_fetch(
        ctx,
        url,
        out_dir,
        f"frame {frame_no}",
        lambda d, target: d.get_frame(frame_no, target),
    )


@app.command()
def frames(
    ctx: typer.Context,
    start: int = typer.Argument(..., help="First frame number."),
    end: int = typer.Argument(..., help="Last frame number."),
    url: str | None = typer.Option(None, "--url", "-u", help=URL_OPTION_HELP),
    out_dir: Path | None = typer.Option(None, "--out", "-o", help=OUT_OPTION_HELP),
):
    """Fetch a range of frames."""
    _run_fetch(
        ctx,
        url,
        out_dir,
        f"frames {start}:{end}",
        lambda d, target: d.get_frames(start, end, target),
    )


@app.command()
def seek(
    ctx: typer.Context,
    pts: int = typer.Argument(..., help="Presentation timestamp to seek to."),
    url: str | None = typer.Option(None, "--url", "-u", help=URL_OPTION_HELP),
    out_dir: Path | None = typer.Option(None, "--out", "-o", help=OUT_OPTION_HELP),
):
    """Fetch the frame nearest to a presentation timestamp."""
    _run_fetch(
        ctx,
        url,
        out_dir,
        f"pts {pts}",
        lambda d, target: d.seek_frame(pts, target),
    )

