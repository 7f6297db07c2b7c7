"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from framefetch.models.media_info import MediaInfo
from framefetch.models.packet import Packet
from framefetch.utils.formatting import format_duration, format_size


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "ProtocolError": [
            "• The server answered with a body this client cannot parse.",
            "• Check that the URL points at a frame stream, not another page.",
        ],
        "BufferUnderflowError": [
            "• A response part was shorter than its framing announced.",
            "• The body may have been truncated in transit.",
        ],
        "BufferOverflowError": [
            "• The response did not fit into the reusable buffer.",
            "• Increase `buffer_size` in the configuration or set it to 0.",
        ],
        "TransportError": [
            "• A network connection issue occurred.",
            "• Check that the frame server is running and reachable.",
            "• Raise the timeouts in the configuration for slow links.",
        ],
        "ConfigurationError": [
            "• Run `framefetch show-config` to inspect the effective settings.",
            "• Fix or delete the configuration file and try again.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(Text("\n".join(suggestions)))

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the effective configuration."""
    console = Console()
    content = ""
    for key, value in config_data.items():
        content += f"{key} = {'' if value is None else value}\n"

    console.print(
        Panel(
            content.strip(),
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_packet_table(packets: list[Packet], duration_s: float, source: str):
    """Displays one row per packet plus a short transfer summary."""
    console = Console()
    table = Table(box=box.ROUNDED, title=f"[bold]{source}[/bold]")
    table.add_column("Frame", justify="right", style="cyan")
    table.add_column("PTS", justify="right")
    table.add_column("Duration", justify="right")
    table.add_column("Key", justify="center")
    table.add_column("Timecode", style="magenta")
    table.add_column("Size", justify="right", style="green")

    for packet in packets:
        table.add_row(
            str(packet.frame_no),
            str(packet.pts),
            str(packet.duration),
            "[green]✓[/green]" if packet.key else "[dim]-[/dim]",
            str(packet.timecode) if packet.timecode else "[dim]-[/dim]",
            format_size(packet.size),
        )

    total = sum(packet.size for packet in packets)
    console.print(table)
    console.print(
        f"[bold]{len(packets)}[/bold] packet(s), [cyan]{format_size(total)}[/cyan]"
        f" in [blue]{format_duration(duration_s)}[/blue]"
    )


def print_media_info(info: Any):
    """Displays a media info object, or its repr for a custom parser result."""
    console = Console()
    if not isinstance(info, MediaInfo):
        console.print(Panel(repr(info), title="Media Info", border_style="cyan"))
        return

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row("Name:", info.name or "[dim]-[/dim]")
    table.add_row("Type:", info.type)
    table.add_row("Codec:", info.codec)
    table.add_row("Timescale:", str(info.timescale))
    table.add_row(
        "Duration:",
        f"{info.duration} ({format_duration(info.duration_seconds)})",
    )
    table.add_row("Frames:", str(info.n_frames))
    if info.dim:
        table.add_row("Size:", f"{info.dim.width}x{info.dim.height}")
    if info.pasp:
        table.add_row("Pixel Aspect:", f"{info.pasp.num}:{info.pasp.den}")
    if info.sample_rate:
        table.add_row("Sample Rate:", f"{info.sample_rate} Hz")
    if info.channels:
        table.add_row("Channels:", str(info.channels))
    if info.labels:
        table.add_row("Labels:", ", ".join(info.labels))

    console.print(
        Panel(table, title="[bold green]Media Info[/bold green]", border_style="green")
    )
