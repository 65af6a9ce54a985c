"""
fiducial-odom CLI - Command-line interface for the fiducial odometry estimator.

Provides commands for replaying detection recordings, validating
configuration and showing version information.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from fiducial_odom.version import __version__

app = typer.Typer(
    name="fiducial-odom",
    help="fiducial-odom - Relative odometry from fiducial marker detections.",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]fiducial-odom[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """fiducial-odom - Relative odometry from fiducial marker detections."""
    pass


@app.command()
def replay(
    recording: Path = typer.Argument(
        ...,
        help="Detection recording (YAML).",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file (defaults are used when omitted).",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="JSON lines file for odometry estimates (overrides config).",
    ),
    calibration: Optional[Path] = typer.Option(
        None,
        "--calibration",
        help="Camera calibration YAML (approximate default when omitted).",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Override log level (DEBUG, INFO, WARNING, ERROR).",
    ),
) -> None:
    """Replay a detection recording through the odometry estimator."""
    from fiducial_odom.config.loader import get_default_config, load_config
    from fiducial_odom.logging.setup import configure_logging
    from fiducial_odom.odometry.publishers import JsonLinesPublisher
    from fiducial_odom.perception.camera import CameraCalibration
    from fiducial_odom.replay import run_replay

    try:
        cfg = load_config(config) if config else get_default_config()
        level = log_level or cfg.project.log_level.value
        configure_logging(level, cfg.project.run_id, cfg.project.json_logs)

        if not cfg.transforms.static:
            console.print(
                "[yellow]⚠[/yellow] No static transforms configured; "
                "every cycle will be skipped."
            )

        calib = CameraCalibration.from_yaml(calibration) if calibration else None
        output_path = output or cfg.output.odometry_path
        publisher = JsonLinesPublisher(path=output_path) if output_path else None
        summary = run_replay(recording, cfg, publisher=publisher, calibration=calib)

    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    table = Table(title="Replay Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    telemetry = summary.telemetry
    table.add_row("Cycles", str(telemetry["cycles"]))
    for outcome, count in sorted(telemetry["outcomes"].items()):
        table.add_row(f"  {outcome}", str(count))
    table.add_row("Emission ratio", f"{telemetry['emission_ratio']:.3f}")

    last = summary.last_estimate
    if last is not None:
        x, y, z = (float(v) for v in last.pose.position)
        vx, vy, vz = (float(v) for v in last.twist.linear)
        table.add_row("Last position", f"({x:.3f}, {y:.3f}, {z:.3f}) m")
        table.add_row("Last velocity", f"({vx:.3f}, {vy:.3f}, {vz:.3f}) m/s")

    console.print(table)
    if output_path:
        console.print(f"[green]✓[/green] Estimates written to {output_path}")


@app.command()
def diagnostics(
    config: Path = typer.Option(
        Path("configs/default.yaml"),
        "--config",
        "-c",
        help="Path to configuration file.",
    ),
) -> None:
    """Validate configuration and show the resolved settings."""
    from fiducial_odom.config.loader import load_config

    console.print("[bold]fiducial-odom Diagnostics[/bold]\n")

    table = Table(title="System Information")
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")

    table.add_row("fiducial-odom Version", __version__)

    try:
        cfg = load_config(config)
        table.add_row("Configuration", f"✓ Valid ({config})")
        table.add_row("Camera Frame", cfg.frames.camera_frame)
        table.add_row("Footprint Frame", cfg.frames.footprint_frame)
        table.add_row("Bin Frame", cfg.frames.bin_frame)
        table.add_row("Odometry Frame", cfg.frames.odometry_frame)
        timeout = cfg.detector.timeout_s
        table.add_row("Detector Timeout", "none" if timeout is None else f"{timeout} s")
        table.add_row("Lookup Backoff", f"{cfg.transforms.backoff_s} s")
        table.add_row("Static Transforms", str(len(cfg.transforms.static)))
    except FileNotFoundError:
        table.add_row("Configuration", f"⚠ Not found ({config})")
    except Exception as e:
        table.add_row("Configuration", f"✗ Error: {e}")

    console.print(table)


@app.command(name="version")
def show_version() -> None:
    """Show version information."""
    console.print(f"[bold blue]fiducial-odom[/bold blue] v{__version__}")
    console.print("Relative odometry from fiducial marker detections.")


if __name__ == "__main__":
    app()
