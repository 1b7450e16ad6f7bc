import sys
import argparse

try:
    from rich.console import Console
    from rich.table import Table
    from rich.panel import Panel
    from rich import box
except ImportError:
    print("Error: The 'rich' library is required for the CLI but not installed.", file=sys.stderr)
    print("Please install it with: pip install wavescope[cli]", file=sys.stderr)
    sys.exit(1)

import numpy as np

from wavescopelib import __version__
from wavescopelib.decode import DecodeError, decode_file
from wavescopelib.envelope import build_envelope
from wavescopelib.plot import format_time

console = Console()

_SPARK_CHARS = "▁▂▃▄▅▆▇█"


def positive_int(value):
    ivalue = int(value)
    if ivalue <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return ivalue


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        description="Wavescope: inspect an audio file's envelope",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("--version", action="version",
                        version=f"wavescope {__version__}")
    parser.add_argument("file", type=str,
                        help="Audio file (.wav, .aif, .flac, .ogg, ...)")
    parser.add_argument("--width", type=positive_int, default=64,
                        help="Number of envelope columns in the sparkline")
    parser.add_argument("--channel", type=int, default=0,
                        help="Channel used for the sparkline")
    return parser.parse_args(argv)


def sparkline(mins: np.ndarray, maxs: np.ndarray) -> str:
    """One block character per envelope column, scaled to the loudest column."""
    peaks = np.maximum(np.abs(mins), np.abs(maxs))
    top = float(peaks.max()) if len(peaks) else 0.0
    if top <= 0:
        return _SPARK_CHARS[0] * len(peaks)
    levels = np.minimum((peaks / top * (len(_SPARK_CHARS) - 1)).round().astype(int),
                        len(_SPARK_CHARS) - 1)
    return "".join(_SPARK_CHARS[i] for i in levels)


def _peak_dbfs(peak: float) -> str:
    if peak <= 0:
        return "-inf"
    return f"{20.0 * np.log10(peak):.1f}"


def main(argv=None):
    args = parse_arguments(argv)

    try:
        samples = decode_file(args.file)
    except DecodeError as e:
        console.print(f"[bold red]Error:[/] {e}")
        sys.exit(1)

    if not 0 <= args.channel < samples.channel_count:
        console.print(f"[bold red]Error:[/] channel {args.channel} out of range "
                      f"(file has {samples.channel_count})")
        sys.exit(1)

    table = Table(box=box.ROUNDED, title=args.file, title_justify="left")
    table.add_column("Property", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Channels", str(samples.channel_count))
    table.add_row("Sample rate", f"{samples.sample_rate} Hz")
    table.add_row("Frames", f"{samples.sample_count:,}")
    table.add_row("Duration", f"{format_time(samples.duration)} "
                              f"({samples.duration:.3f} s)")
    for ch in range(samples.channel_count):
        peak = float(np.max(np.abs(samples.channel(ch))))
        table.add_row(f"Peak ch {ch}", f"{peak:.4f} ({_peak_dbfs(peak)} dBFS)")
    console.print(table)

    envelope = build_envelope(samples, args.width, channel=args.channel)
    console.print(Panel(
        f"[blue]{sparkline(envelope.mins, envelope.maxs)}[/]",
        title=f"Envelope ch {args.channel} ({envelope.step} samples/column)",
        title_align="left", box=box.ROUNDED, expand=False,
    ))


if __name__ == "__main__":
    main()
