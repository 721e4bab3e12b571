"""Command-line interface: ``benchplot [flags] inputs...``."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

import plotly.graph_objects as go

from benchplot.app.builder import build_plot
from benchplot.app.options_config import OptionsConfig
from benchplot.app.plot_options import PlotOptions, parse_filter, parse_log_scale, split_list
from benchplot.errors import BenchplotError
from benchplot.plot.aes import Aes
from benchplot.plot.figure_generator import FigureGenerator, write_html
from benchplot.plot.plot import Plot
from benchplot.plot.records import load_records
from benchplot.plot.transform import TRANSFORMS
from benchplot.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

FORMATS = ("gnuplot", "png", "html", "json")
DEFAULT_OUTPUTS = {"png": "benchplot.png", "html": "benchplot.html"}

_AES_HELP = {
    Aes.X: "map values of PROJECTION to the X axis",
    Aes.Y: "map values of PROJECTION to the Y axis",
    Aes.COLOR: "map values of PROJECTION to color",
    Aes.ROW: "map values of PROJECTION to facet rows",
    Aes.COL: "map values of PROJECTION to facet columns",
}

_PROJECTION_HELP = """\
A projection is a comma-separated list of field names (table columns).
In addition, any projection may be one of the following:

  .unit    The unit of each benchmark-reported metric
  .value   The value of the metric corresponding to .unit
  .residue All fields that were not in some other projection
"""


def _epilog() -> str:
    lines = [_PROJECTION_HELP, "transformations:"]
    for name in sorted(TRANSFORMS):
        lines.append(f"  {name:<10} {TRANSFORMS[name].doc}")
    return "\n".join(lines)


def build_argparser() -> argparse.ArgumentParser:
    defaults = PlotOptions()
    p = argparse.ArgumentParser(
        prog="benchplot",
        description="Plot benchmark results as small multiples.",
        epilog=_epilog(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("inputs", nargs="+", help="CSV/TSV files in long format; '-' reads stdin.")

    aes_group = p.add_argument_group("aesthetic flags")
    for aes in Aes:
        aes_group.add_argument(
            f"--{aes.short_name}",
            metavar="PROJECTION",
            default=None,
            help=f"{_AES_HELP[aes]} (default {defaults.projection(aes)!r})",
        )

    p.add_argument("--ignore", metavar="KEYS", default=None, help="ignore variations in KEYS")
    p.add_argument("--filter", metavar="FIELD=VALUE,...", default=None,
                   help="use only records whose fields have these values")
    p.add_argument("--unit", metavar="UNITS", default=None, help="comma-separated list of UNITS to show")
    p.add_argument("--log-scale", metavar="LIST", default=None,
                   help="comma-separated LIST of aesthetics to plot on a log scale; "
                        "use name:base to set a log base other than 10")
    p.add_argument("--transform", metavar="LIST", default=None,
                   help="comma-separated LIST of data transformations")
    p.add_argument("--confidence", type=float, default=None,
                   help=f"confidence level of intervals (default {defaults.confidence})")
    p.add_argument("--config", type=Path, default=None,
                   help="JSON options file to start from (default: none)")
    p.add_argument("--save-config", action="store_true",
                   help="save the effective options to --config (or the per-user config file)")
    p.add_argument("--format", choices=FORMATS, default="gnuplot", help="output format (default gnuplot)")
    p.add_argument("-o", "--output", type=Path, default=None,
                   help="output file (default stdout, or benchplot.png / benchplot.html)")
    verbosity = p.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="log debug messages")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="log warnings and errors only")
    return p


def options_from_args(args: argparse.Namespace, base: PlotOptions) -> PlotOptions:
    """base with every flag given on the command line applied on top."""
    d = base.to_dict()
    for aes in Aes:
        value = getattr(args, aes.short_name)
        if value is not None:
            d[aes.short_name] = value
    if args.ignore is not None:
        d["ignore"] = args.ignore
    if args.filter is not None:
        d["filter"] = parse_filter(args.filter)
    if args.unit is not None:
        d["units"] = split_list(args.unit)
    if args.log_scale is not None:
        d["log_scale"] = parse_log_scale(args.log_scale)
    if args.transform is not None:
        d["transforms"] = split_list(args.transform)
    if args.confidence is not None:
        d["confidence"] = args.confidence
    d["term"] = "png" if args.format == "png" else ""
    return PlotOptions.from_dict(d)


def _write_output(plot: Plot, options: PlotOptions, fmt: str, output: Optional[Path]) -> None:
    if output is None and fmt in DEFAULT_OUTPUTS:
        output = Path(DEFAULT_OUTPUTS[fmt])

    if fmt in ("gnuplot", "png"):
        if output is None:
            plot.gnuplot(options.term, sys.stdout.buffer, options.confidence)
            sys.stdout.flush()
        else:
            with open(output, "wb") as f:
                plot.gnuplot(options.term, f, options.confidence)
            logger.info(f"Wrote {output}")
        return

    fig_dict = FigureGenerator(confidence=options.confidence).make_figure(plot)
    if fmt == "html":
        write_html(fig_dict, output)
        return
    text = go.Figure(fig_dict).to_json()
    if output is None:
        sys.stdout.write(text + "\n")
    else:
        output.write_text(text, encoding="utf-8")
        logger.info(f"Wrote {output}")


def run(argv: Optional[list[str]] = None) -> None:
    """Parse argv, build the plot and write it. Raises BenchplotError on failure."""
    args = build_argparser().parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.WARNING if args.quiet else None
    configure_logging(level=level, force=True)

    base = PlotOptions()
    if args.config is not None:
        base = OptionsConfig.load(config_path=args.config).get_plot_options()
    options = options_from_args(args, base)
    options.validate()

    if args.save_config:
        cfg = OptionsConfig(path=args.config or OptionsConfig.default_config_path())
        cfg.set_plot_options(options)
        cfg.save()

    records = load_records(args.inputs)
    plot = build_plot(options, records)
    _write_output(plot, options, args.format, args.output)


def main(argv: Optional[list[str]] = None) -> int:
    try:
        run(argv)
    except (BenchplotError, OSError) as e:
        print(f"benchplot: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
