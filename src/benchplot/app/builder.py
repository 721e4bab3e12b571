"""Build a Plot from PlotOptions and loaded records."""

from __future__ import annotations

from typing import Iterable

from benchplot.app.plot_options import PlotOptions
from benchplot.errors import ConfigError, NoDataError
from benchplot.plot.aes import Aes
from benchplot.plot.config import PlotConfig
from benchplot.plot.plot import Plot
from benchplot.plot.projection import RESIDUE_NAME, VALUE_NAME, ProjectionParser
from benchplot.plot.records import Record, filter_records, keep_units
from benchplot.plot.transform import get_transform
from benchplot.utils.logging import get_logger

logger = get_logger(__name__)


def build_config(options: PlotOptions) -> PlotConfig:
    """Parse the projections and log scales of options into a PlotConfig.

    Explicit field lists are parsed first, then the ignore list, so .residue
    covers every field neither mentions.

    Raises:
        ConfigError: On bad projection syntax or option values.
    """
    options.validate()
    config = PlotConfig()
    parser = ProjectionParser()
    residue_aes: list[Aes] = []
    for aes in Aes:
        expr = options.projection(aes).strip()
        if expr == VALUE_NAME:
            config.set_dv(aes)
        elif expr == RESIDUE_NAME:
            residue_aes.append(aes)
        else:
            try:
                config.set_iv(aes, parser.parse(expr))
            except ConfigError as e:
                raise ConfigError(f"parsing --{aes.short_name}: {e}") from e

    try:
        parser.parse(options.ignore)
    except ConfigError as e:
        raise ConfigError(f"parsing --ignore: {e}") from e

    if residue_aes:
        residue = parser.residue()
        for aes in residue_aes:
            config.set_iv(aes, residue)

    for name, base in options.log_scale.items():
        config.set_log_scale(Aes.from_name(name), base)
    return config


def build_plot(options: PlotOptions, records: Iterable[Record]) -> Plot:
    """Filter records, add them to a new Plot and apply the configured transforms.

    Raises:
        ConfigError: On invalid options.
        NoDataError: If there are no records, or none survive filtering.
    """
    plot = Plot(build_config(options))
    plot.set_units(options.unit_metadata_map())

    records = list(records)
    n_parsed = len(records)
    if n_parsed == 0:
        raise NoDataError("no data")

    kept = filter_records(records, options.filter)
    n_filtered = n_parsed - len(kept)
    n_unit_filtered = 0
    if options.units:
        kept, n_unit_filtered = keep_units(kept, options.units)

    if n_unit_filtered == n_parsed:
        raise NoDataError(f"no data has units {','.join(options.units)}")
    if n_unit_filtered + n_filtered == n_parsed:
        raise NoDataError("all data filtered")
    if n_filtered or n_unit_filtered:
        logger.warning(
            f"{n_filtered} records did not match --filter, {n_unit_filtered} records did not match --unit"
        )

    n_points = plot.add_all(kept)
    logger.info(f"Added {len(kept)} records as {n_points} points")

    for name in options.transforms:
        get_transform(name).apply(plot, options.confidence)
    return plot
