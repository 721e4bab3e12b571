"""Aesthetic projection, transforms, scales and renderers for benchmark plots."""

from benchplot.plot.aes import Aes, AesMap
from benchplot.plot.config import PlotConfig
from benchplot.plot.figure_generator import FigureGenerator
from benchplot.plot.key import Field, Key
from benchplot.plot.plot import Plot
from benchplot.plot.projection import Projection, ProjectionParser
from benchplot.plot.records import Record, filter_records, keep_units, load_records, records_from_dataframe
from benchplot.plot.scale import ContinuousScale, ordinal_scale
from benchplot.plot.stats import Assumption, Summary
from benchplot.plot.transform import TRANSFORMS, compare, get_transform, summarize
from benchplot.plot.units import UnitClass, UnitMetadata
from benchplot.plot.value import Point, Value, ValueKind

__all__ = [
    "Aes",
    "AesMap",
    "Assumption",
    "ContinuousScale",
    "Field",
    "FigureGenerator",
    "Key",
    "Plot",
    "PlotConfig",
    "Point",
    "Projection",
    "ProjectionParser",
    "Record",
    "Summary",
    "TRANSFORMS",
    "UnitClass",
    "UnitMetadata",
    "Value",
    "ValueKind",
    "compare",
    "filter_records",
    "get_transform",
    "keep_units",
    "load_records",
    "ordinal_scale",
    "records_from_dataframe",
    "summarize",
]
