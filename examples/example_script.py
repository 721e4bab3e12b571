import numpy as np
import pandas as pd

from benchplot.app.builder import build_plot
from benchplot.app.plot_options import PlotOptions
from benchplot.plot import FigureGenerator, records_from_dataframe
from benchplot.plot.figure_generator import write_html
from benchplot.plot.gnuplot import gnuplot_script
from benchplot.utils.logging import configure_logging

configure_logging(level="DEBUG")

rng = np.random.default_rng(0)
rows = []
for impl, cost in (("map", 12.0), ("slice", 4.0), ("btree", 7.0)):
    for n in (16, 256, 4096):
        for _ in range(8):
            rows.append({"name": "Lookup", "impl": impl, "n": n, "unit": "sec/op",
                         "value": cost * np.log2(n) * 1e-9 * rng.uniform(0.95, 1.05)})
            rows.append({"name": "Lookup", "impl": impl, "n": n, "unit": "B/op",
                         "value": 64 * n if impl == "map" else 16 * n})
records = records_from_dataframe(pd.DataFrame(rows))

options = PlotOptions(x="n", color="impl", log_scale={"x": 2})
plot = build_plot(options, records)
print(gnuplot_script(plot))

write_html(FigureGenerator().make_figure(plot), "lookup.html")

compared = build_plot(PlotOptions(x="n", color="impl", units=["sec/op"], transforms=["compare"]), records)
write_html(FigureGenerator().make_figure(compared), "lookup_vs_btree.html")
