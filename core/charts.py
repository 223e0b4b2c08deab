from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Sequence

import altair as alt
import pandas as pd

from core.stats import RankedItem

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def ranked_bar_chart(
    items: Sequence[RankedItem],
    *,
    title: str = "",
    color: str = "#818cf8",
    highlight_color: str = "#4f46e5",
) -> alt.Chart:
    """Horizontal bar chart of a ranking, top entry highlighted."""
    df = pd.DataFrame([asdict(i) for i in items], columns=["name", "count"])
    df["rank"] = range(1, len(df) + 1)
    df["top"] = df["rank"] == 1

    base = alt.Chart(df).encode(
        y=alt.Y("name:N", title=None, sort=None, axis=alt.Axis(labelLimit=160, ticks=False, domain=False)),
        x=alt.X("count:Q", title=None, axis=None),
    )
    bars = base.mark_bar(cornerRadiusEnd=6, size=18).encode(
        color=alt.condition(alt.datum.top, alt.value(highlight_color), alt.value(color)),
        tooltip=[alt.Tooltip("name:N", title="Nama"), alt.Tooltip("count:Q", title="Jumlah")],
    )
    labels = base.mark_text(align="left", dx=6, fontWeight="bold", color="#64748b").encode(text="count:Q")
    chart = alt.layer(bars, labels).properties(height=max(60, 32 * len(df)))
    if title:
        chart = chart.properties(title=title)
    return chart
