from typing import Optional, Sequence

import altair as alt
import pandas as pd

from algorithms import CalendarTools
from models import MonthlyVolume, VolumeDataPoint


def daily_volume_chart(
    points: Sequence[VolumeDataPoint], title: str = "Volume"
) -> Optional[alt.Chart]:
    """Line chart of a daily volume series, ``None`` when there is nothing to plot."""
    if not points:
        return None
    df = pd.DataFrame(
        {
            "date": [pd.Timestamp(p.date) for p in points],
            "volume": [p.volume for p in points],
        }
    )
    return (
        alt.Chart(df, title=title)
        .mark_line(point=True)
        .encode(
            x=alt.X("date:T", title="Date", axis=alt.Axis(format="%b %d")),
            y=alt.Y("volume:Q", title="Volume (lbs)"),
            tooltip=[
                alt.Tooltip("date:T", title="Date", format="%B %d, %Y"),
                alt.Tooltip("volume:Q", title="Volume"),
            ],
        )
    )


def monthly_volume_chart(
    rows: Sequence[MonthlyVolume], title: str = "Total Volume"
) -> Optional[alt.Chart]:
    """Bar chart per month; ``None`` when every month is zero."""
    if not rows or not any(r.volume > 0 for r in rows):
        return None
    labels = [CalendarTools.month_label(r.month) for r in rows]
    df = pd.DataFrame({"month": labels, "volume": [r.volume for r in rows]})
    return (
        alt.Chart(df, title=title)
        .mark_bar()
        .encode(
            x=alt.X("month:N", title="Month", sort=labels),
            y=alt.Y("volume:Q", title="Total Volume (lbs)"),
            tooltip=["month", "volume"],
        )
    )
