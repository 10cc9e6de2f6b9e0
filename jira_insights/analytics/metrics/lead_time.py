"""Lead-time KPIs and breakdowns (pure functions)."""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from jira_insights.core.config import UNDEFINED_SYSTEM_LABEL
from jira_insights.core.normalizers import round_half_up


@dataclass(slots=True)
class LeadTimeKpis:
    avg_lead_time: int = 0
    median_lead_time: int = 0
    p90_lead_time: int = 0


def _positive_lead_times(df: pd.DataFrame) -> pd.DataFrame:
    if df.empty or "lead_time_days" not in df.columns:
        return df.iloc[0:0].copy()
    out = df.copy()
    out["lead_time_days"] = pd.to_numeric(out["lead_time_days"], errors="coerce")
    return out[out["lead_time_days"] > 0]


def lead_time_kpis(df: pd.DataFrame) -> LeadTimeKpis:
    """Rounded mean, median and 90th percentile of positive lead times.

    Percentiles interpolate linearly between neighbouring values.
    """
    values = _positive_lead_times(df).get("lead_time_days")
    if values is None or values.empty:
        return LeadTimeKpis()
    return LeadTimeKpis(
        avg_lead_time=int(round_half_up(values.mean())),
        median_lead_time=int(round_half_up(values.quantile(0.5))),
        p90_lead_time=int(round_half_up(values.quantile(0.9))),
    )


def lead_time_by_system(df: pd.DataFrame) -> pd.DataFrame:
    work = _positive_lead_times(df)
    if work.empty:
        return pd.DataFrame(columns=["system", "avg_lead_time"])
    if "system" in work.columns:
        work = work.assign(system=work["system"].fillna(UNDEFINED_SYSTEM_LABEL))
    else:
        work = work.assign(system=UNDEFINED_SYSTEM_LABEL)
    grouped = work.groupby("system", sort=False)["lead_time_days"].mean().map(round_half_up).astype(int)
    out = grouped.reset_index().rename(columns={"lead_time_days": "avg_lead_time"})
    return out.sort_values("avg_lead_time", kind="stable").reset_index(drop=True)


def lead_time_by_month(df: pd.DataFrame) -> pd.DataFrame:
    """Average and median lead time per delivery month (``YYYY-MM``)."""
    work = _positive_lead_times(df)
    columns = ["month", "avg_lead_time", "median_lead_time"]
    if work.empty or "resolved_date" not in work.columns:
        return pd.DataFrame(columns=columns)
    resolved = pd.to_datetime(work["resolved_date"], errors="coerce")
    work = work.assign(month=resolved.dt.strftime("%Y-%m"))[resolved.notna()]
    if work.empty:
        return pd.DataFrame(columns=columns)
    grouped = work.groupby("month")["lead_time_days"]
    out = pd.DataFrame(
        {
            "avg_lead_time": grouped.mean().map(round_half_up).astype(int),
            "median_lead_time": grouped.median().map(round_half_up).astype(int),
        }
    ).reset_index()
    return out.sort_values("month").reset_index(drop=True)[columns]


def lead_time_distribution(df: pd.DataFrame) -> pd.DataFrame:
    """Histogram of lead times; bucket width grows with the longest lead time."""
    work = _positive_lead_times(df)
    columns = ["range", "range_start", "count"]
    if work.empty:
        return pd.DataFrame(columns=columns)
    values = work["lead_time_days"]
    longest = values.max()
    bucket_size = 5 if longest <= 30 else 10 if longest <= 60 else 15
    starts = (values // bucket_size * bucket_size).astype(int)
    counts = starts.value_counts().sort_index()
    out = pd.DataFrame({"range_start": counts.index.astype(int), "count": counts.to_numpy()})
    out["range"] = out["range_start"].map(lambda s: f"{s}-{s + bucket_size}")
    return out[columns].reset_index(drop=True)
