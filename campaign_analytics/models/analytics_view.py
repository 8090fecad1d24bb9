"""AnalyticsView - consolidated engine output for the analytics page."""

import json
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from ..analytics.comparison import is_favorable
from ..analytics.models import (
    BreakdownSeries,
    ComparisonMetrics,
    ComparisonMode,
    SeriesPoint,
    SummaryMetrics,
    TrendDirection,
)


def format_number(n: int | float, decimals: int = 0) -> str:
    """Format number with commas."""
    if decimals == 0:
        return f"{int(round(n)):,}"
    return f"{n:,.{decimals}f}"


def format_currency(n: float, currency: str = "USD") -> str:
    symbol = "$" if currency == "USD" else f"{currency} "
    return f"{symbol}{format_number(n, 2)}"


@dataclass
class AnalyticsView:
    """Everything the analytics page renders for one campaign and time range.

    All values are computed fresh by AnalyticsEngine; nothing here is updated
    incrementally.
    """

    # Metadata
    generated_at: datetime
    campaign_id: str | None
    time_range: str
    comparison_mode: ComparisonMode
    active_metric: str
    date_range: tuple[date, date] | None
    total_records: int

    # Engine outputs
    series: list[SeriesPoint]
    summary: SummaryMetrics
    comparison: ComparisonMetrics | None
    breakdowns: dict[str, BreakdownSeries]

    # Active metric
    active_metric_values: list[float] = field(default_factory=list)
    active_metric_trend: TrendDirection = "stable"

    # Budget
    budget: float | None = None
    budget_utilization_pct: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        comparison = None
        if self.comparison is not None:
            window = self.comparison.window
            comparison = {
                "impressions_change": self.comparison.impressions_change,
                "engagements_change": self.comparison.engagements_change,
                "conversions_change": self.comparison.conversions_change,
                "spend_change": self.comparison.spend_change,
                "previous_totals": self.comparison.previous_totals,
                "is_placeholder": self.comparison.is_placeholder,
                "window": (
                    {
                        "start": window.start.isoformat(),
                        "end": window.end.isoformat(),
                        "length_days": window.length_days,
                    }
                    if window
                    else None
                ),
            }

        return {
            "meta": {
                "generated_at": self.generated_at.isoformat(),
                "campaign_id": self.campaign_id,
                "time_range": self.time_range,
                "comparison_mode": self.comparison_mode.value,
                "date_range": (
                    {
                        "start": self.date_range[0].isoformat(),
                        "end": self.date_range[1].isoformat(),
                    }
                    if self.date_range
                    else None
                ),
                "total_records": self.total_records,
            },
            "summary": {
                "total_impressions": self.summary.total_impressions,
                "total_engagements": self.summary.total_engagements,
                "total_conversions": self.summary.total_conversions,
                "total_spend": round(self.summary.total_spend, 2),
                "average_ctr": round(self.summary.average_ctr, 2),
                "average_conversion_rate": round(self.summary.average_conversion_rate, 2),
                "average_dwell_time": round(self.summary.average_dwell_time, 2),
            },
            "series": [p.to_dict() for p in self.series],
            "comparison": comparison,
            "breakdowns": {name: b.to_dict() for name, b in self.breakdowns.items()},
            "active_metric": {
                "name": self.active_metric,
                "values": self.active_metric_values,
                "trend": self.active_metric_trend,
            },
            "budget": {
                "budget": self.budget,
                "utilization_pct": (
                    round(self.budget_utilization_pct, 2)
                    if self.budget_utilization_pct is not None
                    else None
                ),
            },
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def get_summary_cards(self, currency: str = "USD") -> list[dict[str, Any]]:
        """Formatted summary cards with period-over-period deltas.

        `change` is None when no comparison was computed. `favorable` follows
        each metric's sentiment (a spend increase is unfavorable).
        """
        s = self.summary
        cards = [
            ("impressions", "Impressions", format_number(s.total_impressions)),
            ("engagements", "Engagements", format_number(s.total_engagements)),
            ("conversions", "Conversions", format_number(s.total_conversions)),
            ("spend", "Spend", format_currency(s.total_spend, currency)),
        ]

        result = []
        for metric, label, value in cards:
            change = self.comparison.change_for(metric) if self.comparison else None
            result.append(
                {
                    "metric": metric,
                    "label": label,
                    "value": value,
                    "change": round(change, 1) if change is not None else None,
                    "favorable": is_favorable(metric, change) if change is not None else None,
                }
            )

        result.extend(
            [
                {"metric": "ctr", "label": "Avg. CTR", "value": f"{s.average_ctr:.2f}%",
                 "change": None, "favorable": None},
                {"metric": "conversion_rate", "label": "Conversion Rate",
                 "value": f"{s.average_conversion_rate:.2f}%", "change": None, "favorable": None},
                {"metric": "dwell_time", "label": "Avg. Dwell Time",
                 "value": f"{s.average_dwell_time:.1f}s", "change": None, "favorable": None},
            ]
        )
        return result
