"""Streamlit UI for the campaign analytics page."""

import json
from datetime import datetime

import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from campaign_analytics import AnalyticsView, ComparisonMode, TimeRange, load_settings
from campaign_analytics.analytics import TRACKED_METRICS, BreakdownSeries
from campaign_analytics.exceptions import AnalyticsError, AnalyticsFetchError
from campaign_analytics.logging_config import setup_logging
from campaign_analytics.services import (
    AnalyticsApiClient,
    AnalyticsService,
    export_view,
    filter_to_window,
)

setup_logging()

# Page config
st.set_page_config(
    page_title="Campaign Analytics",
    page_icon="📊",
    layout="wide",
)

TIME_RANGE_LABELS = {
    TimeRange.LAST_7_DAYS: "Last 7 days",
    TimeRange.LAST_30_DAYS: "Last 30 days",
    TimeRange.LAST_90_DAYS: "Last 90 days",
    TimeRange.ALL: "All time",
}

COMPARISON_LABELS = {
    ComparisonMode.PREVIOUS: "Compare to previous period",
    ComparisonMode.TARGET: "Compare to target",
    ComparisonMode.NONE: "No comparison",
}

METRIC_COLORS = {
    "impressions": "#667eea",
    "engagements": "#764ba2",
    "conversions": "#28a745",
    "spend": "#f5576c",
}


def render_summary_cards(view: AnalyticsView) -> None:
    """KPI tiles with deltas; spend deltas use inverted colours."""
    cards = view.get_summary_cards()

    columns = st.columns(4)
    for col, card in zip(columns, cards[:4]):
        with col:
            delta = f"{card['change']:+.1f}%" if card["change"] is not None else None
            st.metric(
                card["label"],
                card["value"],
                delta=delta,
                delta_color="inverse" if card["metric"] == "spend" else "normal",
            )

    columns = st.columns(3)
    for col, card in zip(columns, cards[4:]):
        with col:
            st.metric(card["label"], card["value"])

    if view.comparison is not None and view.comparison.is_placeholder:
        st.caption("Previous-period figures are estimated until historical data is available.")


def create_trend_chart(view: AnalyticsView, chart_type: str) -> go.Figure:
    """Active metric over time, as a line or bar chart."""
    metric = view.active_metric
    x = [p.date for p in view.series]
    y = view.active_metric_values
    color = METRIC_COLORS.get(metric, "#667eea")

    fig = go.Figure()
    if chart_type == "bar":
        fig.add_trace(go.Bar(x=x, y=y, name=metric.capitalize(), marker_color=color))
    else:
        fig.add_trace(go.Scatter(
            x=x,
            y=y,
            name=metric.capitalize(),
            mode="lines+markers",
            line=dict(color=color, width=3),
            marker=dict(size=8),
        ))

    fig.update_layout(
        title=f"{metric.capitalize()} ({view.active_metric_trend})",
        yaxis=dict(title=metric.capitalize(), showgrid=True),
        height=400,
        plot_bgcolor="white",
    )
    return fig


def create_rate_chart(view: AnalyticsView) -> go.Figure:
    """Daily CTR and conversion rate (stored per-record rates)."""
    x = [p.date for p in view.series]

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=x, y=[p.ctr for p in view.series], name="CTR (%)", mode="lines+markers",
    ))
    fig.add_trace(go.Scatter(
        x=x,
        y=[p.conversion_rate for p in view.series],
        name="Conversion Rate (%)",
        mode="lines+markers",
    ))
    fig.update_layout(
        legend=dict(x=0, y=1.15, orientation="h"),
        height=350,
        plot_bgcolor="white",
    )
    return fig


def create_breakdown_pie(breakdown: BreakdownSeries, title: str) -> go.Figure:
    fig = px.pie(
        values=[item.value for item in breakdown.items],
        names=[item.name for item in breakdown.items],
        title=f"{title} (illustrative)" if breakdown.is_fallback else title,
        hole=0.4,
    )
    fig.update_layout(height=350)
    return fig


def load_records_from_upload(uploaded) -> list[dict]:
    payload = json.loads(uploaded.getvalue())
    if not isinstance(payload, list):
        raise ValueError("Uploaded file must contain a JSON array of records")
    return payload


def main():
    st.title("📊 Campaign Analytics")

    settings = load_settings()

    # Sidebar - data source and selectors
    with st.sidebar:
        st.header("📁 Data Source")

        source_type = st.radio("Source", ["API", "JSON file"], horizontal=True)
        campaign_id = None
        uploaded = None

        if source_type == "API":
            campaign_id = st.text_input("Campaign ID")
        else:
            uploaded = st.file_uploader(
                "Analytics records (JSON)",
                type=["json"],
                help="A JSON array of daily analytics records",
            )

        st.divider()

        time_range = st.selectbox(
            "Time range",
            options=list(TimeRange),
            format_func=lambda t: TIME_RANGE_LABELS[t],
        )
        comparison_mode = st.selectbox(
            "Comparison",
            options=list(ComparisonMode),
            format_func=lambda m: COMPARISON_LABELS[m],
        )
        active_metric = st.selectbox(
            "Metric", options=list(TRACKED_METRICS), format_func=str.capitalize
        )
        chart_type = st.radio("Chart type", ["line", "bar"], horizontal=True)
        budget = st.number_input("Campaign budget", min_value=0.0, value=0.0, step=100.0)

    # Build the view
    try:
        if source_type == "API":
            if not campaign_id:
                st.info("👈 Enter a campaign ID to get started")
                return
            service = AnalyticsService(source=AnalyticsApiClient(settings.api), settings=settings)
            view = service.load_view(
                campaign_id,
                time_range=time_range,
                comparison_mode=comparison_mode,
                active_metric=active_metric,
                budget=budget or None,
            )
        else:
            if not uploaded:
                st.info("👈 Upload an analytics JSON file to get started")
                return
            service = AnalyticsService(settings=settings)
            records = filter_to_window(
                load_records_from_upload(uploaded), time_range, settings=settings.time_ranges
            )
            view = service.build_view(
                records,
                time_range=time_range,
                comparison_mode=comparison_mode,
                active_metric=active_metric,
                budget=budget or None,
            )
    except AnalyticsFetchError as e:
        st.error(f"Could not load analytics: {e}")
        if e.retryable and st.button("Retry"):
            st.rerun()
        return
    except (AnalyticsError, ValueError) as e:
        st.error(f"Error reading analytics data: {e}")
        return

    tab1, tab2, tab3 = st.tabs([
        "📈 Performance",
        "👥 Audience",
        "📄 Export",
    ])

    # =========================================================================
    # TAB 1: Performance
    # =========================================================================
    with tab1:
        render_summary_cards(view)
        st.divider()

        if view.series:
            st.plotly_chart(create_trend_chart(view, chart_type), use_container_width=True)
            st.subheader("Rates")
            st.plotly_chart(create_rate_chart(view), use_container_width=True)
            st.dataframe(
                [p.to_dict() for p in view.series],
                use_container_width=True,
                hide_index=True,
            )
        else:
            st.info("No analytics data for this period")

        if view.budget_utilization_pct is not None:
            st.subheader("Budget Utilization")
            st.progress(min(100, view.budget_utilization_pct) / 100)
            st.caption(f"{round(view.budget_utilization_pct)}% of budget used")

    # =========================================================================
    # TAB 2: Audience
    # =========================================================================
    with tab2:
        col1, col2, col3 = st.columns(3)
        for col, (name, title) in zip(
            (col1, col2, col3),
            [("age", "Age Groups"), ("sentiment", "Sentiment"), ("device", "Devices")],
        ):
            with col:
                st.plotly_chart(
                    create_breakdown_pie(view.breakdowns[name], title),
                    use_container_width=True,
                )

    # =========================================================================
    # TAB 3: Export
    # =========================================================================
    with tab3:
        st.subheader("Export Analytics")
        stamp = datetime.now().strftime("%Y%m%d")
        prefix = f"campaign_{view.campaign_id or 'upload'}_{view.time_range}_{stamp}"

        col1, col2 = st.columns(2)
        with col1:
            st.download_button(
                label="📥 Download CSV",
                data=export_view(view, "csv"),
                file_name=f"{prefix}.csv",
                mime="text/csv",
            )
        with col2:
            st.download_button(
                label="📥 Download DOCX Report",
                data=export_view(view, "docx"),
                file_name=f"{prefix}.docx",
                mime="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
                type="primary",
            )

        with st.expander("Raw view JSON"):
            st.code(view.to_json(), language="json")


if __name__ == "__main__":
    main()
