"""Export of an already computed AnalyticsView (CSV, DOCX)."""

from datetime import datetime
from io import BytesIO

import polars as pl
from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH

from ..exceptions import UnsupportedExportFormatError
from ..models.analytics_view import AnalyticsView, format_currency, format_number

SUPPORTED_FORMATS = ["csv", "docx"]

CSV_COLUMNS = {
    "report_day": "Date",
    "impressions": "Impressions",
    "engagements": "Engagements",
    "conversions": "Conversions",
    "ctr": "CTR (%)",
    "conversion_rate": "Conversion Rate (%)",
    "average_dwell_time": "Average Dwell Time (s)",
    "spend": "Spend",
}


def _daily_frame(view: AnalyticsView) -> pl.DataFrame:
    """Daily rows with a trailing TOTAL row built from the summary."""
    daily = pl.DataFrame(
        [
            {
                "report_day": p.report_day.isoformat() if p.report_day else "",
                "impressions": p.impressions,
                "engagements": p.engagements,
                "conversions": p.conversions,
                "ctr": f"{p.ctr:.2f}",
                "conversion_rate": f"{p.conversion_rate:.2f}",
                "average_dwell_time": f"{p.average_dwell_time:g}",
                "spend": f"{p.spend:g}",
            }
            for p in view.series
        ],
        schema={
            "report_day": pl.Utf8,
            "impressions": pl.Int64,
            "engagements": pl.Int64,
            "conversions": pl.Int64,
            "ctr": pl.Utf8,
            "conversion_rate": pl.Utf8,
            "average_dwell_time": pl.Utf8,
            "spend": pl.Utf8,
        },
    )

    s = view.summary
    total = pl.DataFrame(
        {
            "report_day": ["TOTAL"],
            "impressions": [s.total_impressions],
            "engagements": [s.total_engagements],
            "conversions": [s.total_conversions],
            "ctr": [f"{s.average_ctr:.2f}"],
            "conversion_rate": [f"{s.average_conversion_rate:.2f}"],
            "average_dwell_time": [f"{s.average_dwell_time:.2f}"],
            "spend": [f"{s.total_spend:.2f}"],
        },
        schema=daily.schema,
    )

    return pl.concat([daily, total]).rename(CSV_COLUMNS)


def export_csv(view: AnalyticsView) -> str:
    """One CSV row per day followed by a TOTAL row.

    Rates are percentages with two decimals; the TOTAL row carries the
    summary's recomputed rates.
    """
    return _daily_frame(view).write_csv()


def export_docx(view: AnalyticsView, campaign_name: str | None = None) -> BytesIO:
    """DOCX report with summary, comparison and daily tables."""
    doc = Document()

    title = doc.add_heading("Campaign Analytics Report", 0)
    title.alignment = WD_ALIGN_PARAGRAPH.CENTER

    doc.add_paragraph(f"Campaign: {campaign_name or view.campaign_id or 'N/A'}")
    doc.add_paragraph(f"Time range: {view.time_range}")
    if view.date_range:
        doc.add_paragraph(
            f"Period: {view.date_range[0].isoformat()} to {view.date_range[1].isoformat()}"
        )
    doc.add_paragraph(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}")

    # Summary
    doc.add_heading("Summary", level=1)
    s = view.summary
    table = doc.add_table(rows=1, cols=2)
    table.style = "Table Grid"
    hdr = table.rows[0].cells
    hdr[0].text = "Metric"
    hdr[1].text = "Value"

    summary_rows = [
        ("Total Impressions", format_number(s.total_impressions)),
        ("Total Engagements", format_number(s.total_engagements)),
        ("Total Conversions", format_number(s.total_conversions)),
        ("Total Spend", format_currency(s.total_spend)),
        ("Average CTR", f"{s.average_ctr:.2f}%"),
        ("Conversion Rate", f"{s.average_conversion_rate:.2f}%"),
        ("Average Dwell Time", f"{s.average_dwell_time:.2f}s"),
    ]
    if view.budget_utilization_pct is not None:
        summary_rows.append(("Budget Used", f"{view.budget_utilization_pct:.0f}%"))

    for metric, value in summary_rows:
        row = table.add_row().cells
        row[0].text = metric
        row[1].text = value

    # Comparison
    if view.comparison is not None:
        doc.add_heading("Compared to Previous Period", level=1)
        if view.comparison.is_placeholder:
            doc.add_paragraph("Previous-period figures are estimated, not measured.")

        table = doc.add_table(rows=1, cols=2)
        table.style = "Table Grid"
        hdr = table.rows[0].cells
        hdr[0].text = "Metric"
        hdr[1].text = "Change"
        for metric in ("impressions", "engagements", "conversions", "spend"):
            row = table.add_row().cells
            row[0].text = metric.capitalize()
            row[1].text = f"{view.comparison.change_for(metric):+.1f}%"

    # Daily
    doc.add_heading("Daily Performance", level=1)
    if view.series:
        headers = ["Date", "Impressions", "Engagements", "Conversions", "CTR", "Spend"]
        table = doc.add_table(rows=1, cols=len(headers))
        table.style = "Table Grid"
        for i, h in enumerate(headers):
            table.rows[0].cells[i].text = h

        for p in view.series:
            row = table.add_row().cells
            row[0].text = p.date or ""
            row[1].text = format_number(p.impressions)
            row[2].text = format_number(p.engagements)
            row[3].text = format_number(p.conversions)
            row[4].text = f"{p.ctr:.2f}%"
            row[5].text = format_currency(p.spend)
    else:
        doc.add_paragraph("No analytics data for this period.")

    buffer = BytesIO()
    doc.save(buffer)
    buffer.seek(0)
    return buffer


def export_view(
    view: AnalyticsView, fmt: str, campaign_name: str | None = None
) -> str | BytesIO:
    """Export in the requested format.

    Raises:
        UnsupportedExportFormatError: If fmt is not csv or docx.
    """
    fmt = fmt.lower()
    if fmt == "csv":
        return export_csv(view)
    if fmt == "docx":
        return export_docx(view, campaign_name)
    raise UnsupportedExportFormatError(fmt, SUPPORTED_FORMATS)
