"""PDF report generation for SolarCalc irradiance and sizing results.

Produces a short engineering report: site and optimum summary, the monthly
decomposition table, Gi and tilt-sweep charts, and the optional off-grid /
grid-tied sizing tables.
"""
from io import BytesIO
from datetime import datetime
import logging

import numpy as np
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.platypus import (
    SimpleDocTemplate,
    Paragraph,
    Spacer,
    Table,
    TableStyle,
    Image,
    PageBreak,
)
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle

from engine.load.consumption import DailyConsumption
from engine.sizing.grid_tied import GridTiedSizing
from engine.sizing.off_grid import OffGridSizing
from engine.solar.tilt_optimizer import OptimizationResult

logger = logging.getLogger(__name__)

# ══════════════════════════════════════════════════════════════════════
# Constants
# ══════════════════════════════════════════════════════════════════════

CHART_DPI = 150
PAGE_W, PAGE_H = A4
MARGIN = 15 * mm

# Color palette
C_PRIMARY = "#d97706"
C_DARK = "#92400e"
C_BLUE = "#2563eb"
C_GREEN = "#059669"
C_RED = "#dc2626"
C_GRAY = "#6b7280"
C_LIGHT_BG = "#f9fafb"
C_GRID = "#e5e7eb"


# ══════════════════════════════════════════════════════════════════════
# Matplotlib setup
# ══════════════════════════════════════════════════════════════════════

def _init_mpl():
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    plt.rcParams.update({
        "font.size": 8,
        "axes.titlesize": 10,
        "axes.labelsize": 8,
        "xtick.labelsize": 7,
        "ytick.labelsize": 7,
        "legend.fontsize": 7,
        "figure.dpi": CHART_DPI,
    })
    return plt


def _fig_to_buf(fig) -> BytesIO:
    """Save matplotlib figure to BytesIO PNG buffer."""
    buf = BytesIO()
    fig.savefig(buf, format="png", dpi=CHART_DPI, bbox_inches="tight")
    import matplotlib.pyplot as plt
    plt.close(fig)
    buf.seek(0)
    return buf


# ══════════════════════════════════════════════════════════════════════
# Charts
# ══════════════════════════════════════════════════════════════════════

def _make_monthly_gi_chart(
    months: list[str],
    gi: list[float],
    gd: list[float],
    tilt_deg: float,
) -> BytesIO:
    """Monthly tilted vs. horizontal irradiation bars with worst month marked."""
    plt = _init_mpl()
    fig, ax = plt.subplots(figsize=(6, 3))
    x = np.arange(len(months))
    bar_w = 0.38

    ax.bar(x - bar_w / 2, gd, bar_w, label="Horizontal (Gd)", color=C_BLUE, alpha=0.75)
    ax.bar(x + bar_w / 2, gi, bar_w, label=f"Tilted {tilt_deg:.0f}° (Gi)",
           color=C_PRIMARY, alpha=0.9)
    worst = int(np.argmin(gi))
    ax.axhline(gi[worst], color=C_RED, linestyle="--", linewidth=0.8,
               label=f"Worst month ({months[worst]})")

    ax.set_xticks(x)
    ax.set_xticklabels(months, rotation=30)
    ax.set_ylabel("kWh/m²/day")
    ax.set_title("Daily Irradiation per Month", fontweight="bold")
    ax.legend(loc="upper right", fontsize=6)
    ax.grid(True, alpha=0.3, axis="y")
    fig.tight_layout()
    return _fig_to_buf(fig)


def _make_tilt_sweep_chart(
    tilts: list[float],
    min_monthly: list[float],
    annual: list[float],
    optimum: float,
) -> BytesIO:
    """Worst-month Gi and annual yield against tilt angle."""
    plt = _init_mpl()
    fig, ax = plt.subplots(figsize=(6, 3))
    ax.plot(tilts, min_monthly, "-o", color=C_PRIMARY, markersize=3,
            linewidth=1.2, label="Worst-month Gi (kWh/m²/day)")
    ax.axvline(optimum, color=C_RED, linestyle="--", linewidth=0.8,
               label=f"Optimum {optimum:.0f}°")
    ax.set_xlabel("Tilt angle (°)")
    ax.set_ylabel("kWh/m²/day")

    ax2 = ax.twinx()
    ax2.plot(tilts, annual, "-", color=C_BLUE, linewidth=1.0,
             label="Annual yield (MWh/m²)")
    ax2.set_ylabel("MWh/m²/yr")

    lines = ax.get_legend_handles_labels()
    lines2 = ax2.get_legend_handles_labels()
    ax.legend(lines[0] + lines2[0], lines[1] + lines2[1], fontsize=6, loc="lower center")
    ax.set_title("Tilt Angle Sweep", fontweight="bold")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    return _fig_to_buf(fig)


# ══════════════════════════════════════════════════════════════════════
# Canvas Callbacks (header / footer / page numbers)
# ══════════════════════════════════════════════════════════════════════

def _on_first_page(canvas, doc):
    """Cover page: subtle footer only."""
    canvas.saveState()
    canvas.setFont("Helvetica", 7)
    canvas.setFillColor(colors.HexColor(C_GRAY))
    canvas.drawCentredString(
        PAGE_W / 2, 10 * mm,
        "Generated by SolarCalc photovoltaic design tool",
    )
    canvas.restoreState()


def _on_later_pages(canvas, doc):
    """Pages 2+: header line + page number."""
    canvas.saveState()
    canvas.setStrokeColor(colors.HexColor(C_PRIMARY))
    canvas.setLineWidth(0.5)
    canvas.line(MARGIN, PAGE_H - 14 * mm, PAGE_W - MARGIN, PAGE_H - 14 * mm)
    canvas.setFont("Helvetica", 7)
    canvas.setFillColor(colors.HexColor(C_GRAY))
    canvas.drawString(MARGIN, PAGE_H - 12 * mm, "SolarCalc Irradiance Report")
    canvas.drawRightString(PAGE_W - MARGIN, 8 * mm, f"Page {doc.page}")
    canvas.restoreState()


# ══════════════════════════════════════════════════════════════════════
# Styles & Table Helpers
# ══════════════════════════════════════════════════════════════════════

def _get_styles():
    """Return configured paragraph styles."""
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(
        "ReportTitle", parent=styles["Title"],
        fontSize=26, spaceAfter=6, textColor=colors.HexColor(C_PRIMARY),
    ))
    styles.add(ParagraphStyle(
        "Subtitle", parent=styles["Heading2"],
        fontSize=14, textColor=colors.HexColor(C_DARK), spaceAfter=4,
    ))
    styles.add(ParagraphStyle(
        "SectionHeader", parent=styles["Heading2"],
        fontSize=13, spaceBefore=14, spaceAfter=6,
        textColor=colors.HexColor(C_DARK),
    ))
    styles.add(ParagraphStyle(
        "BodyText2", parent=styles["Normal"],
        fontSize=9, leading=13, spaceAfter=4,
    ))
    styles.add(ParagraphStyle(
        "CoverInfo", parent=styles["Normal"],
        fontSize=11, leading=16, spaceAfter=2,
    ))
    styles.add(ParagraphStyle(
        "Warning", parent=styles["Normal"],
        fontSize=9, leading=13, textColor=colors.HexColor(C_RED),
    ))
    return styles


def _styled_table(
    data: list[list],
    col_widths: list,
    header_color: str = C_DARK,
    row_bg_alt: str = C_LIGHT_BG,
) -> Table:
    """Create a consistently styled table."""
    t = Table(data, colWidths=col_widths)
    t.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor(header_color)),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("GRID", (0, 0), (-1, -1), 0.4, colors.HexColor(C_GRID)),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1),
         [colors.white, colors.HexColor(row_bg_alt)]),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
        ("LEFTPADDING", (0, 0), (-1, -1), 4),
        ("RIGHTPADDING", (0, 0), (-1, -1), 4),
    ]))
    return t


def _fmt(
    v: float | None, fmt_str: str = ",.2f",
    prefix: str = "", suffix: str = "",
) -> str:
    """Safe number formatting."""
    if v is None:
        return "N/A"
    try:
        return f"{prefix}{v:{fmt_str}}{suffix}"
    except (ValueError, TypeError):
        return "N/A"


def _key_value_table(rows: list[tuple[str, str]], header_color: str = C_DARK) -> Table:
    data = [["Parameter", "Value"]] + [[k, v] for k, v in rows]
    t = _styled_table(data, [95 * mm, 75 * mm], header_color=header_color)
    t.setStyle(TableStyle([("ALIGN", (1, 0), (1, -1), "RIGHT")]))
    return t


# ══════════════════════════════════════════════════════════════════════
# Section 1: Cover Page
# ══════════════════════════════════════════════════════════════════════

def _build_cover(styles, result: OptimizationResult, site_name: str | None,
                 country: str | None) -> list:
    elems: list = []
    elems.append(Spacer(1, 50 * mm))
    elems.append(Paragraph("SolarCalc", styles["ReportTitle"]))
    elems.append(Paragraph("Irradiance &amp; Tilt Optimisation Report", styles["Subtitle"]))
    elems.append(Spacer(1, 15 * mm))

    info = []
    if site_name:
        info.append(f"<b>Site:</b> {site_name[:200]}")
    info.append(
        f"<b>Location:</b> {result.latitude_deg:.4f}°, {result.longitude_deg:.4f}°"
    )
    if country:
        info.append(f"<b>Country:</b> {country}")
    info.append(f"<b>Representative day:</b> {result.representative_day} of each month")
    info.append(f"<b>Generated:</b> {datetime.now().strftime('%Y-%m-%d %H:%M')}")

    for line in info:
        elems.append(Paragraph(line, styles["CoverInfo"]))
    elems.append(PageBreak())
    return elems


# ══════════════════════════════════════════════════════════════════════
# Section 2: Irradiance Summary
# ══════════════════════════════════════════════════════════════════════

def _build_summary(styles, result: OptimizationResult) -> list:
    elems: list = []
    elems.append(Paragraph("Irradiance Summary", styles["SectionHeader"]))

    if not result.available:
        elems.append(Paragraph(
            f"Irradiation data is unavailable for this site: only "
            f"{result.valid_month_count} of 12 months returned usable "
            f"observations. No optimum tilt angle could be determined.",
            styles["Warning"],
        ))
        return elems

    elems.append(_key_value_table([
        ("Optimal tilt angle", _fmt(result.optimal_tilt_deg, ".0f", suffix="°")),
        ("Worst-month irradiation (HSP)",
         _fmt(result.min_monthly_irradiance, ".3f", suffix=" kWh/m²/day")),
        ("Annual irradiation on plane",
         _fmt(result.annual_yield_kwh, ",.1f", suffix=" kWh/m²/yr")),
        ("Valid months", f"{result.valid_month_count} / 12"),
    ]))
    elems.append(Spacer(1, 4 * mm))
    elems.append(Paragraph(
        f"The tilt angle maximising the worst month's daily irradiation is "
        f"{result.optimal_tilt_deg:.0f}°. Size stand-alone systems on "
        f"{result.min_monthly_irradiance:.2f} peak sun hours.",
        styles["BodyText2"],
    ))

    skipped = [o.month.name for o in result.observations if not o.is_valid]
    if skipped:
        elems.append(Paragraph(
            f"Months excluded (no data or polar night): {', '.join(skipped)}.",
            styles["BodyText2"],
        ))
    return elems


# ══════════════════════════════════════════════════════════════════════
# Section 3: Monthly Decomposition
# ══════════════════════════════════════════════════════════════════════

def _build_monthly_table(styles, result: OptimizationResult) -> list:
    elems: list = []
    if not result.monthly_results:
        return elems
    elems.append(Paragraph("Monthly Decomposition", styles["SectionHeader"]))

    data: list[list[str]] = [["Month", "Gd", "Kt", "Dd", "Id", "Rb", "Gi"]]
    for m in result.monthly_results:
        h = m.radiation.horizontal
        data.append([
            m.month_name,
            f"{h.global_kwh:.3f}",
            f"{h.clearness_index:.3f}",
            f"{h.diffuse_kwh:.3f}",
            f"{h.direct_kwh:.3f}",
            f"{m.tilted.beam_transfer_factor:.3f}",
            f"{m.tilted.global_tilted_kwh:.3f}",
        ])
    t = _styled_table(data, [30 * mm] + [23 * mm] * 6)
    t.setStyle(TableStyle([("ALIGN", (1, 0), (-1, -1), "RIGHT")]))
    elems.append(t)
    elems.append(Paragraph(
        "Irradiation values in kWh/m²/day; Kt and Rb are dimensionless.",
        styles["BodyText2"],
    ))
    elems.append(Spacer(1, 4 * mm))

    months = [m.month_name[:3] for m in result.monthly_results]
    gi = [m.tilted.global_tilted_kwh for m in result.monthly_results]
    gd = [m.radiation.horizontal.global_kwh for m in result.monthly_results]
    try:
        buf = _make_monthly_gi_chart(months, gi, gd, result.optimal_tilt_deg or 0.0)
        elems.append(Image(buf, width=170 * mm, height=85 * mm))
    except Exception as exc:
        logger.warning("Monthly irradiation chart failed: %s", exc)

    if result.tilt_sweep:
        try:
            buf = _make_tilt_sweep_chart(
                [p.tilt_deg for p in result.tilt_sweep],
                [p.min_monthly_irradiance for p in result.tilt_sweep],
                [p.annual_yield_mwh for p in result.tilt_sweep],
                result.optimal_tilt_deg or 0.0,
            )
            elems.append(Image(buf, width=170 * mm, height=85 * mm))
        except Exception as exc:
            logger.warning("Tilt sweep chart failed: %s", exc)
    return elems


# ══════════════════════════════════════════════════════════════════════
# Section 4: System Sizing (conditional)
# ══════════════════════════════════════════════════════════════════════

def _build_off_grid(styles, sizing: OffGridSizing | None,
                    consumption: DailyConsumption | None) -> list:
    elems: list = []
    if sizing is None:
        return elems
    elems.append(PageBreak())
    elems.append(Paragraph("Off-Grid System Sizing", styles["SectionHeader"]))

    rows: list[tuple[str, str]] = []
    if consumption is not None:
        rows += [
            ("DC daily energy", _fmt(consumption.dc_wh, ",.0f", suffix=" Wh")),
            ("AC daily energy", _fmt(consumption.ac_wh, ",.0f", suffix=" Wh")),
            ("Total daily energy (ET)", _fmt(consumption.total_wh, ",.0f", suffix=" Wh")),
        ]
    rows += [
        ("Generator peak power", _fmt(sizing.generator_peak_w, ",.0f", suffix=" Wp")),
        ("Panels (energy balance)", str(sizing.panels_energy_balance)),
        ("Array layout", f"{sizing.panels_in_series} series x {sizing.parallel_strings} strings"),
        ("Installed peak power", _fmt(sizing.installed_peak_w, ",.0f", suffix=" Wp")),
        ("Daily generation", _fmt(sizing.daily_generation_kwh, ",.2f", suffix=" kWh")),
        ("Battery capacity", f"{sizing.battery_capacity_ah} Ah"),
        ("Regulator current", f"{sizing.regulator_current_a} A"),
        ("Inverter power", _fmt(sizing.inverter_power_w, ",.0f", suffix=" W")),
        ("DC cable voltage drop", _fmt(sizing.cable.relative_drop_pct, ".2f", suffix=" %")),
        ("DC cable power loss", _fmt(sizing.cable.power_loss_w, ",.1f", suffix=" W")),
    ]
    elems.append(_key_value_table(rows, header_color=C_GREEN))
    for w in sizing.warnings:
        elems.append(Paragraph(w, styles["Warning"]))
    return elems


def _build_grid_tied(styles, sizing: GridTiedSizing | None) -> list:
    elems: list = []
    if sizing is None:
        return elems
    elems.append(Paragraph("Grid-Tied System Sizing", styles["SectionHeader"]))
    elems.append(_key_value_table([
        ("Annual peak sun hours", _fmt(sizing.annual_peak_sun_hours, ",.1f", suffix=" h")),
        ("Array peak power", _fmt(sizing.peak_power_kwp, ",.2f", suffix=" kWp")),
        ("Modules", str(sizing.module_count)),
        ("Inverter power", _fmt(sizing.inverter_power_kw, ",.2f", suffix=" kW")),
        ("Tilt angle", _fmt(sizing.optimal_tilt_deg, ".0f", suffix="°")),
    ], header_color=C_BLUE))
    return elems


# ══════════════════════════════════════════════════════════════════════
# Main Entry Point
# ══════════════════════════════════════════════════════════════════════

def generate_pdf_report(
    result: OptimizationResult,
    site_name: str | None = None,
    country: str | None = None,
    off_grid: OffGridSizing | None = None,
    consumption: DailyConsumption | None = None,
    grid_tied: GridTiedSizing | None = None,
) -> BytesIO:
    """Generate the PDF report and return it as a BytesIO buffer.

    Parameters
    ----------
    result : OptimizationResult
        Output of the tilt optimiser.  An unavailable result still renders
        a cover and a notice.
    off_grid, grid_tied : optional
        Sizing sections are rendered only when given.
    """
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        topMargin=18 * mm,
        bottomMargin=15 * mm,
        leftMargin=MARGIN,
        rightMargin=MARGIN,
        title="SolarCalc Irradiance Report",
    )

    styles = _get_styles()
    elements: list = []

    elements.extend(_build_cover(styles, result, site_name, country))
    elements.extend(_build_summary(styles, result))
    elements.extend(_build_monthly_table(styles, result))
    elements.extend(_build_off_grid(styles, off_grid, consumption))
    elements.extend(_build_grid_tied(styles, grid_tied))

    doc.build(elements, onFirstPage=_on_first_page, onLaterPages=_on_later_pages)
    buffer.seek(0)
    return buffer
