"""
BEP Report Helpers
==================

Presentation of engine results: currency formatting, a plain-text summary
block, PNG charts and an Excel workbook. Break-even values of np.inf are
rendered as "margin ≤ 0%" and never as a number.
"""

import os
from dataclasses import asdict
from typing import Iterable

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd


UNREACHABLE_BEP_LABEL = "margin ≤ 0%"


def format_currency(value: float, config: dict) -> str:
    return f"{config['currency']}{value:,.0f}"


def format_percent(value: float) -> str:
    return f"{value:.1f}%"


def format_bep(value: float, config: dict) -> str:
    """Break-even value for display; unreachable BEPs get a label instead of a number."""
    if not np.isfinite(value):
        return UNREACHABLE_BEP_LABEL
    return format_currency(value, config)


# =============================================================================
# SUMMARY BLOCK
# =============================================================================

def build_summary_block(results: dict, menu_items: Iterable, config: dict) -> str:
    """
    Plain-text summary of one analysis run.

    Args:
        results: Dictionary assembled by bep_engine.run_full_bep_analysis()
        menu_items: Menu records, used to show names next to menu ids
        config: Configuration (currency, restaurant_name)
    """
    lines = []

    def section(title: str):
        lines.append("\n" + "=" * 60)
        lines.append(title)
        lines.append("=" * 60)

    bep = results["bep"]
    monthly = results["monthly_analysis"]
    menu_df = results["menu_analysis_df"]

    section(f"{config.get('restaurant_name', 'Restaurant')} – BEP REPORT ({results['month']})")

    section("BREAK-EVEN POINT")
    lines.append(f"Monthly fixed costs:     {format_currency(bep['monthly_fixed_costs'], config)}")
    lines.append(f"Monthly variable costs:  {format_currency(bep['monthly_variable_costs'], config)}")
    lines.append(f"Monthly marketing costs: {format_currency(bep['monthly_marketing_costs'], config)}")
    lines.append(f"Average margin rate:     {format_percent(bep['average_margin_rate'])}")
    lines.append(f"Operating days:          {bep['operating_days']}")
    lines.append(f"Monthly BEP:             {format_bep(bep['monthly_bep'], config)}")
    lines.append(f"Daily BEP:               {format_bep(bep['daily_bep'], config)}")

    section("MONTHLY ANALYSIS")
    lines.append(f"Revenue:           {format_currency(monthly['total_revenue'], config)}")
    lines.append(f"Fixed costs:       {format_currency(monthly['total_fixed_costs'], config)}"
                 f" ({format_percent(monthly['fixed_cost_rate'])})")
    lines.append(f"Variable costs:    {format_currency(monthly['total_variable_costs'], config)}"
                 f" ({format_percent(monthly['variable_cost_rate'])})")
    lines.append(f"Marketing costs:   {format_currency(monthly['total_marketing_costs'], config)}"
                 f" ({format_percent(monthly['marketing_cost_rate'])})")
    lines.append(f"VAT payable:       {format_currency(monthly['vat_payable'], config)}")
    lines.append(f"Operating profit:  {format_currency(monthly['operating_profit'], config)}"
                 f" ({format_percent(monthly['operating_profit_rate'])})")
    lines.append(f"BEP achieved days: {monthly['bep_achieved_days']} / {monthly['total_operating_days']}")

    section("MENU RANKING (by revenue)")
    names = {item.id: item.name for item in menu_items}
    if menu_df.empty:
        lines.append("No menu items.")
    for _, row in menu_df.iterrows():
        name = names.get(row["menu_id"], row["menu_id"])
        lines.append(
            f"  • {name}: {int(row['total_sold'])} sold, "
            f"{format_currency(row['total_revenue'], config)} revenue, "
            f"{format_percent(row['profit_margin'])} margin"
        )

    section("ALERTS")
    if not results["alerts"]:
        lines.append("None.")
    for alert in results["alerts"]:
        lines.append(f"  [{alert.kind.upper()}] {alert.message}")

    section("COST OPTIMISATION")
    if not results["suggestions"]:
        lines.append("None.")
    for s in results["suggestions"]:
        lines.append(
            f"  [{s.priority.upper()}] {s.category}: {s.suggestion} "
            f"(expected saving {format_currency(s.expected_saving, config)})"
        )

    return "\n".join(lines) + "\n"


# =============================================================================
# CHARTS
# =============================================================================

def plot_daily_revenue_vs_bep(daily_df: pd.DataFrame, config: dict):
    if daily_df.empty:
        return None
    fig, ax = plt.subplots(figsize=(10, 5))
    colors = np.where(daily_df["bep_achieved"], config["chart_colors"][4], config["chart_colors"][3])
    x = np.arange(len(daily_df))
    ax.bar(x, daily_df["total_revenue"], color=colors, alpha=0.85, edgecolor="black")
    daily_bep = daily_df["daily_bep"].iloc[0]
    if np.isfinite(daily_bep):
        ax.axhline(daily_bep, color="black", linestyle="--", label=f"Daily BEP {format_currency(daily_bep, config)}")
        ax.legend()
    ax.set_xticks(x)
    ax.set_xticklabels([d.strftime("%d") for d in daily_df["date"]], fontsize=8)
    ax.set_ylabel(f"Revenue ({config['currency']})")
    ax.set_title("Daily Revenue vs Break-Even", fontweight="bold")
    fig.tight_layout()
    return fig


def plot_menu_revenue(menu_df: pd.DataFrame, config: dict, top_n: int = 10):
    if menu_df.empty:
        return None
    top = menu_df.head(top_n)
    fig, ax = plt.subplots(figsize=(10, 5))
    ax.barh(top["menu_name"][::-1], top["total_revenue"][::-1], color=config["chart_colors"][0])
    ax.set_xlabel(f"Revenue ({config['currency']})")
    ax.set_title("Menu Revenue Ranking", fontweight="bold")
    fig.tight_layout()
    return fig


def plot_cost_structure(monthly: dict, config: dict):
    parts = {
        "Fixed": monthly["total_fixed_costs"],
        "Variable": monthly["total_variable_costs"],
        "Marketing": monthly["total_marketing_costs"],
    }
    parts = {k: v for k, v in parts.items() if v > 0}
    if not parts:
        return None
    fig, ax = plt.subplots(figsize=(6, 6))
    ax.pie(list(parts.values()), labels=list(parts.keys()), autopct="%1.1f%%",
           colors=config["chart_colors"][:len(parts)])
    ax.set_title("Monthly Cost Structure", fontweight="bold")
    return fig


def save_all_charts(results: dict, output_dir: str, config: dict) -> list:
    """
    Save every available chart as PNG in `output_dir`.

    Returns:
        List of written file paths
    """
    os.makedirs(output_dir, exist_ok=True)
    charts = {
        "daily_revenue_vs_bep.png": plot_daily_revenue_vs_bep(results["daily_sales_df"], config),
        "menu_revenue.png": plot_menu_revenue(results["menu_analysis_df"], config),
        "cost_structure.png": plot_cost_structure(results["monthly_analysis"], config),
    }
    written = []
    for fname, fig in charts.items():
        if fig is None:
            continue
        path = os.path.join(output_dir, fname)
        fig.savefig(path, dpi=150, bbox_inches="tight")
        plt.close(fig)
        written.append(path)
    return written


# =============================================================================
# EXCEL
# =============================================================================

def _metric_frame(metrics: dict) -> pd.DataFrame:
    # inf has no Excel representation
    rows = [
        (k, v if not isinstance(v, float) or np.isfinite(v) else UNREACHABLE_BEP_LABEL)
        for k, v in metrics.items()
    ]
    return pd.DataFrame(rows, columns=["metric", "value"])


def export_results_to_excel(results: dict, path: str) -> None:
    """
    Write the result tables into a multi-sheet Excel workbook.

    Args:
        results: Dictionary returned by bep_engine.run_full_bep_analysis()
        path: File path where the workbook will be saved
    """
    with pd.ExcelWriter(path) as writer:
        _metric_frame(results["bep"]).to_excel(writer, sheet_name="BEP", index=False)
        _metric_frame(results["monthly_analysis"]).to_excel(writer, sheet_name="Monthly_Analysis", index=False)

        menu_df = results.get("menu_analysis_df")
        if isinstance(menu_df, pd.DataFrame) and not menu_df.empty:
            menu_df.to_excel(writer, sheet_name="Menu_Analysis", index=False)

        daily_df = results.get("daily_sales_df")
        if isinstance(daily_df, pd.DataFrame) and not daily_df.empty:
            daily_df.replace([np.inf], np.nan).to_excel(writer, sheet_name="Daily_Sales", index=False)

        if results.get("alerts"):
            pd.DataFrame([asdict(a) for a in results["alerts"]]).to_excel(writer, sheet_name="Alerts", index=False)
        if results.get("suggestions"):
            pd.DataFrame([asdict(s) for s in results["suggestions"]]).to_excel(
                writer, sheet_name="Suggestions", index=False
            )
