"""
Advisor Module - Alerts and Cost Optimisation Suggestions

Turns the engine's BEP and monthly analysis into user-facing findings.
Everything here is regenerated from scratch on each call; there is no
alert history.

Architecture:
- engine (BEP + monthly analysis) → advisor (alerts, suggestions) → report
"""

from dataclasses import dataclass
from datetime import date
from typing import List
import numpy as np
import pandas as pd


@dataclass(frozen=True)
class Alert:
    """
    A single threshold finding.

    Attributes:
        id: Stable identifier (e.g. "2024-05-15-bep")
        kind: "warning", "success" or "info"
        message: Human-readable message
        date: ISO date the alert was generated for
    """
    id: str
    kind: str
    message: str
    date: str


@dataclass(frozen=True)
class Suggestion:
    """
    A cost-cutting recommendation.

    Attributes:
        category: Short label ("Reduce fixed costs", ...)
        priority: "high" or "medium"
        suggestion: What to review
        expected_saving: Monthly saving estimate in currency units
    """
    category: str
    priority: str
    suggestion: str
    expected_saving: float


def _money(value: float, config: dict) -> str:
    return f"{config['currency']}{value:,.0f}"


# =============================================================================
# ALERTS
# =============================================================================

def generate_alerts(bep: dict,
                    monthly: dict,
                    target_goals,
                    today: date,
                    config: dict) -> List[Alert]:
    """
    Evaluate every alert rule independently.

    Args:
        bep: Output of bep_engine.calculate_bep()
        monthly: Output of bep_engine.calculate_monthly_analysis()
        target_goals: TargetGoals record
        today: Reference date stamped on each alert
        config: Configuration with an "advisor" threshold table

    Returns:
        List of Alert (possibly empty)
    """
    thresholds = config["advisor"]
    stamp = today.isoformat()
    alerts = []

    monthly_bep = bep["monthly_bep"]
    total_revenue = monthly["total_revenue"]

    if np.isfinite(monthly_bep) and total_revenue < monthly_bep:
        shortfall = monthly_bep - total_revenue
        alerts.append(Alert(
            id=f"{stamp}-bep",
            kind="warning",
            message=f"This month's revenue is {_money(shortfall, config)} short of the break-even point.",
            date=stamp,
        ))

    min_rate = thresholds["min_operating_profit_rate"]
    if total_revenue > 0 and monthly["operating_profit_rate"] < min_rate:
        alerts.append(Alert(
            id=f"{stamp}-margin",
            kind="warning",
            message=(
                f"Operating profit rate is low at {monthly['operating_profit_rate']:.1f}%. "
                f"Review costs or menu prices."
            ),
            date=stamp,
        ))

    target_profit = target_goals.target_profit
    if target_profit > 0 and monthly["operating_profit"] >= target_profit:
        alerts.append(Alert(
            id=f"{stamp}-target",
            kind="success",
            message=f"Target profit of {_money(target_profit, config)} achieved!",
            date=stamp,
        ))

    return alerts


# =============================================================================
# COST OPTIMISATION
# =============================================================================

def generate_cost_optimization_suggestions(monthly: dict,
                                           menu_df: pd.DataFrame,
                                           config: dict) -> List[Suggestion]:
    """
    Heuristic cost-cutting suggestions; each rule may fire independently.

    Args:
        monthly: Output of bep_engine.calculate_monthly_analysis()
        menu_df: Output of bep_engine.calculate_menu_analysis()
        config: Configuration with an "advisor" threshold table
    """
    thresholds = config["advisor"]
    suggestions = []

    if monthly["fixed_cost_rate"] > thresholds["fixed_cost_rate_threshold"]:
        suggestions.append(Suggestion(
            category="Reduce fixed costs",
            priority="high",
            suggestion=(
                "Fixed costs are a high share of revenue. Renegotiate rent, cancel unused "
                "subscriptions and improve energy efficiency."
            ),
            expected_saving=monthly["total_fixed_costs"] * thresholds["fixed_cost_saving_rate"],
        ))

    if monthly["variable_cost_rate"] > thresholds["variable_cost_rate_threshold"]:
        suggestions.append(Suggestion(
            category="Reduce variable costs",
            priority="medium",
            suggestion=(
                "Variable costs are a high share of revenue. Compare ingredient suppliers, "
                "cut packaging waste and optimise power usage."
            ),
            expected_saving=monthly["total_variable_costs"] * thresholds["variable_cost_saving_rate"],
        ))

    if not menu_df.empty:
        low_profit = menu_df[
            (menu_df["profit_margin"] < thresholds["menu_profit_margin_threshold"]) &
            (menu_df["total_sold"] > 0)
        ]
        if len(low_profit) > 0:
            suggestions.append(Suggestion(
                category="Menu optimisation",
                priority="high",
                suggestion=(
                    f"{len(low_profit)} menu item(s) have low profitability. "
                    f"Review their prices or ingredient costs."
                ),
                expected_saving=float((low_profit["total_revenue"] * thresholds["menu_saving_rate"]).sum()),
            ))

    return suggestions
