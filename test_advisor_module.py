"""
Pytest Suite for Alerts and Cost Optimisation Suggestions
"""

import pytest
import numpy as np
import pandas as pd
from datetime import date
from pathlib import Path
import sys

# Add current directory to path
sys.path.insert(0, str(Path(__file__).parent))

from advisor_module import generate_alerts, generate_cost_optimization_suggestions
from bep_engine import CONFIG, MENU_ANALYSIS_COLUMNS
from bep_models import TargetGoals

TODAY = date(2024, 5, 15)


def make_monthly(**overrides):
    monthly = {
        "total_revenue": 10000000,
        "operating_profit": 2000000,
        "operating_profit_rate": 20.0,
        "total_fixed_costs": 3000000,
        "fixed_cost_rate": 30.0,
        "total_variable_costs": 3000000,
        "variable_cost_rate": 30.0,
        "total_marketing_costs": 0,
    }
    monthly.update(overrides)
    return monthly


def make_menu_df(rows):
    return pd.DataFrame(
        [
            {"menu_id": mid, "menu_name": mid, "total_sold": sold, "total_revenue": revenue,
             "total_profit": revenue * margin / 100, "average_daily": 0.0, "profit_margin": margin}
            for mid, sold, revenue, margin in rows
        ],
        columns=MENU_ANALYSIS_COLUMNS,
    )


# =============================================================================
# ALERT TESTS
# =============================================================================

class TestAlerts:

    def test_healthy_month_has_no_alerts(self):
        alerts = generate_alerts({"monthly_bep": 8000000}, make_monthly(), TargetGoals(), TODAY, CONFIG)
        assert alerts == []

    def test_bep_shortfall(self):
        alerts = generate_alerts({"monthly_bep": 12500000}, make_monthly(), TargetGoals(), TODAY, CONFIG)
        assert len(alerts) == 1
        alert = alerts[0]
        assert alert.id == "2024-05-15-bep"
        assert alert.kind == "warning"
        assert alert.date == "2024-05-15"
        assert "₩2,500,000" in alert.message

    def test_revenue_equal_to_bep_is_not_short(self):
        alerts = generate_alerts({"monthly_bep": 10000000}, make_monthly(), TargetGoals(), TODAY, CONFIG)
        assert not any(a.id.endswith("-bep") for a in alerts)

    def test_unreachable_bep_no_shortfall_alert(self):
        alerts = generate_alerts({"monthly_bep": np.inf}, make_monthly(), TargetGoals(), TODAY, CONFIG)
        assert not any(a.id.endswith("-bep") for a in alerts)

    @pytest.mark.parametrize("rate,fires", [
        (9.99, True),
        (10.0, False),
        (-40.0, True),
    ])
    def test_low_operating_profit_rate(self, rate, fires):
        monthly = make_monthly(operating_profit_rate=rate)
        alerts = generate_alerts({"monthly_bep": 0}, monthly, TargetGoals(), TODAY, CONFIG)
        assert any(a.id == "2024-05-15-margin" for a in alerts) is fires

    def test_no_margin_alert_without_revenue(self):
        monthly = make_monthly(total_revenue=0, operating_profit_rate=0.0, operating_profit=-100)
        alerts = generate_alerts({"monthly_bep": 0}, monthly, TargetGoals(), TODAY, CONFIG)
        assert alerts == []

    @pytest.mark.parametrize("profit,fires", [
        (2000000, True),
        (1999999, False),
    ])
    def test_target_profit(self, profit, fires):
        goals = TargetGoals(target_profit=2000000)
        monthly = make_monthly(operating_profit=profit)
        alerts = generate_alerts({"monthly_bep": 0}, monthly, goals, TODAY, CONFIG)
        success = [a for a in alerts if a.kind == "success"]
        assert bool(success) is fires

    def test_zero_target_never_succeeds(self):
        alerts = generate_alerts({"monthly_bep": 0}, make_monthly(), TargetGoals(), TODAY, CONFIG)
        assert not any(a.kind == "success" for a in alerts)

    def test_rules_are_independent(self):
        goals = TargetGoals(target_profit=100)
        monthly = make_monthly(operating_profit_rate=5.0, operating_profit=500000)
        alerts = generate_alerts({"monthly_bep": 20000000}, monthly, goals, TODAY, CONFIG)
        assert [a.id.rsplit("-", 1)[1] for a in alerts] == ["bep", "margin", "target"]

    def test_thresholds_come_from_config(self):
        config = dict(CONFIG, advisor=dict(CONFIG["advisor"], min_operating_profit_rate=25))
        alerts = generate_alerts({"monthly_bep": 0}, make_monthly(), TargetGoals(), TODAY, config)
        assert any(a.id.endswith("-margin") for a in alerts)


# =============================================================================
# SUGGESTION TESTS
# =============================================================================

class TestSuggestions:

    def test_no_suggestions_below_thresholds(self):
        suggestions = generate_cost_optimization_suggestions(make_monthly(), make_menu_df([]), CONFIG)
        assert suggestions == []

    def test_fixed_cost_boundary(self):
        at = generate_cost_optimization_suggestions(make_monthly(fixed_cost_rate=35.0), make_menu_df([]), CONFIG)
        above = generate_cost_optimization_suggestions(make_monthly(fixed_cost_rate=35.01), make_menu_df([]), CONFIG)
        assert at == []
        assert len(above) == 1
        assert above[0].category == "Reduce fixed costs"
        assert above[0].priority == "high"
        assert above[0].expected_saving == pytest.approx(300000)

    def test_variable_cost_boundary(self):
        at = generate_cost_optimization_suggestions(make_monthly(variable_cost_rate=40.0), make_menu_df([]), CONFIG)
        above = generate_cost_optimization_suggestions(make_monthly(variable_cost_rate=41.0), make_menu_df([]), CONFIG)
        assert at == []
        assert above[0].category == "Reduce variable costs"
        assert above[0].priority == "medium"
        assert above[0].expected_saving == pytest.approx(450000)

    def test_low_margin_menu_items(self):
        menu_df = make_menu_df([
            ("m1", 10, 1000000, 45.0),
            ("m2", 5, 500000, 30.0),
            ("m3", 8, 800000, 50.0),   # exactly at threshold
            ("m4", 0, 0, 0.0),         # unsold
        ])
        suggestions = generate_cost_optimization_suggestions(make_monthly(), menu_df, CONFIG)
        assert len(suggestions) == 1
        menu = suggestions[0]
        assert menu.category == "Menu optimisation"
        assert menu.priority == "high"
        assert menu.suggestion.startswith("2 menu item(s)")
        assert menu.expected_saving == pytest.approx(150000)

    def test_all_rules_can_fire_together(self):
        monthly = make_monthly(fixed_cost_rate=50.0, variable_cost_rate=50.0)
        menu_df = make_menu_df([("m1", 1, 10000, 10.0)])
        suggestions = generate_cost_optimization_suggestions(monthly, menu_df, CONFIG)
        assert [s.category for s in suggestions] == [
            "Reduce fixed costs", "Reduce variable costs", "Menu optimisation",
        ]
