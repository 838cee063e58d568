"""
Synthetic Sample Snapshot
=========================

Builds a realistic one-restaurant snapshot for demos and charts:
- Korean casual-dining menu with weekday discounts
- Fixed / variable cost buckets, depreciation and marketing spend
- One month of daily sales recorded through the engine itself

Day-of-week multipliers make Fri/Sat the busiest days, so the BEP-achieved
pattern in the demo looks like a real month.
"""

from dataclasses import replace
from datetime import timedelta

import numpy as np
import pandas as pd

import bep_engine as engine
from bep_models import (
    BepSnapshot,
    CostDetailItem,
    DepreciationItem,
    MarketingCost,
    SpecificCardFeeData,
    TargetGoals,
    VatSettings,
    build_menu_item,
    default_card_fees,
)


SAMPLE_MENU = [
    # (name, price, cost_rate %, discount)
    ("Beef Bulgogi Set", 23000, 42, None),
    ("Marinated Galbi 150g", 29000, 50, ("rate", 10, ("Mon", "Tue"))),
    ("Kimchi Stew", 11000, 30, None),
    ("Bibimbap", 12000, 33, None),
    ("Seafood Pancake", 18000, 38, ("amount", 3000, ("Sun",))),
    ("Cold Noodles", 10000, 28, None),
    ("Soju", 5000, 25, None),
    ("Beer", 6000, 30, None),
]

# Mean covers per item per day, before day-of-week multipliers
SAMPLE_DAILY_VOLUME = [14, 9, 22, 18, 8, 12, 30, 20]

DOW_MULTIPLIERS = {
    0: 0.85,  # Monday
    1: 0.9,
    2: 0.95,
    3: 1.0,
    4: 1.35,  # Friday
    5: 1.45,  # Saturday
    6: 1.1,
}


def generate_sample_menu() -> tuple:
    items = []
    for i, (name, price, cost_rate, discount) in enumerate(SAMPLE_MENU, start=1):
        kwargs = {}
        if discount is not None:
            mode, value, days = discount
            kwargs = dict(
                discount_enabled=True,
                discount_days=days,
                discount_type=mode,
                discount_rate=value if mode == "rate" else 0.0,
                discount_amount=value if mode == "amount" else 0.0,
            )
        items.append(build_menu_item(f"m{i}", name, price, cost_rate=cost_rate, **kwargs))
    return tuple(items)


def generate_sample_costs() -> tuple:
    fixed_costs = {
        "storeRent": (CostDetailItem("f1", "Store rent", 3500000),),
        "laborCost": (
            CostDetailItem("f2", "Head chef", 3800000, person="Kim"),
            CostDetailItem("f3", "Floor manager", 2900000, person="Lee"),
        ),
        "insurance": (CostDetailItem("f4", "Statutory insurance", 560000),),
        "communication": (CostDetailItem("f5", "Phone + internet", 88000),),
        "posRental": (CostDetailItem("f6", "POS terminal", 33000),),
    }
    variable_costs = {
        "electricity": (CostDetailItem("v1", "Electricity", 620000),),
        "gas": (CostDetailItem("v2", "Gas", 410000),),
        "water": (CostDetailItem("v3", "Water", 95000),),
        "partTime": (
            CostDetailItem("v4", "Weekend server", 0, daily_wage=95000, work_days=9),
        ),
    }
    return fixed_costs, variable_costs


def generate_sample_snapshot(month: str = "2024-05", seed: int = 42) -> BepSnapshot:
    """
    Build a complete snapshot for `month` ("YYYY-MM").

    `today` is the last day of the month so every recorded day is in range.
    """
    rng = np.random.default_rng(seed)

    month_start = pd.Timestamp(f"{month}-01")
    month_end = (month_start + pd.offsets.MonthEnd(0)).date()
    today = month_end

    menu_items = generate_sample_menu()
    fixed_costs, variable_costs = generate_sample_costs()

    card_fees = tuple(
        SpecificCardFeeData(card.id, card.card_name, fee_rate=1.5, sales_amount=0)
        for card in default_card_fees()
    )

    snapshot = BepSnapshot(
        today=today,
        menu_items=menu_items,
        fixed_costs=fixed_costs,
        variable_costs=variable_costs,
        depreciation_items=(
            DepreciationItem("d1", today - timedelta(days=400), "Kitchen equipment", 36000000, 60),
            DepreciationItem("d2", today - timedelta(days=90), "Interior", 18000000, 36),
        ),
        marketing_costs=(
            MarketingCost("mk1", "Delivery app ads", 450000, today - timedelta(days=60),
                          today + timedelta(days=300), period="monthly"),
            MarketingCost("mk2", "Annual map listing", 1200000, today - timedelta(days=100),
                          today + timedelta(days=265), period="annual"),
        ),
        card_fees=card_fees,
        operating_days=26,
        vat_settings=VatSettings(enabled=True, rate=10, auto_calculate=True),
        target_goals=TargetGoals(target_profit=5000000, target_revenue=60000000),
    )

    history = ()
    day = month_start.date()
    while day <= month_end:
        # Closed on the first Monday and the third Monday of the month
        if day.weekday() == 0 and (day.day <= 7 or 15 <= day.day <= 21):
            day += timedelta(days=1)
            continue
        mult = DOW_MULTIPLIERS[day.weekday()]
        qty = rng.poisson(np.array(SAMPLE_DAILY_VOLUME) * mult)
        quantities = {item.id: int(q) for item, q in zip(menu_items, qty)}
        other_revenue = float(rng.choice([0, 0, 0, 20000, 50000]))
        _, history = engine.record_daily_sales(
            replace(snapshot, daily_sales=history),
            day,
            quantities,
            other_revenue=other_revenue,
        )
        day += timedelta(days=1)

    monthly_revenue = sum(sale.total_revenue for sale in history)
    # Card sales are roughly 85% of revenue, spread across issuers
    shares = rng.dirichlet(np.ones(len(card_fees)))
    card_fees = tuple(
        SpecificCardFeeData(card.id, card.card_name, card.fee_rate, round(monthly_revenue * 0.85 * share))
        for card, share in zip(card_fees, shares)
    )

    return replace(snapshot, daily_sales=history, card_fees=card_fees)
