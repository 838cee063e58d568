# %% [markdown]
# # Restaurant BEP Calculator – Engine
#
# Pure derivation functions that turn a `BepSnapshot` into:
#
# - Payroll burden for a base salary
# - Fixed / variable cost totals per category
# - Discounted menu prices per calendar date
# - Daily sales records
# - Monthly and daily break-even revenue
# - Monthly profit analysis and per-menu profitability
#
# Nothing in this module reads the clock, touches files or mutates its
# inputs. `run_full_bep_analysis()` at the bottom is the one orchestration
# entry point and the only place that prints.


# %%
from datetime import date
from typing import Iterable, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

import advisor_module
import bep_report
from bep_models import (
    DEFAULT_FIXED_CATEGORIES,
    DEFAULT_VARIABLE_CATEGORIES,
    SPECIAL_CARD_FEE,
    SPECIAL_DEPRECIATION,
    SPECIAL_SALES,
    SPECIAL_VAT,
    BepSnapshot,
    CategorySpec,
    CostDetailItem,
    DailySales,
    DepreciationItem,
    InvalidInputError,
    MARKETING_PERIOD_DIVISORS,
    MarketingCost,
    MenuItem,
    MenuSale,
    SpecificCardFeeData,
    category_registry,
)

# %% [markdown]
# ## 1. CONFIG – Master Settings
#
# - Copy and override per restaurant: `config = engine.CONFIG.copy()`.
# - Payroll rates are the Korean statutory reference values.


# %%
CONFIG = {
    "currency": "₩",
    "restaurant_name": "My Restaurant",
    "engine_version": "v1.0",

    "default_operating_days": 26,

    # Statutory payroll add-ons (fractions of base salary)
    "payroll_rates": {
        "pension_rate": 0.045,
        "pension_cap": 150000,
        "health_rate": 0.03545,
        "care_rate": 0.2377,         # applied to the health premium, not salary
        "employment_rate": 0.0105,
        "accident_rate": 0.008,
        "retirement_divisor": 12,
    },

    # Quick estimates shown next to labour cost entries
    "labor_estimate_rates": {
        "retirement_divisor": 12,
        "insurance_rate": 0.09,
    },

    # Alert and optimisation thresholds (percent of revenue unless noted)
    "advisor": {
        "min_operating_profit_rate": 10,
        "fixed_cost_rate_threshold": 35,
        "variable_cost_rate_threshold": 40,
        "menu_profit_margin_threshold": 50,
        "fixed_cost_saving_rate": 0.10,
        "variable_cost_saving_rate": 0.15,
        "menu_saving_rate": 0.10,
    },

    "chart_colors": ["#2E86AB", "#A23B72", "#F18F01", "#C73E1D", "#6A994E"],
}

# %% [markdown]
# ## 2. Payroll Burden


# %%
def calculate_payroll_burden(salary: float, rates: Optional[dict] = None) -> dict:
    """
    Convert a base salary into statutory add-on costs and a fully-loaded total.

    Args:
        salary: Monthly base salary (non-negative)
        rates: Rate table; defaults to CONFIG["payroll_rates"]

    Returns:
        {base_salary, pension, health, care, employment, accident, retirement, total}
    """
    if salary < 0:
        raise InvalidInputError(f"Salary must not be negative: {salary}")
    rates = rates or CONFIG["payroll_rates"]

    pension = min(salary * rates["pension_rate"], rates["pension_cap"])
    health = salary * rates["health_rate"]
    care = health * rates["care_rate"]
    employment = salary * rates["employment_rate"]
    accident = salary * rates["accident_rate"]
    retirement = salary / rates["retirement_divisor"]

    return {
        "base_salary": salary,
        "pension": pension,
        "health": health,
        "care": care,
        "employment": employment,
        "accident": accident,
        "retirement": retirement,
        "total": salary + pension + health + care + employment + accident + retirement,
    }


def estimate_labor_add_ons(amount: float, config: dict = CONFIG) -> dict:
    """Rough retirement / insurance estimate for a labour cost entry."""
    rates = config["labor_estimate_rates"]
    return {
        "estimated_retirement": amount / rates["retirement_divisor"],
        "estimated_insurance": amount * rates["insurance_rate"],
    }

# %% [markdown]
# ## 3. Cost Aggregation


# %%
def is_active(start: date, end: date, today: date) -> bool:
    return start <= today <= end


def cost_item_amount(item: CostDetailItem) -> float:
    # Part-time rows are authoritative on daily wage x days
    if item.daily_wage and item.work_days and item.daily_wage > 0 and item.work_days > 0:
        return item.daily_wage * item.work_days
    return item.amount


def current_depreciation_total(items: Iterable[DepreciationItem], today: date) -> float:
    return sum(
        item.monthly_depreciation
        for item in items
        if is_active(item.purchase_date, item.depreciation_end_date, today)
    )


def card_fee_total(card_fees: Iterable[SpecificCardFeeData]) -> float:
    return sum(card.calculated_fee for card in card_fees)


def category_total(bucket: Mapping[str, Tuple[CostDetailItem, ...]],
                   category_key: str,
                   registry: Optional[Mapping[str, CategorySpec]] = None,
                   depreciation_items: Iterable[DepreciationItem] = (),
                   card_fees: Iterable[SpecificCardFeeData] = (),
                   today: Optional[date] = None) -> float:
    """
    Total of one cost category.

    Special categories are dispatched on the registry entry's
    `special_behavior`; everything else is the sum of item amounts.
    Without a registry the default fixed and variable categories apply.
    Unknown keys total 0.
    """
    if registry is None:
        registry = {
            **category_registry(DEFAULT_FIXED_CATEGORIES),
            **category_registry(DEFAULT_VARIABLE_CATEGORIES),
        }
    spec = registry.get(category_key)
    behavior = spec.special_behavior if spec else None

    if behavior == SPECIAL_DEPRECIATION:
        if today is None:
            return 0.0
        return current_depreciation_total(depreciation_items, today)
    if behavior == SPECIAL_CARD_FEE:
        return card_fee_total(card_fees)

    return sum(cost_item_amount(item) for item in bucket.get(category_key, ()))


def domain_total(bucket: Mapping[str, Tuple[CostDetailItem, ...]],
                 category_keys: Iterable[str],
                 registry: Optional[Mapping[str, CategorySpec]] = None,
                 depreciation_items: Iterable[DepreciationItem] = (),
                 card_fees: Iterable[SpecificCardFeeData] = (),
                 today: Optional[date] = None,
                 exclude: Iterable[str] = ()) -> float:
    excluded = set(exclude)
    depreciation_items = tuple(depreciation_items)
    card_fees = tuple(card_fees)
    return sum(
        category_total(bucket, key, registry, depreciation_items, card_fees, today)
        for key in category_keys
        if key not in excluded
    )


def _keys_with_behavior(registry: Mapping[str, CategorySpec], *behaviors: str) -> Tuple[str, ...]:
    return tuple(key for key, spec in registry.items() if spec.special_behavior in behaviors)


def total_fixed_costs(snapshot: BepSnapshot) -> float:
    registry = snapshot.fixed_registry
    return domain_total(
        snapshot.fixed_costs,
        registry.keys(),
        registry,
        snapshot.depreciation_items,
        snapshot.card_fees,
        snapshot.today,
    )


def total_variable_costs(snapshot: BepSnapshot) -> float:
    """
    Monthly variable cost total used by the BEP engine.

    Ingredients come from daily sales and are never counted here. Manually
    entered VAT counts only when VAT is not auto-calculated. The card-fee
    total is added exactly once.
    """
    registry = snapshot.variable_registry
    excluded = _keys_with_behavior(registry, SPECIAL_SALES, SPECIAL_CARD_FEE)
    if snapshot.vat_settings.auto_calculate:
        excluded += _keys_with_behavior(registry, SPECIAL_VAT)

    general = domain_total(
        snapshot.variable_costs,
        registry.keys(),
        registry,
        today=snapshot.today,
        exclude=excluded,
    )
    return general + card_fee_total(snapshot.card_fees)

# %% [markdown]
# ## 4. Discount-Aware Pricing


# %%
def effective_price(item: MenuItem, on_date: Optional[date]) -> float:
    """
    Sale price of a menu item on a given calendar date.

    Weekday discounts apply only when the item has discounts enabled and
    `on_date.weekday()` is one of its discount days. Always within
    [0, price].
    """
    if not item.discount_enabled or on_date is None:
        return item.price
    if on_date.weekday() not in item.discount_days:
        return item.price

    if item.discount_type == "rate":
        discounted = item.price * (1 - item.discount_rate / 100)
    else:
        discounted = item.price - item.discount_amount
    return min(item.price, max(0.0, discounted))

# %% [markdown]
# ## 5. Daily Sales


# %%
def calculate_daily_sales(on_date: date,
                          quantities: Mapping[str, int],
                          other_revenue: float,
                          other_costs: float,
                          menu_items: Iterable[MenuItem],
                          daily_bep: float) -> DailySales:
    """
    Build one day's sales record.

    Args:
        on_date: The sales date (drives weekday discounts)
        quantities: menu_id → quantity sold
        other_revenue: Revenue not tied to a menu item
        other_costs: Costs not tied to a menu item
        menu_items: Full menu
        daily_bep: That month's daily BEP (np.inf ⇒ never achieved)

    Returns:
        DailySales
    """
    total_revenue = 0.0
    total_costs = 0.0
    menu_sales = []

    for item in menu_items:
        quantity = int(quantities.get(item.id, 0) or 0)
        if quantity <= 0:
            continue
        menu_sales.append(MenuSale(item.id, quantity))
        total_revenue += effective_price(item, on_date) * quantity
        total_costs += item.cost * quantity

    total_revenue += other_revenue
    total_costs += other_costs

    return DailySales(
        date=on_date,
        menu_sales=tuple(menu_sales),
        other_revenue=other_revenue,
        other_costs=other_costs,
        total_revenue=total_revenue,
        total_costs=total_costs,
        net_profit=total_revenue - total_costs,
        bep_achieved=bool(np.isfinite(daily_bep) and total_revenue >= daily_bep),
    )


def upsert_daily_sales(history: Iterable[DailySales], record: DailySales) -> Tuple[DailySales, ...]:
    """Replace the record for `record.date`, or append it. Returns a new tuple."""
    history = tuple(history)
    for i, sale in enumerate(history):
        if sale.date == record.date:
            return history[:i] + (record,) + history[i + 1:]
    return history + (record,)


def daily_sales_for_date(history: Iterable[DailySales], on_date: date) -> Optional[DailySales]:
    return next((sale for sale in history if sale.date == on_date), None)


def record_daily_sales(snapshot: BepSnapshot,
                       on_date: date,
                       quantities: Mapping[str, int],
                       other_revenue: float = 0.0,
                       other_costs: float = 0.0) -> Tuple[DailySales, Tuple[DailySales, ...]]:
    """Compute a day's record against the current BEP and upsert it into the history."""
    bep = calculate_bep(snapshot)
    record = calculate_daily_sales(
        on_date, quantities, other_revenue, other_costs, snapshot.menu_items, bep["daily_bep"]
    )
    return record, upsert_daily_sales(snapshot.daily_sales, record)

# %% [markdown]
# ## 6. Break-Even Point


# %%
def monthly_marketing_amount(cost: MarketingCost) -> float:
    divisor = MARKETING_PERIOD_DIVISORS.get(cost.period)
    if not divisor:
        return 0.0
    return cost.amount / divisor


def current_month_marketing_costs(items: Iterable[MarketingCost], today: date) -> float:
    return sum(
        monthly_marketing_amount(cost)
        for cost in items
        if is_active(cost.start_date, cost.end_date, today)
    )


def projected_contribution_margin(menu_items: Iterable[MenuItem]) -> dict:
    """
    Contribution margin of the theoretical menu mix.

    Every menu item counts once regardless of how often it sells. This is
    the target-setting margin; realised margin comes from
    `calculate_monthly_analysis()`.
    """
    menu_items = tuple(menu_items)
    projected_revenue = sum(item.price for item in menu_items)
    projected_cost = sum(item.cost for item in menu_items)
    rate = (projected_revenue - projected_cost) / projected_revenue if projected_revenue > 0 else 0.0
    return {
        "projected_revenue": projected_revenue,
        "projected_cost": projected_cost,
        "contribution_margin_rate": rate,
    }


def calculate_bep(snapshot: BepSnapshot) -> dict:
    """
    Monthly and daily break-even revenue.

    Returns np.inf for both BEPs when the contribution margin is not
    positive, and for the daily BEP when operating days is not positive.
    Callers must check with np.isfinite() before formatting.
    """
    fixed = total_fixed_costs(snapshot)
    variable = total_variable_costs(snapshot)
    marketing = current_month_marketing_costs(snapshot.marketing_costs, snapshot.today)
    margin = projected_contribution_margin(snapshot.menu_items)
    rate = margin["contribution_margin_rate"]

    total_fixed_like = fixed + variable + marketing
    monthly_bep = total_fixed_like / rate if rate > 0 else np.inf
    operating_days = snapshot.operating_days
    daily_bep = monthly_bep / operating_days if operating_days > 0 else np.inf

    return {
        "monthly_fixed_costs": fixed,
        "monthly_variable_costs": variable,
        "monthly_marketing_costs": marketing,
        "projected_revenue": margin["projected_revenue"],
        "projected_cost": margin["projected_cost"],
        "contribution_margin_rate": rate,
        "average_margin_rate": rate * 100,
        "operating_days": operating_days,
        "daily_bep": daily_bep,
        "monthly_bep": monthly_bep,
    }

# %% [markdown]
# ## 7. Monthly Analysis


# %%
def month_key(value) -> str:
    """'YYYY-MM' for a date, or the string itself if already a month key."""
    if isinstance(value, date):
        return value.strftime("%Y-%m")
    return str(value)[:7]


def sales_for_month(history: Iterable[DailySales], month: str) -> Tuple[DailySales, ...]:
    return tuple(sale for sale in history if sale.date.isoformat().startswith(month))


def _vat_is_auto(snapshot: BepSnapshot) -> bool:
    vat = snapshot.vat_settings
    return vat.enabled and vat.auto_calculate


def calculate_monthly_analysis(snapshot: BepSnapshot, month: Optional[str] = None) -> dict:
    """
    Realised profit and loss for one month of daily sales.

    Cost buckets are totalled over the category registry, so bucket keys
    that are not registered are left out (validate_snapshot warns on them).

    Args:
        snapshot: Current data
        month: "YYYY-MM"; defaults to the month of snapshot.today

    Returns:
        Dict of revenue, cost totals, operating profit and percentage rates.
        All rates are 0 when the month has no revenue.
    """
    month = month_key(month or snapshot.today)
    month_sales = sales_for_month(snapshot.daily_sales, month)
    menu_by_id = {item.id: item for item in snapshot.menu_items}

    total_revenue = sum(sale.total_revenue for sale in month_sales)

    total_menu_costs = 0.0
    for sale in month_sales:
        for ms in sale.menu_sales:
            item = menu_by_id.get(ms.menu_id)
            if item is not None:
                total_menu_costs += item.cost * ms.quantity
        total_menu_costs += sale.other_costs

    variable_registry = snapshot.variable_registry
    other_variable_costs = domain_total(
        snapshot.variable_costs,
        variable_registry.keys(),
        variable_registry,
        today=snapshot.today,
        exclude=_keys_with_behavior(variable_registry, SPECIAL_SALES, SPECIAL_CARD_FEE, SPECIAL_VAT),
    )
    total_card_fees = card_fee_total(snapshot.card_fees)

    if _vat_is_auto(snapshot):
        vat_payable = total_revenue * (snapshot.vat_settings.rate / 100)
    else:
        vat_payable = sum(
            category_total(snapshot.variable_costs, key, variable_registry)
            for key in _keys_with_behavior(variable_registry, SPECIAL_VAT)
        )

    total_variable = total_menu_costs + other_variable_costs + total_card_fees + vat_payable
    total_fixed = total_fixed_costs(snapshot)
    total_marketing = current_month_marketing_costs(snapshot.marketing_costs, snapshot.today)
    operating_profit = total_revenue - total_fixed - total_variable - total_marketing

    def _rate(value: float) -> float:
        return value / total_revenue * 100 if total_revenue > 0 else 0.0

    n_days = len(month_sales)

    return {
        "month": month,
        "total_revenue": total_revenue,
        "total_menu_costs": total_menu_costs,
        "other_variable_costs": other_variable_costs,
        "total_card_fees": total_card_fees,
        "vat_payable": vat_payable,
        "total_variable_costs": total_variable,
        "total_fixed_costs": total_fixed,
        "total_marketing_costs": total_marketing,
        "operating_profit": operating_profit,
        "operating_profit_rate": _rate(operating_profit),
        "fixed_cost_rate": _rate(total_fixed),
        "variable_cost_rate": _rate(total_variable),
        "marketing_cost_rate": _rate(total_marketing),
        "bep_achieved_days": sum(1 for sale in month_sales if sale.bep_achieved),
        "total_operating_days": n_days,
        "average_daily_revenue": total_revenue / n_days if n_days > 0 else 0.0,
        "retirement_savings_expense": category_total(snapshot.fixed_costs, "retirementFund"),
        "taxes_expense": category_total(snapshot.fixed_costs, "taxes"),
    }


MENU_ANALYSIS_COLUMNS = [
    "menu_id", "menu_name", "total_sold", "total_revenue",
    "total_profit", "average_daily", "profit_margin",
]


def calculate_menu_analysis(snapshot: BepSnapshot, month: Optional[str] = None) -> pd.DataFrame:
    """
    Per-menu profitability for one month, highest revenue first.

    Revenue uses each day's discounted price. Ties keep menu order.
    """
    month = month_key(month or snapshot.today)
    month_sales = sales_for_month(snapshot.daily_sales, month)
    n_days = len(month_sales)

    rows = []
    for item in snapshot.menu_items:
        total_sold = 0
        revenue = 0.0
        profit = 0.0
        for sale in month_sales:
            menu_sale = next((ms for ms in sale.menu_sales if ms.menu_id == item.id), None)
            if menu_sale is None:
                continue
            price = effective_price(item, sale.date)
            total_sold += menu_sale.quantity
            revenue += menu_sale.quantity * price
            profit += menu_sale.quantity * (price - item.cost)
        rows.append({
            "menu_id": item.id,
            "menu_name": item.name,
            "total_sold": total_sold,
            "total_revenue": revenue,
            "total_profit": profit,
        })

    df = pd.DataFrame(rows, columns=MENU_ANALYSIS_COLUMNS[:5])
    df["average_daily"] = df["total_sold"] / n_days if n_days > 0 else 0.0
    df["profit_margin"] = np.where(
        df["total_revenue"] > 0,
        df["total_profit"] / df["total_revenue"].where(df["total_revenue"] > 0, 1) * 100,
        0.0,
    )
    df = df.sort_values("total_revenue", ascending=False, kind="mergesort").reset_index(drop=True)
    return df[MENU_ANALYSIS_COLUMNS]


def build_daily_sales_frame(history: Iterable[DailySales],
                            month: str,
                            daily_bep: float = np.inf) -> pd.DataFrame:
    """One row per recorded day of `month`, date-ordered, for charts and export."""
    columns = ["date", "total_revenue", "total_costs", "net_profit", "bep_achieved", "daily_bep"]
    month_sales = sorted(sales_for_month(history, month), key=lambda s: s.date)
    df = pd.DataFrame(
        [
            {
                "date": sale.date,
                "total_revenue": sale.total_revenue,
                "total_costs": sale.total_costs,
                "net_profit": sale.net_profit,
                "bep_achieved": sale.bep_achieved,
            }
            for sale in month_sales
        ],
        columns=columns[:5],
    )
    df["daily_bep"] = daily_bep
    return df[columns]

# %% [markdown]
# ## 8. Snapshot Validation


# %%
def validate_snapshot(snapshot: BepSnapshot) -> dict:
    """
    Checks a snapshot for input that would make the derived numbers meaningless.

    Returns:
        {
            "valid": bool,
            "errors": [list of issues that block the analysis],
            "warnings": [list of issues that degrade it],
            "summary": {dict of key counts}
        }
    """
    errors = []
    warnings = []
    summary = {}

    # --- MENU ---
    if not snapshot.menu_items:
        warnings.append("WARNING: Menu is empty - contribution margin is 0 and BEP is unreachable")

    for item in snapshot.menu_items:
        if item.price < 0 or item.cost < 0:
            errors.append(f"CRITICAL: Menu item '{item.name}' has a negative price or cost")
        elif item.price > 0 and item.cost > item.price:
            warnings.append(f"WARNING: Menu item '{item.name}' costs more than its price (negative margin)")
        bad_days = [d for d in item.discount_days if not 0 <= d <= 6]
        if bad_days:
            errors.append(f"CRITICAL: Menu item '{item.name}' has invalid discount weekdays: {bad_days}")
        if item.discount_rate < 0 or item.discount_amount < 0:
            errors.append(f"CRITICAL: Menu item '{item.name}' has a negative discount")

    # --- COSTS ---
    domains = (
        ("fixed", snapshot.fixed_costs, snapshot.fixed_registry),
        ("variable", snapshot.variable_costs, snapshot.variable_registry),
    )
    for domain, bucket, registry in domains:
        for key, items in bucket.items():
            negative = [item.name for item in items if item.amount < 0]
            if negative:
                errors.append(f"CRITICAL: Negative amounts in {domain} category '{key}': {negative}")
            if key not in registry and items:
                warnings.append(
                    f"WARNING: {domain.capitalize()} category '{key}' is not registered - its items are not counted"
                )

    for item in snapshot.depreciation_items:
        if item.investment_amount < 0:
            errors.append(f"CRITICAL: Depreciation item '{item.category}' has a negative investment amount")
        if item.useful_life_months <= 0:
            warnings.append(f"WARNING: Depreciation item '{item.category}' has no useful life - it contributes 0")

    for cost in snapshot.marketing_costs:
        if cost.amount < 0:
            errors.append(f"CRITICAL: Marketing cost '{cost.name}' has a negative amount")
        if cost.period not in MARKETING_PERIOD_DIVISORS:
            warnings.append(f"WARNING: Marketing cost '{cost.name}' has unknown period '{cost.period}'")

    # --- SETTINGS ---
    if snapshot.operating_days <= 0:
        warnings.append("WARNING: Operating days is not positive - daily BEP is unreachable")

    # --- SALES ---
    dates = pd.Series([sale.date for sale in snapshot.daily_sales], dtype=object)
    duplicated = sorted(set(dates[dates.duplicated()]))
    if duplicated:
        errors.append(f"CRITICAL: Duplicate daily sales records for {[d.isoformat() for d in duplicated]}")

    menu_ids = {item.id for item in snapshot.menu_items}
    unknown_ids = sorted({
        ms.menu_id for sale in snapshot.daily_sales for ms in sale.menu_sales if ms.menu_id not in menu_ids
    })
    if unknown_ids:
        warnings.append(f"WARNING: Daily sales reference unknown menu ids {unknown_ids} - their costs are ignored")

    summary["menu_items"] = len(snapshot.menu_items)
    summary["daily_sales_records"] = len(snapshot.daily_sales)
    summary["depreciation_items"] = len(snapshot.depreciation_items)
    summary["marketing_costs"] = len(snapshot.marketing_costs)
    summary["operating_days"] = snapshot.operating_days

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
        "summary": summary,
    }

# %% [markdown]
# ## 9. Full Analysis


# %%
def run_full_bep_analysis(snapshot: BepSnapshot,
                          month: Optional[str] = None,
                          config: dict = CONFIG) -> dict:
    """
    Run every derivation for one snapshot and return all result objects.

    Args:
        snapshot: Current data, with `today` injected
        month: "YYYY-MM" to analyse; defaults to the month of snapshot.today
        config: Configuration dictionary (defaults to module `CONFIG`)

    Returns:
        A dictionary with keys: month, bep, monthly_analysis, menu_analysis_df,
        daily_sales_df, alerts, suggestions, summary_block, validation_result
    """
    validation_result = validate_snapshot(snapshot)

    print("\n" + "=" * 60)
    print("SNAPSHOT VALIDATION RESULTS")
    print("=" * 60)

    if not validation_result["valid"]:
        print("\n❌ CRITICAL ERRORS FOUND - Analysis cannot proceed:\n")
        for error in validation_result["errors"]:
            print(f"  • {error}")
        print("\nPlease fix these errors and try again.")
        print("=" * 60 + "\n")
        return {
            "validation": validation_result,
            "error": "Snapshot validation failed - see validation results above",
        }

    if validation_result["warnings"]:
        print("\n⚠️  WARNINGS (analysis will proceed but results may be misleading):\n")
        for warning in validation_result["warnings"]:
            print(f"  • {warning}")

    print("\n📊 SNAPSHOT SUMMARY:")
    for key, value in validation_result["summary"].items():
        print(f"  • {key}: {value}")

    print("\n✅ Validation passed - proceeding with analysis")
    print("=" * 60 + "\n")

    month = month_key(month or snapshot.today)
    bep = calculate_bep(snapshot)
    monthly = calculate_monthly_analysis(snapshot, month)
    menu_df = calculate_menu_analysis(snapshot, month)
    daily_df = build_daily_sales_frame(snapshot.daily_sales, month, bep["daily_bep"])

    alerts = advisor_module.generate_alerts(bep, monthly, snapshot.target_goals, snapshot.today, config)
    suggestions = advisor_module.generate_cost_optimization_suggestions(monthly, menu_df, config)

    results = {
        "month": month,
        "bep": bep,
        "monthly_analysis": monthly,
        "menu_analysis_df": menu_df,
        "daily_sales_df": daily_df,
        "alerts": alerts,
        "suggestions": suggestions,
        "validation_result": validation_result,
    }
    results["summary_block"] = bep_report.build_summary_block(results, snapshot.menu_items, config)
    return results
