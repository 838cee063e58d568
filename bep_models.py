"""
BEP Domain Records

Immutable records that describe one restaurant at one point in time:
menu, cost buckets, depreciation schedule, marketing spend, card fees,
daily sales history and settings. The engine never mutates these; every
calculation receives a `BepSnapshot` and returns fresh values.

Architecture:
- records (this module) → engine (bep_engine) → advisor → report
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Dict, List, Optional, Tuple
import pandas as pd


class InvalidInputError(ValueError):
    """Raised when a caller passes input that violates a precondition."""


# =============================================================================
# CATEGORY REGISTRY
# =============================================================================

SPECIAL_NONE = "none"
SPECIAL_DEPRECIATION = "depreciation_auto"
SPECIAL_CARD_FEE = "card_fee_auto"
SPECIAL_SALES = "sales_auto"
SPECIAL_VAT = "vat_auto"


@dataclass(frozen=True)
class CategorySpec:
    """
    One entry of the cost category registry.

    Attributes:
        key: Bucket key (e.g. "storeRent")
        label: Display label
        removable: Whether the user may delete the category
        special_behavior: How the aggregator totals this category
            - "none": plain sum of item amounts
            - "depreciation_auto": active depreciation schedule
            - "card_fee_auto": card issuer fee table
            - "sales_auto": sourced from daily sales (ingredients)
            - "vat_auto": sourced from VAT settings when auto-calculated
    """
    key: str
    label: str
    removable: bool = True
    special_behavior: str = SPECIAL_NONE


DEFAULT_FIXED_CATEGORIES: Tuple[CategorySpec, ...] = (
    CategorySpec("storeRent", "Store rent", removable=False),
    CategorySpec("depreciation", "Depreciation (auto)", removable=False,
                 special_behavior=SPECIAL_DEPRECIATION),
    CategorySpec("laborCost", "Labour cost", removable=False),
    CategorySpec("retirementFund", "Retirement fund (actual deposits)"),
    CategorySpec("insurance", "Statutory insurance (actual payments)"),
    CategorySpec("communication", "Communication (phone, internet)"),
    CategorySpec("rentalFees", "Equipment rental"),
    CategorySpec("professionalServices", "Professional services (tax, legal)"),
    CategorySpec("taxes", "Other taxes and dues"),
    CategorySpec("welfare", "Staff welfare"),
    CategorySpec("posRental", "POS rental"),
    CategorySpec("security", "Security service"),
    CategorySpec("pest", "Pest control / hygiene"),
    CategorySpec("loanInterest", "Loan interest"),
    CategorySpec("advertising", "Monthly advertising (separate from marketing)"),
)

DEFAULT_VARIABLE_CATEGORIES: Tuple[CategorySpec, ...] = (
    CategorySpec("ingredients", "Ingredients (from daily sales)", removable=False,
                 special_behavior=SPECIAL_SALES),
    CategorySpec("electricity", "Electricity"),
    CategorySpec("gas", "Gas"),
    CategorySpec("water", "Water"),
    CategorySpec("cardFees", "Card fees (auto)", removable=False,
                 special_behavior=SPECIAL_CARD_FEE),
    CategorySpec("employeeBonus", "Full-time staff bonus"),
    CategorySpec("partTime", "Part-time labour"),
    CategorySpec("vatWithheld", "VAT withheld (from revenue)", removable=False,
                 special_behavior=SPECIAL_VAT),
)


def category_registry(defaults: Tuple[CategorySpec, ...],
                      custom_keys: Tuple[str, ...] = ()) -> Dict[str, CategorySpec]:
    """
    Build an ordered key → CategorySpec registry from the defaults plus
    user-defined custom categories. Custom keys that collide with a default
    key keep the default entry.
    """
    registry = {spec.key: spec for spec in defaults}
    for key in custom_keys:
        if key not in registry:
            registry[key] = CategorySpec(key, key, removable=True)
    return registry


def custom_category_key(name: str) -> str:
    """Normalise a category display name into a bucket key."""
    if name is None or not str(name).strip():
        raise InvalidInputError("Category name must not be empty")
    return "_".join(str(name).split()).lower()


# =============================================================================
# MENU
# =============================================================================

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

# Korean weekday labels used by web app exports
_KOREAN_WEEKDAYS = ("월", "화", "수", "목", "금", "토", "일")


def weekday_ordinal(label: Any) -> int:
    """Map a weekday label (English, Korean or 0-6 ordinal) to 0=Monday..6=Sunday."""
    if isinstance(label, int) and not isinstance(label, bool):
        if 0 <= label <= 6:
            return label
        raise InvalidInputError(f"Weekday ordinal out of range: {label}")
    text = str(label).strip()
    if text in _KOREAN_WEEKDAYS:
        return _KOREAN_WEEKDAYS.index(text)
    short = text[:3].title()
    if short in WEEKDAY_LABELS:
        return WEEKDAY_LABELS.index(short)
    raise InvalidInputError(f"Unknown weekday label: {label!r}")


def menu_margin(price: float, cost: float) -> float:
    """Margin percent of a menu item; 0 when price is not positive."""
    return (price - cost) / price * 100 if price > 0 else 0.0


@dataclass(frozen=True)
class MenuItem:
    id: str
    name: str
    price: float
    cost: float
    cost_rate: float = 0.0
    cost_input_type: str = "amount"
    margin: float = 0.0
    discount_enabled: bool = False
    discount_days: Tuple[int, ...] = ()
    discount_type: str = "amount"
    discount_rate: float = 0.0
    discount_amount: float = 0.0


def build_menu_item(id: str,
                    name: str,
                    price: float,
                    cost: Optional[float] = None,
                    cost_rate: Optional[float] = None,
                    discount_enabled: bool = False,
                    discount_days=(),
                    discount_type: str = "amount",
                    discount_rate: float = 0.0,
                    discount_amount: float = 0.0) -> MenuItem:
    """
    Create a MenuItem from either a cost amount or a cost rate.

    Cost amount and cost rate are mutually exclusive input modes. When a
    cost rate is given the cost is `price * cost_rate / 100`; otherwise the
    cost rate is derived from the amount. Cost is rounded to 2 decimals and
    the margin is derived from the rounded cost.
    """
    if cost is not None and cost_rate is not None:
        raise InvalidInputError("Give either cost or cost_rate, not both")

    if cost_rate is not None:
        cost_input_type = "rate"
        cost_value = round(price * (cost_rate / 100), 2)
        rate_value = cost_rate
    else:
        cost_input_type = "amount"
        cost_value = round(cost or 0.0, 2)
        rate_value = round(cost_value / price * 100, 2) if price > 0 else 0.0

    return MenuItem(
        id=str(id),
        name=name,
        price=price,
        cost=cost_value,
        cost_rate=rate_value,
        cost_input_type=cost_input_type,
        margin=menu_margin(price, cost_value),
        discount_enabled=discount_enabled,
        discount_days=tuple(weekday_ordinal(d) for d in discount_days),
        discount_type=discount_type,
        discount_rate=discount_rate,
        discount_amount=discount_amount,
    )


def apply_bulk_margin(items: Tuple[MenuItem, ...], margin_rate: float) -> Tuple[MenuItem, ...]:
    """
    Re-cost every menu item so that it earns `margin_rate` percent.

    Returns new items; the input tuple is left untouched.
    """
    if margin_rate <= 0 or margin_rate > 100:
        raise InvalidInputError("Margin rate must be within (0, 100]")

    updated = []
    for item in items:
        new_cost = round(item.price * (1 - margin_rate / 100), 2)
        updated.append(replace(
            item,
            cost=new_cost,
            cost_input_type="amount",
            cost_rate=round(new_cost / item.price * 100, 2) if item.price > 0 else 0.0,
            margin=menu_margin(item.price, new_cost),
        ))
    return tuple(updated)


# =============================================================================
# COSTS
# =============================================================================

@dataclass(frozen=True)
class CostDetailItem:
    id: str
    name: str
    amount: float
    person: Optional[str] = None
    memo: Optional[str] = None
    daily_wage: Optional[float] = None
    work_days: Optional[int] = None


@dataclass(frozen=True)
class DepreciationItem:
    """A capital asset spread over `useful_life_months` calendar months."""
    id: str
    purchase_date: date
    category: str
    investment_amount: float
    useful_life_months: int
    note: str = ""

    @property
    def monthly_depreciation(self) -> float:
        if self.useful_life_months <= 0:
            return 0.0
        return self.investment_amount / self.useful_life_months

    @property
    def depreciation_end_date(self) -> date:
        end = pd.Timestamp(self.purchase_date) + pd.DateOffset(months=self.useful_life_months)
        return end.date()


MARKETING_PERIOD_DIVISORS = {
    "monthly": 1,
    "quarterly": 3,
    "biannual": 6,
    "annual": 12,
}


@dataclass(frozen=True)
class MarketingCost:
    id: str
    name: str
    amount: float
    start_date: date
    end_date: date
    period: str = "monthly"
    category: str = "online"
    memo: str = ""


@dataclass(frozen=True)
class SpecificCardFeeData:
    id: str
    card_name: str
    fee_rate: float = 0.0
    sales_amount: float = 0.0

    @property
    def calculated_fee(self) -> float:
        return self.sales_amount * (self.fee_rate / 100)


CARD_ISSUERS = (
    ("shinhan", "Shinhan Card"),
    ("kb", "KB Kookmin Card"),
    ("samsung", "Samsung Card"),
    ("hyundai", "Hyundai Card"),
    ("lotte", "Lotte Card"),
    ("woori", "Woori Card"),
    ("hana", "Hana Card"),
    ("bc", "BC Card"),
)


def default_card_fees() -> Tuple[SpecificCardFeeData, ...]:
    return tuple(SpecificCardFeeData(card_id, name) for card_id, name in CARD_ISSUERS)


# =============================================================================
# SALES & SETTINGS
# =============================================================================

@dataclass(frozen=True)
class MenuSale:
    menu_id: str
    quantity: int


@dataclass(frozen=True)
class DailySales:
    date: date
    menu_sales: Tuple[MenuSale, ...]
    other_revenue: float
    other_costs: float
    total_revenue: float
    total_costs: float
    net_profit: float
    bep_achieved: bool


@dataclass(frozen=True)
class TargetGoals:
    target_profit: float = 0.0
    target_revenue: float = 0.0


@dataclass(frozen=True)
class VatSettings:
    enabled: bool = True
    rate: float = 10.0
    auto_calculate: bool = True


@dataclass(frozen=True)
class BepSnapshot:
    """
    Everything the engine needs for one calculation.

    `today` is the injected reference date for depreciation windows,
    marketing windows and the default analysis month.
    """
    today: date
    menu_items: Tuple[MenuItem, ...] = ()
    fixed_costs: Dict[str, Tuple[CostDetailItem, ...]] = field(default_factory=dict)
    variable_costs: Dict[str, Tuple[CostDetailItem, ...]] = field(default_factory=dict)
    custom_fixed_categories: Tuple[str, ...] = ()
    custom_variable_categories: Tuple[str, ...] = ()
    depreciation_items: Tuple[DepreciationItem, ...] = ()
    marketing_costs: Tuple[MarketingCost, ...] = ()
    card_fees: Tuple[SpecificCardFeeData, ...] = field(default_factory=default_card_fees)
    daily_sales: Tuple[DailySales, ...] = ()
    operating_days: int = 26
    vat_settings: VatSettings = field(default_factory=VatSettings)
    target_goals: TargetGoals = field(default_factory=TargetGoals)

    @property
    def fixed_registry(self) -> Dict[str, CategorySpec]:
        return category_registry(DEFAULT_FIXED_CATEGORIES, self.custom_fixed_categories)

    @property
    def variable_registry(self) -> Dict[str, CategorySpec]:
        return category_registry(DEFAULT_VARIABLE_CATEGORIES, self.custom_variable_categories)


# =============================================================================
# SNAPSHOT LOADING (plain dicts → records)
# =============================================================================

def _get(data: dict, *keys, default=None):
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _parse_date(value) -> date:
    if isinstance(value, date):
        return value
    try:
        return pd.Timestamp(value).date()
    except (ValueError, TypeError) as e:
        raise InvalidInputError(f"Invalid date value: {value!r}") from e


def _cost_items(rows: List[dict]) -> Tuple[CostDetailItem, ...]:
    return tuple(
        CostDetailItem(
            id=str(_get(row, "id", default=i)),
            name=_get(row, "name", default=""),
            amount=float(_get(row, "amount", default=0)),
            person=_get(row, "person"),
            memo=_get(row, "memo"),
            daily_wage=_get(row, "daily_wage", "dailyWage"),
            work_days=_get(row, "work_days", "workDays"),
        )
        for i, row in enumerate(rows)
    )


def _menu_item(row: dict) -> MenuItem:
    cost_input_type = _get(row, "cost_input_type", "costInputType", default="amount")
    price = float(_get(row, "price", default=0))
    common = dict(
        id=_get(row, "id"),
        name=_get(row, "name", default=""),
        price=price,
        discount_enabled=bool(_get(row, "discount_enabled", "discountEnabled", default=False)),
        discount_days=_get(row, "discount_days", "discountDays", default=()),
        discount_type=_get(row, "discount_type", "discountType", default="amount"),
        discount_rate=float(_get(row, "discount_rate", "discountRate", default=0)),
        discount_amount=float(_get(row, "discount_amount", "discountAmount", default=0)),
    )
    if cost_input_type == "rate":
        return build_menu_item(cost_rate=float(_get(row, "cost_rate", "costRate", default=0)), **common)
    return build_menu_item(cost=float(_get(row, "cost", default=0)), **common)


def snapshot_from_dict(data: dict, today: Optional[date] = None) -> BepSnapshot:
    """
    Build a BepSnapshot from plain JSON-like data.

    Accepts both snake_case and camelCase keys so that exports of the
    web app load unchanged.

    Args:
        data: Parsed JSON document
        today: Reference date; falls back to data["today"], then date.today()

    Returns:
        BepSnapshot
    """
    if not isinstance(data, dict):
        raise InvalidInputError("Snapshot must be a mapping")

    if today is None:
        raw_today = _get(data, "today")
        today = _parse_date(raw_today) if raw_today else date.today()

    try:
        menu_items = tuple(_menu_item(row) for row in _get(data, "menu_items", "menuItems", default=[]))

        fixed_costs = {
            key: _cost_items(rows)
            for key, rows in _get(data, "fixed_costs", "fixedCosts", default={}).items()
        }
        variable_costs = {
            key: _cost_items(rows)
            for key, rows in _get(data, "variable_costs", "variableCosts", default={}).items()
        }

        depreciation_items = tuple(
            DepreciationItem(
                id=str(_get(row, "id", default=i)),
                purchase_date=_parse_date(_get(row, "purchase_date", "date")),
                category=_get(row, "category", default=""),
                investment_amount=float(_get(row, "investment_amount", "investmentAmount", default=0)),
                useful_life_months=int(_get(row, "useful_life_months", "usefulLifeMonths", default=0)),
                note=_get(row, "note", default=""),
            )
            for i, row in enumerate(_get(data, "depreciation_items", "depreciationItems", default=[]))
        )

        marketing_costs = tuple(
            MarketingCost(
                id=str(_get(row, "id", default=i)),
                name=_get(row, "name", default=""),
                amount=float(_get(row, "amount", default=0)),
                start_date=_parse_date(_get(row, "start_date", "startDate")),
                end_date=_parse_date(_get(row, "end_date", "endDate")),
                period=_get(row, "period", default="monthly"),
                category=_get(row, "category", default="online"),
                memo=_get(row, "memo", default=""),
            )
            for i, row in enumerate(_get(data, "marketing_costs", "marketingCosts", default=[]))
        )

        card_rows = _get(data, "card_fees", "specificCardFees")
        if card_rows is None:
            card_fees = default_card_fees()
        else:
            card_fees = tuple(
                SpecificCardFeeData(
                    id=str(_get(row, "id")),
                    card_name=_get(row, "card_name", "name", default=""),
                    fee_rate=float(_get(row, "fee_rate", "feeRate", default=0)),
                    sales_amount=float(_get(row, "sales_amount", "salesAmount", default=0)),
                )
                for row in card_rows
            )

        daily_sales = tuple(
            DailySales(
                date=_parse_date(_get(row, "date")),
                menu_sales=tuple(
                    MenuSale(str(_get(ms, "menu_id", "menuId")), int(_get(ms, "quantity", default=0)))
                    for ms in _get(row, "menu_sales", "menuSales", default=[])
                ),
                other_revenue=float(_get(row, "other_revenue", "otherRevenue", default=0)),
                other_costs=float(_get(row, "other_costs", "otherCosts", default=0)),
                total_revenue=float(_get(row, "total_revenue", "totalRevenue", default=0)),
                total_costs=float(_get(row, "total_costs", "totalCosts", default=0)),
                net_profit=float(_get(row, "net_profit", "netProfit", default=0)),
                bep_achieved=bool(_get(row, "bep_achieved", "bepAchieved", default=False)),
            )
            for row in _get(data, "daily_sales", "dailySales", default=[])
        )

        vat = _get(data, "vat_settings", "vatSettings", default={})
        goals = _get(data, "target_goals", "targetGoals", default={})
    except (KeyError, TypeError, ValueError) as e:
        if isinstance(e, InvalidInputError):
            raise
        raise InvalidInputError(f"Malformed snapshot: {e}") from e

    return BepSnapshot(
        today=today,
        menu_items=menu_items,
        fixed_costs=fixed_costs,
        variable_costs=variable_costs,
        custom_fixed_categories=tuple(_get(data, "custom_fixed_categories", "customFixedCategories", default=())),
        custom_variable_categories=tuple(
            _get(data, "custom_variable_categories", "customVariableCategories", default=())
        ),
        depreciation_items=depreciation_items,
        marketing_costs=marketing_costs,
        card_fees=card_fees,
        daily_sales=daily_sales,
        operating_days=int(_get(data, "operating_days", "operatingDays", default=26)),
        vat_settings=VatSettings(
            enabled=bool(_get(vat, "enabled", default=True)),
            rate=float(_get(vat, "rate", default=10)),
            auto_calculate=bool(_get(vat, "auto_calculate", "autoCalculate", default=True)),
        ),
        target_goals=TargetGoals(
            target_profit=float(_get(goals, "target_profit", "targetProfit", default=0)),
            target_revenue=float(_get(goals, "target_revenue", "targetRevenue", default=0)),
        ),
    )
