from __future__ import annotations

import math
import statistics
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from app.utils.periods import (
    Period,
    Window,
    current_window,
    month_window,
    previous_window,
    shift_month,
)

INCOME = "income"
EXPENSE = "expense"
TRANSACTION_TYPES = (INCOME, EXPENSE)

TOP_CATEGORY_LIMIT = 5
TREND_MONTHS = 6

SUMMARY_LABELS = {
    Period.WEEKLY: "This Week",
    Period.MONTHLY: "This Month",
    Period.HALF_YEARLY: "This Half Year",
    Period.YEARLY: "This Year",
}

COMPARISON_LABELS = {
    Period.WEEKLY: ("Current Week", "Previous Week"),
    Period.MONTHLY: ("Current Month", "Previous Month"),
    Period.HALF_YEARLY: ("Current Half Year", "Previous Half Year"),
    Period.YEARLY: ("Current Year", "Previous Year"),
}

HEALTH_WEIGHTS = {
    "Savings Rate": 0.30,
    "Spending Consistency": 0.25,
    "Income Growth": 0.20,
    "Expense Balance": 0.25,
}


class InvalidTransactionError(ValueError):
    """Raised when a transaction record cannot be ingested."""


def parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidTransactionError(f"Missing or non-string date: {value!r}")

    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        # Full ISO timestamps are truncated to their calendar date.
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError as exc:
        raise InvalidTransactionError(f"Unparseable date: {value!r}") from exc


@dataclass(frozen=True)
class Transaction:
    id: str
    amount: float
    category: str
    date: date
    type: str
    description: str = ""
    source: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        """
        Build a transaction from a plain mapping, rejecting records whose
        date, type or amount cannot be understood.
        """
        tx_type = data.get("type")
        if tx_type not in TRANSACTION_TYPES:
            raise InvalidTransactionError(f"Unknown transaction type: {tx_type!r}")
        try:
            amount = float(data.get("amount", 0))
        except (TypeError, ValueError) as exc:
            raise InvalidTransactionError(f"Invalid amount: {data.get('amount')!r}") from exc
        if not math.isfinite(amount):
            raise InvalidTransactionError(f"Amount must be finite: {amount!r}")

        return cls(
            id=str(data["id"]),
            amount=amount,
            category=str(data.get("category", "")),
            date=parse_date(data.get("date")),
            type=tx_type,
            description=data.get("description") or "",
            source=data.get("source"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["date"] = self.date.isoformat()
        return data


@dataclass
class CategorySummary:
    category: str
    amount: float
    count: int
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class PeriodSummary:
    period: str
    total_income: float
    total_expenses: float
    net_amount: float
    transaction_count: int
    top_categories: List[CategorySummary]
    average_daily: float
    savings_rate: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Growth:
    income: float
    expenses: float
    savings: float


@dataclass
class PeriodComparison:
    current: PeriodSummary
    previous: PeriodSummary
    growth: Growth

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CategoryComparison:
    category: str
    current_month: float
    previous_month: float
    change: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TrendPoint:
    month: str
    income: float
    expenses: float
    savings: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class HealthFactor:
    name: str
    score: float
    impact: str
    description: str


@dataclass
class HealthScore:
    score: int
    factors: List[HealthFactor] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def calculate_growth(current: float, previous: float) -> float:
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / previous * 100


def calculate_variation(values: Sequence[float]) -> float:
    """Coefficient of variation (population stddev over mean) as a percentage."""
    if not values:
        return 0.0
    mean = statistics.fmean(values)
    if mean <= 0:
        return 0.0
    return statistics.pstdev(values) / mean * 100


def calculate_category_balance(categories: Sequence[CategorySummary]) -> float:
    if not categories:
        return 100.0

    max_percentage = max(c.percentage for c in categories)
    if max_percentage > 50:
        return 30.0
    if max_percentage > 40:
        return 50.0
    if max_percentage > 30:
        return 70.0
    return 90.0


def _banded_impact(score: float, positive_at: float, neutral_at: float) -> str:
    if score >= positive_at:
        return "positive"
    if score >= neutral_at:
        return "neutral"
    return "negative"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _sum_amounts(transactions: Iterable[Transaction], tx_type: str) -> float:
    return sum(abs(t.amount) for t in transactions if t.type == tx_type)


class AnalyticsEngine:
    """
    Read-only analytics over a snapshot of transactions.

    The snapshot is sorted newest-first at construction and never changes;
    callers rebuild the engine when their transaction list changes. Every
    period is anchored to the date returned by ``clock``.
    """

    def __init__(
        self,
        transactions: Iterable[Transaction],
        clock: Optional[Callable[[], date]] = None,
    ) -> None:
        self._transactions: Tuple[Transaction, ...] = tuple(
            sorted(transactions, key=lambda t: t.date, reverse=True)
        )
        self._clock = clock or date.today

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        return self._transactions

    @property
    def today(self) -> date:
        return self._clock()

    def transactions_in(self, window: Window) -> List[Transaction]:
        return [t for t in self._transactions if window.contains(t.date)]

    def summarize(self, transactions: Sequence[Transaction], label: str, days: int) -> PeriodSummary:
        income = _sum_amounts(transactions, INCOME)
        expenses = _sum_amounts(transactions, EXPENSE)
        net_amount = income - expenses

        category_totals: Dict[str, float] = defaultdict(float)
        category_counts: Dict[str, int] = defaultdict(int)
        for t in transactions:
            if t.type != EXPENSE:
                continue
            category_totals[t.category] += abs(t.amount)
            category_counts[t.category] += 1

        categories = [
            CategorySummary(
                category=category,
                amount=amount,
                count=category_counts[category],
                percentage=amount / expenses * 100 if expenses > 0 else 0.0,
            )
            for category, amount in category_totals.items()
        ]
        categories.sort(key=lambda c: c.amount, reverse=True)

        return PeriodSummary(
            period=label,
            total_income=income,
            total_expenses=expenses,
            net_amount=net_amount,
            transaction_count=len(transactions),
            top_categories=categories[:TOP_CATEGORY_LIMIT],
            average_daily=expenses / days if expenses > 0 and days > 0 else 0.0,
            savings_rate=net_amount / income * 100 if income > 0 else 0.0,
        )

    def get_period_analytics(self, period: Period) -> PeriodSummary:
        period = Period(period)
        window = current_window(period, self.today)
        return self.summarize(self.transactions_in(window), SUMMARY_LABELS[period], window.days)

    def get_period_comparison(self, period: Period) -> PeriodComparison:
        period = Period(period)
        today = self.today
        current_label, previous_label = COMPARISON_LABELS[period]

        current_win = current_window(period, today)
        previous_win = previous_window(period, today)
        current = self.summarize(self.transactions_in(current_win), current_label, current_win.days)
        previous = self.summarize(self.transactions_in(previous_win), previous_label, previous_win.days)

        return PeriodComparison(
            current=current,
            previous=previous,
            growth=Growth(
                income=calculate_growth(current.total_income, previous.total_income),
                expenses=calculate_growth(current.total_expenses, previous.total_expenses),
                savings=calculate_growth(current.net_amount, previous.net_amount),
            ),
        )

    def get_weekly_analytics(self) -> PeriodSummary:
        return self.get_period_analytics(Period.WEEKLY)

    def get_monthly_analytics(self) -> PeriodSummary:
        return self.get_period_analytics(Period.MONTHLY)

    def get_half_yearly_analytics(self) -> PeriodSummary:
        return self.get_period_analytics(Period.HALF_YEARLY)

    def get_annual_analytics(self) -> PeriodSummary:
        return self.get_period_analytics(Period.YEARLY)

    def get_weekly_comparison(self) -> PeriodComparison:
        return self.get_period_comparison(Period.WEEKLY)

    def get_monthly_comparison(self) -> PeriodComparison:
        return self.get_period_comparison(Period.MONTHLY)

    def get_half_yearly_comparison(self) -> PeriodComparison:
        return self.get_period_comparison(Period.HALF_YEARLY)

    def get_yearly_comparison(self) -> PeriodComparison:
        return self.get_period_comparison(Period.YEARLY)

    def get_spending_trends(self) -> List[TrendPoint]:
        today = self.today
        trends: List[TrendPoint] = []
        for months_back in range(TREND_MONTHS - 1, -1, -1):
            year, month = shift_month(today.year, today.month, -months_back)
            in_month = self.transactions_in(month_window(year, month))
            income = _sum_amounts(in_month, INCOME)
            expenses = _sum_amounts(in_month, EXPENSE)
            trends.append(
                TrendPoint(
                    month=date(year, month, 1).strftime("%b %y"),
                    income=income,
                    expenses=expenses,
                    savings=income - expenses,
                )
            )
        return trends

    def get_category_comparison(self) -> List[CategoryComparison]:
        """Month-over-month expense change per category, largest current spend first."""
        today = self.today
        current_win = current_window(Period.MONTHLY, today)
        previous_win = previous_window(Period.MONTHLY, today)

        current: Dict[str, float] = defaultdict(float)
        previous: Dict[str, float] = defaultdict(float)
        for t in self._transactions:
            if t.type != EXPENSE:
                continue
            if current_win.contains(t.date):
                current[t.category] += abs(t.amount)
            elif previous_win.contains(t.date):
                previous[t.category] += abs(t.amount)

        # dict.fromkeys keeps first-seen order for stable ties
        categories = dict.fromkeys(list(current) + list(previous))
        result = [
            CategoryComparison(
                category=category,
                current_month=current.get(category, 0.0),
                previous_month=previous.get(category, 0.0),
                change=calculate_growth(current.get(category, 0.0), previous.get(category, 0.0)),
            )
            for category in categories
        ]
        result.sort(key=lambda c: c.current_month, reverse=True)
        return result

    def get_financial_health_score(self) -> HealthScore:
        monthly = self.get_monthly_analytics()
        factors: List[HealthFactor] = []

        savings_score = min(max(monthly.savings_rate * 2, 0.0), 100.0)
        factors.append(
            HealthFactor(
                name="Savings Rate",
                score=savings_score,
                impact=_banded_impact(savings_score, 60, 30),
                description=f"You're saving {monthly.savings_rate:.1f}% of your income",
            )
        )

        variation = calculate_variation([p.expenses for p in self.get_spending_trends()])
        consistency_score = max(0.0, 100 - variation)
        factors.append(
            HealthFactor(
                name="Spending Consistency",
                score=consistency_score,
                impact=_banded_impact(consistency_score, 70, 40),
                description="Your spending pattern is "
                + ("consistent" if consistency_score >= 70 else "variable"),
            )
        )

        income_growth = self.get_monthly_comparison().growth.income
        growth_score = min(max(50 + income_growth, 0.0), 100.0)
        if income_growth > 5:
            growth_impact = "positive"
        elif income_growth < -5:
            growth_impact = "negative"
        else:
            growth_impact = "neutral"
        factors.append(
            HealthFactor(
                name="Income Growth",
                score=growth_score,
                impact=growth_impact,
                description=(
                    f"Income {'increased' if income_growth >= 0 else 'decreased'} "
                    f"by {abs(income_growth):.1f}%"
                ),
            )
        )

        balance_score = calculate_category_balance(monthly.top_categories)
        factors.append(
            HealthFactor(
                name="Expense Balance",
                score=balance_score,
                impact=_banded_impact(balance_score, 70, 40),
                description="Your expenses are "
                + ("well distributed" if balance_score >= 70 else "concentrated")
                + " across categories",
            )
        )

        total = sum(f.score * HEALTH_WEIGHTS[f.name] for f in factors)
        return HealthScore(score=_round_half_up(total), factors=factors)
