from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from app.utils.analytics import (
    EXPENSE,
    AnalyticsEngine,
    CategoryComparison,
    PeriodSummary,
)
from app.utils.periods import Period, current_window

LOW_SAVINGS_RATE = 10.0
HIGH_SAVINGS_RATE = 30.0
CONCENTRATED_CATEGORY_PERCENT = 40.0


@dataclass
class Insight:
    type: str
    message: str
    detail: str
    action: str
    category: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class BudgetStatus:
    category: str
    budget: float
    spent: float
    remaining: float
    percentage_used: float
    overspent: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SavingsProgress:
    period: str
    target: float
    saved: float
    progress: float
    met: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def generate_insights(
    summary: PeriodSummary,
    category_changes: Sequence[CategoryComparison],
    spike_percent: float = 20.0,
) -> List[Insight]:
    """
    Turn a period summary and the month-over-month category changes into a
    short list of human-readable observations. Always returns at least one.
    """
    insights: List[Insight] = []

    rising = sorted(
        (c for c in category_changes if c.change > spike_percent),
        key=lambda c: c.change,
        reverse=True,
    )
    if rising:
        top = rising[0]
        insights.append(
            Insight(
                type="warning",
                message=f"You spent {top.change:.1f}% more on {top.category} this month",
                detail=f"That's {top.current_month - top.previous_month:.2f} more than last month.",
                action="Set Budget Reminder",
                category=top.category,
            )
        )

    if summary.savings_rate < LOW_SAVINGS_RATE:
        insights.append(
            Insight(
                type="alert",
                message=f"Your savings rate is only {summary.savings_rate:.1f}%",
                detail="Financial experts recommend saving at least 20% of your income.",
                action="Review Expenses",
                category="Savings",
            )
        )
    elif summary.savings_rate > HIGH_SAVINGS_RATE:
        insights.append(
            Insight(
                type="positive",
                message=f"Excellent savings rate of {summary.savings_rate:.1f}%!",
                detail=f"You're saving {summary.net_amount:.2f} this period.",
                action="Investment Tips",
                category="Savings",
            )
        )

    if summary.top_categories:
        top_category = summary.top_categories[0]
        if top_category.percentage > CONCENTRATED_CATEGORY_PERCENT:
            insights.append(
                Insight(
                    type="suggestion",
                    message=(
                        f"{top_category.category} takes up "
                        f"{top_category.percentage:.1f}% of your expenses"
                    ),
                    detail=f"Consider ways to optimize your {top_category.category.lower()} spending.",
                    action="Get Suggestions",
                    category=top_category.category,
                )
            )

    if not insights:
        insights.append(
            Insight(
                type="positive",
                message="Your spending patterns look balanced!",
                detail="Keep up the good financial habits.",
                action="View Analytics",
                category="General",
            )
        )
    return insights


def budget_status(
    engine: AnalyticsEngine,
    period: Period,
    budget_goals: Dict[str, float],
) -> List[BudgetStatus]:
    """Spending against each budget goal over the current window of ``period``."""
    window = current_window(period, engine.today)
    spent: Dict[str, float] = {category: 0.0 for category in budget_goals}
    for t in engine.transactions_in(window):
        if t.type == EXPENSE and t.category in spent:
            spent[t.category] += abs(t.amount)

    statuses = []
    for category, budget in budget_goals.items():
        amount = spent[category]
        statuses.append(
            BudgetStatus(
                category=category,
                budget=budget,
                spent=round(amount, 2),
                remaining=round(budget - amount, 2),
                percentage_used=round(amount / budget * 100, 2) if budget > 0 else 0.0,
                overspent=amount > budget,
            )
        )
    return statuses


def savings_progress(summary: PeriodSummary, target: Optional[float]) -> SavingsProgress:
    target = target or 0.0
    saved = summary.net_amount
    return SavingsProgress(
        period=summary.period,
        target=target,
        saved=saved,
        progress=round(saved / target * 100, 2) if target > 0 else 0.0,
        met=target > 0 and saved >= target,
    )


@dataclass
class ReminderStatus:
    id: str
    category: str
    period: str
    limit: float
    spent: float
    remaining: float
    percentage_used: float
    exceeded: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class GoalProgress:
    id: str
    name: str
    target_amount: float
    current_amount: float
    remaining: float
    progress: float
    days_left: int
    achieved: bool
    overdue: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def reminder_status(engine: AnalyticsEngine, reminders: Sequence[Dict[str, Any]]) -> List[ReminderStatus]:
    """
    Spending against each active budget reminder, each over its own weekly
    or monthly window.
    """
    today = engine.today
    statuses = []
    for reminder in reminders:
        if not reminder.get("is_active", True):
            continue
        window = current_window(Period(reminder["period"]), today)
        spent = sum(
            abs(t.amount)
            for t in engine.transactions_in(window)
            if t.type == EXPENSE and t.category == reminder["category"]
        )
        limit = reminder["amount"]
        statuses.append(
            ReminderStatus(
                id=reminder["id"],
                category=reminder["category"],
                period=reminder["period"],
                limit=limit,
                spent=round(spent, 2),
                remaining=round(limit - spent, 2),
                percentage_used=round(spent / limit * 100, 2) if limit > 0 else 0.0,
                exceeded=spent > limit,
            )
        )
    return statuses


def goal_progress(goal: Dict[str, Any], today: date) -> GoalProgress:
    target = goal["target_amount"]
    current = goal["current_amount"]
    achieved = current >= target
    days_left = (goal["deadline"] - today).days
    return GoalProgress(
        id=goal["id"],
        name=goal["name"],
        target_amount=target,
        current_amount=current,
        remaining=round(max(target - current, 0.0), 2),
        progress=round(min(current / target * 100, 100.0), 2) if target > 0 else 0.0,
        days_left=max(days_left, 0),
        achieved=achieved,
        overdue=days_left < 0 and not achieved,
    )
