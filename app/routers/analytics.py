"""
Analytics Router
Read-only views over the current transaction snapshot
"""
import logging
from typing import Dict, List

from fastapi import APIRouter, Depends

from app.core.config import settings
from app.db.store import TransactionStore, get_store
from app.utils.insights import (
    budget_status,
    generate_insights,
    goal_progress,
    reminder_status,
    savings_progress,
)
from app.utils.periods import Period

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/summary")
def period_summary(
    period: Period = Period.MONTHLY,
    store: TransactionStore = Depends(get_store),
) -> Dict:
    """
    Totals, top expense categories, daily average and savings rate for the
    current week, month, half year or year.
    """
    return store.engine.get_period_analytics(period).to_dict()


@router.get("/comparison")
def period_comparison(
    period: Period = Period.MONTHLY,
    store: TransactionStore = Depends(get_store),
) -> Dict:
    return store.engine.get_period_comparison(period).to_dict()


@router.get("/trends")
def spending_trends(store: TransactionStore = Depends(get_store)) -> List[Dict]:
    """Income, expenses and savings for each of the last six months, oldest first."""
    return [point.to_dict() for point in store.engine.get_spending_trends()]


@router.get("/categories")
def category_comparison(store: TransactionStore = Depends(get_store)) -> List[Dict]:
    return [item.to_dict() for item in store.engine.get_category_comparison()]


@router.get("/health-score")
def health_score(store: TransactionStore = Depends(get_store)) -> Dict:
    result = store.engine.get_financial_health_score()
    logger.info(f"Financial health score computed: {result.score}")
    return result.to_dict()


@router.get("/insights")
def insights(
    period: Period = Period.MONTHLY,
    store: TransactionStore = Depends(get_store),
) -> List[Dict]:
    engine = store.engine
    found = generate_insights(
        engine.get_period_analytics(period),
        engine.get_category_comparison(),
        spike_percent=settings.INSIGHT_SPIKE_PERCENT,
    )
    return [insight.to_dict() for insight in found]


@router.get("/budgets")
def budgets(
    period: Period = Period.MONTHLY,
    store: TransactionStore = Depends(get_store),
) -> Dict:
    """
    Spending against each active budget goal for the selected period.
    """
    statuses = budget_status(store.engine, period, store.active_budget_goals())
    overspent = {s.category: s.spent for s in statuses if s.overspent}
    return {
        "period": period.value,
        "budgets": [s.to_dict() for s in statuses],
        "overspending_categories": overspent,
    }


@router.get("/savings")
def savings(
    period: Period = Period.MONTHLY,
    store: TransactionStore = Depends(get_store),
) -> Dict:
    summary = store.engine.get_period_analytics(period)
    return savings_progress(summary, store.get_preferences()["savings_target"]).to_dict()


@router.get("/reminders")
def reminders(store: TransactionStore = Depends(get_store)) -> List[Dict]:
    """
    Active budget reminders, each checked over its own weekly or monthly window.
    """
    statuses = reminder_status(store.engine, store.list_budget_reminders())
    exceeded = [s.category for s in statuses if s.exceeded]
    if exceeded:
        logger.info(f"Budget reminders exceeded for: {', '.join(exceeded)}")
    return [s.to_dict() for s in statuses]


@router.get("/goals")
def goals(store: TransactionStore = Depends(get_store)) -> List[Dict]:
    today = store.engine.today
    return [
        goal_progress(goal, today).to_dict()
        for goal in store.list_goal_targets()
        if goal.get("is_active", True)
    ]
