from datetime import date

import pytest

from app.utils.analytics import (
    AnalyticsEngine,
    CategorySummary,
    InvalidTransactionError,
    Transaction,
    calculate_category_balance,
    calculate_growth,
    calculate_variation,
)

TODAY = date(2025, 11, 12)  # a Wednesday


def tx(tx_id, amount, tx_type, day, category="Other"):
    return Transaction(id=tx_id, amount=amount, category=category, date=day, type=tx_type)


def engine_for(transactions, today=TODAY):
    return AnalyticsEngine(transactions, clock=lambda: today)


def test_monthly_summary_income_and_single_expense():
    engine = engine_for([
        tx("1", 5000.0, "income", date(2025, 11, 1), "Salary"),
        tx("2", 2000.0, "expense", date(2025, 11, 5), "Food"),
    ])
    summary = engine.get_monthly_analytics()

    assert summary.period == "This Month"
    assert summary.total_income == 5000.0
    assert summary.total_expenses == 2000.0
    assert summary.net_amount == 3000.0
    assert summary.savings_rate == 60.0
    assert summary.transaction_count == 2
    assert summary.average_daily == pytest.approx(2000.0 / 30)
    assert [c.to_dict() for c in summary.top_categories] == [
        {"category": "Food", "amount": 2000.0, "count": 1, "percentage": 100.0}
    ]


def test_empty_engine_returns_zero_summaries():
    engine = engine_for([])

    for summary in (
        engine.get_weekly_analytics(),
        engine.get_monthly_analytics(),
        engine.get_half_yearly_analytics(),
        engine.get_annual_analytics(),
    ):
        assert summary.total_income == 0
        assert summary.total_expenses == 0
        assert summary.net_amount == 0
        assert summary.transaction_count == 0
        assert summary.top_categories == []
        assert summary.average_daily == 0
        assert summary.savings_rate == 0

    comparison = engine.get_yearly_comparison()
    assert (comparison.growth.income, comparison.growth.expenses, comparison.growth.savings) == (0, 0, 0)
    assert engine.get_category_comparison() == []
    assert [p.expenses for p in engine.get_spending_trends()] == [0.0] * 6


def test_empty_engine_health_score():
    score = engine_for([]).get_financial_health_score()
    factors = {f.name: f for f in score.factors}

    assert [f.name for f in score.factors] == [
        "Savings Rate",
        "Spending Consistency",
        "Income Growth",
        "Expense Balance",
    ]
    assert factors["Savings Rate"].score == 0
    assert factors["Spending Consistency"].score == 100
    assert factors["Income Growth"].score == 50
    assert factors["Expense Balance"].score == 100
    assert score.score == 60


def test_amount_sign_is_ignored_and_type_decides():
    engine = engine_for([
        tx("1", -300.0, "expense", date(2025, 11, 3), "Food"),
        tx("2", -1000.0, "income", date(2025, 11, 4), "Refund"),
    ])
    summary = engine.get_monthly_analytics()

    assert summary.total_expenses == 300.0
    assert summary.total_income == 1000.0
    assert summary.net_amount == 700.0


def test_top_categories_capped_and_expense_only():
    transactions = [
        tx(str(i), float(100 * (i + 1)), "expense", date(2025, 11, 2), f"Cat{i}")
        for i in range(7)
    ]
    transactions.append(tx("income", 9999.0, "income", date(2025, 11, 2), "Salary"))
    summary = engine_for(transactions).get_monthly_analytics()

    assert len(summary.top_categories) == 5
    assert [c.category for c in summary.top_categories] == ["Cat6", "Cat5", "Cat4", "Cat3", "Cat2"]
    assert "Salary" not in {c.category for c in summary.top_categories}
    assert all(0 <= c.percentage <= 100 for c in summary.top_categories)
    assert sum(c.percentage for c in summary.top_categories) < 100


def test_savings_rate_zero_without_income():
    engine = engine_for([tx("1", 500.0, "expense", date(2025, 11, 2), "Food")])
    summary = engine.get_monthly_analytics()
    assert summary.savings_rate == 0
    assert summary.net_amount == -500.0


def test_transactions_outside_window_are_excluded():
    engine = engine_for([
        tx("1", 100.0, "expense", date(2025, 10, 31), "Food"),
        tx("2", 200.0, "expense", date(2025, 12, 1), "Food"),
        tx("3", 50.0, "expense", date(2025, 11, 30), "Food"),
    ])
    assert engine.get_monthly_analytics().total_expenses == 50.0


def test_weekly_window_runs_sunday_to_saturday():
    engine = engine_for([
        tx("sat-before", 1.0, "expense", date(2025, 11, 8)),
        tx("sun", 10.0, "expense", date(2025, 11, 9)),
        tx("sat", 100.0, "expense", date(2025, 11, 15)),
        tx("sun-after", 1000.0, "expense", date(2025, 11, 16)),
    ])
    weekly = engine.get_weekly_analytics()
    assert weekly.period == "This Week"
    assert weekly.total_expenses == 110.0
    assert weekly.average_daily == pytest.approx(110.0 / 7)


def test_annual_average_uses_leap_year_days():
    engine = engine_for([tx("1", 366.0, "expense", date(2024, 5, 1))], today=date(2024, 2, 1))
    assert engine.get_annual_analytics().average_daily == 1.0


def test_snapshot_sorted_newest_first_without_mutating_input():
    transactions = [
        tx("old", 1.0, "expense", date(2025, 1, 1)),
        tx("new", 1.0, "expense", date(2025, 11, 1)),
        tx("mid", 1.0, "expense", date(2025, 6, 1)),
    ]
    engine = engine_for(transactions)

    assert [t.id for t in engine.transactions] == ["new", "mid", "old"]
    assert [t.id for t in transactions] == ["old", "new", "mid"]


def test_calculate_growth_zero_guard():
    assert calculate_growth(50.0, 0.0) == 100
    assert calculate_growth(0.0, 0.0) == 0
    assert calculate_growth(-10.0, 0.0) == 0
    assert calculate_growth(150.0, 100.0) == 50.0
    assert calculate_growth(50.0, 100.0) == -50.0


def test_monthly_comparison_growth():
    engine = engine_for([
        tx("1", 4000.0, "income", date(2025, 10, 1)),
        tx("2", 1000.0, "expense", date(2025, 10, 10)),
        tx("3", 5000.0, "income", date(2025, 11, 1)),
        tx("4", 1500.0, "expense", date(2025, 11, 10)),
    ])
    comparison = engine.get_monthly_comparison()

    assert comparison.current.period == "Current Month"
    assert comparison.previous.period == "Previous Month"
    assert comparison.previous.average_daily == pytest.approx(1000.0 / 31)
    assert comparison.growth.income == 25.0
    assert comparison.growth.expenses == 50.0
    assert comparison.growth.savings == pytest.approx((3500 - 3000) / 3000 * 100)


def test_weekly_comparison_uses_previous_calendar_week():
    engine = engine_for([
        tx("1", 100.0, "expense", date(2025, 11, 2)),
        tx("2", 100.0, "expense", date(2025, 11, 8)),
        tx("3", 300.0, "expense", date(2025, 11, 12)),
    ])
    comparison = engine.get_weekly_comparison()
    assert comparison.previous.total_expenses == 200.0
    assert comparison.current.total_expenses == 300.0
    assert comparison.growth.expenses == 50.0


def test_half_yearly_comparison_wraps_into_previous_year():
    engine = engine_for(
        [
            tx("1", 1000.0, "income", date(2024, 7, 1)),
            tx("2", 1000.0, "income", date(2024, 12, 31)),
            tx("3", 500.0, "income", date(2024, 6, 30)),
            tx("4", 3000.0, "income", date(2025, 3, 1)),
        ],
        today=date(2025, 3, 15),
    )
    comparison = engine.get_half_yearly_comparison()

    assert comparison.previous.total_income == 2000.0
    assert comparison.current.total_income == 3000.0
    assert comparison.growth.income == 50.0


def test_yearly_comparison():
    engine = engine_for([
        tx("1", 365.0, "expense", date(2024, 3, 1)),
        tx("2", 730.0, "expense", date(2025, 3, 1)),
    ])
    comparison = engine.get_yearly_comparison()

    assert comparison.current.period == "Current Year"
    assert comparison.previous.average_daily == pytest.approx(365.0 / 366)
    assert comparison.current.average_daily == 2.0
    assert comparison.growth.expenses == 100.0


def test_spending_trends_six_months_oldest_first():
    engine = engine_for([
        tx("1", 3000.0, "income", date(2025, 11, 1)),
        tx("2", 1200.0, "expense", date(2025, 11, 2)),
        tx("3", 800.0, "expense", date(2025, 6, 30)),
        tx("4", 999.0, "expense", date(2025, 5, 31)),
    ])
    trends = engine.get_spending_trends()

    assert [p.month for p in trends] == ["Jun 25", "Jul 25", "Aug 25", "Sep 25", "Oct 25", "Nov 25"]
    assert trends[0].expenses == 800.0
    assert trends[-1].to_dict() == {"month": "Nov 25", "income": 3000.0, "expenses": 1200.0, "savings": 1800.0}


def test_spending_trends_cross_year_boundary():
    trends = engine_for([], today=date(2026, 2, 3)).get_spending_trends()
    assert [p.month for p in trends] == ["Sep 25", "Oct 25", "Nov 25", "Dec 25", "Jan 26", "Feb 26"]


def test_category_comparison():
    engine = engine_for([
        tx("1", 200.0, "expense", date(2025, 10, 5), "Food"),
        tx("2", 100.0, "expense", date(2025, 10, 6), "Travel"),
        tx("3", 300.0, "expense", date(2025, 11, 5), "Food"),
        tx("4", 1000.0, "expense", date(2025, 11, 6), "Rent"),
        tx("5", 5000.0, "income", date(2025, 11, 1), "Salary"),
        tx("6", 400.0, "expense", date(2025, 9, 1), "Old"),
    ])
    result = [c.to_dict() for c in engine.get_category_comparison()]

    assert result == [
        {"category": "Rent", "current_month": 1000.0, "previous_month": 0.0, "change": 100.0},
        {"category": "Food", "current_month": 300.0, "previous_month": 200.0, "change": 50.0},
        {"category": "Travel", "current_month": 0.0, "previous_month": 100.0, "change": -100.0},
    ]


def test_category_balance_boundaries():
    def balance(percentage):
        return calculate_category_balance([CategorySummary("Food", 1.0, 1, percentage)])

    assert calculate_category_balance([]) == 100
    assert balance(60.0) == 30
    assert balance(50.0) == 50
    assert balance(40.0) == 70
    assert balance(30.0) == 90
    assert balance(50.01) == 30


def test_calculate_variation():
    assert calculate_variation([]) == 0
    assert calculate_variation([0.0, 0.0]) == 0
    assert calculate_variation([100.0, 100.0, 100.0]) == 0
    assert calculate_variation([50.0, 150.0]) == pytest.approx(50.0)


def test_health_score_concentrated_spending():
    # 25% savings rate, Food is 60% of expenses, nothing in earlier months
    engine = engine_for([
        tx("1", 4000.0, "income", date(2025, 11, 1), "Salary"),
        tx("2", 1800.0, "expense", date(2025, 11, 2), "Food"),
        tx("3", 1200.0, "expense", date(2025, 11, 3), "Rent"),
    ])
    score = engine.get_financial_health_score()
    factors = {f.name: f for f in score.factors}

    assert factors["Savings Rate"].score == 50
    assert factors["Savings Rate"].impact == "neutral"
    assert factors["Savings Rate"].description == "You're saving 25.0% of your income"
    assert factors["Spending Consistency"].score == 0
    assert factors["Spending Consistency"].impact == "negative"
    assert factors["Income Growth"].score == 100
    assert factors["Income Growth"].impact == "positive"
    assert factors["Income Growth"].description == "Income increased by 100.0%"
    assert factors["Expense Balance"].score == 30
    assert factors["Expense Balance"].impact == "negative"
    assert factors["Expense Balance"].description == "Your expenses are concentrated across categories"
    assert score.score == 43


def test_health_score_income_drop_is_negative():
    engine = engine_for([
        tx("1", 5000.0, "income", date(2025, 10, 1)),
        tx("2", 4000.0, "income", date(2025, 11, 1)),
    ])
    factors = {f.name: f for f in engine.get_financial_health_score().factors}

    assert factors["Income Growth"].score == 30
    assert factors["Income Growth"].impact == "negative"
    assert factors["Income Growth"].description == "Income decreased by 20.0%"
    assert factors["Savings Rate"].score == 100



def test_health_score_floors_savings_factor_when_spending_exceeds_income():
    engine = engine_for([
        tx("1", 1000.0, "income", date(2025, 11, 1)),
        tx("2", 3000.0, "expense", date(2025, 11, 2), "Rent"),
    ])
    score = engine.get_financial_health_score()
    factors = {f.name: f for f in score.factors}

    assert engine.get_monthly_analytics().savings_rate == -200.0
    assert factors["Savings Rate"].score == 0
    assert factors["Savings Rate"].impact == "negative"
    assert 0 <= score.score <= 100

def test_queries_are_idempotent():
    engine = engine_for([
        tx("1", 4000.0, "income", date(2025, 11, 1)),
        tx("2", 1234.56, "expense", date(2025, 9, 2), "Food"),
        tx("3", 789.0, "expense", date(2025, 11, 3), "Rent"),
    ])
    assert engine.get_financial_health_score() == engine.get_financial_health_score()
    assert engine.get_spending_trends() == engine.get_spending_trends()
    assert engine.get_half_yearly_comparison() == engine.get_half_yearly_comparison()


def test_period_dispatch_rejects_unknown_period():
    with pytest.raises(ValueError):
        engine_for([]).get_period_analytics("fortnightly")


def test_from_dict_accepts_timestamps():
    transaction = Transaction.from_dict({
        "id": "1",
        "amount": "250.5",
        "category": "Food",
        "date": "2025-11-01T12:00:00Z",
        "type": "expense",
    })
    assert transaction.date == date(2025, 11, 1)
    assert transaction.amount == 250.5
    assert transaction.description == ""


@pytest.mark.parametrize("bad", [
    {"id": "1", "amount": 1, "category": "Food", "date": "not-a-date", "type": "expense"},
    {"id": "1", "amount": 1, "category": "Food", "date": None, "type": "expense"},
    {"id": "1", "amount": 1, "category": "Food", "date": "2025-11-01", "type": "transfer"},
    {"id": "1", "amount": "abc", "category": "Food", "date": "2025-11-01", "type": "income"},
    {"id": "1", "amount": float("inf"), "category": "Food", "date": "2025-11-01", "type": "expense"},
    {"id": "1", "amount": float("nan"), "category": "Food", "date": "2025-11-01", "type": "expense"},
    {"id": "1", "amount": "1e309", "category": "Food", "date": "2025-11-01", "type": "income"},
])
def test_from_dict_rejects_invalid_records(bad):
    with pytest.raises(InvalidTransactionError):
        Transaction.from_dict(bad)
