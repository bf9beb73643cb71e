import logging
import threading
from dataclasses import replace
from datetime import date
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4

from app.core.config import settings
from app.utils.analytics import AnalyticsEngine, Transaction

logger = logging.getLogger(__name__)


class TransactionStore:
    """
    In-memory owner of the transaction list and user preferences.

    Every mutation builds a new AnalyticsEngine from the full list and swaps
    it in under the lock, so readers only ever see a complete snapshot.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], date]] = None,
        currency: str = settings.DEFAULT_CURRENCY,
        rates: Optional[Dict[str, float]] = None,
    ) -> None:
        self._lock = threading.RLock()
        self._clock = clock
        self._transactions: List[Transaction] = []
        self._rates = dict(rates or settings.CURRENCY_RATES)
        self._currency = currency
        self._salary = settings.DEFAULT_SALARY
        self._savings_target = settings.DEFAULT_SAVINGS_TARGET
        self._budget_goals: List[Dict[str, Any]] = [
            {"category": category, "amount": amount, "is_active": True}
            for category, amount in settings.DEFAULT_BUDGET_GOALS.items()
        ]
        self._goal_targets: List[Dict[str, Any]] = []
        self._budget_reminders: List[Dict[str, Any]] = []
        self._engine = AnalyticsEngine([], clock=self._clock)

    @property
    def engine(self) -> AnalyticsEngine:
        return self._engine

    def _rebuild(self) -> None:
        self._engine = AnalyticsEngine(self._transactions, clock=self._clock)

    @staticmethod
    def _new_id() -> str:
        return uuid4().hex

    def list_transactions(self, start: Optional[date] = None, end: Optional[date] = None) -> List[Transaction]:
        """Transactions newest first, optionally limited to an inclusive date range."""
        items = self._engine.transactions
        return [
            t for t in items
            if (start is None or t.date >= start) and (end is None or t.date <= end)
        ]

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        for t in self._engine.transactions:
            if t.id == transaction_id:
                return t
        return None

    def add_transaction(self, item: Dict[str, Any]) -> Transaction:
        """Insert a single transaction; raises InvalidTransactionError on bad input."""
        transaction = Transaction.from_dict({**item, "id": self._new_id()})
        with self._lock:
            self._transactions = [transaction] + self._transactions
            self._rebuild()
        logger.info(f"Added {transaction.type} transaction {transaction.id} ({transaction.category})")
        return transaction

    def replace_all(self, items: List[Dict[str, Any]]) -> List[Transaction]:
        """
        Replace every stored transaction with ``items``, as a statement import
        does. Nothing is replaced if any item is invalid.
        """
        batch_id = self._new_id()
        transactions = [
            Transaction.from_dict({**item, "id": f"{batch_id}-{index}"})
            for index, item in enumerate(items)
        ]
        with self._lock:
            self._transactions = transactions
            self._rebuild()
        logger.info(f"Imported {len(transactions)} transactions (batch {batch_id})")
        return list(self._engine.transactions)

    def update_transaction(self, transaction_id: str, updates: Dict[str, Any]) -> Optional[Transaction]:
        """Apply partial updates to a transaction. Returns the updated item or None."""
        with self._lock:
            for index, current in enumerate(self._transactions):
                if current.id != transaction_id:
                    continue
                merged = {**current.to_dict(), **updates, "id": transaction_id}
                updated = Transaction.from_dict(merged)
                transactions = list(self._transactions)
                transactions[index] = updated
                self._transactions = transactions
                self._rebuild()
                logger.info(f"Updated transaction {transaction_id}")
                return updated
        return None

    def delete_transaction(self, transaction_id: str) -> bool:
        with self._lock:
            remaining = [t for t in self._transactions if t.id != transaction_id]
            if len(remaining) == len(self._transactions):
                return False
            self._transactions = remaining
            self._rebuild()
        logger.info(f"Deleted transaction {transaction_id}")
        return True

    def clear(self) -> int:
        """Drop every transaction and reset the salary; other preferences stay."""
        with self._lock:
            removed = len(self._transactions)
            self._transactions = []
            self._salary = settings.DEFAULT_SALARY
            self._rebuild()
        logger.info(f"Cleared {removed} transactions and reset salary")
        return removed

    @property
    def currency(self) -> str:
        return self._currency

    def supported_currencies(self) -> List[str]:
        return sorted(self._rates)

    def convert_currency(self, currency: str) -> bool:
        """
        Re-express every stored amount in ``currency`` and rebuild the engine.
        Returns False for a currency without a known rate.
        """
        currency = currency.upper()
        if currency not in self._rates:
            return False

        with self._lock:
            if currency == self._currency:
                return True
            factor = self._rates[currency] / self._rates[self._currency]
            self._transactions = [
                replace(t, amount=round(t.amount * factor, 2)) for t in self._transactions
            ]
            self._salary = round(self._salary * factor, 2)
            self._savings_target = round(self._savings_target * factor, 2)
            self._budget_goals = [
                {**goal, "amount": round(goal["amount"] * factor, 2)} for goal in self._budget_goals
            ]
            self._goal_targets = [
                {
                    **goal,
                    "target_amount": round(goal["target_amount"] * factor, 2),
                    "current_amount": round(goal["current_amount"] * factor, 2),
                }
                for goal in self._goal_targets
            ]
            self._budget_reminders = [
                {**reminder, "amount": round(reminder["amount"] * factor, 2)}
                for reminder in self._budget_reminders
            ]
            previous, self._currency = self._currency, currency
            self._rebuild()
        logger.info(f"Converted amounts from {previous} to {currency} (factor {factor})")
        return True

    def get_preferences(self) -> Dict[str, Any]:
        return {
            "currency": self._currency,
            "salary": self._salary,
            "savings_target": self._savings_target,
            "budget_goals": [dict(goal) for goal in self._budget_goals],
            "goal_targets": [dict(goal) for goal in self._goal_targets],
            "budget_reminders": [dict(reminder) for reminder in self._budget_reminders],
        }

    def set_salary(self, salary: float) -> None:
        with self._lock:
            self._salary = salary
        logger.info(f"Salary set to {salary}")

    def set_savings_target(self, target: float) -> None:
        with self._lock:
            self._savings_target = target
        logger.info(f"Savings target set to {target}")

    def set_budget_goals(self, goals: List[Dict[str, Any]]) -> None:
        with self._lock:
            self._budget_goals = [dict(goal) for goal in goals]
        logger.info(f"Saved {len(goals)} budget goals")

    def active_budget_goals(self) -> Dict[str, float]:
        return {g["category"]: g["amount"] for g in self._budget_goals if g.get("is_active", True)}

    def list_goal_targets(self) -> List[Dict[str, Any]]:
        return [dict(goal) for goal in self._goal_targets]

    def add_goal_target(self, goal: Dict[str, Any]) -> Dict[str, Any]:
        created = {**goal, "id": self._new_id()}
        with self._lock:
            self._goal_targets = self._goal_targets + [created]
        logger.info(f"Added savings goal {created['id']} ({created['name']})")
        return dict(created)

    def update_goal_target(self, goal_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Merge ``updates`` into a savings goal. Returns the updated goal or None."""
        with self._lock:
            for index, goal in enumerate(self._goal_targets):
                if goal["id"] != goal_id:
                    continue
                updated = {**goal, **updates, "id": goal_id}
                goals = list(self._goal_targets)
                goals[index] = updated
                self._goal_targets = goals
                logger.info(f"Updated savings goal {goal_id}")
                return dict(updated)
        return None

    def remove_goal_target(self, goal_id: str) -> bool:
        with self._lock:
            remaining = [g for g in self._goal_targets if g["id"] != goal_id]
            if len(remaining) == len(self._goal_targets):
                return False
            self._goal_targets = remaining
        logger.info(f"Removed savings goal {goal_id}")
        return True

    def list_budget_reminders(self) -> List[Dict[str, Any]]:
        return [dict(reminder) for reminder in self._budget_reminders]

    def add_budget_reminder(self, reminder: Dict[str, Any]) -> Dict[str, Any]:
        created = {**reminder, "id": self._new_id(), "created": (self._clock or date.today)()}
        with self._lock:
            self._budget_reminders = self._budget_reminders + [created]
        logger.info(f"Added {created['period']} budget reminder for {created['category']}")
        return dict(created)

    def remove_budget_reminder(self, reminder_id: str) -> bool:
        with self._lock:
            remaining = [r for r in self._budget_reminders if r["id"] != reminder_id]
            if len(remaining) == len(self._budget_reminders):
                return False
            self._budget_reminders = remaining
        logger.info(f"Removed budget reminder {reminder_id}")
        return True

    def toggle_budget_reminder(self, reminder_id: str) -> Optional[Dict[str, Any]]:
        """Flip a reminder's ``is_active`` flag. Returns the reminder or None."""
        with self._lock:
            for index, reminder in enumerate(self._budget_reminders):
                if reminder["id"] != reminder_id:
                    continue
                toggled = {**reminder, "is_active": not reminder.get("is_active", True)}
                reminders = list(self._budget_reminders)
                reminders[index] = toggled
                self._budget_reminders = reminders
                logger.info(f"Budget reminder {reminder_id} active={toggled['is_active']}")
                return dict(toggled)
        return None


store = TransactionStore()


def get_store() -> TransactionStore:
    return store
