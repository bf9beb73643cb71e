"""
Preferences Router
Salary, savings target, budget goals, savings goals and budget reminders
"""
import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, status

from app.db.store import TransactionStore, get_store
from app.models.preferences import (
    BudgetGoalsUpdate,
    BudgetReminder,
    BudgetReminderCreate,
    GoalTarget,
    GoalTargetCreate,
    GoalTargetUpdate,
    Preferences,
    SalaryUpdate,
    SavingsTargetUpdate,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/", response_model=Preferences)
def get_preferences(store: TransactionStore = Depends(get_store)):
    return store.get_preferences()


@router.put("/salary")
def update_salary(update: SalaryUpdate, store: TransactionStore = Depends(get_store)) -> Dict:
    store.set_salary(update.salary)
    return {"success": True, "salary": update.salary}


@router.put("/savings-target")
def update_savings_target(update: SavingsTargetUpdate, store: TransactionStore = Depends(get_store)) -> Dict:
    store.set_savings_target(update.savings_target)
    return {"success": True, "savings_target": update.savings_target}


@router.put("/budget-goals")
def update_budget_goals(update: BudgetGoalsUpdate, store: TransactionStore = Depends(get_store)) -> Dict:
    """
    Replace the budget goals. Categories must be unique.
    """
    categories = [goal.category for goal in update.budget_goals]
    if len(set(categories)) != len(categories):
        raise HTTPException(status_code=400, detail="Duplicate budget goal category")

    goals = [goal.model_dump() for goal in update.budget_goals]
    store.set_budget_goals(goals)
    return {
        "success": True,
        "message": "Budget goals updated successfully",
        "budget_goals": goals,
    }


@router.get("/goals", response_model=List[GoalTarget])
def list_goal_targets(store: TransactionStore = Depends(get_store)):
    return store.list_goal_targets()


@router.post("/goals", response_model=GoalTarget, status_code=status.HTTP_201_CREATED)
def add_goal_target(goal: GoalTargetCreate, store: TransactionStore = Depends(get_store)):
    return store.add_goal_target(goal.model_dump())


@router.put("/goals/{goal_id}", response_model=GoalTarget)
def update_goal_target(goal_id: str, update: GoalTargetUpdate, store: TransactionStore = Depends(get_store)):
    changes = {k: v for k, v in update.model_dump(exclude_unset=True).items() if v is not None}
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")

    updated = store.update_goal_target(goal_id, changes)
    if not updated:
        raise HTTPException(status_code=404, detail="Goal not found")
    return updated


@router.delete("/goals/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_goal_target(goal_id: str, store: TransactionStore = Depends(get_store)):
    if not store.remove_goal_target(goal_id):
        raise HTTPException(status_code=404, detail="Goal not found")
    return None


@router.get("/reminders", response_model=List[BudgetReminder])
def list_budget_reminders(store: TransactionStore = Depends(get_store)):
    return store.list_budget_reminders()


@router.post("/reminders", response_model=BudgetReminder, status_code=status.HTTP_201_CREATED)
def add_budget_reminder(reminder: BudgetReminderCreate, store: TransactionStore = Depends(get_store)):
    """
    Add a spending limit for one category over a weekly or monthly window.
    """
    return store.add_budget_reminder(reminder.model_dump())


@router.post("/reminders/{reminder_id}/toggle", response_model=BudgetReminder)
def toggle_budget_reminder(reminder_id: str, store: TransactionStore = Depends(get_store)):
    toggled = store.toggle_budget_reminder(reminder_id)
    if not toggled:
        raise HTTPException(status_code=404, detail="Reminder not found")
    return toggled


@router.delete("/reminders/{reminder_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_budget_reminder(reminder_id: str, store: TransactionStore = Depends(get_store)):
    if not store.remove_budget_reminder(reminder_id):
        raise HTTPException(status_code=404, detail="Reminder not found")
    return None
