import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

ReminderPeriod = Literal["weekly", "monthly"]


class BudgetGoal(BaseModel):
    category: str = Field(min_length=1)
    amount: float = Field(ge=0, allow_inf_nan=False)
    is_active: bool = True


class GoalTargetCreate(BaseModel):
    name: str = Field(min_length=1)
    target_amount: float = Field(gt=0, allow_inf_nan=False)
    current_amount: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    deadline: dt.date
    is_active: bool = True


class GoalTargetUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    target_amount: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    current_amount: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    deadline: Optional[dt.date] = None
    is_active: Optional[bool] = None


class GoalTarget(GoalTargetCreate):
    id: str


class BudgetReminderCreate(BaseModel):
    category: str = Field(min_length=1)
    amount: float = Field(gt=0, allow_inf_nan=False)
    period: ReminderPeriod = "monthly"
    is_active: bool = True


class BudgetReminder(BudgetReminderCreate):
    id: str
    created: dt.date


class Preferences(BaseModel):
    currency: str
    salary: float = 0.0
    savings_target: float = 0.0
    budget_goals: List[BudgetGoal] = Field(default_factory=list)
    goal_targets: List[GoalTarget] = Field(default_factory=list)
    budget_reminders: List[BudgetReminder] = Field(default_factory=list)


class SalaryUpdate(BaseModel):
    salary: float = Field(ge=0, allow_inf_nan=False)


class SavingsTargetUpdate(BaseModel):
    savings_target: float = Field(ge=0, allow_inf_nan=False)


class BudgetGoalsUpdate(BaseModel):
    budget_goals: List[BudgetGoal]
