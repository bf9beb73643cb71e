import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

TransactionType = Literal["income", "expense"]


class TransactionCreate(BaseModel):
    amount: float = Field(allow_inf_nan=False)
    category: str = Field(min_length=1)
    description: Optional[str] = ""
    date: dt.date
    type: TransactionType
    source: Optional[str] = "manual"


class TransactionUpdate(BaseModel):
    amount: Optional[float] = Field(default=None, allow_inf_nan=False)
    category: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    date: Optional[dt.date] = None
    type: Optional[TransactionType] = None
    source: Optional[str] = None


class TransactionPublic(BaseModel):
    id: str
    amount: float
    category: str
    description: Optional[str] = ""
    date: dt.date
    type: TransactionType
    source: Optional[str] = None


class TransactionImport(BaseModel):
    transactions: List[TransactionCreate]


class CurrencyConversion(BaseModel):
    currency: str = Field(min_length=3, max_length=3)
