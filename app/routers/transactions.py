import logging
from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from app.db.store import TransactionStore, get_store
from app.models.transaction import (
    CurrencyConversion,
    TransactionCreate,
    TransactionImport,
    TransactionPublic,
    TransactionUpdate,
)
from app.utils.analytics import InvalidTransactionError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/", response_model=List[TransactionPublic])
def list_transactions(
    start: Optional[date] = None,
    end: Optional[date] = None,
    store: TransactionStore = Depends(get_store),
):
    """
    Newest first. ``start``/``end`` (YYYY-MM-DD) narrow to an inclusive range.
    """
    if start and end and start > end:
        raise HTTPException(status_code=400, detail="start must not be after end")
    return [t.to_dict() for t in store.list_transactions(start, end)]


@router.post("/", response_model=TransactionPublic, status_code=status.HTTP_201_CREATED)
def create_transaction(transaction: TransactionCreate, store: TransactionStore = Depends(get_store)):
    try:
        created = store.add_transaction(transaction.model_dump())
    except InvalidTransactionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return created.to_dict()


@router.post("/import", response_model=List[TransactionPublic], status_code=status.HTTP_201_CREATED)
def import_transactions(payload: TransactionImport, store: TransactionStore = Depends(get_store)):
    """
    Replace all stored transactions with an imported batch.
    """
    try:
        imported = store.replace_all([t.model_dump() for t in payload.transactions])
    except InvalidTransactionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return [t.to_dict() for t in imported]


@router.post("/convert")
def convert_currency(conversion: CurrencyConversion, store: TransactionStore = Depends(get_store)) -> Dict:
    """
    Re-express all amounts in another currency.
    """
    if not store.convert_currency(conversion.currency):
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported currency {conversion.currency}. "
            f"Supported: {', '.join(store.supported_currencies())}",
        )
    return {
        "success": True,
        "currency": store.currency,
        "transaction_count": len(store.engine.transactions),
    }


@router.put("/{transaction_id}", response_model=TransactionPublic)
def update_transaction(
    transaction_id: str,
    transaction_update: TransactionUpdate,
    store: TransactionStore = Depends(get_store),
):
    mutable_fields = {
        k: v for k, v in transaction_update.model_dump(exclude_unset=True).items() if v is not None
    }
    if not mutable_fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    try:
        updated = store.update_transaction(transaction_id, mutable_fields)
    except InvalidTransactionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not updated:
        raise HTTPException(status_code=404, detail="Transaction not found")

    return updated.to_dict()


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(transaction_id: str, store: TransactionStore = Depends(get_store)):
    deleted = store.delete_transaction(transaction_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return None


@router.delete("/")
def clear_transactions(store: TransactionStore = Depends(get_store)) -> Dict:
    removed = store.clear()
    return {"success": True, "removed": removed}
