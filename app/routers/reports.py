import csv
import io
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from app.db.store import TransactionStore, get_store
from app.utils.periods import Period, current_window

router = APIRouter()
logger = logging.getLogger(__name__)

CSV_FIELDS = ["id", "date", "type", "category", "amount", "description", "source"]


def transactions_to_csv(transactions) -> str:
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=CSV_FIELDS)
    writer.writeheader()
    for t in transactions:
        writer.writerow({
            "id": t.id,
            "date": t.date.isoformat(),
            "type": t.type,
            "category": t.category,
            "amount": t.amount,
            "description": t.description or "",
            "source": t.source or "",
        })
    return output.getvalue()


@router.get("/{period}.csv")
def export_period_csv(period: Period, store: TransactionStore = Depends(get_store)) -> Response:
    """
    Export the current window's transactions (e.g. /reports/monthly.csv), newest first.
    """
    engine = store.engine
    window = current_window(period, engine.today)
    transactions = engine.transactions_in(window)
    logger.info(f"Exporting {len(transactions)} transactions for {period.value} ({window.start} - {window.end})")

    filename = f"transactions_{period.value}_{window.start.isoformat()}.csv"
    return Response(
        content=transactions_to_csv(transactions),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
