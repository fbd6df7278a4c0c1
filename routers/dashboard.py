from fastapi import APIRouter, Depends

from database import get_store
from schemas import AnalyticsResponse, TransactionFilter
from routers.transactions import transaction_filters
import analytics
import services

router = APIRouter()


@router.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics(
        filters: TransactionFilter = Depends(transaction_filters),
        store=Depends(get_store)
):
    """Counts, turnover and category breakdown for the filtered transactions"""
    transactions = services.get_transactions(store, filters)
    return AnalyticsResponse(analytics=analytics.summarize(transactions))
