from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from datetime import date

from config import settings
from database import get_store
from schemas import (
    TransactionCreate, TransactionUpdate, TransactionFilter,
    TransactionEnvelope, TransactionListResponse, MessageResponse,
)
import services

router = APIRouter()


def transaction_filters(
        user_id: str = Query(..., min_length=1),
        type: str = Query("all", pattern="^(all|credit|expense)$"),
        frequency: str = Query(settings.DEFAULT_FREQUENCY, pattern=r"^(custom|[1-9]\d*)$"),
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
) -> TransactionFilter:
    return TransactionFilter(
        user_id=user_id,
        type=type,
        frequency=frequency,
        start_date=start_date,
        end_date=end_date,
    )


@router.post("/", response_model=TransactionEnvelope, status_code=status.HTTP_201_CREATED)
async def create_transaction(transaction_data: TransactionCreate, store=Depends(get_store)):
    """Create a new transaction"""
    transaction = services.add_transaction(store, transaction_data)
    return TransactionEnvelope(message="Transaction added successfully", transaction=transaction)


@router.get("/", response_model=TransactionListResponse)
async def list_transactions(
        filters: TransactionFilter = Depends(transaction_filters),
        store=Depends(get_store)
):
    """List a user's transactions by type and frequency"""
    return TransactionListResponse(transactions=services.get_transactions(store, filters))


@router.put("/{transaction_id}", response_model=TransactionEnvelope)
async def update_transaction(
        transaction_id: str,
        transaction_data: TransactionUpdate,
        store=Depends(get_store)
):
    """Update a transaction"""
    transaction = services.update_transaction(store, transaction_id, transaction_data)
    return TransactionEnvelope(message="Transaction updated successfully", transaction=transaction)


@router.delete("/{transaction_id}", response_model=MessageResponse)
async def delete_transaction(
        transaction_id: str,
        user_id: str = Query(..., min_length=1),
        store=Depends(get_store)
):
    """Delete a transaction"""
    services.delete_transaction(store, transaction_id, user_id)
    return MessageResponse(message="Transaction successfully deleted")
