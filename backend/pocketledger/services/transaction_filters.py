"""Filtering and sorting for transaction listings."""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel
from sqlalchemy import extract, func, or_
from sqlalchemy.orm import Query

from pocketledger.models.transaction import Transaction, TransactionType

SORT_OPTIONS = ("date-desc", "date-asc", "amount-desc", "amount-asc")


class TransactionFilters(BaseModel):
    search: Optional[str] = None
    categories: Optional[List[str]] = None
    type: Optional[TransactionType] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    amount_min: Optional[float] = None
    amount_max: Optional[float] = None
    month: Optional[int] = None
    year: Optional[int] = None
    is_recurring: Optional[bool] = None


def apply_transaction_filters(query: Query, filters: TransactionFilters) -> Query:
    """Narrow a Transaction query. Amount bounds compare absolute values."""
    if filters.search:
        search_term = f"%{filters.search}%"
        query = query.filter(
            or_(
                Transaction.description.ilike(search_term),
                Transaction.merchant_name.ilike(search_term),
            )
        )
    if filters.categories:
        query = query.filter(Transaction.category.in_(filters.categories))
    if filters.type is not None:
        query = query.filter(Transaction.type == filters.type)
    if filters.date_from:
        query = query.filter(Transaction.date >= filters.date_from)
    if filters.date_to:
        query = query.filter(Transaction.date <= filters.date_to)
    if filters.amount_min is not None:
        query = query.filter(func.abs(Transaction.amount) >= filters.amount_min)
    if filters.amount_max is not None:
        query = query.filter(func.abs(Transaction.amount) <= filters.amount_max)
    if filters.month is not None:
        query = query.filter(extract("month", Transaction.date) == filters.month)
    if filters.year is not None:
        query = query.filter(extract("year", Transaction.date) == filters.year)
    if filters.is_recurring is not None:
        query = query.filter(Transaction.is_recurring == filters.is_recurring)
    return query


def apply_transaction_sort(query: Query, sort_by: str = "date-desc") -> Query:
    if sort_by == "date-asc":
        return query.order_by(Transaction.date.asc())
    if sort_by == "amount-desc":
        return query.order_by(func.abs(Transaction.amount).desc())
    if sort_by == "amount-asc":
        return query.order_by(func.abs(Transaction.amount).asc())
    return query.order_by(Transaction.date.desc())
