"""
Main API router.
"""

from fastapi import APIRouter
from pocketledger.api import statements, transactions, recurring, subscriptions, category_rules

api_router = APIRouter()

api_router.include_router(statements.router)
api_router.include_router(transactions.router)
api_router.include_router(recurring.router)
api_router.include_router(subscriptions.router)
api_router.include_router(category_rules.router)
