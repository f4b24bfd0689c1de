"""Descriptors for the record kinds served by the edit endpoint."""
from dataclasses import dataclass
from typing import Type

import config
from models.record import Expense, Income, Record


@dataclass(frozen=True)
class ResourceKind:
    name: str
    collection_name: str
    listing_path: str  # collection listing page, default post-delete redirect
    record_model: Type[Record]

    @property
    def route_prefix(self) -> str:
        return self.listing_path.rstrip("/")


EXPENSES = ResourceKind(
    name="expense",
    collection_name=config.EXPENSES_COLLECTION,
    listing_path="/dashboard/expenses/",
    record_model=Expense,
)

INCOME = ResourceKind(
    name="income",
    collection_name=config.INCOME_COLLECTION,
    listing_path="/dashboard/income/",
    record_model=Income,
)

ALL_KINDS = (EXPENSES, INCOME)
