"""In-memory implementation of PortfolioRepository."""

from typing import Optional

from portfolio_tracker.core.exceptions import NotFoundError, ValidationError
from portfolio_tracker.domain.models import Investment, Transaction


class InMemoryPortfolioRepository:
    """Dict-backed store; contents are lost when the process exits."""

    def __init__(self):
        self._investments: dict[str, Investment] = {}
        self._transactions: list[Transaction] = []

    def add_investment(self, investment: Investment) -> Investment:
        if investment.id in self._investments:
            raise ValidationError(f"Investment id already exists: {investment.id}")
        self._check_quantity(investment)
        self._investments[investment.id] = investment
        return investment

    def get_investment(self, investment_id: str) -> Optional[Investment]:
        return self._investments.get(investment_id)

    def list_investments(self) -> list[Investment]:
        return list(self._investments.values())

    def update_investment(self, investment: Investment) -> Investment:
        if investment.id not in self._investments:
            raise NotFoundError("Investment", investment.id)
        self._check_quantity(investment)
        self._investments[investment.id] = investment
        return investment

    def delete_investment(self, investment_id: str) -> None:
        if self._investments.pop(investment_id, None) is None:
            raise NotFoundError("Investment", investment_id)

    def append_transaction(self, transaction: Transaction) -> Transaction:
        self._transactions.append(transaction)
        return transaction

    def list_transactions(self) -> list[Transaction]:
        # Append-only, so insertion order is chronological
        return list(reversed(self._transactions))

    @staticmethod
    def _check_quantity(investment: Investment) -> None:
        if investment.quantity < 0:
            raise ValidationError("Quantity cannot be negative")
