"""Portfolio repository protocol."""

from typing import Optional, Protocol

from portfolio_tracker.domain.models import Investment, Transaction


class PortfolioRepository(Protocol):
    """Interface for investment and transaction storage."""

    def add_investment(self, investment: Investment) -> Investment:
        """Persist a new investment; ids are unique."""
        ...

    def get_investment(self, investment_id: str) -> Optional[Investment]:
        """Retrieve investment by ID."""
        ...

    def list_investments(self) -> list[Investment]:
        """List all investments in insertion order."""
        ...

    def update_investment(self, investment: Investment) -> Investment:
        """Replace an existing investment."""
        ...

    def delete_investment(self, investment_id: str) -> None:
        """Delete an investment (hard delete)."""
        ...

    def append_transaction(self, transaction: Transaction) -> Transaction:
        """Append to the transaction log."""
        ...

    def list_transactions(self) -> list[Transaction]:
        """List transactions, newest first."""
        ...
