"""View models for portfolio outputs."""

from dataclasses import dataclass


@dataclass
class PortfolioSummary:
    """Portfolio totals with the owner split applied per investment."""

    total_value: float = 0.0
    total_cost: float = 0.0
    total_gain_loss: float = 0.0
    gain_loss_percentage: float = 0.0
    admin_share: float = 0.0
    viewer_share: float = 0.0


@dataclass
class RefreshReport:
    """Result of applying resolved quotes to the holdings."""

    updated: list[str]
    skipped: dict[str, str]
