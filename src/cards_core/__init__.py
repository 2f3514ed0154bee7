"""cards-core: card issuance and card payment domain model."""

__version__ = "0.1.0"
