"""Domain layer for ledgerline: entities, pure ledger logic and services."""
