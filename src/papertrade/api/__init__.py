"""HTTP adapter over the ledger services."""
