"""Feature modules: calculator, currency, transfers, analytics."""
