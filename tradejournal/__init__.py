"""Trade journal backend: risk calculations, fund transfers and portfolio analytics."""
