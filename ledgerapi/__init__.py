"""Money values, accounts and transactions with SQLite storage, sample seeding and a small WSGI router."""

__version__ = "1.0.0"