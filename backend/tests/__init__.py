"""
pytest suite for the payment-gateway and order-status core.

Test categories:
- Unit tests: slug generation, drivers, config parsing (no database)
- Integration tests: services against in-memory SQLite
- API tests: FastAPI routes through httpx ASGITransport
"""
