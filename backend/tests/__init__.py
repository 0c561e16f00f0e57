"""
Pytest suite for the travel & donation payments backend.

Test categories:
- Unit tests: signature math, ledger CAS, gateway wrapper, services
- API tests: full FastAPI app over ASGITransport with in-memory SQLite
- Integration tests: concurrent verification against a file-backed DB
"""
