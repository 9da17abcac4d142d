"""
Contracts (data models).

This folder defines the request/response shapes for the deposit flow and the
payment gateway:
- Transactions handed to the ledger
- User notifications
- Gateway order/status payloads

Both mock and real HTTP clients should use these contracts.
"""
