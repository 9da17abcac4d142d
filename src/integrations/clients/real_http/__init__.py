"""
Real HTTP integration clients.

These clients communicate with the real payment gateway over HTTPS.

Important:
- Must implement the same interface as the mock clients
- Must return data shaped according to src/integrations/contracts/*

Switching:
The selection of mock vs real clients happens in src/api/endpoints/deposits.py only.
"""
