"""
Mock integration clients.

These clients return fake (but realistic) gateway responses without calling
any external API. They are used when:
- gateway credentials are not available
- we want to test the deposit flow end-to-end without external dependencies

Important:
- Mock clients must follow the SAME interface as real HTTP clients.
- Mock clients should return data shaped according to src/integrations/contracts/*
"""
