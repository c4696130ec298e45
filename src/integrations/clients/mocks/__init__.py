"""
Mock integration clients.

These clients return fake (but realistic) responses without calling any
external API. They stand in for a bank data-aggregation provider:
- bank_registry: the fixed list of banks and their simulated failure modes
- connection_simulator: success / upstream 500 / timeout per bank
- identifiers: seedable source of session ids, account ids and masks

Important:
- Mock clients should return data shaped according to src/integrations/contracts/*
"""
