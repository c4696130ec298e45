"""
Contracts (data models).

This folder defines the request/response shapes shared by the mock backend and
the client that drives the pay-by-bank screens:
- Bank entries and their simulated failure modes
- Connection attempt results and synthetic accounts
- Event log records and the storage interface behind them

Both the simulator and the HTTP client should use these contracts instead of
ad-hoc dicts.
"""
