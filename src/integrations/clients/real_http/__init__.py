"""
Real HTTP integration clients.

These clients communicate with a running Quantum Pay backend over HTTP:
- listing banks for the picker
- posting connection attempts
- polling the recent event feed

Important:
- Must return data shaped according to src/integrations/contracts/*
- Accept an injected httpx client so tests can run against the ASGI app
"""
