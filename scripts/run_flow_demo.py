#!/usr/bin/env python3
"""
Walk through the four pay-by-bank screens and print each stage to the terminal.
Shows the bank list, the connection result banner and the live event feed.

Usage (from repo root):
  python scripts/run_flow_demo.py                      # in-process app, Chase
  python scripts/run_flow_demo.py --bank partnerbank   # simulated upstream 500
  python scripts/run_flow_demo.py --base-url http://localhost:8080 --bank slowbank
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import httpx

from src.flows.pay_by_bank import PayByBankFlow
from src.integrations.clients.real_http.bank_api import BankApiClient


def setup_logging():
    """Log to terminal at INFO so every stage is visible."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


def print_stage(title: str, data: dict | list | str):
    """Print a stage header and data to the terminal."""
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)
    if isinstance(data, (dict, list)):
        print(json.dumps(data, indent=2, default=str))
    else:
        print(data)
    print()


def build_api(base_url: str | None) -> BankApiClient:
    if base_url:
        return BankApiClient(base_url=base_url)

    from src.api.main import app

    transport = httpx.ASGITransport(app=app)
    return BankApiClient(client=httpx.AsyncClient(transport=transport, base_url="http://demo", timeout=30.0))


async def main(bank_id: str, base_url: str | None):
    setup_logging()
    api = build_api(base_url)
    flow = PayByBankFlow(api)

    try:
        print_stage("SCREEN 0: Pay Bill", {"amount_due": "$69.45", "due": "February 8"})
        await flow.pay_by_bank()
        print_stage("SCREEN 1: Intro", "Quantum Pay uses a bank data connect product to link your accounts")
        await flow.next()
        print_stage("SCREEN 2: Find your bank", flow.banks)

        bank = next((b for b in flow.banks if b.get("id") == bank_id), None)
        if bank is None:
            print_stage("UNKNOWN BANK", f"'{bank_id}' is not in the bank list")
            return 1

        await flow.select_bank(bank)
        print_stage(f"SCREEN 3: Share data with {bank['name']}", "Connecting...")
        banner = await flow.connect()
        print_stage("RESULT", {"type": banner.type, "text": banner.text} if banner else "no banner")

        await flow.refresh_events()
        print_stage("RECENT EVENTS", flow.events)
        return 0 if banner and banner.type == "success" else 2
    finally:
        await flow.close()
        await api.aclose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run the pay-by-bank flow end to end")
    parser.add_argument("--bank", default="chase", help="Bank id to connect to (default: chase)")
    parser.add_argument("--base-url", default=None, help="Running backend URL; omit to use the in-process app")
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.bank, args.base_url)))
