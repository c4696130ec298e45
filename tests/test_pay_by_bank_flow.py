"""
Tests for the pay-by-bank screen flow.

Run with: pytest tests/test_pay_by_bank_flow.py -v
"""

from __future__ import annotations

import asyncio

import httpx
import pytest
import pytest_asyncio

from src.flows.pay_by_bank import Banner, FlowTransitionError, PayByBankFlow, Screen
from src.integrations.clients.real_http.bank_api import ApiResponse, BankApiClient
from src.integrations.contracts.interfaces import ConnectionEvent, EventOutcome


class FakeBankApi:
    def __init__(self, banks=None, connect_response=None, connect_error=None):
        self.banks = banks if banks is not None else [{"id": "chase", "name": "Chase"}]
        self.connect_response = connect_response
        self.connect_error = connect_error
        self.bank_calls = 0
        self.event_calls = 0
        self.connect_calls = []
        self.loading_seen = []
        self.flow = None

    async def list_banks(self):
        self.bank_calls += 1
        return list(self.banks)

    async def recent_events(self, limit=None):
        self.event_calls += 1
        return [{"outcome": "attempt", "n": self.event_calls}]

    async def connect(self, bank_id):
        self.connect_calls.append(bank_id)
        if self.flow is not None:
            self.loading_seen.append(self.flow.loading)
        if self.connect_error is not None:
            raise self.connect_error
        return self.connect_response


async def _to_share_data(flow, bank=None):
    await flow.pay_by_bank()
    await flow.next()
    await flow.select_bank(bank or flow.banks[0])


def test_flow_steps_defined():
    assert PayByBankFlow.STEPS == [Screen.BILL, Screen.INTRO, Screen.FIND_BANK, Screen.SHARE_DATA]


@pytest.mark.asyncio
async def test_forward_transitions_and_one_time_bank_fetch():
    api = FakeBankApi()
    flow = PayByBankFlow(api)

    assert flow.screen is Screen.BILL
    await flow.pay_by_bank()
    assert flow.screen is Screen.INTRO
    assert api.bank_calls == 0

    await flow.next()
    assert flow.screen is Screen.FIND_BANK
    assert api.bank_calls == 1
    assert flow.banks == [{"id": "chase", "name": "Chase"}]

    await flow.select_bank(flow.banks[0])
    assert flow.screen is Screen.SHARE_DATA
    assert flow.selected_bank["id"] == "chase"
    await flow.close()


@pytest.mark.asyncio
async def test_bank_list_not_refetched_when_already_loaded():
    api = FakeBankApi()
    flow = PayByBankFlow(api)
    flow.banks = [{"id": "citi", "name": "Citi"}]

    await flow.pay_by_bank()
    await flow.next()

    assert api.bank_calls == 0
    assert flow.banks[0]["id"] == "citi"


@pytest.mark.asyncio
async def test_no_back_or_skipped_navigation():
    flow = PayByBankFlow(FakeBankApi())

    with pytest.raises(FlowTransitionError):
        await flow.next()
    with pytest.raises(FlowTransitionError):
        await flow.select_bank({"id": "chase", "name": "Chase"})
    with pytest.raises(FlowTransitionError):
        await flow.connect()

    await flow.pay_by_bank()
    with pytest.raises(FlowTransitionError):
        await flow.pay_by_bank()


@pytest.mark.asyncio
async def test_share_data_fetches_events_immediately_and_polls_until_closed():
    api = FakeBankApi()
    flow = PayByBankFlow(api, poll_interval_seconds=0.02)

    await _to_share_data(flow)
    assert api.event_calls == 1
    assert flow.polling

    await asyncio.sleep(0.15)
    assert api.event_calls >= 3

    await flow.close()
    assert not flow.polling
    calls_after_close = api.event_calls
    await asyncio.sleep(0.06)
    assert api.event_calls == calls_after_close


@pytest.mark.asyncio
async def test_connect_success_banner_and_loading_flag():
    api = FakeBankApi(
        connect_response=ApiResponse(
            status_code=200,
            data={"success": True, "account": {"institution": "Chase", "mask": "****1234"}},
        )
    )
    flow = PayByBankFlow(api)
    api.flow = flow
    await _to_share_data(flow)

    banner = await flow.connect()

    assert api.connect_calls == ["chase"]
    assert api.loading_seen == [True]
    assert flow.loading is False
    assert banner == Banner("success", "Connected: Chase ****1234")
    await flow.close()


@pytest.mark.asyncio
async def test_connect_error_uses_server_message_or_fallback():
    api = FakeBankApi(connect_response=ApiResponse(status_code=500, data={"error": "upstream_500", "message": "Partner Bank connection failed."}))
    flow = PayByBankFlow(api)
    await _to_share_data(flow)

    assert await flow.connect() == Banner("error", "Partner Bank connection failed.")

    api.connect_response = ApiResponse(status_code=504, data={})
    assert await flow.connect() == Banner("error", "Connection failed")
    await flow.close()


@pytest.mark.asyncio
async def test_connect_network_failure_shows_error_banner():
    api = FakeBankApi(connect_error=httpx.ConnectError("connection refused"))
    flow = PayByBankFlow(api)
    await _to_share_data(flow)

    banner = await flow.connect()

    assert banner == Banner("error", "connection refused")
    assert flow.loading is False
    await flow.close()


@pytest.mark.asyncio
async def test_fetch_failures_leave_empty_lists():
    def handler(request):
        raise httpx.ConnectError("backend down")

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test")
    api = BankApiClient(client=http_client)
    flow = PayByBankFlow(api)

    await flow.pay_by_bank()
    await flow.next()
    assert flow.banks == []

    flow.banks = [{"id": "chase", "name": "Chase"}]
    await flow.select_bank(flow.banks[0])
    assert flow.events == []
    await flow.close()
    await http_client.aclose()


# ---------------------------------------------------------------------------
# Against the in-process backend
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def asgi_api(app):
    client = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")
    yield BankApiClient(client=client)
    await client.aclose()


@pytest.mark.asyncio
async def test_full_flow_against_backend_success(asgi_api):
    flow = PayByBankFlow(asgi_api)
    await flow.pay_by_bank()
    await flow.next()
    chase = next(b for b in flow.banks if b["id"] == "chase")
    await flow.select_bank(chase)

    banner = await flow.connect()
    await flow.refresh_events()

    assert banner.type == "success"
    assert banner.text.startswith("Connected: Chase ****")
    assert [e["outcome"] for e in flow.events[:2]] == ["success", "attempt"]
    await flow.close()


@pytest.mark.asyncio
async def test_full_flow_against_backend_failure(asgi_api):
    flow = PayByBankFlow(asgi_api)
    await flow.pay_by_bank()
    await flow.next()
    await flow.select_bank(next(b for b in flow.banks if b["id"] == "partnerbank"))

    banner = await flow.connect()

    assert banner.type == "error"
    assert "Partner Bank" in banner.text
    await flow.close()


@pytest.mark.asyncio
async def test_polling_picks_up_new_events(asgi_api, memory_store):
    flow = PayByBankFlow(asgi_api, poll_interval_seconds=0.02)
    await flow.pay_by_bank()
    await flow.next()
    await flow.select_bank(flow.banks[0])
    assert flow.events == []

    memory_store.record(ConnectionEvent(session_id="sess-x", bank_id="chase", outcome=EventOutcome.ATTEMPT))
    await asyncio.sleep(0.1)

    assert flow.events and flow.events[0]["session_id"] == "sess-x"
    await flow.close()
