import pytest

from src.integrations.clients.mocks.bank_registry import BankRegistry, default_bank_registry
from src.integrations.contracts.interfaces import Bank, FailMode


def test_list_banks_is_fixed_and_ordered():
    first = [b.id for b in default_bank_registry.list_banks()]
    second = [b.id for b in default_bank_registry.list_banks()]

    assert first == second
    assert first[0] == "partnerbank"
    assert "chase" in first
    assert len(first) == len(set(first))


def test_list_banks_returns_a_copy():
    banks = default_bank_registry.list_banks()
    banks.clear()
    assert default_bank_registry.list_banks()


def test_designated_failure_modes():
    assert default_bank_registry.find_bank("partnerbank").fail_mode is FailMode.SERVER_ERROR
    assert default_bank_registry.find_bank("slowbank").fail_mode is FailMode.TIMEOUT
    assert default_bank_registry.find_bank("chase").fail_mode is FailMode.NONE


def test_find_bank_normalizes_whitespace_and_case():
    assert default_bank_registry.find_bank("  Chase ").name == "Chase"


@pytest.mark.parametrize("bank_id", ["nope", "", None])
def test_find_bank_unknown_returns_none(bank_id):
    assert default_bank_registry.find_bank(bank_id) is None


def test_custom_registry_rejects_duplicate_ids():
    with pytest.raises(ValueError):
        BankRegistry([Bank(id="a", name="A"), Bank(id="A", name="Other A")])


def test_summary_hides_failure_mode():
    bank = Bank(id="x", name="X Bank", fail_mode=FailMode.TIMEOUT)
    assert bank.summary() == {"id": "x", "name": "X Bank"}
