"""Tests for CurrencyService over a seeded rate table."""

from dataclasses import replace
from decimal import Decimal

import pytest

from ledger_config.schema import CurrencyFormatConfig
from ledger_kernel.domain.values import Money
from ledger_kernel.exceptions import InvalidCurrencyError, MissingBaseCurrencyError
from ledger_kernel.models import CurrencyRateModel
from ledger_services import CurrencyService


@pytest.fixture
def service(db_session, seeded, ledger_config):
    return CurrencyService(db_session, seeded.client_id, config=ledger_config)


class TestCurrencyService:
    def test_rate_table_loaded(self, service):
        table = service.rate_table()
        assert table.base_code == "USD"
        assert table.codes == ("USD", "EUR", "GBP", "JPY")

    def test_rate_table_loaded_once(self, service, captured_logs):
        service.rate_table()
        service.convert(Decimal("1"), "USD", "EUR")
        loads = [r for r in captured_logs() if r["message"] == "rate_table_loaded"]
        assert len(loads) == 1

    def test_convert(self, service):
        assert service.convert(Decimal("100"), "USD", "EUR") == Decimal("92.36")

    def test_convert_money(self, service):
        result = service.convert_money(Money.of("10", "USD"), "JPY")
        assert result == Money.of("1495", "JPY")

    def test_format(self, service):
        assert service.format(Decimal("1234.56"), "EUR") == "€1,234.56 EUR"
        assert service.format(Decimal("-350.25"), "USD") == "-$350.25 USD"

    def test_iso_minor_units_from_config(self, db_session, seeded, ledger_config):
        config = replace(ledger_config, currency=CurrencyFormatConfig(use_iso_minor_units=True))
        service = CurrencyService(db_session, seeded.client_id, config=config)
        assert service.format(Decimal("1234.5"), "JPY") == "¥1,235 JPY"

    def test_unknown_currency(self, service):
        with pytest.raises(InvalidCurrencyError):
            service.format(Decimal("1"), "CHF")

    def test_table_without_base_rejected(self, db_session, seeded, ledger_config):
        db_session.query(CurrencyRateModel).filter(
            CurrencyRateModel.client_id == seeded.client_id,
            CurrencyRateModel.code == "USD",
        ).update({"is_base": False})
        db_session.flush()
        service = CurrencyService(db_session, seeded.client_id, config=ledger_config)
        with pytest.raises(MissingBaseCurrencyError):
            service.rate_table()
