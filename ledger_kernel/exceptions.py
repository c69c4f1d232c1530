"""
Typed exception hierarchy for the ledger core.

Every error has a typed class (catch by type, not by message), a ``code``
class attribute (machine-readable, API-safe), and carries structured data
as instance attributes so it survives logging and serialization.

    LedgerError (base)
    |
    +-- NotFoundError
    |   +-- TransactionNotFoundError
    |
    +-- CurrencyError
    |   +-- InvalidCurrencyError
    |   +-- RateTableError
    |       +-- EmptyRateTableError
    |       +-- MissingBaseCurrencyError
    |       +-- MultipleBaseCurrenciesError
    |       +-- InvalidBaseRateError
    |       +-- InvalidExchangeRateError
    |       +-- DuplicateCurrencyError
    |
    +-- DataQualityError
    |   +-- AgingDataQualityError
    |   +-- StockDataQualityError
    |
    +-- ConfigError

Code            | When raised
----------------|---------------------------------------------------------
NOT_FOUND       | toggle_match / lookup referencing an unknown id
INVALID_CURRENCY| convert / format with a code absent from the rate table
RATE_TABLE_*    | rate table violates the single-base / positive-rate rules
DATA_QUALITY    | malformed input records (missing due date, negative amount
                | or quantity, due date before issue date)
CONFIG_ERROR    | configuration file missing keys or holding invalid values

Handling pattern::

    try:
        updated = matcher.toggle_match(transactions, txn_id)
    except TransactionNotFoundError as e:
        return {"error": e.code, "transaction_id": e.transaction_id}

No operation in the ledger core performs I/O, so none of these errors is
transient; re-issuing the same call with the same input fails the same way.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class LedgerError(Exception):
    """
    Base exception for all ledger core errors.

    All subclasses must have a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "LEDGER_ERROR"


# Lookup exceptions


class NotFoundError(LedgerError):
    """Base exception for references to records that do not exist."""

    code: str = "NOT_FOUND"


class TransactionNotFoundError(NotFoundError):
    """Reconciliation transaction id is not part of the transaction set."""

    code: str = "NOT_FOUND"

    def __init__(self, transaction_id: Any):
        self.transaction_id = transaction_id
        super().__init__(f"Reconciliation transaction not found: {transaction_id}")


# Currency exceptions


class CurrencyError(LedgerError):
    """Base exception for currency-related errors."""

    code: str = "CURRENCY_ERROR"


class InvalidCurrencyError(CurrencyError):
    """Currency code is absent from the rate table in use."""

    code: str = "INVALID_CURRENCY"

    def __init__(self, currency: str):
        self.currency = currency
        super().__init__(f"Currency not present in rate table: '{currency}'")


class RateTableError(CurrencyError):
    """Base exception for structurally invalid rate tables."""

    code: str = "RATE_TABLE_ERROR"


class EmptyRateTableError(RateTableError):
    """Rate table has no rates at all."""

    code: str = "RATE_TABLE_EMPTY"

    def __init__(self) -> None:
        super().__init__("Rate table must contain at least one currency")


class MissingBaseCurrencyError(RateTableError):
    """No rate in the table is flagged as the base currency."""

    code: str = "RATE_TABLE_MISSING_BASE"

    def __init__(self, codes: tuple[str, ...]):
        self.codes = codes
        super().__init__(f"Rate table has no base currency: {', '.join(codes)}")


class MultipleBaseCurrenciesError(RateTableError):
    """More than one rate in the table is flagged as the base currency."""

    code: str = "RATE_TABLE_MULTIPLE_BASE"

    def __init__(self, base_codes: tuple[str, ...]):
        self.base_codes = base_codes
        super().__init__(
            f"Rate table has more than one base currency: {', '.join(base_codes)}"
        )


class InvalidBaseRateError(RateTableError):
    """The base currency's rate is not exactly 1."""

    code: str = "RATE_TABLE_INVALID_BASE_RATE"

    def __init__(self, currency: str, rate: Any):
        self.currency = currency
        self.rate = str(rate)
        super().__init__(f"Base currency {currency} must have rate 1, got {rate}")


class InvalidExchangeRateError(RateTableError):
    """Exchange rate is zero, negative, or not a number."""

    code: str = "INVALID_EXCHANGE_RATE"

    def __init__(self, currency: str, rate: Any):
        self.currency = currency
        self.rate = str(rate)
        super().__init__(f"Exchange rate for {currency} must be positive, got {rate}")


class DuplicateCurrencyError(RateTableError):
    """The same currency code appears more than once in the table."""

    code: str = "RATE_TABLE_DUPLICATE_CURRENCY"

    def __init__(self, currency: str):
        self.currency = currency
        super().__init__(f"Currency listed more than once in rate table: {currency}")


# Data quality exceptions


@dataclass(frozen=True)
class DataQualityIssue:
    """One malformed input record.

    ``record_id`` identifies the offending record, ``field`` the offending
    attribute and ``reason`` a short machine-readable tag such as
    ``missing_due_date``.
    """

    record_id: str
    field: str
    reason: str
    value: str | None = None

    def as_dict(self) -> dict[str, str | None]:
        return {
            "record_id": self.record_id,
            "field": self.field,
            "reason": self.reason,
            "value": self.value,
        }


class DataQualityError(LedgerError):
    """Input records are malformed; carries every issue found."""

    code: str = "DATA_QUALITY"

    def __init__(self, issues: tuple[DataQualityIssue, ...], subject: str = "records"):
        self.issues = tuple(issues)
        self.subject = subject
        reasons = sorted({i.reason for i in self.issues})
        super().__init__(
            f"{len(self.issues)} malformed {subject}: {', '.join(reasons)}"
        )


class AgingDataQualityError(DataQualityError):
    """Invoices that cannot be aged (missing due date, negative amount, ...)."""

    def __init__(self, issues: tuple[DataQualityIssue, ...]):
        super().__init__(issues, subject="invoices")


class StockDataQualityError(DataQualityError):
    """Stock records with negative on-hand or reserved quantities."""

    def __init__(self, issues: tuple[DataQualityIssue, ...]):
        super().__init__(issues, subject="stock records")


# Configuration exceptions


class ConfigError(LedgerError):
    """Configuration file is missing keys or holds invalid values."""

    code: str = "CONFIG_ERROR"

    def __init__(self, message: str, key: str | None = None):
        self.key = key
        super().__init__(message)
