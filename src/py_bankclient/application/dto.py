from __future__ import annotations

from dataclasses import dataclass, field

from py_bankclient.domain.errors import ValidationError
from py_bankclient.domain.models import TRANSACTION_TYPES, Account, Transaction

__all__ = [
    "RegisterInput",
    "TransactionQuery",
    "TransactionPage",
    "DashboardSnapshot",
    "DEFAULT_PAGE_LIMIT",
]

DEFAULT_PAGE_LIMIT = 20


@dataclass(frozen=True, slots=True)
class RegisterInput:
    """Registration form fields; sent as snake_case JSON."""

    email: str
    password: str
    first_name: str
    last_name: str

    def to_payload(self) -> dict[str, str]:
        return {
            "email": self.email.strip(),
            "password": self.password,
            "first_name": self.first_name.strip(),
            "last_name": self.last_name.strip(),
        }


@dataclass(frozen=True, slots=True)
class TransactionQuery:
    """History filter + pagination.

    ``type`` None means all kinds; it is omitted from the query string.
    Pages are 1-based.
    """

    type: str | None = None
    page: int = 1
    limit: int = DEFAULT_PAGE_LIMIT

    def __post_init__(self) -> None:
        if self.type is not None and self.type not in TRANSACTION_TYPES:
            raise ValidationError(f"Unknown transaction type: {self.type!r}")
        if self.page < 1:
            raise ValidationError("page must be >= 1")
        if self.limit < 1:
            raise ValidationError("limit must be >= 1")

    def to_params(self) -> dict[str, str | int | None]:
        return {"type": self.type, "page": self.page, "limit": self.limit}

    def next(self) -> TransactionQuery:
        return TransactionQuery(type=self.type, page=self.page + 1, limit=self.limit)

    def previous(self) -> TransactionQuery:
        return TransactionQuery(type=self.type, page=max(1, self.page - 1), limit=self.limit)


@dataclass(frozen=True, slots=True)
class TransactionPage:
    """One page of history. A full page implies there may be a next one."""

    items: tuple[Transaction, ...]
    query: TransactionQuery

    @property
    def has_previous(self) -> bool:
        return self.query.page > 1

    @property
    def has_next(self) -> bool:
        return len(self.items) >= self.query.limit


@dataclass(slots=True)
class DashboardSnapshot:
    """Independent state slots filled by concurrent fetches.

    Each slot is None until its own request completes; a failed slot records a
    user-visible message in ``errors`` and leaves the other slot untouched.
    """

    accounts: list[Account] | None = None
    recent_transactions: list[Transaction] | None = None
    errors: dict[str, str] = field(default_factory=dict)

    def balance_for(self, currency: str) -> Account | None:
        for account in self.accounts or []:
            if account.currency == currency.upper():
                return account
        return None

    @property
    def loaded(self) -> bool:
        return self.accounts is not None and self.recent_transactions is not None
