"""Domain models - immutable dataclasses for the Akahu account and transaction models"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Generic, Mapping, TypeVar

from akahu_client.domain.categories import NzfccCode, PersonalFinanceGroup
from akahu_client.domain.money import Money

T = TypeVar("T")


class AccountKind(str, Enum):
    CHECKING = "CHECKING"
    SAVINGS = "SAVINGS"
    CREDIT_CARD = "CREDITCARD"
    LOAN = "LOAN"
    KIWISAVER = "KIWISAVER"
    INVESTMENT = "INVESTMENT"
    TERM_DEPOSIT = "TERMDEPOSIT"
    FOREIGN = "FOREIGN"
    TAX = "TAX"
    REWARDS = "REWARDS"
    WALLET = "WALLET"


class AccountStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"  # cached data only, user must reconnect


class AccountAttribute(str, Enum):
    TRANSACTIONS = "TRANSACTIONS"
    TRANSFER_TO = "TRANSFER_TO"
    TRANSFER_FROM = "TRANSFER_FROM"
    PAYMENT_TO = "PAYMENT_TO"
    PAYMENT_FROM = "PAYMENT_FROM"


class TransactionKind(str, Enum):
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"
    PAYMENT = "PAYMENT"
    TRANSFER = "TRANSFER"
    STANDING_ORDER = "STANDING ORDER"
    EFTPOS = "EFTPOS"
    INTEREST = "INTEREST"
    FEE = "FEE"
    TAX = "TAX"
    CREDIT_CARD = "CREDIT CARD"
    DIRECT_DEBIT = "DIRECT DEBIT"
    DIRECT_CREDIT = "DIRECT CREDIT"
    ATM = "ATM"
    LOAN = "LOAN"


@dataclass(frozen=True)
class Balance:
    """Account balance; every amount shares one currency"""

    current: Money
    available: Money | None = None
    limit: Money | None = None
    overdrawn: bool | None = None

    def __post_init__(self) -> None:
        for other in (self.available, self.limit):
            if other is not None and other.currency != self.current.currency:
                raise ValueError(
                    f"Balance mixes currencies: {self.current.currency} and {other.currency}"
                )

    @property
    def currency(self) -> str:
        return self.current.currency


@dataclass(frozen=True)
class RefreshDetails:
    """When Akahu last refreshed each part of an account (all UTC, all optional)"""

    balance: datetime | None = None
    meta: datetime | None = None
    transactions: datetime | None = None
    party: datetime | None = None


@dataclass(frozen=True)
class PaymentDetails:
    """Payment instructions for payable accounts that are not bank accounts"""

    account_holder: str
    account_number: str
    particulars: str | None = None
    code: str | None = None
    reference: str | None = None
    minimum_amount: Decimal | None = None


@dataclass(frozen=True)
class InterestDetails:
    rate: Decimal
    type: str  # e.g. FIXED, FLOATING
    expires_at: datetime | None = None


@dataclass(frozen=True)
class RepaymentDetails:
    frequency: str  # e.g. MONTHLY
    next_amount: Decimal
    next_date: datetime | None = None


@dataclass(frozen=True)
class LoanDetails:
    purpose: str  # UNKNOWN when the provider doesn't say
    type: str
    interest: InterestDetails | None = None
    is_interest_only: bool | None = None
    interest_only_expires_at: datetime | None = None
    term: str | None = None
    matures_at: datetime | None = None
    initial_principal: Decimal | None = None
    repayment: RepaymentDetails | None = None


@dataclass(frozen=True)
class AccountMeta:
    """
    Integration-specific account metadata.

    Providers report very different subsets of this object, so every field is
    optional. `breakdown` and `portfolio` are passed through untouched.
    """

    holder: str | None = None
    has_unlisted_holders: bool | None = None
    payment_details: PaymentDetails | None = None
    loan_details: LoanDetails | None = None
    breakdown: Any = None
    portfolio: Any = None


@dataclass(frozen=True)
class Connection:
    """A financial institution that Akahu connects to"""

    id: str  # conn_...
    name: str
    logo: str | None = None


@dataclass(frozen=True)
class Account:
    """A connected account - anything that has a balance"""

    id: str  # acc_...
    name: str
    status: AccountStatus
    kind: AccountKind
    balance: Balance
    connection: Connection | None = None
    authorisation: str | None = None  # auth_..., shared by accounts from one login
    credentials: str | None = None  # deprecated alias of authorisation
    migrated: str | None = None  # predecessor id after an open banking migration
    formatted_account: str | None = None
    refreshed: RefreshDetails | None = None
    meta: AccountMeta | None = None
    attributes: tuple[AccountAttribute, ...] | None = None  # None when Akahu omits the key

    @property
    def is_active(self) -> bool:
        return self.status is AccountStatus.ACTIVE

    def has_attribute(self, attribute: AccountAttribute) -> bool:
        return attribute in (self.attributes or ())


@dataclass(frozen=True)
class CategoryGroup:
    """Personal finance grouping of an NZFCC category"""

    id: str
    name: str  # raw name as sent by Akahu
    code: PersonalFinanceGroup


@dataclass(frozen=True)
class Category:
    """
    NZFCC category assigned by Akahu enrichment.

    `code` is NzfccCode.UNKNOWN when `name` is outside the known taxonomy; the
    raw `name` is always preserved so nothing is lost on re-encoding.
    """

    id: str
    name: str
    code: NzfccCode
    group: CategoryGroup | None = None
    other_groups: Mapping[str, Any] | None = None

    @property
    def is_unknown(self) -> bool:
        return self.code is NzfccCode.UNKNOWN


@dataclass(frozen=True)
class Merchant:
    id: str  # _merchant...
    name: str
    website: str | None = None


@dataclass(frozen=True)
class Enrichment:
    """Merchant and category data added by Akahu's enrichment engine"""

    category: Category | None = None
    merchant: Merchant | None = None


@dataclass(frozen=True)
class Conversion:
    """Foreign currency details of a transaction"""

    amount: Money
    rate: Decimal


@dataclass(frozen=True)
class TransactionMeta:
    particulars: str | None = None
    code: str | None = None
    reference: str | None = None
    other_account: str | None = None
    conversion: Conversion | None = None
    card_suffix: str | None = None
    logo: str | None = None


def _check_reported_currency(reported: str | None, amount: Money) -> None:
    if reported is not None and reported != amount.currency:
        raise ValueError(f"Reported currency {reported} does not match amount in {amount.currency}")


@dataclass(frozen=True)
class Transaction:
    """
    Settled transaction.

    `account_id` references an Account by id only; accounts and transactions
    have independent lifecycles. `enrichment` is None when Akahu has not
    enriched the transaction (or the app lacks the permission to see it).
    """

    id: str  # trans_...
    account_id: str
    connection_id: str
    date: datetime
    description: str
    amount: Money
    kind: TransactionKind
    created_at: datetime | None = None
    updated_at: datetime | None = None
    balance: Money | None = None
    enrichment: Enrichment | None = None
    meta: TransactionMeta | None = None
    user_id: str | None = None  # _user
    reported_currency: str | None = None  # explicit `currency` key, when sent

    def __post_init__(self) -> None:
        _check_reported_currency(self.reported_currency, self.amount)


@dataclass(frozen=True)
class PendingTransaction:
    """Not yet settled; has no id, is never enriched and may still change"""

    account_id: str
    connection_id: str
    date: datetime
    updated_at: datetime
    description: str
    amount: Money
    kind: TransactionKind
    user_id: str | None = None
    reported_currency: str | None = None

    def __post_init__(self) -> None:
        _check_reported_currency(self.reported_currency, self.amount)


@dataclass(frozen=True)
class User:
    """Profile of the user who authorised the app"""

    id: str  # user_...
    created_at: datetime
    first_name: str | None = None
    last_name: str | None = None
    preferred_name: str | None = None
    email: str | None = None  # needs the AKAHU scope
    access_granted_at: datetime | None = None


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a cursor-paginated listing"""

    items: tuple[T, ...]
    next_cursor: str | None = None

    @property
    def has_more(self) -> bool:
        return self.next_cursor is not None
