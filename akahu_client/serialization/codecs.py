"""
Per-entity codec tables for the Akahu account, transaction and user models.

Each table lists every wire key the client understands, with its rename and
absence semantics spelled out row by row.
"""

from typing import Any, Mapping

from akahu_client.domain.categories import NzfccCode, PersonalFinanceGroup
from akahu_client.domain.currencies import DEFAULT_CURRENCY
from akahu_client.domain.exceptions import DecodeError
from akahu_client.domain.models import (
    Account,
    AccountAttribute,
    AccountKind,
    AccountMeta,
    AccountStatus,
    Balance,
    Category,
    CategoryGroup,
    Connection,
    Conversion,
    Enrichment,
    InterestDetails,
    LoanDetails,
    Merchant,
    Page,
    PaymentDetails,
    PendingTransaction,
    RefreshDetails,
    RepaymentDetails,
    Transaction,
    TransactionKind,
    TransactionMeta,
    User,
)
from akahu_client.domain.money import Money
from akahu_client.serialization.fields import (
    BOOL,
    CURRENCY,
    DECIMAL,
    RAW,
    ROOT,
    STRING,
    TIMESTAMP,
    Codec,
    EnumCodec,
    ListCodec,
    ObjectCodec,
    freeze,
    join_path,
    optional,
    optional_list,
    required,
    thaw,
)


def _money(amount, currency: str) -> Money | None:
    return None if amount is None else Money(amount, currency)


# -- Account -----------------------------------------------------------------

REFRESH_DETAILS = ObjectCodec(
    RefreshDetails,
    [
        optional("balance", "balance", TIMESTAMP),
        optional("meta", "meta", TIMESTAMP),
        optional("transactions", "transactions", TIMESTAMP),
        optional("party", "party", TIMESTAMP),
    ],
)

PAYMENT_DETAILS = ObjectCodec(
    PaymentDetails,
    [
        required("account_holder", "account_holder", STRING),
        required("account_number", "account_number", STRING),
        optional("particulars", "particulars", STRING),
        optional("code", "code", STRING),
        optional("reference", "reference", STRING),
        optional("minimum_amount", "minimum_amount", DECIMAL),
    ],
)

INTEREST_DETAILS = ObjectCodec(
    InterestDetails,
    [
        required("rate", "rate", DECIMAL),
        required("type", "type", STRING),
        optional("expires_at", "expires_at", TIMESTAMP),
    ],
)

REPAYMENT_DETAILS = ObjectCodec(
    RepaymentDetails,
    [
        required("frequency", "frequency", STRING),
        required("next_amount", "next_amount", DECIMAL),
        optional("next_date", "next_date", TIMESTAMP),
    ],
)

LOAN_DETAILS = ObjectCodec(
    LoanDetails,
    [
        required("purpose", "purpose", STRING),
        required("type", "type", STRING),
        optional("interest", "interest", INTEREST_DETAILS),
        optional("is_interest_only", "is_interest_only", BOOL),
        optional("interest_only_expires_at", "interest_only_expires_at", TIMESTAMP),
        optional("term", "term", STRING),
        optional("matures_at", "matures_at", TIMESTAMP),
        optional("initial_principal", "initial_principal", DECIMAL),
        optional("repayment", "repayment", REPAYMENT_DETAILS),
    ],
)

ACCOUNT_META = ObjectCodec(
    AccountMeta,
    [
        optional("holder", "holder", STRING),
        optional("has_unlisted_holders", "has_unlisted_holders", BOOL),
        optional("payment_details", "payment_details", PAYMENT_DETAILS),
        optional("loan_details", "loan_details", LOAN_DETAILS),
        optional("breakdown", "breakdown", RAW),
        optional("portfolio", "portfolio", RAW),
    ],
)


def _assemble_balance(attrs: dict[str, Any]) -> Balance:
    currency = attrs["currency"]
    return Balance(
        current=Money(attrs["current"], currency),
        available=_money(attrs["available"], currency),
        limit=_money(attrs["limit"], currency),
        overdrawn=attrs["overdrawn"],
    )


def _disassemble_balance(balance: Balance) -> dict[str, Any]:
    return {
        "current": balance.current.amount,
        "available": balance.available.amount if balance.available else None,
        "limit": balance.limit.amount if balance.limit else None,
        "overdrawn": balance.overdrawn,
        "currency": balance.currency,
    }


BALANCE = ObjectCodec(
    Balance,
    [
        required("current", "current", DECIMAL),
        optional("available", "available", DECIMAL),
        optional("limit", "limit", DECIMAL),
        optional("overdrawn", "overdrawn", BOOL),
        required("currency", "currency", CURRENCY),
    ],
    assemble=_assemble_balance,
    disassemble=_disassemble_balance,
)

CONNECTION = ObjectCodec(
    Connection,
    [
        required("id", "_id", STRING),
        required("name", "name", STRING),
        optional("logo", "logo", STRING),
    ],
)

ACCOUNT = ObjectCodec(
    Account,
    [
        required("id", "_id", STRING),
        optional("authorisation", "_authorisation", STRING),
        optional("credentials", "_credentials", STRING),
        optional("migrated", "_migrated", STRING),
        optional("connection", "connection", CONNECTION),
        required("name", "name", STRING),
        required("status", "status", EnumCodec(AccountStatus)),
        required("kind", "type", EnumCodec(AccountKind)),
        required("balance", "balance", BALANCE),
        optional("formatted_account", "formatted_account", STRING),
        optional("refreshed", "refreshed", REFRESH_DETAILS),
        optional("meta", "meta", ACCOUNT_META),
        optional_list("attributes", "attributes", EnumCodec(AccountAttribute)),
    ],
)


# -- Enrichment ----------------------------------------------------------------

CATEGORY_GROUP = ObjectCodec(
    CategoryGroup,
    [
        required("id", "_id", STRING),
        required("name", "name", STRING),
    ],
    assemble=lambda attrs: CategoryGroup(
        id=attrs["id"], name=attrs["name"], code=PersonalFinanceGroup.parse(attrs["name"])
    ),
)


class CategoryGroupsCodec:
    """
    `groups` object of a category: the personal_finance grouping is decoded,
    any app-specific groupings are kept verbatim.
    """

    personal_finance_key = "personal_finance"

    def decode(self, value: Any, path: str) -> tuple[CategoryGroup | None, Mapping[str, Any] | None]:
        if not isinstance(value, Mapping):
            raise DecodeError(path, f"expected an object, got {type(value).__name__}")
        raw_group = value.get(self.personal_finance_key)
        group = None
        if raw_group is not None:
            group = CATEGORY_GROUP.decode(raw_group, join_path(path, self.personal_finance_key))
        others = {key: item for key, item in value.items() if key != self.personal_finance_key}
        return group, (freeze(others) if others else None)

    def encode(self, value: tuple[CategoryGroup | None, Mapping[str, Any] | None]) -> dict[str, Any]:
        group, others = value
        out = thaw(others) if others else {}
        if group is not None:
            out[self.personal_finance_key] = CATEGORY_GROUP.encode(group)
        return out


def _assemble_category(attrs: dict[str, Any]) -> Category:
    group, others = attrs["groups"] or (None, None)
    return Category(
        id=attrs["id"],
        name=attrs["name"],
        code=NzfccCode.parse(attrs["name"]),
        group=group,
        other_groups=others,
    )


def _disassemble_category(category: Category) -> dict[str, Any]:
    has_groups = category.group is not None or category.other_groups
    return {
        "id": category.id,
        "name": category.name,
        "groups": (category.group, category.other_groups) if has_groups else None,
    }


CATEGORY = ObjectCodec(
    Category,
    [
        required("id", "_id", STRING),
        required("name", "name", STRING),
        optional("groups", "groups", CategoryGroupsCodec()),
    ],
    assemble=_assemble_category,
    disassemble=_disassemble_category,
)

MERCHANT = ObjectCodec(
    Merchant,
    [
        required("id", "_id", STRING),
        required("name", "name", STRING),
        optional("website", "website", STRING),
    ],
)


# -- Transaction ---------------------------------------------------------------

CONVERSION = ObjectCodec(
    Conversion,
    [
        required("amount", "amount", DECIMAL),
        required("currency", "currency", CURRENCY),
        required("rate", "rate", DECIMAL),
    ],
    assemble=lambda attrs: Conversion(
        amount=Money(attrs["amount"], attrs["currency"]), rate=attrs["rate"]
    ),
    disassemble=lambda conversion: {
        "amount": conversion.amount.amount,
        "currency": conversion.amount.currency,
        "rate": conversion.rate,
    },
)

TRANSACTION_META = ObjectCodec(
    TransactionMeta,
    [
        optional("particulars", "particulars", STRING),
        optional("code", "code", STRING),
        optional("reference", "reference", STRING),
        optional("other_account", "other_account", STRING),
        optional("conversion", "conversion", CONVERSION),
        optional("card_suffix", "card_suffix", STRING),
        optional("logo", "logo", STRING),
    ],
)


def _assemble_transaction(attrs: dict[str, Any]) -> Transaction:
    # Akahu reports amounts in the account's currency without naming it;
    # an explicit `currency` key wins when present.
    reported = attrs["currency"]
    currency = reported or DEFAULT_CURRENCY
    category, merchant = attrs["category"], attrs["merchant"]
    enrichment = None
    if category is not None or merchant is not None:
        enrichment = Enrichment(category=category, merchant=merchant)
    return Transaction(
        id=attrs["id"],
        account_id=attrs["account_id"],
        connection_id=attrs["connection_id"],
        date=attrs["date"],
        description=attrs["description"],
        amount=Money(attrs["amount"], currency),
        kind=attrs["kind"],
        created_at=attrs["created_at"],
        updated_at=attrs["updated_at"],
        balance=_money(attrs["balance"], currency),
        enrichment=enrichment,
        meta=attrs["meta"],
        user_id=attrs["user_id"],
        reported_currency=reported,
    )


def _disassemble_transaction(transaction: Transaction) -> dict[str, Any]:
    enrichment = transaction.enrichment or Enrichment()
    return {
        "id": transaction.id,
        "account_id": transaction.account_id,
        "connection_id": transaction.connection_id,
        "created_at": transaction.created_at,
        "updated_at": transaction.updated_at,
        "date": transaction.date,
        "description": transaction.description,
        "amount": transaction.amount.amount,
        "balance": transaction.balance.amount if transaction.balance else None,
        "currency": transaction.reported_currency,
        "kind": transaction.kind,
        "category": enrichment.category,
        "merchant": enrichment.merchant,
        "meta": transaction.meta,
        "user_id": transaction.user_id,
    }


TRANSACTION = ObjectCodec(
    Transaction,
    [
        required("id", "_id", STRING),
        required("account_id", "_account", STRING),
        required("connection_id", "_connection", STRING),
        optional("user_id", "_user", STRING),
        optional("created_at", "created_at", TIMESTAMP),
        optional("updated_at", "updated_at", TIMESTAMP),
        required("date", "date", TIMESTAMP),
        required("description", "description", STRING),
        required("amount", "amount", DECIMAL),
        optional("balance", "balance", DECIMAL),
        optional("currency", "currency", CURRENCY),
        required("kind", "type", EnumCodec(TransactionKind)),
        optional("category", "category", CATEGORY),
        optional("merchant", "merchant", MERCHANT),
        optional("meta", "meta", TRANSACTION_META),
    ],
    assemble=_assemble_transaction,
    disassemble=_disassemble_transaction,
)

PENDING_TRANSACTION = ObjectCodec(
    PendingTransaction,
    [
        required("account_id", "_account", STRING),
        required("connection_id", "_connection", STRING),
        optional("user_id", "_user", STRING),
        required("date", "date", TIMESTAMP),
        required("updated_at", "updated_at", TIMESTAMP),
        required("description", "description", STRING),
        required("amount", "amount", DECIMAL),
        optional("currency", "currency", CURRENCY),
        required("kind", "type", EnumCodec(TransactionKind)),
    ],
    assemble=lambda attrs: PendingTransaction(
        account_id=attrs["account_id"],
        connection_id=attrs["connection_id"],
        date=attrs["date"],
        updated_at=attrs["updated_at"],
        description=attrs["description"],
        amount=Money(attrs["amount"], attrs["currency"] or DEFAULT_CURRENCY),
        kind=attrs["kind"],
        user_id=attrs["user_id"],
        reported_currency=attrs["currency"],
    ),
    disassemble=lambda pending: {
        "account_id": pending.account_id,
        "connection_id": pending.connection_id,
        "user_id": pending.user_id,
        "date": pending.date,
        "updated_at": pending.updated_at,
        "description": pending.description,
        "amount": pending.amount.amount,
        "currency": pending.reported_currency,
        "kind": pending.kind,
    },
)


# -- User ------------------------------------------------------------------------

USER = ObjectCodec(
    User,
    [
        required("id", "_id", STRING),
        required("created_at", "created_at", TIMESTAMP),
        optional("first_name", "first_name", STRING),
        optional("last_name", "last_name", STRING),
        optional("preferred_name", "preferred_name", STRING),
        optional("email", "email", STRING),
        optional("access_granted_at", "access_granted_at", TIMESTAMP),
    ],
)


# -- Response envelopes ------------------------------------------------------------

def _envelope(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise DecodeError(ROOT, f"expected a response object, got {type(payload).__name__}")
    return payload


def _field(envelope: Mapping[str, Any], key: str) -> Any:
    value = envelope.get(key)
    if value is None:
        raise DecodeError(key, "required field is missing")
    return value


def decode_items(payload: Any, codec: Codec[Any]) -> tuple[Any, ...]:
    """`{"success": true, "items": [...]}`"""
    return ListCodec(codec).decode(_field(_envelope(payload), "items"), "items")


def decode_item(payload: Any, codec: Codec[Any]) -> Any:
    """`{"success": true, "item": {...}}`"""
    return codec.decode(_field(_envelope(payload), "item"), "item")


def decode_page(payload: Any, codec: Codec[Any]) -> Page[Any]:
    """`{"success": true, "items": [...], "cursor": {"next": ...}}`"""
    envelope = _envelope(payload)
    items = decode_items(envelope, codec)
    cursor = envelope.get("cursor")
    next_cursor = None
    if cursor is not None:
        if not isinstance(cursor, Mapping):
            raise DecodeError("cursor", f"expected an object, got {type(cursor).__name__}")
        if cursor.get("next") is not None:
            next_cursor = STRING.decode(cursor["next"], "cursor.next")
    return Page(items=items, next_cursor=next_cursor)


# -- Public entry points -------------------------------------------------------------

def decode_account(data: Any) -> Account:
    return ACCOUNT.decode(data, ROOT)


def encode_account(account: Account) -> dict[str, Any]:
    return ACCOUNT.encode(account)


def decode_connection(data: Any) -> Connection:
    return CONNECTION.decode(data, ROOT)


def encode_connection(connection: Connection) -> dict[str, Any]:
    return CONNECTION.encode(connection)


def decode_transaction(data: Any) -> Transaction:
    return TRANSACTION.decode(data, ROOT)


def encode_transaction(transaction: Transaction) -> dict[str, Any]:
    return TRANSACTION.encode(transaction)


def decode_pending_transaction(data: Any) -> PendingTransaction:
    return PENDING_TRANSACTION.decode(data, ROOT)


def encode_pending_transaction(pending: PendingTransaction) -> dict[str, Any]:
    return PENDING_TRANSACTION.encode(pending)


def decode_user(data: Any) -> User:
    return USER.decode(data, ROOT)


def encode_user(user: User) -> dict[str, Any]:
    return USER.encode(user)
