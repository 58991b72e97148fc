"""LedgerPaymentRail — balance-table value transfer.

Each movement is an atomic UPDATE ... RETURNING on balances plus one
payment_ledger row. A collect that updates 0 rows means the buyer's balance
is short, which aborts the purchase.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.enums import PaymentEntryType, PayoutKind
from src.mp_common.errors import PaymentTransferError

_DEBIT_SQL = text("""
    UPDATE balances
    SET available = available - :amount,
        updated_at = NOW()
    WHERE address = :address AND available >= :amount
    RETURNING available
""")

_CREDIT_SQL = text("""
    INSERT INTO balances (address, available)
    VALUES (:address, :amount)
    ON CONFLICT (address) DO UPDATE
        SET available = balances.available + EXCLUDED.available,
            updated_at = NOW()
    RETURNING available
""")

_GET_BALANCE_SQL = text("SELECT available FROM balances WHERE address = :address")

_INSERT_LEDGER_SQL = text("""
    INSERT INTO payment_ledger (address, entry_type, amount, balance_after, reference_id)
    VALUES (:address, :entry_type, :amount, :balance_after, :reference_id)
""")


class LedgerPaymentRail:
    async def collect(
        self, db: AsyncSession, payer: str, amount: int, reference_id: str
    ) -> None:
        if amount == 0:
            return
        row = (await db.execute(_DEBIT_SQL, {"address": payer, "amount": amount})).fetchone()
        if row is None:
            available = (
                await db.execute(_GET_BALANCE_SQL, {"address": payer})
            ).scalar_one_or_none()
            raise PaymentTransferError(
                f"{payer} cannot pay {amount}, available {int(available or 0)}"
            )
        await self._write_ledger(
            db, payer, PaymentEntryType.PURCHASE_PAYMENT, -amount, int(row.available), reference_id
        )

    async def pay(
        self,
        db: AsyncSession,
        payee: str,
        amount: int,
        kind: PayoutKind,
        reference_id: str,
    ) -> None:
        if amount <= 0:
            raise PaymentTransferError(f"refusing non-positive {kind.value} payout {amount}")
        row = (await db.execute(_CREDIT_SQL, {"address": payee, "amount": amount})).fetchone()
        if row is None:
            raise PaymentTransferError(f"credit to {payee} returned no row")
        await self._write_ledger(
            db, payee, PaymentEntryType(kind.value), amount, int(row.available), reference_id
        )

    async def _write_ledger(
        self,
        db: AsyncSession,
        address: str,
        entry_type: PaymentEntryType,
        amount: int,
        balance_after: int,
        reference_id: str,
    ) -> None:
        await db.execute(
            _INSERT_LEDGER_SQL,
            {
                "address": address,
                "entry_type": entry_type.value,
                "amount": amount,
                "balance_after": balance_after,
                "reference_id": reference_id,
            },
        )
