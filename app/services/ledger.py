# File: app/services/ledger.py
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import StorageError
from app.models.user import User
from app.models.xp_transaction import XpReason, XpTransaction

logger = logging.getLogger(__name__)


class UserScoreLedger:
    """XP balances per user.

    Every change is first recorded as an XpTransaction and then applied with a
    single `UPDATE ... SET xp_points = xp_points + delta`, so two sessions
    crediting the same user never lose an increment. Transactions that were
    recorded but could not be applied stay pending until `reconcile` runs.
    """

    def __init__(self, db: Session):
        self.db = db

    def balance(self, user_id: int) -> Optional[int]:
        return self.db.query(User.xp_points).filter(User.id == user_id).scalar()

    def record_pending(
        self,
        user_id: int,
        delta: int,
        reason: XpReason = XpReason.adjustment,
        issue_id: Optional[int] = None,
    ) -> XpTransaction:
        txn = XpTransaction(user_id=user_id, issue_id=issue_id, delta=delta, reason=reason.value)
        self.db.add(txn)
        return txn

    def apply_pending(self, txn: XpTransaction) -> Optional[int]:
        """Apply one pending transaction; a no-op if any session already applied it.

        The row is claimed (`applied_at` set where still NULL) and the balance
        incremented in the same commit, so only the session that wins the claim
        credits the user.
        """
        txn_id, user_id, delta = txn.id, txn.user_id, txn.delta
        try:
            claimed = self.db.execute(
                update(XpTransaction)
                .where(XpTransaction.id == txn_id, XpTransaction.applied_at.is_(None))
                .values(applied_at=datetime.now(timezone.utc))
                .execution_options(synchronize_session=False)
            )
            if claimed.rowcount == 0:
                self.db.rollback()
                return self.balance(user_id)
            result = self.db.execute(
                update(User)
                .where(User.id == user_id)
                .values(xp_points=User.xp_points + delta)
                .execution_options(synchronize_session=False)
            )
            # a credit for a deleted user stays claimed so the queue drains
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("Could not update XP balance") from e
        if result.rowcount == 0:
            logger.warning(f"XP transaction {txn_id} targets missing user {user_id}; dropped")
            return None
        return self.balance(user_id)

    def apply_delta(
        self,
        user_id: int,
        delta: int,
        reason: XpReason = XpReason.adjustment,
        issue_id: Optional[int] = None,
    ) -> Optional[int]:
        """Add `delta` to a user's balance and return the new balance (None if no such user)."""
        if self.db.get(User, user_id) is None:
            return None
        txn = self.record_pending(user_id, delta, reason, issue_id)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("Could not update XP balance") from e
        return self.apply_pending(txn)

    def pending(self) -> list[XpTransaction]:
        return (
            self.db.query(XpTransaction)
            .filter(XpTransaction.applied_at.is_(None))
            .order_by(XpTransaction.id.asc())
            .all()
        )

    def reconcile(self) -> int:
        applied = 0
        for txn in self.pending():
            txn_id, user_id = txn.id, txn.user_id
            try:
                if self.apply_pending(txn) is not None:
                    applied += 1
            except StorageError as e:
                logger.error(f"Reconciliation failed for XP transaction {txn_id} (user {user_id}): {e}", exc_info=True)
        if applied:
            logger.info(f"Reconciled {applied} pending XP transaction(s)")
        return applied
