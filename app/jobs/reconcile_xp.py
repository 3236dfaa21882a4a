# File: app/jobs/reconcile_xp.py
# Project: community-reports-backend
#
# Applies XP credits that were recorded with a report but never reached the
# user's balance. Safe to run repeatedly (cron, or `reconcile-xp` by hand).

import logging

from app.core.config import settings
from app.db.session import SessionLocal
from app.services.ledger import UserScoreLedger

logger = logging.getLogger(__name__)

def run() -> int:
    db = SessionLocal()
    try:
        ledger = UserScoreLedger(db)
        pending = len(ledger.pending())
        applied = ledger.reconcile()
        logger.info(f"XP reconciliation: {applied}/{pending} pending transaction(s) applied")
        return applied
    finally:
        db.close()

def main():
    logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run()

if __name__ == "__main__":
    main()
