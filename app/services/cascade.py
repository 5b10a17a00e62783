"""
Ordered deletion steps for the two cascading deletes.

Each step names a child model and what happens to its rows that point at the
case being removed: ``DELETE`` removes them, ``DETACH`` nulls their ``case_id``.
Steps run top to bottom and the case row itself goes last, so every foreign
key is satisfied at each statement. The tables are kept explicit rather than
derived from the foreign-key graph.
"""
import logging
from typing import Dict, Iterable, Tuple

from sqlalchemy.orm import Session

from app.models import Case, CaseSession, CaseUser, Document, Invoice, Task

logger = logging.getLogger(__name__)

DELETE = "delete"
DETACH = "detach"

# Direct case deletion: invoices survive, decoupled from the case.
CASE_DELETE_STEPS: Tuple[Tuple[type, str], ...] = (
    (CaseUser, DELETE),
    (CaseSession, DELETE),
    (Document, DELETE),
    (Invoice, DETACH),
    (Task, DELETE),
)

# Cases removed as part of a client deletion: invoices are hard-deleted.
# TODO: product decision pending on whether this should detach like CASE_DELETE_STEPS.
CLIENT_CASE_DELETE_STEPS: Tuple[Tuple[type, str], ...] = (
    (CaseSession, DELETE),
    (Document, DELETE),
    (Invoice, DELETE),
    (Task, DELETE),
    (CaseUser, DELETE),
)


def remove_case(db: Session, case_id: int, steps: Iterable[Tuple[type, str]]) -> Dict[str, int]:
    """Apply ``steps`` to one case, then delete the case row.

    Does not commit; the caller owns the transaction. Returns affected row
    counts keyed by table name.
    """
    affected = {}
    for model, action in steps:
        query = db.query(model).filter(model.case_id == case_id)
        if action == DETACH:
            count = query.update({model.case_id: None}, synchronize_session=False)
        elif action == DELETE:
            count = query.delete(synchronize_session=False)
        else:
            raise ValueError(f"Unknown cascade action: {action}")
        affected[model.__tablename__] = count

    affected[Case.__tablename__] = db.query(Case).filter(Case.id == case_id).delete(synchronize_session=False)
    logger.debug("Removed case %s: %s", case_id, affected)
    return affected
