"""Contact inbox consolidation routes."""

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from inbox_identity.config import get_settings
from inbox_identity.db.dependencies import get_db
from inbox_identity.schemas.common import ApiResponse
from inbox_identity.schemas.consolidation import ConsolidationRequest, ConsolidationResult
from inbox_identity.services.consolidation import consolidate_contact_inboxes
from inbox_identity.services.lookups import get_inbox


router = APIRouter(prefix="/inboxes/{inbox_id}")


@router.post("/contact-inboxes/consolidate", response_model=ApiResponse[ConsolidationResult])
def consolidate(
    payload: ConsolidationRequest,
    inbox_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
) -> ApiResponse[ConsolidationResult]:
    """Reconcile the phone-keyed and LID-keyed identity records of one contact."""

    inbox = get_inbox(db, inbox_id)
    if inbox is None:
        raise HTTPException(status_code=404, detail="Inbox not found")
    if not get_settings().enable_identity_consolidation:
        return ApiResponse(data=ConsolidationResult(inbox_id=inbox_id, outcome="disabled", applied=False))

    try:
        outcome = consolidate_contact_inboxes(
            db,
            inbox,
            phone=payload.phone,
            lid=payload.lid,
            identifier=payload.identifier,
        )
    except IntegrityError as exc:
        raise HTTPException(
            status_code=409,
            detail="Identity records changed during consolidation; retry the request.",
        ) from exc
    return ApiResponse(
        data=ConsolidationResult(inbox_id=inbox_id, outcome=outcome.value, applied=outcome.applied)
    )
