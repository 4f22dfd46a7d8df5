"""Transparent identity record view routes."""

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.orm import Session

from inbox_identity.db.dependencies import get_db
from inbox_identity.schemas.common import ApiResponse
from inbox_identity.schemas.contact_inbox import ContactInboxRead
from inbox_identity.schemas.identity_merge_audit import IdentityMergeAuditRead
from inbox_identity.services.database import list_contact_inboxes, list_identity_merge_audits
from inbox_identity.services.lookups import get_inbox


router = APIRouter(prefix="/inboxes/{inbox_id}")


@router.get("/contact-inboxes", response_model=ApiResponse[list[ContactInboxRead]])
def get_contact_inboxes(
    inbox_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
) -> ApiResponse[list[ContactInboxRead]]:
    """List identity records for an inbox."""

    if get_inbox(db, inbox_id) is None:
        raise HTTPException(status_code=404, detail="Inbox not found")
    return ApiResponse(data=list_contact_inboxes(db, inbox_id))


@router.get("/identity-merges", response_model=ApiResponse[list[IdentityMergeAuditRead]])
def get_identity_merges(
    inbox_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
) -> ApiResponse[list[IdentityMergeAuditRead]]:
    """List identity merge audit records for an inbox."""

    return ApiResponse(
        data=[
            IdentityMergeAuditRead.model_validate(record)
            for record in list_identity_merge_audits(db, inbox_id)
        ]
    )
