import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pymongo import ReturnDocument
from pymongo.database import Database

from database import get_db, get_documents, serialize, serialize_many
from schemas import MembershipCreate, MembershipUpdate
from services import NotFound, create_membership, delete_membership, membership_discount, to_utc_naive

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/memberships", tags=["Memberships"])


@router.get("")
def list_memberships(
    type: Optional[str] = Query(None),
    active: Optional[str] = Query(None, description='"true" keeps only unexpired memberships'),
    customerId: Optional[str] = Query(None),
    db: Database = Depends(get_db),
):
    filt = {}
    if type:
        filt["type"] = type
    if customerId:
        filt["customerId"] = customerId
    if active == "true":
        filt["expiryDate"] = {"$gte": datetime.utcnow()}

    memberships = get_documents(db, "memberships", filt, sort=[("expiryDate", -1)])
    return {"success": True, "count": len(memberships), "data": serialize_many(memberships)}


@router.post("")
def post_membership(body: MembershipCreate, db: Database = Depends(get_db)):
    membership = create_membership(db, body.model_dump())
    return {"success": True, "message": "Membership created successfully", "data": serialize(membership)}


@router.get("/{membership_id}")
def get_membership(membership_id: str, db: Database = Depends(get_db)):
    membership = db["memberships"].find_one({"membershipId": membership_id})
    if not membership:
        raise HTTPException(status_code=404, detail="Membership not found")
    return {"success": True, "data": serialize(membership)}


@router.patch("/{membership_id}")
def patch_membership(membership_id: str, body: MembershipUpdate, db: Database = Depends(get_db)):
    update = body.model_dump(exclude_unset=True)
    if update.get("type"):
        update["discount"] = membership_discount(update["type"])
    if update.get("expiryDate"):
        update["expiryDate"] = to_utc_naive(update["expiryDate"])
    update["updatedAt"] = datetime.utcnow()

    membership = db["memberships"].find_one_and_update(
        {"membershipId": membership_id},
        {"$set": update},
        return_document=ReturnDocument.AFTER,
    )
    if not membership:
        raise HTTPException(status_code=404, detail="Membership not found")
    logger.info("Updated membership %s", membership_id)
    return {"success": True, "message": "Membership updated successfully", "data": serialize(membership)}


@router.delete("/{membership_id}")
def remove_membership(membership_id: str, db: Database = Depends(get_db)):
    try:
        delete_membership(db, membership_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"success": True, "message": "Membership deleted successfully"}
