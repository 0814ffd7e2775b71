import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from pymongo import ReturnDocument
from pymongo.database import Database

from database import contains_filter, create_document, get_db, get_documents, next_id, serialize, serialize_many
from schemas import CustomerCreate, CustomerReplace, CustomerUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/customers", tags=["Customers"])

SEARCH_FIELDS = ["name", "email", "phone"]


@router.get("")
def list_customers(
    search: str = Query(""),
    sort: str = Query("createdAt"),
    order: int = Query(-1, description="1 ascending, -1 descending"),
    limit: int = Query(0, ge=0, description="0 means no limit"),
    db: Database = Depends(get_db),
):
    if order not in (1, -1):
        raise HTTPException(status_code=400, detail="order must be 1 or -1")
    filt = contains_filter(search, SEARCH_FIELDS) if search else {}
    customers = get_documents(db, "customers", filt, sort=[(sort, order)], limit=limit)
    return {"success": True, "count": len(customers), "data": serialize_many(customers)}


@router.post("")
def post_customer(body: CustomerCreate, db: Database = Depends(get_db)):
    customer = {"customerId": next_id(db, "customers", "customerId", "C"), **body.model_dump()}
    customer = create_document(db, "customers", customer)
    logger.info("Created customer %s", customer["customerId"])
    return {"success": True, "message": "Customer created successfully", "data": serialize(customer)}


@router.get("/{customer_id}")
def get_customer(customer_id: str, db: Database = Depends(get_db)):
    customer = db["customers"].find_one({"customerId": customer_id})
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return {"success": True, "data": serialize(customer)}


@router.patch("/{customer_id}")
def patch_customer(customer_id: str, body: CustomerUpdate, db: Database = Depends(get_db)):
    update = {**body.model_dump(exclude_unset=True), "updatedAt": datetime.utcnow()}
    customer = db["customers"].find_one_and_update(
        {"customerId": customer_id},
        {"$set": update},
        return_document=ReturnDocument.AFTER,
    )
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    logger.info("Updated customer %s", customer_id)
    return {"success": True, "message": "Customer updated successfully", "data": serialize(customer)}


@router.put("/{customer_id}")
def put_customer(customer_id: str, body: CustomerReplace, db: Database = Depends(get_db)):
    if body.customerId != customer_id:
        raise HTTPException(status_code=400, detail="Customer ID in body does not match URL")

    existing = db["customers"].find_one({"customerId": customer_id})
    if not existing:
        raise HTTPException(status_code=404, detail="Customer not found")

    replacement = {
        **body.model_dump(),
        "createdAt": existing.get("createdAt") or datetime.utcnow(),
        "updatedAt": datetime.utcnow(),
    }
    result = db["customers"].replace_one({"customerId": customer_id}, replacement)
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Customer not found")

    logger.info("Replaced customer %s", customer_id)
    replacement["_id"] = existing["_id"]
    return {"success": True, "message": "Customer updated successfully", "data": serialize(replacement)}


@router.delete("/{customer_id}")
def delete_customer(customer_id: str, db: Database = Depends(get_db)):
    result = db["customers"].delete_one({"customerId": customer_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Customer not found")
    logger.info("Deleted customer %s", customer_id)
    return {"success": True, "message": "Customer deleted successfully"}
