import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pymongo import ReturnDocument
from pymongo.database import Database

from database import day_filter, get_db, get_documents, serialize, serialize_many
from schemas import OrderCreate, OrderUpdate
from services import create_order

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.get("")
def list_orders(
    customerId: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    bookingId: Optional[str] = Query(None),
    date: Optional[str] = Query(None, description="YYYY-MM-DD, matched against orderDate"),
    db: Database = Depends(get_db),
):
    filt = {}
    if customerId:
        filt["customerId"] = customerId
    if status:
        filt["status"] = status
    if bookingId:
        filt["bookingId"] = bookingId
    if date:
        try:
            filt["orderDate"] = day_filter(date)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD.")

    orders = get_documents(db, "orders", filt, sort=[("orderDate", -1)])
    total_revenue = round(sum(o.get("totalAmount", 0) for o in orders), 2)
    return {
        "success": True,
        "count": len(orders),
        "totalRevenue": total_revenue,
        "data": serialize_many(orders),
    }


@router.post("")
def post_order(body: OrderCreate, db: Database = Depends(get_db)):
    order = create_order(db, body.model_dump())
    return {"success": True, "message": "Order created successfully", "data": serialize(order)}


@router.get("/{order_id}")
def get_order(order_id: str, db: Database = Depends(get_db)):
    order = db["orders"].find_one({"orderId": order_id})
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return {"success": True, "data": serialize(order)}


@router.patch("/{order_id}")
def patch_order(order_id: str, body: OrderUpdate, db: Database = Depends(get_db)):
    update = {**body.model_dump(exclude_unset=True), "updatedAt": datetime.utcnow()}
    order = db["orders"].find_one_and_update(
        {"orderId": order_id},
        {"$set": update},
        return_document=ReturnDocument.AFTER,
    )
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    logger.info("Updated order %s", order_id)
    return {"success": True, "message": "Order updated successfully", "data": serialize(order)}


@router.delete("/{order_id}")
def delete_order(order_id: str, db: Database = Depends(get_db)):
    result = db["orders"].delete_one({"orderId": order_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Order not found")
    logger.info("Deleted order %s", order_id)
    return {"success": True, "message": "Order deleted successfully"}
