from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pymongo.database import Database

from database import day_filter, get_db, get_documents, serialize, serialize_many
from schemas import BookingCreate, BookingUpdate
from services import InvalidTimeSlot, NotFound, create_booking, delete_booking, update_booking

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.get("")
def list_bookings(
    status: Optional[str] = Query(None),
    customerId: Optional[str] = Query(None),
    roomId: Optional[str] = Query(None),
    date: Optional[str] = Query(None, description="YYYY-MM-DD, matched against bookingAt"),
    db: Database = Depends(get_db),
):
    filt = {}
    if status:
        filt["status"] = status
    if customerId:
        filt["customerId"] = customerId
    if roomId:
        filt["roomId"] = roomId
    if date:
        try:
            filt["bookingAt"] = day_filter(date)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD.")

    bookings = get_documents(db, "bookings", filt, sort=[("bookingId", 1)])
    return {"success": True, "count": len(bookings), "data": serialize_many(bookings)}


@router.post("")
def post_booking(body: BookingCreate, db: Database = Depends(get_db)):
    try:
        booking = create_booking(db, body.model_dump())
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidTimeSlot as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "message": "Booking created successfully", "data": serialize(booking)}


@router.get("/{booking_id}")
def get_booking(booking_id: str, db: Database = Depends(get_db)):
    booking = db["bookings"].find_one({"bookingId": booking_id})
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return {"success": True, "data": serialize(booking)}


@router.put("/{booking_id}")
def put_booking(booking_id: str, body: BookingUpdate, db: Database = Depends(get_db)):
    try:
        booking = update_booking(db, booking_id, body.model_dump(exclude_unset=True))
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidTimeSlot as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "success": True,
        "message": f"Booking {booking_id} updated successfully",
        "data": serialize(booking),
    }


@router.delete("/{booking_id}")
def remove_booking(booking_id: str, db: Database = Depends(get_db)):
    try:
        delete_booking(db, booking_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"success": True, "message": f"Booking {booking_id} deleted successfully"}
