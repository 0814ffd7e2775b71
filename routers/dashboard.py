from datetime import datetime, timedelta

from fastapi import APIRouter, Depends
from pymongo.database import Database

from database import COLLECTIONS, get_db, serialize_many

router = APIRouter(tags=["Dashboard"])


def _today_range():
    today = datetime.utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
    return {"$gte": today, "$lt": today + timedelta(days=1)}


def dashboard_snapshot(db: Database) -> dict:
    today = _today_range()

    total_customers = db["customers"].count_documents({})
    total_rooms = db["rooms"].count_documents({})
    available_rooms = db["rooms"].count_documents({"available": True})
    today_bookings = db["bookings"].count_documents({"bookingAt": today})
    active_bookings = db["bookings"].count_documents({"status": "Active"})
    today_orders = db["orders"].count_documents({"orderDate": today})
    revenue = list(db["orders"].aggregate([
        {"$match": {"orderDate": today}},
        {"$group": {"_id": None, "total": {"$sum": "$totalAmount"}}},
    ]))

    popular_products = list(db["orders"].aggregate([
        {"$unwind": "$orderDetails"},
        {"$group": {
            "_id": "$orderDetails.productId",
            "productName": {"$first": "$orderDetails.productName"},
            "totalQuantity": {"$sum": "$orderDetails.quantity"},
            "totalRevenue": {"$sum": "$orderDetails.subtotal"},
        }},
        {"$sort": {"totalQuantity": -1}},
        {"$limit": 5},
    ]))

    room_utilization = list(db["bookings"].aggregate([
        {"$match": {"bookingAt": today}},
        {"$group": {
            "_id": "$roomId",
            "bookingCount": {"$sum": 1},
            "totalHours": {"$sum": "$duration"},
        }},
        {"$sort": {"totalHours": -1}},
    ]))

    # Bookings whose customer or room is gone drop out of the join
    recent_bookings = list(db["bookings"].aggregate([
        {"$sort": {"bookingAt": -1}},
        {"$limit": 5},
        {"$lookup": {"from": "customers", "localField": "customerId", "foreignField": "customerId", "as": "customer"}},
        {"$unwind": "$customer"},
        {"$lookup": {"from": "rooms", "localField": "roomId", "foreignField": "roomId", "as": "room"}},
        {"$unwind": "$room"},
        {"$project": {
            "_id": 0,
            "bookingId": 1,
            "customerName": "$customer.name",
            "roomName": "$room.name",
            "startAt": "$timeSlot.startAt",
            "endAt": "$timeSlot.endAt",
            "status": 1,
        }},
    ]))

    rooms = serialize_many(db["rooms"].find().sort("roomId", 1))

    occupancy_rate = (
        f"{(total_rooms - available_rooms) / total_rooms * 100:.1f}" if total_rooms else 0
    )

    return {
        "summary": {
            "totalCustomers": total_customers,
            "totalRooms": total_rooms,
            "availableRooms": available_rooms,
            "occupancyRate": occupancy_rate,
        },
        "today": {
            "bookings": today_bookings,
            "activeBookings": active_bookings,
            "orders": today_orders,
            "revenue": revenue[0]["total"] if revenue else 0,
        },
        "popularProducts": popular_products,
        "roomUtilization": room_utilization,
        "recentBookings": recent_bookings,
        "rooms": rooms,
    }


@router.get("/dashboard")
def dashboard(db: Database = Depends(get_db)):
    return {
        "success": True,
        "dashboard": dashboard_snapshot(db),
        "timestamp": datetime.utcnow().isoformat(),
    }


@router.get("/all-data")
def all_data(db: Database = Depends(get_db)):
    data = {name: serialize_many(db[name].find({})) for name in COLLECTIONS}
    stats = {
        "totalCustomers": len(data["customers"]),
        "totalRooms": len(data["rooms"]),
        "totalBookings": len(data["bookings"]),
        "totalProducts": len(data["products"]),
        "totalOrders": len(data["orders"]),
        "totalMemberships": len(data["memberships"]),
        "availableRooms": sum(1 for r in data["rooms"] if r.get("available")),
        "activeBookings": sum(1 for b in data["bookings"] if b.get("status") == "Active"),
    }
    return {
        "success": True,
        "data": data,
        "stats": stats,
        "timestamp": datetime.utcnow().isoformat(),
    }
