# services.py
# Computation & business rules. Routers stay thin: they parse the request,
# call these functions and shape the envelope.
import logging
from datetime import datetime, timezone
from typing import Optional

from pymongo.database import Database

from database import create_document, next_id

logger = logging.getLogger(__name__)

# Statuses that hold the room
OCCUPYING_STATUSES = ("Active", "Confirmed")

MEMBERSHIP_DISCOUNTS = {
    "Bronze": 5,
    "Silver": 10,
    "Gold": 20,
    "Platinum": 30,
}

PRODUCT_PREFIXES = {"Food": "F", "Drink": "D"}


class NotFound(Exception):
    """A referenced document does not exist."""

    def __init__(self, what: str):
        super().__init__(f"{what} not found")
        self.what = what


class InvalidTimeSlot(ValueError):
    pass


def is_occupying(status: Optional[str]) -> bool:
    return status in OCCUPYING_STATUSES


def to_utc_naive(value: datetime) -> datetime:
    """Mongo hands back naive UTC datetimes; store them the same way."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def slot_duration_hours(start_at: datetime, end_at: datetime) -> float:
    start_at, end_at = to_utc_naive(start_at), to_utc_naive(end_at)
    if end_at <= start_at:
        raise InvalidTimeSlot("timeSlot.endAt must be after timeSlot.startAt")
    return (end_at - start_at).total_seconds() / 3600


def set_room_availability(db: Database, room_id: str, available: bool) -> None:
    db["rooms"].update_one(
        {"roomId": room_id},
        {"$set": {"available": available, "updatedAt": datetime.utcnow()}},
    )
    logger.info("Room %s marked %s", room_id, "available" if available else "unavailable")


def _price_slot(db: Database, room_id: str, time_slot: dict) -> dict:
    room = db["rooms"].find_one({"roomId": room_id})
    if not room:
        raise NotFound("Room")
    start_at = to_utc_naive(time_slot["startAt"])
    end_at = to_utc_naive(time_slot["endAt"])
    duration = slot_duration_hours(start_at, end_at)
    return {
        "timeSlot": {"startAt": start_at, "endAt": end_at},
        "bookingAt": start_at,
        "duration": duration,
        "totalPrice": round(room.get("pricePerHour", 0) * duration, 2),
    }


# ---------- Bookings ----------
def create_booking(db: Database, data: dict) -> dict:
    """
    Store a new booking with the next B-id.

    Duration and price are derived from the time slot here as well as on
    update, so every stored booking carries them. A booking created in an
    occupying status takes its room straight away.
    """
    priced = _price_slot(db, data["roomId"], data["timeSlot"])
    booking = {
        "bookingId": next_id(db, "bookings", "bookingId", "B"),
        "customerId": data["customerId"],
        "roomId": data["roomId"],
        "status": data.get("status") or "Pending",
        **priced,
    }
    booking = create_document(db, "bookings", booking)
    logger.info("Created booking %s for room %s", booking["bookingId"], booking["roomId"])

    if is_occupying(booking["status"]):
        set_room_availability(db, booking["roomId"], False)
    return booking


def update_booking(db: Database, booking_id: str, changes: dict) -> dict:
    existing = db["bookings"].find_one({"bookingId": booking_id})
    if not existing:
        raise NotFound("Booking")

    updated = {k: v for k, v in existing.items() if k != "_id"}
    for key in ("customerId", "roomId", "status"):
        if changes.get(key):
            updated[key] = changes[key]

    if changes.get("timeSlot"):
        updated.update(_price_slot(db, updated["roomId"], changes["timeSlot"]))

    updated["updatedAt"] = datetime.utcnow()
    db["bookings"].update_one({"bookingId": booking_id}, {"$set": updated})
    logger.info("Updated booking %s", booking_id)

    old_status = existing.get("status")
    new_status = changes.get("status")
    if new_status and new_status != old_status:
        if is_occupying(old_status):
            set_room_availability(db, existing["roomId"], True)
        if is_occupying(new_status):
            set_room_availability(db, updated["roomId"], False)

    updated["_id"] = existing["_id"]
    return updated


def delete_booking(db: Database, booking_id: str) -> dict:
    booking = db["bookings"].find_one({"bookingId": booking_id})
    if not booking:
        raise NotFound("Booking")

    db["bookings"].delete_one({"bookingId": booking_id})
    logger.info("Deleted booking %s", booking_id)

    if is_occupying(booking.get("status")):
        set_room_availability(db, booking["roomId"], True)
    return booking


# ---------- Products ----------
def product_prefix(category: str) -> str:
    return PRODUCT_PREFIXES.get(category, "S")


# ---------- Memberships ----------
def membership_discount(membership_type: str) -> int:
    return MEMBERSHIP_DISCOUNTS.get(membership_type, 0)


def create_membership(db: Database, data: dict) -> dict:
    membership = {
        "membershipId": next_id(db, "memberships", "membershipId", "M"),
        "customerId": data["customerId"],
        "type": data["type"],
        "discount": membership_discount(data["type"]),
        "startDate": to_utc_naive(data.get("startDate") or datetime.utcnow()),
        "expiryDate": to_utc_naive(data["expiryDate"]),
        "benefits": data.get("benefits") or [],
    }
    membership = create_document(db, "memberships", membership)

    # Not atomic with the insert above
    db["customers"].update_one(
        {"customerId": data["customerId"]},
        {"$set": {"membershipId": membership["membershipId"], "updatedAt": datetime.utcnow()}},
    )
    logger.info("Created membership %s for customer %s", membership["membershipId"], data["customerId"])
    return membership


def delete_membership(db: Database, membership_id: str) -> dict:
    membership = db["memberships"].find_one({"membershipId": membership_id})
    if not membership:
        raise NotFound("Membership")

    db["memberships"].delete_one({"membershipId": membership_id})
    db["customers"].update_one(
        {"customerId": membership.get("customerId"), "membershipId": membership_id},
        {"$set": {"membershipId": None, "updatedAt": datetime.utcnow()}},
    )
    logger.info("Deleted membership %s", membership_id)
    return membership


# ---------- Orders ----------
def customer_discount_rate(db: Database, customer_id: str) -> float:
    """Discount percent granted by the customer's membership, 0 without one."""
    customer = db["customers"].find_one({"customerId": customer_id})
    if not customer or not customer.get("membershipId"):
        return 0
    membership = db["memberships"].find_one({"membershipId": customer["membershipId"]})
    if not membership:
        return 0
    return membership.get("discount", membership_discount(membership.get("type")))


def create_order(db: Database, data: dict) -> dict:
    details = []
    for item in data["orderDetails"]:
        line = dict(item)
        if line.get("subtotal") is None:
            line["subtotal"] = round(line["quantity"] * line["unitPrice"], 2)
        details.append(line)

    subtotal = data.get("subtotal")
    if subtotal is None:
        subtotal = round(sum(line["subtotal"] for line in details), 2)

    rate = customer_discount_rate(db, data["customerId"])
    discount = round(subtotal * rate / 100, 2)

    order = {
        "orderId": next_id(db, "orders", "orderId", "O"),
        "customerId": data["customerId"],
        "bookingId": data.get("bookingId"),
        "orderDate": datetime.utcnow(),
        "status": data.get("status") or "Pending",
        "orderDetails": details,
        "subtotal": subtotal,
        "discount": discount,
        "totalAmount": round(subtotal - discount, 2),
        "paymentMethod": data.get("paymentMethod"),
    }
    order = create_document(db, "orders", order)
    logger.info("Created order %s (total %s)", order["orderId"], order["totalAmount"])

    # Stock is decremented line by line, without a transaction
    for line in details:
        db["products"].update_one(
            {"productId": line["productId"]},
            {"$inc": {"stock": -line["quantity"]}},
        )
    return order
