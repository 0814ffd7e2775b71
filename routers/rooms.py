import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pymongo import ReturnDocument
from pymongo.database import Database

from database import create_document, get_db, get_documents, next_id, serialize, serialize_many
from schemas import RoomCreate, RoomPut, RoomUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rooms", tags=["Rooms"])


def _apply_room_update(db: Database, room_id: str, changes: dict) -> dict:
    changes["updatedAt"] = datetime.utcnow()
    room = db["rooms"].find_one_and_update(
        {"roomId": room_id},
        {"$set": changes},
        return_document=ReturnDocument.AFTER,
    )
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    logger.info("Updated room %s", room_id)
    return room


@router.get("")
def list_rooms(
    available: Optional[str] = Query(None, description='"true" for free rooms, anything else for taken ones'),
    type: Optional[str] = Query(None),
    minCapacity: int = Query(0),
    db: Database = Depends(get_db),
):
    filt = {}
    if available is not None:
        filt["available"] = available == "true"
    if type:
        filt["type"] = type
    if minCapacity > 0:
        filt["capacity"] = {"$gte": minCapacity}

    rooms = get_documents(db, "rooms", filt, sort=[("roomId", 1)])
    return {"success": True, "count": len(rooms), "data": serialize_many(rooms)}


@router.post("")
def post_room(body: RoomCreate, db: Database = Depends(get_db)):
    room = {
        "roomId": next_id(db, "rooms", "roomId", "R"),
        **body.model_dump(),
        "available": True,
    }
    room = create_document(db, "rooms", room)
    logger.info("Created room %s", room["roomId"])
    return {"success": True, "message": "Room created successfully", "data": serialize(room)}


@router.put("")
def put_room(body: RoomPut, db: Database = Depends(get_db)):
    changes = body.model_dump(exclude_unset=True, exclude={"roomId"})
    room = _apply_room_update(db, body.roomId, changes)
    return {"success": True, "message": "Room updated successfully", "data": serialize(room)}


@router.delete("")
def delete_room(roomId: Optional[str] = Query(None), db: Database = Depends(get_db)):
    if not roomId:
        raise HTTPException(status_code=400, detail="Room ID missing")
    result = db["rooms"].delete_one({"roomId": roomId})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Room not found")
    logger.info("Deleted room %s", roomId)
    return {"success": True, "message": "Room deleted successfully"}


@router.get("/{room_id}")
def get_room(room_id: str, db: Database = Depends(get_db)):
    room = db["rooms"].find_one({"roomId": room_id})
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    return {"success": True, "data": serialize(room)}


@router.patch("/{room_id}")
def patch_room(room_id: str, body: RoomUpdate, db: Database = Depends(get_db)):
    room = _apply_room_update(db, room_id, body.model_dump(exclude_unset=True))
    return {"success": True, "message": "Room updated successfully", "data": serialize(room)}
