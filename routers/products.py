import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pymongo.database import Database

from database import contains_filter, create_document, get_db, get_documents, next_id, serialize, serialize_many
from schemas import ProductCreate, ProductUpdate
from services import product_prefix

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("")
def list_products(
    category: Optional[str] = Query(None),
    available: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Case-insensitive match on name or description"),
    db: Database = Depends(get_db),
):
    filt = {}
    if category:
        filt["category"] = category
    if available is not None:
        filt["available"] = available == "true"
    if search:
        filt.update(contains_filter(search, ["name", "description"]))

    products = serialize_many(get_documents(db, "products", filt, sort=[("category", 1), ("name", 1)]))

    grouped = {}
    for product in products:
        grouped.setdefault(product.get("category"), []).append(product)

    return {"success": True, "count": len(products), "data": products, "grouped": grouped}


@router.post("")
def post_product(body: ProductCreate, db: Database = Depends(get_db)):
    product = {
        "productId": next_id(db, "products", "productId", product_prefix(body.category)),
        **body.model_dump(),
        "available": True,
    }
    product = create_document(db, "products", product)
    logger.info("Created product %s", product["productId"])
    return {"success": True, "message": "Product created successfully", "data": serialize(product)}


@router.put("")
def put_product(body: ProductUpdate, db: Database = Depends(get_db)):
    changes = body.model_dump(exclude_unset=True, exclude={"productId"})
    changes["updatedAt"] = datetime.utcnow()
    result = db["products"].update_one({"productId": body.productId}, {"$set": changes})
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Product not found")
    logger.info("Updated product %s", body.productId)
    return {"success": True, "message": "Product updated successfully"}


@router.delete("")
def delete_product(productId: Optional[str] = Query(None), db: Database = Depends(get_db)):
    if not productId:
        raise HTTPException(status_code=400, detail="Product ID is required")
    result = db["products"].delete_one({"productId": productId})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Product not found")
    logger.info("Deleted product %s", productId)
    return {"success": True, "message": "Product deleted successfully"}


@router.get("/{product_id}")
def get_product(product_id: str, db: Database = Depends(get_db)):
    product = db["products"].find_one({"productId": product_id})
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return {"success": True, "data": serialize(product)}
