"""
Request schemas for the KTV admin API

Each create model describes the body accepted for a collection; the
collection name is the plural lowercase of the class name. Update models
are partial: only the fields a client sends are written.
"""
from pydantic import BaseModel, Field, EmailStr, model_validator
from typing import ClassVar, Optional, List, Literal, Tuple
from datetime import datetime

RoomType = Literal["Standard", "VIP", "Family"]
BookingStatus = Literal["Pending", "Confirmed", "Active", "Completed", "Cancelled"]
ProductCategory = Literal["Food", "Drink", "Snack"]
OrderStatus = Literal["Pending", "Preparing", "Ready", "Delivered", "Cancelled"]
PaymentMethod = Literal["Cash", "Card", "Transfer", "E-wallet"]
MembershipType = Literal["Bronze", "Silver", "Gold", "Platinum"]


class PartialUpdate(BaseModel):
    """Omitted fields are left alone; an explicit null is only accepted where listed."""
    nullable: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="before")
    @classmethod
    def reject_nulls(cls, data):
        if isinstance(data, dict):
            nulls = [k for k, v in data.items() if v is None and k in cls.model_fields and k not in cls.nullable]
            if nulls:
                raise ValueError(f"{', '.join(nulls)} cannot be null")
        return data


# ---------- Customers ----------
class CustomerCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=1)
    address: str = ""
    membershipId: Optional[str] = None

class CustomerUpdate(PartialUpdate):
    nullable: ClassVar[Tuple[str, ...]] = ("membershipId",)

    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    membershipId: Optional[str] = None

class CustomerReplace(BaseModel):
    customerId: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    membershipId: Optional[str] = None


# ---------- Rooms ----------
class RoomCreate(BaseModel):
    name: str = Field(..., min_length=1)
    type: RoomType
    pricePerHour: float = Field(..., ge=0)
    capacity: int = Field(..., ge=1)
    description: str = ""
    equipment: List[str] = []

class RoomUpdate(PartialUpdate):
    """Availability is not editable here; bookings own it."""
    name: Optional[str] = None
    type: Optional[RoomType] = None
    pricePerHour: Optional[float] = Field(None, ge=0)
    capacity: Optional[int] = Field(None, ge=1)
    description: Optional[str] = None
    equipment: Optional[List[str]] = None

class RoomPut(RoomUpdate):
    roomId: str = Field(..., min_length=1)


# ---------- Bookings ----------
class TimeSlot(BaseModel):
    startAt: datetime
    endAt: datetime

class BookingCreate(BaseModel):
    customerId: str = Field(..., min_length=1)
    roomId: str = Field(..., min_length=1)
    timeSlot: TimeSlot
    status: BookingStatus = "Pending"

class BookingUpdate(PartialUpdate):
    customerId: Optional[str] = None
    roomId: Optional[str] = None
    timeSlot: Optional[TimeSlot] = None
    status: Optional[BookingStatus] = None


# ---------- Products ----------
class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    category: ProductCategory
    description: str = ""
    stock: int = Field(100, ge=0)
    image: Optional[str] = None

class ProductUpdate(PartialUpdate):
    nullable: ClassVar[Tuple[str, ...]] = ("image",)

    productId: str = Field(..., min_length=1)
    name: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    category: Optional[ProductCategory] = None
    description: Optional[str] = None
    available: Optional[bool] = None
    stock: Optional[int] = Field(None, ge=0)
    image: Optional[str] = None


# ---------- Orders ----------
class OrderDetail(BaseModel):
    productId: str = Field(..., min_length=1)
    productName: str = ""
    quantity: int = Field(..., ge=1)
    unitPrice: float = Field(..., ge=0)
    subtotal: Optional[float] = Field(None, ge=0, description="Defaults to quantity * unitPrice")

class OrderCreate(BaseModel):
    customerId: str = Field(..., min_length=1)
    bookingId: Optional[str] = None
    status: OrderStatus = "Pending"
    orderDetails: List[OrderDetail] = Field(..., min_length=1)
    subtotal: Optional[float] = Field(None, ge=0, description="Defaults to the sum of line subtotals")
    paymentMethod: PaymentMethod = "Cash"

class OrderUpdate(PartialUpdate):
    status: Optional[OrderStatus] = None
    paymentMethod: Optional[PaymentMethod] = None


# ---------- Memberships ----------
class MembershipCreate(BaseModel):
    customerId: str = Field(..., min_length=1)
    type: MembershipType
    startDate: Optional[datetime] = None
    expiryDate: datetime
    benefits: List[str] = []

class MembershipUpdate(PartialUpdate):
    type: Optional[MembershipType] = None
    expiryDate: Optional[datetime] = None
    benefits: Optional[List[str]] = None
