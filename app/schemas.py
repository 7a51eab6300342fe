# app/schemas.py
"""Request and response bodies. JSON field names are camelCase."""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Annotated, Optional, List
from datetime import datetime
from decimal import Decimal


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# fits Numeric(12, 2); Decimal rejects Infinity and NaN
Money = Annotated[Decimal, Field(gt=0, max_digits=12, decimal_places=2)]


class Envelope(CamelModel):
    success: bool = True

class PaintingSummary(CamelModel):
    id: int
    artist_name: str
    painting_name: str
    image_url: Optional[str] = None
    base_price: float
    current_price: float
    total_bidders: int

class PaintingDetail(PaintingSummary):
    auction_active: bool

class UserBidInfo(CamelModel):
    bid_amount: float
    rank: int
    bid_time: datetime

class PaintingListData(CamelModel):
    paintings: List[PaintingSummary]

class PaintingListResponse(Envelope):
    data: PaintingListData

class PaintingDetailData(CamelModel):
    painting: PaintingDetail
    user_bid_info: Optional[UserBidInfo] = None

class PaintingDetailResponse(Envelope):
    data: PaintingDetailData

class BidCreate(CamelModel):
    painting_id: int = Field(..., gt=0)
    bid_amount: Money
    name: Optional[str] = Field(None, max_length=255)
    mobile: Optional[str] = None

class BidOut(CamelModel):
    id: int
    bid_amount: float
    bid_time: datetime
    rank: int

class BidData(CamelModel):
    bid: BidOut

class UserOut(CamelModel):
    id: int
    name: str
    mobile: str
    first_name: str
    last_name: str

class BidResponse(Envelope):
    message: str
    data: BidData
    token: Optional[str] = None
    user: Optional[UserOut] = None

class PaintingRef(CamelModel):
    id: int
    name: str
    artist: str
    image_url: Optional[str] = None

class UserBidOut(CamelModel):
    id: int
    bid_amount: float
    bid_time: datetime
    rank: int
    current_highest_bid: float
    painting: PaintingRef

class UserBidsData(CamelModel):
    bids: List[UserBidOut]

class UserBidsResponse(Envelope):
    data: UserBidsData

class RegisterRequest(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    mobile: str
    password: str = Field(..., min_length=4)

class LoginRequest(CamelModel):
    mobile: str
    password: str

class AuthData(CamelModel):
    token: str
    user: UserOut

class AuthResponse(Envelope):
    message: str
    data: AuthData

class MobileUser(CamelModel):
    first_name: str
    last_name: str

class CheckMobileData(CamelModel):
    exists: bool
    user: Optional[MobileUser] = None

class CheckMobileResponse(Envelope):
    data: CheckMobileData

class AdminLoginRequest(CamelModel):
    username: str
    password: str

class AdminLoginData(CamelModel):
    token: str

class AdminLoginResponse(Envelope):
    data: AdminLoginData

class DashboardStats(CamelModel):
    total_paintings: int
    active_paintings: int
    total_users: int
    total_bids: int
    highest_bid: Optional[float] = None

class DashboardStatsResponse(Envelope):
    data: DashboardStats

class AdminUserOut(CamelModel):
    id: int
    first_name: str
    last_name: str
    mobile: str
    total_bids: int
    created_at: Optional[datetime] = None

class AdminUsersData(CamelModel):
    users: List[AdminUserOut]

class AdminUsersResponse(Envelope):
    data: AdminUsersData

class PaintingIn(CamelModel):
    artist_name: str = Field(..., min_length=1, max_length=255)
    painting_name: str = Field(..., min_length=1, max_length=255)
    base_price: Money
    image_url: Optional[str] = None

class PaintingUpdate(CamelModel):
    artist_name: Optional[str] = Field(None, min_length=1, max_length=255)
    painting_name: Optional[str] = Field(None, min_length=1, max_length=255)
    base_price: Optional[Money] = None
    image_url: Optional[str] = None
    status: Optional[str] = Field(None, pattern="^(active|inactive)$")

class AdminPaintingOut(PaintingSummary):
    status: str
    created_at: Optional[datetime] = None

class AdminPaintingData(CamelModel):
    painting: AdminPaintingOut

class AdminPaintingResponse(Envelope):
    message: Optional[str] = None
    data: AdminPaintingData

class AdminPaintingsData(CamelModel):
    paintings: List[AdminPaintingOut]

class AdminPaintingsResponse(Envelope):
    data: AdminPaintingsData

class BidderRef(CamelModel):
    id: int
    first_name: str
    last_name: str
    mobile: str

class AdminPaintingRef(CamelModel):
    id: int
    name: str
    artist: str

class AdminBidOut(CamelModel):
    id: int
    bid_amount: float
    bid_time: datetime
    rank: int
    painting: AdminPaintingRef
    user: BidderRef

class AdminBidsData(CamelModel):
    bids: List[AdminBidOut]

class AdminBidsResponse(Envelope):
    data: AdminBidsData

class AuctionSettingsIn(CamelModel):
    start_date: datetime
    end_date: datetime

class AuctionSettingsOut(CamelModel):
    id: int
    is_active: bool
    start_date: datetime
    end_date: datetime
    created_at: Optional[datetime] = None

class AuctionSettingsData(CamelModel):
    settings: Optional[AuctionSettingsOut] = None

class AuctionSettingsResponse(Envelope):
    message: Optional[str] = None
    data: AuctionSettingsData

class MessageResponse(Envelope):
    message: str
