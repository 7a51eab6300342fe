# app/api/admin.py
"""Dashboard endpoints: paintings, users, bids and the auction window."""
from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session
from typing import Optional
import jwt
from .. import crud, schemas, services, security, errors
from ..db import get_db
from ..utils import logger

router = APIRouter(prefix="/admin")


def require_admin(authorization: Optional[str] = Header(None)) -> str:
    token = security.bearer_token(authorization)
    if not token:
        raise errors.Unauthorized("Admin login required")
    try:
        payload = security.decode_token(token)
    except jwt.PyJWTError:
        raise errors.Unauthorized()
    if payload.get("type") != security.ADMIN_TOKEN:
        raise errors.Forbidden()
    return payload.get("sub")


def _admin_painting(painting, current_price, total_bidders) -> schemas.AdminPaintingOut:
    return schemas.AdminPaintingOut(
        id=painting.id,
        artist_name=painting.artist_name,
        painting_name=painting.painting_name,
        image_url=painting.image_url,
        base_price=float(painting.base_price),
        current_price=float(current_price),
        total_bidders=int(total_bidders or 0),
        status=painting.status,
        created_at=painting.created_at,
    )


def _settings_out(window) -> schemas.AuctionSettingsOut:
    return schemas.AuctionSettingsOut(
        id=window.id,
        is_active=window.is_active,
        start_date=window.start_date,
        end_date=window.end_date,
        created_at=window.created_at,
    )


def _painting_response(db: Session, painting_id: int, message: str) -> schemas.AdminPaintingResponse:
    row = crud.get_painting_with_stats(db, painting_id)
    return schemas.AdminPaintingResponse(
        message=message,
        data=schemas.AdminPaintingData(painting=_admin_painting(*row)),
    )


@router.post("/login", response_model=schemas.AdminLoginResponse)
def login(payload: schemas.AdminLoginRequest):
    token = services.login_admin(payload.username, payload.password)
    return schemas.AdminLoginResponse(data=schemas.AdminLoginData(token=token))


@router.get("/dashboard-stats", response_model=schemas.DashboardStatsResponse)
def dashboard_stats(db: Session = Depends(get_db), admin: str = Depends(require_admin)):
    stats = crud.dashboard_stats(db)
    if stats["highest_bid"] is not None:
        stats["highest_bid"] = float(stats["highest_bid"])
    return schemas.DashboardStatsResponse(data=schemas.DashboardStats(**stats))


@router.get("/users", response_model=schemas.AdminUsersResponse)
def list_users(db: Session = Depends(get_db), admin: str = Depends(require_admin)):
    users = [
        schemas.AdminUserOut(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            mobile=user.mobile,
            total_bids=total_bids,
            created_at=user.created_at,
        )
        for user, total_bids in crud.list_users_with_bid_counts(db)
    ]
    return schemas.AdminUsersResponse(data=schemas.AdminUsersData(users=users))


@router.get("/paintings", response_model=schemas.AdminPaintingsResponse)
def list_paintings(db: Session = Depends(get_db), admin: str = Depends(require_admin)):
    rows = crud.list_paintings_with_stats(db, only_active=False)
    return schemas.AdminPaintingsResponse(
        data=schemas.AdminPaintingsData(paintings=[_admin_painting(*row) for row in rows])
    )


@router.post("/paintings", response_model=schemas.AdminPaintingResponse, status_code=201)
def create_painting(payload: schemas.PaintingIn, db: Session = Depends(get_db),
                    admin: str = Depends(require_admin)):
    painting = crud.create_painting(db, payload.model_dump())
    logger.info("Admin %s created painting %s", admin, painting.id)
    return _painting_response(db, painting.id, "Painting added successfully")


@router.put("/paintings/{painting_id}", response_model=schemas.AdminPaintingResponse)
def update_painting(painting_id: int, payload: schemas.PaintingUpdate, db: Session = Depends(get_db),
                    admin: str = Depends(require_admin)):
    updates = payload.model_dump(exclude_unset=True)
    # null only clears the image; the other columns are NOT NULL and keep their value
    updates = {k: v for k, v in updates.items() if v is not None or k == "image_url"}
    obj = crud.update_painting(db, painting_id, updates=updates)
    if not obj:
        raise errors.PaintingNotFound()
    logger.info("Admin %s updated painting %s", admin, painting_id)
    return _painting_response(db, painting_id, "Painting updated successfully")


@router.delete("/paintings/{painting_id}", response_model=schemas.MessageResponse)
def delete_painting(painting_id: int, db: Session = Depends(get_db), admin: str = Depends(require_admin)):
    if not crud.deactivate_painting(db, painting_id):
        raise errors.PaintingNotFound()
    logger.info("Admin %s removed painting %s", admin, painting_id)
    return schemas.MessageResponse(message="Painting deleted successfully")


@router.get("/bids", response_model=schemas.AdminBidsResponse)
def list_bids(db: Session = Depends(get_db), admin: str = Depends(require_admin)):
    bids = [
        schemas.AdminBidOut(
            id=bid.id,
            bid_amount=float(bid.bid_amount),
            bid_time=bid.bid_time,
            rank=int(rank),
            painting=schemas.AdminPaintingRef(
                id=bid.painting.id, name=bid.painting.painting_name, artist=bid.painting.artist_name,
            ),
            user=schemas.BidderRef(
                id=bid.user.id, first_name=bid.user.first_name,
                last_name=bid.user.last_name, mobile=bid.user.mobile,
            ),
        )
        for bid, rank in crud.list_ranked_bids(db)
    ]
    return schemas.AdminBidsResponse(data=schemas.AdminBidsData(bids=bids))


@router.get("/auction-settings", response_model=schemas.AuctionSettingsResponse)
def get_auction_settings(db: Session = Depends(get_db), admin: str = Depends(require_admin)):
    window = crud.get_active_auction(db)
    settings = _settings_out(window) if window else None
    return schemas.AuctionSettingsResponse(data=schemas.AuctionSettingsData(settings=settings))


@router.put("/auction-settings", response_model=schemas.AuctionSettingsResponse)
def update_auction_settings(payload: schemas.AuctionSettingsIn, db: Session = Depends(get_db),
                            admin: str = Depends(require_admin)):
    window = services.set_auction_window(db, payload.start_date, payload.end_date)
    return schemas.AuctionSettingsResponse(
        message="Auction settings updated successfully",
        data=schemas.AuctionSettingsData(settings=_settings_out(window)),
    )
