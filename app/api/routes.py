# app/api/routes.py
from datetime import datetime
from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.orm import Session
from typing import Optional
from .. import crud, schemas, services, security, errors
from ..db import get_db
from ..models import User
from ..utils import get_now

router = APIRouter()


def get_auction_window(db: Session = Depends(get_db)):
    """Currently active auction window, or None."""
    return crud.get_active_auction(db)


def optional_user(
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> Optional[User]:
    # a bad optional credential just means an anonymous read
    token = security.bearer_token(authorization)
    if not token:
        return None
    try:
        return services.user_from_token(db, token)
    except errors.Unauthorized:
        return None


def _user_out(user: User) -> schemas.UserOut:
    return schemas.UserOut(
        id=user.id,
        name=user.full_name,
        mobile=user.mobile,
        first_name=user.first_name,
        last_name=user.last_name,
    )


def _painting_summary(painting, current_price, total_bidders) -> dict:
    return dict(
        id=painting.id,
        artist_name=painting.artist_name,
        painting_name=painting.painting_name,
        image_url=painting.image_url,
        base_price=float(painting.base_price),
        current_price=float(current_price),
        total_bidders=int(total_bidders or 0),
    )


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/paintings", response_model=schemas.PaintingListResponse)
def list_paintings(db: Session = Depends(get_db)):
    rows = crud.list_paintings_with_stats(db)
    paintings = [schemas.PaintingSummary(**_painting_summary(*row)) for row in rows]
    return schemas.PaintingListResponse(data=schemas.PaintingListData(paintings=paintings))


# must be registered before /paintings/{painting_id}
@router.get("/paintings/user-bids", response_model=schemas.UserBidsResponse)
def user_bids(
    mobile: str = Query(..., pattern=r"^[0-9]{10}$"),
    db: Session = Depends(get_db),
):
    bids = [
        schemas.UserBidOut(
            id=bid.id,
            bid_amount=float(bid.bid_amount),
            bid_time=bid.bid_time,
            rank=rank,
            current_highest_bid=float(current_highest),
            painting=schemas.PaintingRef(
                id=painting.id,
                name=painting.painting_name,
                artist=painting.artist_name,
                image_url=painting.image_url,
            ),
        )
        for bid, painting, rank, current_highest in services.get_user_bids(db, mobile)
    ]
    return schemas.UserBidsResponse(data=schemas.UserBidsData(bids=bids))


@router.post("/paintings/bid", response_model=schemas.BidResponse,
             response_model_exclude_none=True, status_code=201)
def place_bid(
    payload: schemas.BidCreate,
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
    window=Depends(get_auction_window),
    now: datetime = Depends(get_now),
):
    identity = services.identity_from_request(authorization, payload.name, payload.mobile)
    resolved = services.resolve_identity(db, identity)
    services.check_auction_window(window, now)
    result = services.place_bid(db, payload.painting_id, payload.bid_amount, resolved, now)

    response = schemas.BidResponse(
        message=result.message,
        data=schemas.BidData(bid=schemas.BidOut(
            id=result.bid.id,
            bid_amount=float(result.bid.bid_amount),
            bid_time=result.bid.bid_time,
            rank=result.rank,
        )),
    )
    if resolved.token:
        response.token = resolved.token
        response.user = _user_out(resolved.user)
    return response


@router.get("/paintings/{painting_id}", response_model=schemas.PaintingDetailResponse)
def get_painting(
    painting_id: int,
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(optional_user),
    window=Depends(get_auction_window),
    now: datetime = Depends(get_now),
):
    painting, current_price, total_bidders, auction_active, user_bid = services.get_painting_detail(
        db, painting_id, user, window, now
    )
    user_bid_info = None
    if user_bid is not None:
        bid, rank = user_bid
        user_bid_info = schemas.UserBidInfo(bid_amount=float(bid.bid_amount), rank=rank, bid_time=bid.bid_time)
    detail = schemas.PaintingDetail(
        **_painting_summary(painting, current_price, total_bidders),
        auction_active=auction_active,
    )
    return schemas.PaintingDetailResponse(
        data=schemas.PaintingDetailData(painting=detail, user_bid_info=user_bid_info)
    )


@router.post("/auth/register", response_model=schemas.AuthResponse, status_code=201)
def register(payload: schemas.RegisterRequest, db: Session = Depends(get_db)):
    resolved = services.register_user(db, payload.first_name, payload.last_name, payload.mobile, payload.password)
    return schemas.AuthResponse(
        message="Registration successful",
        data=schemas.AuthData(token=resolved.token, user=_user_out(resolved.user)),
    )


@router.post("/auth/login", response_model=schemas.AuthResponse)
def login(payload: schemas.LoginRequest, db: Session = Depends(get_db)):
    resolved = services.login_user(db, payload.mobile, payload.password)
    return schemas.AuthResponse(
        message="Login successful",
        data=schemas.AuthData(token=resolved.token, user=_user_out(resolved.user)),
    )


@router.get("/auth/check-mobile/{mobile}", response_model=schemas.CheckMobileResponse)
def check_mobile(mobile: str, db: Session = Depends(get_db)):
    user = crud.get_user_by_mobile(db, services.validate_mobile(mobile))
    found = schemas.MobileUser(first_name=user.first_name, last_name=user.last_name) if user else None
    return schemas.CheckMobileResponse(data=schemas.CheckMobileData(exists=user is not None, user=found))
