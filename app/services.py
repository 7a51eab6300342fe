# app/services.py
"""Bid placement and the rules around it.

A request to place a bid flows through four steps:

1. identity resolution (`identity_from_request` then `resolve_identity`),
2. the auction window gate (`check_auction_window`),
3. bid intake (`place_bid`), which validates and writes the caller's bid,
4. the ranking lookup for the written bid.

Every rule violation is raised as an `app.errors.AuctionError` subclass.
"""
import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

import jwt
from sqlalchemy.orm import Session

from . import crud, errors, security, config
from .models import User, Bid, AuctionSettings, PAINTING_ACTIVE
from .utils import logger, as_utc, to_decimal, format_amount

MOBILE_RE = re.compile(r"^[0-9]{10}$")

# Numeric(12, 2): below 10^10, whole paise
MAX_BID_AMOUNT = Decimal("10000000000")
CENTS = Decimal("0.01")

# rank reported when the projection has no row for a bid
DEFAULT_BID_RANK = 1
# rank reported in a user's bid listing when the projection has no row
UNRANKED = 999

@dataclass(frozen=True)
class Authenticated:
    token: str

@dataclass(frozen=True)
class Guest:
    name: str
    mobile: str

Identity = Union[Authenticated, Guest]

@dataclass
class ResolvedUser:
    user: User
    is_new: bool = False
    # set only when this call issued a fresh credential (guest flow)
    token: Optional[str] = None

def identity_from_request(authorization: Optional[str], name: Optional[str], mobile: Optional[str]) -> Identity:
    token = security.bearer_token(authorization)
    if token:
        return Authenticated(token)
    if name and name.strip() and mobile:
        return Guest(name.strip(), mobile.strip())
    raise errors.Unauthenticated()

def validate_mobile(mobile: str) -> str:
    if not mobile or not MOBILE_RE.match(mobile):
        raise errors.ValidationError("Invalid mobile number. Must be 10 digits")
    return mobile

def split_name(name: str):
    """'Asha Rao' -> ('Asha', 'Rao'); a single word is used for both parts."""
    parts = name.split()
    first = parts[0]
    last = " ".join(parts[1:]) or first
    return first, last

def user_from_token(db: Session, token: str) -> User:
    try:
        payload = security.decode_token(token)
    except jwt.PyJWTError:
        raise errors.Unauthorized()
    if payload.get("type") != security.USER_TOKEN:
        raise errors.Unauthorized()
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise errors.Unauthorized()
    user = crud.get_user(db, user_id)
    if not user:
        raise errors.Unauthorized("User not found")
    return user

def resolve_identity(db: Session, identity: Identity) -> ResolvedUser:
    if isinstance(identity, Authenticated):
        return ResolvedUser(user=user_from_token(db, identity.token))

    mobile = validate_mobile(identity.mobile)
    user = crud.get_user_by_mobile(db, mobile)
    is_new = False
    if user is None:
        first, last = split_name(identity.name)
        # guests can later log in with their mobile number as password
        user = crud.create_user(db, first, last, mobile, security.hash_password(mobile))
        is_new = True
        logger.info("Created guest user %s for mobile ending %s", user.id, mobile[-4:])
    return ResolvedUser(user=user, is_new=is_new, token=security.create_user_token(user.id, mobile))

def register_user(db: Session, first_name: str, last_name: str, mobile: str, password: str) -> ResolvedUser:
    validate_mobile(mobile)
    if crud.get_user_by_mobile(db, mobile):
        raise errors.ValidationError("Mobile number already registered")
    user = crud.create_user(db, first_name.strip(), last_name.strip(), mobile, security.hash_password(password))
    logger.info("Registered user %s", user.id)
    return ResolvedUser(user=user, is_new=True, token=security.create_user_token(user.id, mobile))

def login_user(db: Session, mobile: str, password: str) -> ResolvedUser:
    user = crud.get_user_by_mobile(db, mobile)
    if not user or not security.verify_password(password, user.password_hash):
        raise errors.Unauthorized("Invalid mobile number or password")
    return ResolvedUser(user=user, token=security.create_user_token(user.id, user.mobile))

def login_admin(username: str, password: str) -> str:
    if not config.ADMIN_PASSWORD or username != config.ADMIN_USERNAME or password != config.ADMIN_PASSWORD:
        raise errors.Unauthorized("Invalid admin credentials")
    logger.info("Admin %s logged in", username)
    return security.create_admin_token(username)

def check_auction_window(window: Optional[AuctionSettings], now: datetime) -> None:
    if window is None:
        raise errors.NoActiveAuction()
    now = as_utc(now)
    if now < as_utc(window.start_date):
        raise errors.AuctionNotStarted()
    if now > as_utc(window.end_date):
        raise errors.AuctionEnded()

def is_auction_active(window: Optional[AuctionSettings], now: datetime) -> bool:
    if window is None:
        return False
    return as_utc(window.start_date) <= as_utc(now) <= as_utc(window.end_date)

def set_auction_window(db: Session, start_date: datetime, end_date: datetime) -> AuctionSettings:
    if as_utc(end_date) <= as_utc(start_date):
        raise errors.ValidationError("End date must be after start date")
    window = crud.replace_auction_settings(db, as_utc(start_date), as_utc(end_date))
    logger.info("Auction window set to %s - %s", window.start_date, window.end_date)
    return window

def validate_amount(value) -> Decimal:
    amount = to_decimal(value)
    if not amount.is_finite() or amount <= 0 or amount >= MAX_BID_AMOUNT:
        raise errors.ValidationError(
            f"Bid amount must be a positive number below ₹{format_amount(MAX_BID_AMOUNT)}"
        )
    if amount != amount.quantize(CENTS):
        raise errors.ValidationError("Bid amount can have at most 2 decimal places")
    return amount

@dataclass
class BidResult:
    bid: Bid
    rank: int
    updated: bool
    resolved: ResolvedUser

    @property
    def message(self) -> str:
        if self.resolved.is_new:
            return "Welcome! Your bid has been placed successfully."
        if self.updated:
            return "Your bid has been updated successfully!"
        return "Bid placed successfully!"

def place_bid(db: Session, painting_id: int, bid_amount, resolved: ResolvedUser, now: datetime) -> BidResult:
    """Validate and record `resolved.user`'s bid on a painting.

    The painting row stays locked from the highest-bid read until the write
    commits, so two bids on the same painting cannot both pass the check.
    """
    amount = validate_amount(bid_amount)
    user_id = resolved.user.id

    painting = crud.get_active_painting_for_update(db, painting_id)
    if painting is None:
        raise errors.PaintingNotAvailable()

    base_price = to_decimal(painting.base_price)
    if amount < base_price:
        logger.info("Rejected bid %s on painting %s: below base %s", amount, painting_id, base_price)
        raise errors.BidBelowBase(f"Bid amount must be at least ₹{format_amount(base_price)}")

    highest = to_decimal(crud.get_highest_bid(db, painting_id))
    if highest is not None and amount <= highest:
        logger.info("Rejected bid %s on painting %s: highest is %s", amount, painting_id, highest)
        raise errors.BidNotHighEnough(
            f"Bid amount must be greater than current highest bid of ₹{format_amount(highest)}"
        )

    existing = crud.get_active_bid(db, painting_id, user_id)
    bid = crud.save_bid(db, painting_id, user_id, amount, now, existing=existing)

    rank = crud.get_bid_rank(db, bid.id)
    if rank is None:
        rank = DEFAULT_BID_RANK
    logger.info("User %s %s bid %s on painting %s (rank %s)",
                user_id, "updated" if existing else "placed", amount, painting_id, rank)
    return BidResult(bid=bid, rank=rank, updated=existing is not None, resolved=resolved)

def get_painting_detail(db: Session, painting_id: int, user: Optional[User],
                        window: Optional[AuctionSettings], now: datetime):
    """Return (painting, current_price, total_bidders, auction_active, user_bid).

    `user_bid` is a (Bid, rank) pair for the caller's active bid, or None.
    """
    row = crud.get_painting_with_stats(db, painting_id)
    if row is None:
        raise errors.PaintingNotFound()
    painting, current_price, total_bidders = row
    if painting.status != PAINTING_ACTIVE:
        raise errors.PaintingNotAvailable("This painting is not available for bidding", status_code=400)

    user_bid = None
    if user is not None:
        found = crud.get_user_bid_with_rank(db, painting_id, user.id)
        if found is not None:
            bid, rank = found
            user_bid = (bid, int(rank) if rank is not None else DEFAULT_BID_RANK)
    return painting, current_price, total_bidders, is_auction_active(window, now), user_bid

def get_user_bids(db: Session, mobile: str):
    user = crud.get_user_by_mobile(db, validate_mobile(mobile))
    if not user:
        raise errors.UserNotFound()
    return [
        (bid, painting, int(rank) if rank is not None else UNRANKED, current_highest)
        for bid, painting, rank, current_highest in crud.list_user_bids(db, user.id)
    ]
