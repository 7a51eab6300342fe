# app/crud.py
"""Queries and writes for users, paintings, bids and auction settings.

Derived values are never stored: a painting's current price and bidder count
come from an aggregate over its active bids, and bid ranks come from the
`user_bid_rankings` window-function projection built by `ranking_subquery`.
"""
from datetime import datetime
from sqlalchemy import select, and_, func, distinct
from sqlalchemy.orm import Session
from typing import Dict, Any, List, Optional
from .models import User, Painting, Bid, AuctionSettings, BID_ACTIVE, PAINTING_ACTIVE, PAINTING_INACTIVE

def ranking_subquery():
    """Per-painting dense rank of active bids: amount desc, earlier bid wins ties."""
    rank = func.dense_rank().over(
        partition_by=Bid.painting_id,
        order_by=(Bid.bid_amount.desc(), Bid.bid_time.asc()),
    )
    return (
        select(
            Bid.id.label("bid_id"),
            Bid.painting_id.label("painting_id"),
            rank.label("rank"),
        )
        .where(Bid.status == BID_ACTIVE)
        .subquery("user_bid_rankings")
    )

def get_bid_rank(db: Session, bid_id: int) -> Optional[int]:
    ranks = ranking_subquery()
    value = db.query(ranks.c.rank).filter(ranks.c.bid_id == bid_id).scalar()
    return int(value) if value is not None else None

def _painting_stats_query(db: Session):
    current_price = func.coalesce(func.max(Bid.bid_amount), Painting.base_price).label("current_price")
    total_bidders = func.count(distinct(Bid.user_id)).label("total_bidders")
    return (
        db.query(Painting, current_price, total_bidders)
        .outerjoin(Bid, and_(Bid.painting_id == Painting.id, Bid.status == BID_ACTIVE))
        .group_by(Painting.id)
    )

def list_paintings_with_stats(db: Session, only_active: bool = True) -> List:
    q = _painting_stats_query(db)
    if only_active:
        q = q.filter(Painting.status == PAINTING_ACTIVE)
    return q.order_by(Painting.created_at.desc(), Painting.id.desc()).all()

def get_painting_with_stats(db: Session, painting_id: int):
    return _painting_stats_query(db).filter(Painting.id == painting_id).first()

def get_painting(db: Session, painting_id: int) -> Optional[Painting]:
    return db.query(Painting).filter(Painting.id == painting_id).first()

def get_active_painting_for_update(db: Session, painting_id: int) -> Optional[Painting]:
    # row lock serializes concurrent bids on one painting (no-op on SQLite)
    return (
        db.query(Painting)
        .filter(Painting.id == painting_id, Painting.status == PAINTING_ACTIVE)
        .with_for_update()
        .first()
    )

def create_painting(db: Session, data: Dict[str, Any]) -> Painting:
    obj = Painting(**data)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj

def update_painting(db: Session, painting_id: int, updates: Dict[str, Any]) -> Optional[Painting]:
    obj = get_painting(db, painting_id)
    if not obj:
        return None
    for k, v in updates.items():
        setattr(obj, k, v)
    db.commit()
    db.refresh(obj)
    return obj

def deactivate_painting(db: Session, painting_id: int) -> bool:
    obj = get_painting(db, painting_id)
    if not obj:
        return False
    obj.status = PAINTING_INACTIVE
    db.commit()
    return True

def get_highest_bid(db: Session, painting_id: int):
    return (
        db.query(func.max(Bid.bid_amount))
        .filter(Bid.painting_id == painting_id, Bid.status == BID_ACTIVE)
        .scalar()
    )

def get_active_bid(db: Session, painting_id: int, user_id: int) -> Optional[Bid]:
    return (
        db.query(Bid)
        .filter(Bid.painting_id == painting_id, Bid.user_id == user_id, Bid.status == BID_ACTIVE)
        .first()
    )

def save_bid(db: Session, painting_id: int, user_id: int, amount, bid_time: datetime,
             existing: Optional[Bid] = None) -> Bid:
    """Overwrite the caller's active bid in place, or insert a new one."""
    if existing is not None:
        existing.bid_amount = amount
        existing.bid_time = bid_time
        bid = existing
    else:
        bid = Bid(painting_id=painting_id, user_id=user_id, bid_amount=amount,
                  bid_time=bid_time, status=BID_ACTIVE)
        db.add(bid)
    db.commit()
    db.refresh(bid)
    return bid

def get_user_bid_with_rank(db: Session, painting_id: int, user_id: int):
    ranks = ranking_subquery()
    return (
        db.query(Bid, ranks.c.rank)
        .outerjoin(ranks, ranks.c.bid_id == Bid.id)
        .filter(Bid.painting_id == painting_id, Bid.user_id == user_id, Bid.status == BID_ACTIVE)
        .order_by(Bid.bid_amount.desc(), Bid.bid_time.asc())
        .first()
    )

def _highest_per_painting():
    return (
        select(
            Bid.painting_id.label("painting_id"),
            func.max(Bid.bid_amount).label("highest"),
        )
        .where(Bid.status == BID_ACTIVE)
        .group_by(Bid.painting_id)
        .subquery("highest_bids")
    )

def list_user_bids(db: Session, user_id: int) -> List:
    """A user's active bids with painting, rank and the painting's current highest bid."""
    ranks = ranking_subquery()
    highest = _highest_per_painting()
    return (
        db.query(
            Bid,
            Painting,
            ranks.c.rank,
            func.coalesce(highest.c.highest, Painting.base_price).label("current_highest_bid"),
        )
        .join(Painting, Painting.id == Bid.painting_id)
        .outerjoin(ranks, ranks.c.bid_id == Bid.id)
        .outerjoin(highest, highest.c.painting_id == Bid.painting_id)
        .filter(Bid.user_id == user_id, Bid.status == BID_ACTIVE)
        .order_by(Bid.bid_time.desc(), Bid.id.desc())
        .all()
    )

def list_ranked_bids(db: Session) -> List:
    ranks = ranking_subquery()
    return (
        db.query(Bid, ranks.c.rank)
        .join(ranks, ranks.c.bid_id == Bid.id)
        .filter(Bid.status == BID_ACTIVE)
        .order_by(Bid.painting_id, ranks.c.rank)
        .all()
    )

def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_mobile(db: Session, mobile: str) -> Optional[User]:
    return db.query(User).filter(User.mobile == mobile).first()

def create_user(db: Session, first_name: str, last_name: str, mobile: str, password_hash: str) -> User:
    obj = User(first_name=first_name, last_name=last_name, mobile=mobile, password_hash=password_hash)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj

def list_users_with_bid_counts(db: Session) -> List:
    total_bids = func.count(Bid.id).label("total_bids")
    return (
        db.query(User, total_bids)
        .outerjoin(Bid, and_(Bid.user_id == User.id, Bid.status == BID_ACTIVE))
        .group_by(User.id)
        .order_by(User.created_at.desc(), User.id.desc())
        .all()
    )

def get_active_auction(db: Session) -> Optional[AuctionSettings]:
    return (
        db.query(AuctionSettings)
        .filter(AuctionSettings.is_active.is_(True))
        .order_by(AuctionSettings.created_at.desc(), AuctionSettings.id.desc())
        .first()
    )

def replace_auction_settings(db: Session, start_date: datetime, end_date: datetime) -> AuctionSettings:
    """Retire every active window and record a new one."""
    db.query(AuctionSettings).filter(AuctionSettings.is_active.is_(True)).update(
        {"is_active": False}, synchronize_session=False
    )
    obj = AuctionSettings(is_active=True, start_date=start_date, end_date=end_date)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj

def dashboard_stats(db: Session) -> Dict[str, Any]:
    return {
        "total_paintings": db.query(func.count(Painting.id)).scalar() or 0,
        "active_paintings": db.query(func.count(Painting.id)).filter(Painting.status == PAINTING_ACTIVE).scalar() or 0,
        "total_users": db.query(func.count(User.id)).scalar() or 0,
        "total_bids": db.query(func.count(Bid.id)).filter(Bid.status == BID_ACTIVE).scalar() or 0,
        "highest_bid": db.query(func.max(Bid.bid_amount)).filter(Bid.status == BID_ACTIVE).scalar(),
    }
