# tests/test_crud.py
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from app import crud, models, security

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


def _user(db, mobile, first="Test", last="User"):
    return crud.create_user(db, first, last, mobile, security.hash_password(mobile))


def _bid(db, painting, user, amount, minutes=0, status=models.BID_ACTIVE):
    bid = models.Bid(
        painting_id=painting.id,
        user_id=user.id,
        bid_amount=Decimal(str(amount)),
        bid_time=NOW + timedelta(minutes=minutes),
        status=status,
    )
    db.add(bid)
    db.commit()
    db.refresh(bid)
    return bid


def test_stats_without_bids_fall_back_to_base_price(db, painting):
    p, current_price, total_bidders = crud.get_painting_with_stats(db, painting.id)
    assert p.id == painting.id
    assert Decimal(str(current_price)) == Decimal("1000")
    assert total_bidders == 0


def test_stats_use_active_bids_only(db, painting):
    a, b = _user(db, "9000000001"), _user(db, "9000000002")
    _bid(db, painting, a, 1500)
    _bid(db, painting, b, 1800)
    _bid(db, painting, b, 5000, status="withdrawn")

    _, current_price, total_bidders = crud.get_painting_with_stats(db, painting.id)
    assert Decimal(str(current_price)) == Decimal("1800")
    assert total_bidders == 2
    assert Decimal(str(crud.get_highest_bid(db, painting.id))) == Decimal("1800")


def test_list_paintings_hides_inactive(db, painting):
    hidden = crud.create_painting(db, {"artist_name": "A", "painting_name": "B", "base_price": 10})
    crud.deactivate_painting(db, hidden.id)

    ids = [p.id for p, _, _ in crud.list_paintings_with_stats(db)]
    assert ids == [painting.id]
    all_ids = {p.id for p, _, _ in crud.list_paintings_with_stats(db, only_active=False)}
    assert all_ids == {painting.id, hidden.id}


def test_rank_orders_by_amount_then_earliest_time(db, painting):
    a, b, c = _user(db, "9000000001"), _user(db, "9000000002"), _user(db, "9000000003")
    low = _bid(db, painting, a, 1200, minutes=0)
    tie_late = _bid(db, painting, b, 2000, minutes=5)
    tie_early = _bid(db, painting, c, 2000, minutes=1)

    assert crud.get_bid_rank(db, tie_early.id) == 1
    assert crud.get_bid_rank(db, tie_late.id) == 2
    assert crud.get_bid_rank(db, low.id) == 3


def test_ranks_are_per_painting(db, painting):
    other = crud.create_painting(db, {"artist_name": "A", "painting_name": "B", "base_price": 10})
    a, b = _user(db, "9000000001"), _user(db, "9000000002")
    big = _bid(db, painting, a, 9000)
    small = _bid(db, other, b, 20)

    assert crud.get_bid_rank(db, big.id) == 1
    assert crud.get_bid_rank(db, small.id) == 1


def test_inactive_bid_has_no_rank(db, painting):
    a = _user(db, "9000000001")
    bid = _bid(db, painting, a, 1500, status="withdrawn")
    assert crud.get_bid_rank(db, bid.id) is None


def test_save_bid_updates_existing_row(db, painting):
    a = _user(db, "9000000001")
    first = crud.save_bid(db, painting.id, a.id, Decimal("1500"), NOW)
    existing = crud.get_active_bid(db, painting.id, a.id)
    second = crud.save_bid(db, painting.id, a.id, Decimal("2000"), NOW + timedelta(minutes=3), existing=existing)

    assert second.id == first.id
    assert db.query(models.Bid).count() == 1
    assert Decimal(str(second.bid_amount)) == Decimal("2000")


def test_active_auction_is_newest_active_row(db):
    crud.replace_auction_settings(db, NOW, NOW + timedelta(days=1))
    newest = crud.replace_auction_settings(db, NOW + timedelta(days=2), NOW + timedelta(days=3))

    assert crud.get_active_auction(db).id == newest.id
    assert db.query(models.AuctionSettings).filter(models.AuctionSettings.is_active.is_(True)).count() == 1


def test_user_bids_listing(db, painting):
    a, b = _user(db, "9000000001"), _user(db, "9000000002")
    mine = _bid(db, painting, a, 1500)
    _bid(db, painting, b, 1700, minutes=1)

    rows = crud.list_user_bids(db, a.id)
    assert len(rows) == 1
    bid, p, rank, current_highest = rows[0]
    assert bid.id == mine.id
    assert p.id == painting.id
    assert rank == 2
    assert Decimal(str(current_highest)) == Decimal("1700")


def test_users_with_bid_counts(db, painting):
    a, b = _user(db, "9000000001"), _user(db, "9000000002")
    _bid(db, painting, a, 1500)

    counts = {u.mobile: n for u, n in crud.list_users_with_bid_counts(db)}
    assert counts == {"9000000001": 1, "9000000002": 0}
