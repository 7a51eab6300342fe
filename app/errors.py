# app/errors.py
"""Business-rule failures raised by services and turned into
`{"success": false, "message": ...}` responses in `app.main`."""


class AuctionError(Exception):
    status_code = 400
    message = "Request failed"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class Unauthenticated(AuctionError):
    status_code = 401
    message = "Please provide your name and mobile number to place a bid."


class Unauthorized(AuctionError):
    status_code = 401
    message = "Invalid or expired token"


class Forbidden(AuctionError):
    status_code = 403
    message = "Admin access required"


class ValidationError(AuctionError):
    status_code = 400
    message = "Invalid request"


class NoActiveAuction(AuctionError):
    status_code = 400
    message = "No active auction found"


class AuctionNotStarted(AuctionError):
    status_code = 400
    message = "Auction has not started yet"


class AuctionEnded(AuctionError):
    status_code = 400
    message = "Auction has ended"


class PaintingNotFound(AuctionError):
    status_code = 404
    message = "Painting not found"


class PaintingNotAvailable(AuctionError):
    status_code = 404
    message = "Painting not found or not available for bidding"


class UserNotFound(AuctionError):
    status_code = 404
    message = "User not found"


class BidBelowBase(AuctionError):
    status_code = 400


class BidNotHighEnough(AuctionError):
    status_code = 400


class InternalError(AuctionError):
    status_code = 500
    message = "Internal server error"
