"""Error taxonomy shared by services and the HTTP layer.

Services raise these; ``dailydraw.main`` renders them as
``{"status": "error", "code": ..., "message": ...}``.
"""
from __future__ import annotations


class DailyDrawError(Exception):
    code = "error"
    status_code = 400
    message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"status": "error", "code": self.code, "message": self.message}


# ---------- validation ----------

class InvalidImage(DailyDrawError):
    code = "invalid_image"
    message = "Invalid image. Use a PNG under ~500KB."


class PayloadTooLarge(DailyDrawError):
    code = "payload_too_large"
    status_code = 413
    message = "Image too large. Use a PNG under ~500KB."


class InvalidDay(DailyDrawError):
    code = "invalid_day"
    message = "Day must be YYYY-MM-DD"


class TooShort(DailyDrawError):
    code = "too_short"


class TooLong(DailyDrawError):
    code = "too_long"


class Profane(DailyDrawError):
    code = "profane"
    message = "Prompt contains inappropriate content"


# ---------- policy ----------

class AlreadySubmittedToday(DailyDrawError):
    code = "already_submitted_today"
    status_code = 409
    message = "You already submitted today. One submission per day."


class AlreadyProposedToday(DailyDrawError):
    code = "already_proposed_today"
    status_code = 409
    message = "You already submitted a prompt today. One per day."


class AlreadyVoted(DailyDrawError):
    code = "already_voted"
    status_code = 409
    message = "Already voted"


class SelfVote(DailyDrawError):
    code = "self_vote"
    message = "You cannot vote for your own entry"


class RateLimited(DailyDrawError):
    code = "rate_limited"
    status_code = 429
    message = "Vote limit reached"


class NotPending(DailyDrawError):
    code = "not_pending"
    message = "Prompt is no longer pending"


# ---------- authorization ----------

class Unauthenticated(DailyDrawError):
    code = "unauthenticated"
    status_code = 401
    message = "You must be logged in"


class Forbidden(DailyDrawError):
    code = "forbidden"
    status_code = 403
    message = "Moderator access required"


class NotFound(DailyDrawError):
    code = "not_found"
    status_code = 404
    message = "Not found"


# ---------- rollover ----------

class CloseIncomplete(DailyDrawError):
    code = "close_incomplete"
    status_code = 500
    message = "Day was claimed for closing but its winners were never recorded"
