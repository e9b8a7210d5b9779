"""
Session Service - server-side login sessions in MongoDB.

The browser only holds a random `sid` cookie; the identity it maps to
({id, type}) lives in the `sessions` collection until logout or expiry.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from pymongo.collection import Collection

from app.schemas.schemas import SessionIdentity


def utcnow() -> datetime:
    """Naive UTC now, the form BSON dates come back in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class SessionStore:
    def __init__(self, collection: Collection, max_age_seconds: int):
        self.collection = collection
        self.max_age = timedelta(seconds=max_age_seconds)

    def create(self, identity: SessionIdentity) -> str:
        """Store the identity under a fresh sid and return the sid."""
        sid = secrets.token_urlsafe(32)
        now = utcnow()
        self.collection.insert_one({
            "_id": sid,
            "identity": identity.model_dump(mode="json"),
            "created_at": now,
            "expires_at": now + self.max_age,
        })
        return sid

    def get(self, sid: str) -> Optional[SessionIdentity]:
        """Identity for a sid, or None if unknown or expired."""
        doc = self.collection.find_one({"_id": sid})
        if doc is None:
            return None
        # The TTL monitor only runs once a minute
        if doc["expires_at"] <= utcnow():
            self.collection.delete_one({"_id": sid})
            return None
        return SessionIdentity(**doc["identity"])

    def destroy(self, sid: str) -> bool:
        result = self.collection.delete_one({"_id": sid})
        return result.deleted_count > 0
