"""
User Repository - read access to user wishlists
"""
from typing import Optional, Set

from bson import ObjectId
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from app.domain.order import User
from app.core.errors import PersistenceError


class UserRepository:
    """Repository for User lookups (wishlist projection only)"""

    def __init__(self, collection: Collection):
        self.collection = collection

    def find_by_id(self, user_id: str) -> Optional[User]:
        if not ObjectId.is_valid(user_id):
            return None

        try:
            doc = self.collection.find_one({"_id": ObjectId(user_id)}, {"wishlist": 1})
        except PyMongoError as e:
            raise PersistenceError(f"Error fetching user {user_id}: {e}") from e

        if not doc:
            return None

        return User.from_document(doc)

    def get_wishlist(self, user_id: str) -> Set[str]:
        """Wishlisted product IDs of a user; empty for an unknown user"""
        user = self.find_by_id(user_id)
        return set(user.wishlist) if user else set()
