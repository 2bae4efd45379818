"""
User account store. Passwords arrive already hashed; the store only keeps them.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .schema import DEFAULT_USER_ROLE, format_timestamp, parse_timestamp
from .store import EntityStore, Record


class UserStore(EntityStore):

    def __init__(self, path, collection: str = "users", schema_version: Optional[str] = None):
        super().__init__(path, collection, schema_version)

    def validate_new(self, data: Dict[str, Any]) -> None:
        for field in ("username", "email", "password"):
            self.require(data, field, f"{field} is required")

    def check_conflicts(self, data: Dict[str, Any], records: List[Record], existing: Optional[Record] = None) -> None:
        if "email" not in data:
            return
        email = str(data["email"] or "").lower()
        own_id = existing.get("id") if existing else None
        if any(
            r.get("id") != own_id and str(r.get("email") or "").lower() == email
            for r in records
        ):
            raise self.fault("Email is already in use", "email")

    def build_record(self, data: Dict[str, Any], timestamp: str) -> Dict[str, Any]:
        return {
            "username": data["username"],
            "email": data["email"].lower(),
            "password": data["password"],
            "role": data.get("role") or DEFAULT_USER_ROLE,
            "isVerified": bool(data.get("isVerified", False)),
            "verificationToken": data.get("verificationToken"),
            "resetToken": data.get("resetToken"),
            "resetTokenExpiry": data.get("resetTokenExpiry"),
            "lastLogin": None,
        }

    def prepare_update(self, existing: Record, changes: Dict[str, Any]) -> Dict[str, Any]:
        if isinstance(changes.get("email"), str):
            changes = {**changes, "email": changes["email"].lower()}
        return changes

    # ----- Lookups -----

    async def get_user_by_email(self, email: str) -> Optional[Record]:
        """Case-insensitive lookup by e-mail."""
        if not email:
            return None
        needle = email.lower()
        matches = await self.filter(lambda u: str(u.get("email") or "").lower() == needle)
        return matches[0] if matches else None

    async def get_user_by_verification_token(self, token: str) -> Optional[Record]:
        if not token:
            return None
        return await self.find_one("verificationToken", token)

    async def get_user_by_reset_token(self, token: str) -> Optional[Record]:
        if not token:
            return None
        return await self.find_one("resetToken", token)

    async def find_users_by_role(self, role: str) -> List[Record]:
        return await self.get_by_field("role", role)

    async def search_users(self, query: str) -> List[Record]:
        """Case-insensitive substring match over username and email."""
        needle = (query or "").lower()
        return await self.filter(
            lambda u: needle in str(u.get("username") or "").lower()
            or needle in str(u.get("email") or "").lower()
        )

    async def count_users(self) -> int:
        return await self.count()

    # ----- Account flows -----

    async def record_login(self, user_id: str) -> Optional[Record]:
        return await self.update(user_id, {"lastLogin": format_timestamp(datetime.now(timezone.utc))})

    async def verify_user(self, token: str) -> Optional[Record]:
        user = await self.get_user_by_verification_token(token)
        if user is None:
            return None
        return await self.update(user["id"], {"isVerified": True, "verificationToken": None})

    async def set_password_reset_token(self, email: str, token: str, expiry: datetime) -> Optional[Record]:
        user = await self.get_user_by_email(email)
        if user is None:
            return None
        return await self.update(user["id"], {
            "resetToken": token,
            "resetTokenExpiry": format_timestamp(expiry),
        })

    async def reset_password(self, token: str, new_password: str) -> Optional[Record]:
        """Swap in a new (hashed) password. None if the token is unknown or expired."""
        user = await self.get_user_by_reset_token(token)
        if user is None:
            return None

        expiry = parse_timestamp(user.get("resetTokenExpiry"))
        if expiry is None or expiry < datetime.now(timezone.utc):
            return None

        return await self.update(user["id"], {
            "password": new_password,
            "resetToken": None,
            "resetTokenExpiry": None,
        })
