"""Account directory: registration and credential checks.

Session tokens are not issued here; the login route feeds the returned
identity into ``notekeeper.utils.jwt_auth.create_access_token``.
"""
from __future__ import annotations

from notekeeper.core.exceptions import InvalidCredentialsError, ValidationError
from notekeeper.core.logging import get_logger
from notekeeper.storage.users_store import UserRecord, UsersStore
from notekeeper.utils.auth_hash import dummy_verify, hash_password, verify_password

logger = get_logger(__name__)


class AccountDirectory:
    def __init__(self, users: UsersStore):
        self.users = users

    def register(self, username: str, password: str) -> UserRecord:
        if not username or not password:
            raise ValidationError("username and password are required")

        hpw = hash_password(password)  # never store plaintext
        user = self.users.create(username, hpw)
        logger.info("user_registered", user_id=user.id)
        return user

    def authenticate(self, username: str, password: str) -> str:
        """Return the user id for a valid username/password pair.

        Unknown usernames and wrong passwords raise the same error and take
        roughly the same time.
        """
        rec = self.users.get_by_username(username) if username else None
        if rec is None:
            dummy_verify()
            valid = False
        else:
            valid = verify_password(password, rec.hashed_password)

        if not valid:
            logger.warning("login_failed")
            raise InvalidCredentialsError()
        return rec.id
