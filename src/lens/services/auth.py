"""Authentication service for the Lens application.

Users sign up and sign in with an email address and a password. Passwords
are stored as bcrypt hashes in the users table; usernames are claimed in
the username index so profile URLs resolve to exactly one user.
"""

import os
import re
import uuid
from dataclasses import dataclass

import bcrypt

from ..error_handling import AuthenticationError, AuthorizationError, DatabaseError, ValidationError
from ..logging_config import get_logger, log_security_event, log_user_action
from ..models.album import Album
from ..models.user import UserProfile
from .store import LensStore

logger = get_logger(__name__)

USERNAME_PATTERN = re.compile(r"^[a-z0-9_.-]{3,30}$")
MIN_PASSWORD_LENGTH = 8
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password."


@dataclass
class UserInfo:
    """Represents the signed-in user."""

    user_id: str
    email: str
    name: str | None = None
    username: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.username or self.email


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored hash is not a bcrypt hash
        return False


class AuthService:
    """
    Service for email/password authentication.

    One instance lives in each Streamlit session and holds that session's
    current user.
    """

    def __init__(self, store: LensStore) -> None:
        self.store = store
        self._current_user: UserInfo | None = None
        self._development_mode = self._is_development_mode()

        if self._development_mode:
            logger.info("development_auth_mode_enabled", message="Using development authentication mode")

    def _is_development_mode(self) -> bool:
        """Check if running in development mode."""
        environment = os.getenv("ENVIRONMENT", "development").lower().strip()
        return environment in ["development", "dev", "local"]

    def sign_up(self, email: str, password: str, username: str, full_name: str = "") -> UserInfo:
        """
        Register a new user and sign them in.

        Args:
            email: Email address used to sign in
            password: Plain-text password (at least 8 characters)
            username: Requested username (lower-cased before use)
            full_name: Display name

        Returns:
            UserInfo: The signed-in user

        Raises:
            ValidationError: If any field is invalid or already taken
            DatabaseError: If the user cannot be stored
        """
        email = email.strip()
        username = username.strip().lower()
        full_name = full_name.strip()

        if not email or "@" not in email:
            raise ValidationError("Please enter a valid email address.", code="invalid_email")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters.", code="weak_password"
            )
        if not USERNAME_PATTERN.match(username):
            raise ValidationError(
                "Username must be 3-30 characters: lowercase letters, numbers, '.', '_' or '-'.",
                code="invalid_username",
            )
        if self.store.get_username(username) is not None:
            raise ValidationError("This username is already taken.", code="username_taken")
        if self.store.get_user_by_email(email) is not None:
            raise ValidationError("An account with this email already exists.", code="email_taken")

        profile = UserProfile.create_new(uid=str(uuid.uuid4()), username=username, full_name=full_name, email=email)

        # A users row never exists without its username claim
        try:
            self.store.put_username(username, profile.uid, profile.to_dict()["created_at"])
        except DatabaseError as e:
            if self.store.get_username(username) is not None:
                raise ValidationError("This username is already taken.", code="username_taken") from e
            raise

        try:
            self.store.put_user(profile, hash_password(password))
        except DatabaseError:
            self.store.delete_username(username)
            raise

        log_user_action(profile.uid, "user_signed_up", username=username)

        user = UserInfo(user_id=profile.uid, email=email, name=full_name or None, username=username)
        self._current_user = user
        return user

    def sign_in(self, email: str, password: str) -> UserInfo:
        """
        Sign in with email and password.

        Raises:
            AuthenticationError: If the email is unknown or the password does not match
        """
        row = self.store.get_user_by_email(email.strip()) if email.strip() else None

        if row is None or not verify_password(password, row.get("password_hash") or ""):
            log_security_event("sign_in_failed", context={"email_known": row is not None})
            raise AuthenticationError(
                "Sign-in failed",
                code="invalid_credentials",
                user_message=INVALID_CREDENTIALS_MESSAGE,
            )

        user = UserInfo(
            user_id=row["uid"],
            email=row["email"],
            name=row.get("full_name") or None,
            username=row.get("username") or None,
        )
        self._current_user = user
        log_user_action(user.user_id, "user_signed_in")
        return user

    def sign_out(self) -> None:
        """Clear the current authentication state."""
        user_id = self._current_user.user_id if self._current_user else None
        self._current_user = None
        log_user_action(user_id or "unknown", "user_signed_out")

    def get_current_user(self) -> UserInfo | None:
        """Get the currently authenticated user."""
        return self._current_user

    def is_authenticated(self) -> bool:
        """Check if a user is currently authenticated."""
        return self._current_user is not None

    def ensure_owner(self, album: Album) -> UserInfo:
        """
        Ensure the current user owns the album.

        Raises:
            AuthenticationError: If user is not authenticated
            AuthorizationError: If user doesn't own the album
        """
        return ensure_album_owner(album, self._current_user)

    def get_profile(self, uid: str) -> UserProfile:
        """Get the stored profile of a user, see ``load_user_profile``."""
        return load_user_profile(self.store, uid, self._current_user)


def require_user(user: UserInfo | None) -> UserInfo:
    """
    Raises:
        AuthenticationError: If no user is given
    """
    if user is None:
        raise AuthenticationError(
            "User is not authenticated", code="user_not_authenticated", user_message="You must be logged in."
        )
    return user


def ensure_album_owner(album: Album, user: UserInfo | None) -> UserInfo:
    """
    Check that the user owns the album.

    Raises:
        AuthenticationError: If no user is given
        AuthorizationError: If the user doesn't own the album
    """
    user = require_user(user)
    if not album.is_owned_by(user.user_id):
        log_security_event("album_access_denied", user_id=user.user_id, album_id=album.id)
        raise AuthorizationError(
            f"Access denied to album: {album.id}",
            code="album_access_denied",
            user_message="You don't have permission to edit this album.",
            details={"album_id": album.id, "user_id": user.user_id},
        )
    return user


def load_user_profile(store: LensStore, uid: str, user: UserInfo | None = None) -> UserProfile:
    """
    Get the stored profile of a user.

    When the profile row is missing, a profile without username is built
    from ``user`` if it is the same user.
    """
    profile = store.get_user(uid)
    if profile is not None:
        return profile

    logger.warning("user_profile_missing", user_id=uid)
    current = user if user and user.user_id == uid else None
    return UserProfile(
        uid=uid,
        username="",
        full_name=(current.name or "") if current else "",
        email=current.email if current else "",
    )
