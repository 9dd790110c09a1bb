"""Identity service: staff accounts, login and role checks."""

import logging
from dataclasses import dataclass

from restaurant_pos_service.auth.credentials import generate_token, hash_password, verify_password
from restaurant_pos_service.errors import (
    AccountDisabledError,
    DuplicateKeyError,
    InvalidCredentialsError,
    RoleMismatchError,
    UserNotFoundError,
)
from restaurant_pos_service.models.common import generate_entity_id, utc_now
from restaurant_pos_service.models.user_models import User, UserPatch, UserRole
from restaurant_pos_service.repositories.pos_repositories import UserRepository

logger = logging.getLogger(__name__)

DEFAULT_USERS: list[tuple[str, str, str, UserRole]] = [
    ("jamjambar", "bar@123", "Bar Staff", UserRole.BAR),
    ("jamjamkitchen", "kitchen@123", "Kitchen Staff", UserRole.KITCHEN),
    ("admin", "admin@123", "Administrator", UserRole.ADMIN),
]


@dataclass
class LoginResult:
    """Successful login.

    Attributes:
        user: The authenticated user
        token: Opaque random token, not persisted
    """

    user: User
    token: str


class IdentityService:
    """Service for staff users and authentication."""

    def __init__(self, user_repository: UserRepository) -> None:
        """Initialize the IdentityService.

        Args:
            user_repository: Repository for users
        """
        self.user_repository = user_repository

    async def create_user(self, username: str, password: str, name: str, role: UserRole) -> User:
        """Register a new user.

        Args:
            username: Login name, stored lowercased
            password: Plaintext password, stored as a digest
            name: Display name
            role: Staff role

        Returns:
            The created user

        Raises:
            DuplicateKeyError: If the username is taken
        """
        normalized = username.strip().lower()
        if self.user_repository.find_by_username(normalized) is not None:
            raise DuplicateKeyError("Username already exists")

        now = utc_now()
        user = User(
            user_id=generate_entity_id("USER"),
            username=normalized,
            password_hash=hash_password(password),
            name=name,
            role=role,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        self.user_repository.create(user)
        logger.info(f"Created user {normalized} with role {role.value}")
        return user

    async def find_by_username(self, username: str) -> User | None:
        return self.user_repository.find_by_username(username)

    async def validate_login(
        self, username: str, password: str, role: UserRole | None = None
    ) -> LoginResult:
        """Check credentials and the requested role.

        Admins pass any role check.

        Args:
            username: Login name (case-insensitive)
            password: Plaintext password
            role: Role the user is logging in as, if any

        Returns:
            LoginResult with the user and a fresh token

        Raises:
            UserNotFoundError: No user has this username
            AccountDisabledError: The user is deactivated
            InvalidCredentialsError: The password does not match
            RoleMismatchError: The user may not act in the requested role
        """
        user = self.user_repository.find_by_username(username)
        if user is None:
            raise UserNotFoundError("User not found")

        if not user.is_active:
            raise AccountDisabledError("Account is deactivated")

        if not verify_password(password, user.password_hash):
            raise InvalidCredentialsError("Invalid password")

        if role is not None and user.role != role and user.role != UserRole.ADMIN:
            raise RoleMismatchError(f"User is not authorized for {role.value} role")

        logger.info(f"User {user.username} logged in as {(role or user.role).value}")
        return LoginResult(user=user, token=generate_token())

    async def get_all_users(self) -> list[User]:
        return self.user_repository.list_all()

    async def update_user(self, user_id: str, patch: UserPatch) -> User:
        """Apply a partial update, hashing a new password if one is given.

        Raises:
            NotFoundError: If the user does not exist
        """
        values = patch.model_dump(by_alias=True, exclude_none=True, exclude={"password"})
        if "role" in values:
            values["role"] = values["role"].value
        if patch.password is not None:
            values["password"] = hash_password(patch.password)
        return self.user_repository.update_fields(user_id, values)

    async def deactivate_user(self, user_id: str) -> User:
        """Soft-delete a user by clearing isActive."""
        user = self.user_repository.update_fields(user_id, {"isActive": False})
        logger.info(f"Deactivated user {user_id}")
        return user

    async def seed_default_users(self) -> list[str]:
        """Create the default bar, kitchen and admin accounts.

        Existing usernames are left untouched.

        Returns:
            list: Usernames that were created
        """
        created: list[str] = []
        for username, password, name, role in DEFAULT_USERS:
            try:
                await self.create_user(username, password, name, role)
                created.append(username)
            except DuplicateKeyError:
                logger.debug(f"Default user {username} already exists")
        return created
