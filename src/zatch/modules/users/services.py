"""User service for profile management."""

from typing import Annotated

from fastapi import Depends

from zatch.core.auth.backend import hash_password, verify_password
from zatch.core.errors import BadRequestError
from zatch.modules.users.models import User
from zatch.modules.users.repos import RefreshTokenRepo, UserRepo
from zatch.modules.users.schemas import UserPasswordUpdate, UserUpdate


class UserService:
    """Operations a signed-in user performs on their own account."""

    def __init__(self, repo: UserRepo, tokens: RefreshTokenRepo) -> None:
        self.repo = repo
        self.tokens = tokens

    async def update_profile(self, user: User, data: UserUpdate) -> User:
        """Apply profile changes."""
        if data.full_name:
            user.full_name = data.full_name
        return await self.repo.update(user)

    async def change_password(self, user: User, data: UserPasswordUpdate) -> int:
        """Change the password and sign the user out everywhere.

        Returns:
            Number of refresh tokens revoked

        Raises:
            BadRequestError: If the current password does not match
        """
        if not verify_password(data.current_password, user.password_hash):
            raise BadRequestError(
                "Current password is incorrect",
                error_code="invalid_current_password",
            )
        user.password_hash = hash_password(data.new_password)
        await self.repo.update(user)
        return await self.tokens.revoke_all_for_user(user.id)


# Type alias for dependency injection
UserSvc = Annotated[UserService, Depends(UserService)]
