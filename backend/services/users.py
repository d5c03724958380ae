# services/users.py - User directory: accounts, roles, lookups
import logging
from typing import Callable, List

from email_validator import validate_email, EmailNotValidError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from errors import NotFoundError, ValidationError
from models import User, Role
from schemas import UserSummary, EmployeeOut

logger = logging.getLogger("taskdesk.users")

ASSIGNABLE_ROLES = (Role.EMPLOYEE, Role.TEAM_LEAD)


def normalize_email(email: str) -> str:
    """Canonical form used for storage and lookup; matches what EmailStr yields.

    Raises ValidationError for addresses email-validator rejects.
    """
    try:
        return validate_email(email, check_deliverability=False).normalized
    except EmailNotValidError as e:
        raise ValidationError(f"Invalid email: {e}")


def to_summary(user: User) -> UserSummary:
    return UserSummary(
        id=user.id,
        full_name=user.full_name,
        email=user.email,
        role=user.role,
        active=bool(user.is_active),
    )


class UserDirectory:
    """Stores accounts and resolves identities for the other services"""

    def __init__(self, db: AsyncSession, password_hasher: Callable[[str], str]):
        self.db = db
        self.password_hasher = password_hasher

    async def create(self, full_name: str, email: str, password: str, role: Role) -> UserSummary:
        email = normalize_email(email)
        existing = await self.db.execute(select(User.id).where(User.email == email))
        if existing.scalar_one_or_none():
            raise ValidationError("Email already exists")

        user = User(
            full_name=full_name,
            email=email,
            password_hash=self.password_hasher(password),
            role=Role(role),
            is_active=True,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # A concurrent request registered the same email first
            await self.db.rollback()
            raise ValidationError("Email already exists")
        await self.db.refresh(user)

        logger.info(f"User created: {user.id} ({user.role.value})")
        return to_summary(user)

    async def get_by_id_or_throw(self, user_id: str) -> User:
        result = await self.db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if not user:
            raise NotFoundError(f"User not found: {user_id}")
        return user

    async def get_by_email_or_throw(self, email: str) -> User:
        try:
            email = normalize_email(email)
        except ValidationError:
            raise NotFoundError(f"User not found: {email}")
        result = await self.db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        if not user:
            raise NotFoundError(f"User not found: {email}")
        return user

    async def list_employees(self) -> List[EmployeeOut]:
        """Users who can be picked when assigning work"""
        result = await self.db.execute(
            select(User)
            .where(User.role.in_(ASSIGNABLE_ROLES))
            .order_by(User.full_name)
        )
        return [
            EmployeeOut(id=u.id, full_name=u.full_name, email=u.email, role=u.role)
            for u in result.scalars().all()
        ]

    async def list_all(self) -> List[UserSummary]:
        result = await self.db.execute(select(User).order_by(User.created_at))
        return [to_summary(u) for u in result.scalars().all()]

    async def ensure_bootstrap_admin(self, email: str, password: str, full_name: str = "Administrator") -> None:
        """Create the first ADMIN account if the email is not registered yet"""
        email = normalize_email(email)
        existing = await self.db.execute(select(User.id).where(User.email == email))
        if existing.scalar_one_or_none():
            return
        await self.create(full_name, email, password, Role.ADMIN)
        logger.info(f"Bootstrap admin created: {email}")
