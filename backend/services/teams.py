# services/teams.py - Team registry: one team per lead, one team per member
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from errors import NotFoundError, ValidationError
from models import Team, TeamMember, Role
from schemas import TeamOut, TeamMemberOut
from services.users import UserDirectory

logger = logging.getLogger("taskdesk.teams")


def to_out(team: Team) -> TeamOut:
    return TeamOut(
        id=team.id,
        name=team.name,
        lead_id=team.lead.id,
        lead_name=team.lead.full_name,
        lead_email=team.lead.email,
        created_at=team.created_at,
    )


class TeamRegistry:

    def __init__(self, db: AsyncSession, users: UserDirectory):
        self.db = db
        self.users = users

    async def _find_by_lead(self, lead_id: str):
        result = await self.db.execute(
            select(Team).where(Team.lead_id == lead_id).options(selectinload(Team.lead))
        )
        return result.scalar_one_or_none()

    async def _name_taken(self, name: str) -> bool:
        result = await self.db.execute(select(Team.id).where(Team.name == name))
        return result.scalar_one_or_none() is not None

    async def _create_conflict(self, lead_id: str) -> str:
        """Message for a create that lost a race against a concurrent insert"""
        owned = await self.db.execute(select(Team.id).where(Team.lead_id == lead_id))
        if owned.scalar_one_or_none():
            return "Lead already has a team"
        return "Team name already exists"

    async def create_team(self, name: str, lead_id: str) -> TeamOut:
        lead = await self.users.get_by_id_or_throw(lead_id)
        if lead.role != Role.TEAM_LEAD:
            raise ValidationError("Only TEAM_LEAD can create teams")

        if await self._find_by_lead(lead_id):
            raise ValidationError("Lead already has a team")

        if await self._name_taken(name):
            raise ValidationError("Team name already exists")

        team = Team(name=name, lead_id=lead.id)
        self.db.add(team)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ValidationError(await self._create_conflict(lead_id))

        logger.info(f"Team {team.id} created by lead {lead_id}")
        return TeamOut(
            id=team.id,
            name=team.name,
            lead_id=lead.id,
            lead_name=lead.full_name,
            lead_email=lead.email,
            created_at=team.created_at,
        )

    async def add_member(self, team_id: str, user_id: str, caller_id: str) -> None:
        result = await self.db.execute(select(Team).where(Team.id == team_id))
        team = result.scalar_one_or_none()
        if not team:
            raise NotFoundError("Team not found")

        if team.lead_id != caller_id:
            raise ValidationError("Only the team lead can add members to this team")

        user = await self.users.get_by_id_or_throw(user_id)
        if user.role != Role.EMPLOYEE:
            raise ValidationError("Only EMPLOYEE users can be added to a team")

        existing = await self.db.execute(select(TeamMember).where(TeamMember.user_id == user.id))
        if existing.scalar_one_or_none():
            raise ValidationError("User already belongs to a team")

        self.db.add(TeamMember(team_id=team.id, user_id=user.id))
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ValidationError("User already belongs to a team")

        logger.info(f"User {user_id} added to team {team_id}")

    async def get_team_by_lead(self, lead_id: str) -> TeamOut:
        team = await self._find_by_lead(lead_id)
        if not team:
            raise NotFoundError("No team found for this lead")
        return to_out(team)

    async def get_my_team_members(self, lead_id: str) -> List[TeamMemberOut]:
        team = await self._find_by_lead(lead_id)
        if not team:
            raise NotFoundError("No team found for this lead")

        result = await self.db.execute(
            select(TeamMember)
            .where(TeamMember.team_id == team.id)
            .options(selectinload(TeamMember.user))
            .order_by(TeamMember.joined_at)
        )
        return [
            TeamMemberOut(id=m.user.id, full_name=m.user.full_name, email=m.user.email)
            for m in result.scalars().all()
        ]

    async def get_all_teams(self) -> List[TeamOut]:
        result = await self.db.execute(
            select(Team).options(selectinload(Team.lead)).order_by(Team.created_at)
        )
        return [to_out(t) for t in result.scalars().all()]
