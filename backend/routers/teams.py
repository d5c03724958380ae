# routers/teams.py - Team lead's own team; the lead is always the caller
from typing import List

from fastapi import APIRouter, Depends

from auth import require_permission, CurrentUser
from dependencies import get_team_registry
from schemas import TeamCreate, TeamMemberAdd, TeamOut, TeamMemberOut
from services.teams import TeamRegistry

router = APIRouter(prefix="/api/v1/teams", tags=["Teams"])


@router.post("", response_model=TeamOut, status_code=201)
async def create_team(
    data: TeamCreate,
    user: CurrentUser = Depends(require_permission("teams:manage")),
    teams: TeamRegistry = Depends(get_team_registry),
):
    return await teams.create_team(data.name, user.id)


@router.post("/{team_id}/members", status_code=201)
async def add_member(
    team_id: str,
    data: TeamMemberAdd,
    user: CurrentUser = Depends(require_permission("teams:manage")),
    teams: TeamRegistry = Depends(get_team_registry),
):
    await teams.add_member(team_id, data.user_id, user.id)
    return {"status": "added", "team_id": team_id, "user_id": data.user_id}


@router.get("/mine", response_model=TeamOut)
async def my_team(
    user: CurrentUser = Depends(require_permission("teams:manage")),
    teams: TeamRegistry = Depends(get_team_registry),
):
    return await teams.get_team_by_lead(user.id)


@router.get("/mine/members", response_model=List[TeamMemberOut])
async def my_team_members(
    user: CurrentUser = Depends(require_permission("teams:manage")),
    teams: TeamRegistry = Depends(get_team_registry),
):
    return await teams.get_my_team_members(user.id)
