from pydantic import Field

from .base import CamelModel


class MemberOverview(CamelModel):
    id: int
    name: str
    membership_plan_name: str | None = None
    owes_us: str


class ClubMembersOverview(CamelModel):
    members: list[MemberOverview] = Field(default_factory=list)
