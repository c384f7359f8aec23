"""PostgreSQL read-side implementation of IRecruiterRepository."""

from typing import Optional

from sqlalchemy import String, cast, select

from talent_search.domain.entities.recruiter import RecruiterProfile
from talent_search.domain.repositories.recruiter_repository import IRecruiterRepository
from talent_search.domain.value_objects import SchoolType
from talent_search.infrastructure.persistence.models.read_models import (
    CoachTable,
    GameTable,
    SchoolTable,
    TeamTable,
)
from talent_search.infrastructure.persistence.repositories.base import PostgresRepository


class PostgresRecruiterRepository(PostgresRepository, IRecruiterRepository):

    async def get_profile(self, recruiter_id: str) -> Optional[RecruiterProfile]:
        async with self.session("load recruiter profile") as session:
            result = await session.execute(
                select(CoachTable, SchoolTable)
                .outerjoin(SchoolTable, SchoolTable.id == CoachTable.school_id)
                .where(cast(CoachTable.id, String) == recruiter_id)
            )
            row = result.first()
            if row is None:
                return None
            coach, school = row

            games = await session.execute(
                select(GameTable.id, GameTable.name)
                .join(TeamTable, TeamTable.game_id == GameTable.id)
                .where(TeamTable.coach_id == coach.id)
                .distinct()
            )
            game_rows = sorted(games.all(), key=lambda g: g.name)

        school_type = None
        if school is not None and school.type:
            try:
                school_type = SchoolType(school.type.upper())
            except ValueError:
                school_type = None

        return RecruiterProfile(
            id=str(coach.id),
            school_name=school.name if school is not None else coach.school,
            school_type=school_type,
            game_ids=[str(g.id) for g in game_rows],
            game_names=[g.name for g in game_rows],
        )
