"""Assembles PlayerProfile aggregates from the platform's player tables."""

from typing import Dict, Iterable, List, Optional, Tuple

from talent_search.domain.entities.player import (
    AcademicInfo,
    GameProfile,
    MainGameSummary,
    PlayerProfile,
    SchoolSummary,
)
from talent_search.domain.value_objects import SchoolType
from talent_search.infrastructure.persistence.models.read_models import (
    GameTable,
    PlayerGameProfileTable,
    PlayerTable,
    SchoolTable,
)


def _school_type(value: Optional[str]) -> Optional[SchoolType]:
    if not value:
        return None
    try:
        return SchoolType(value.upper())
    except ValueError:
        return None


class PlayerMapper:
    """Pure mapping; all rows are loaded by the repository beforehand."""

    @staticmethod
    def to_game_profile(row: PlayerGameProfileTable, game: GameTable) -> GameProfile:
        return GameProfile(
            game_id=str(game.id),
            game_name=game.name,
            game_short_name=game.short_name,
            username=row.username,
            rank=row.rank,
            rating=row.rating,
            role=row.role,
            agents=tuple(row.agents or ()),
            play_style=row.play_style,
            combine_score=row.combine_score,
            league_score=row.league_score,
        )

    @classmethod
    def to_domain(
        cls,
        player: PlayerTable,
        school: Optional[SchoolTable],
        main_game: Optional[GameTable],
        profiles: Iterable[Tuple[PlayerGameProfileTable, GameTable]],
    ) -> PlayerProfile:
        return PlayerProfile(
            id=str(player.id),
            first_name=player.first_name,
            last_name=player.last_name,
            username=player.username,
            image_url=player.image_url,
            location=player.location,
            bio=player.bio,
            school=SchoolSummary(
                id=str(school.id) if school else None,
                name=school.name if school else player.school,
                type=_school_type(school.type) if school else None,
                state=school.state if school else None,
            ),
            academics=AcademicInfo(
                class_year=player.class_year,
                gpa=float(player.gpa) if player.gpa is not None else None,
                graduation_date=player.graduation_date,
                intended_major=player.intended_major,
            ),
            main_game=MainGameSummary(
                id=str(main_game.id),
                name=main_game.name,
                short_name=main_game.short_name,
                icon_url=main_game.icon,
                color=main_game.color,
            ) if main_game else None,
            game_profiles=sorted(
                (cls.to_game_profile(row, game) for row, game in profiles),
                key=lambda p: (p.game_name.casefold(), p.game_id),
            ),
        )

    @classmethod
    def assemble(
        cls,
        players: List[PlayerTable],
        schools: Dict[str, SchoolTable],
        games: Dict[str, GameTable],
        profiles: Dict[str, List[Tuple[PlayerGameProfileTable, GameTable]]],
    ) -> List[PlayerProfile]:
        return [
            cls.to_domain(
                player,
                schools.get(str(player.school_id)) if player.school_id else None,
                games.get(str(player.main_game_id)) if player.main_game_id else None,
                profiles.get(str(player.id), []),
            )
            for player in players
        ]
