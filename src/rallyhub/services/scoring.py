"""Championship scoring: pure functions over already-fetched result rows."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from typing import Literal

from rallydb.models import Championship, ChampionshipRally, RallyResult

ParticipantType = Literal["registered", "manual_linked", "manual_unlinked"]

UNKNOWN_PLAYER = "Unknown Player"
UNKNOWN_CLASS = "Unknown Class"


@dataclass(frozen=True)
class ChampionshipResultRow:
    """One participant's score in one championship round."""

    participant_key: str
    participant_name: str
    participant_type: ParticipantType
    class_name: str
    rally_id: str
    round_number: int
    rally_points: float
    extra_points: float
    participated: bool
    class_position: int | None = None

    @property
    def overall_points(self) -> float:
        return self.rally_points + self.extra_points


@dataclass(frozen=True)
class RallyScoreLine:
    rally_id: str
    round_number: int
    rally_points: float
    extra_points: float
    overall_points: float
    participated: bool
    class_position: int | None = None


@dataclass(frozen=True)
class ChampionshipParticipantResult:
    participant_key: str
    participant_name: str
    participant_type: ParticipantType
    class_name: str
    rally_scores: tuple[RallyScoreLine, ...]
    total_rally_points: float
    total_extra_points: float
    total_overall_points: float
    rounds_participated: int
    championship_position: int

    @property
    def is_linked(self) -> bool:
        return self.participant_type != "manual_unlinked"


@dataclass(frozen=True)
class ChampionshipStandings:
    championship_id: str
    championship_name: str
    participants: tuple[ChampionshipParticipantResult, ...]
    total_rounds: int
    linked_participants: int
    unlinked_participants: int
    warnings: tuple[str, ...]

    def for_class(self, class_name: str) -> list[ChampionshipParticipantResult]:
        return [p for p in self.participants if p.class_name == class_name]


def participant_identity(
    result: RallyResult, class_name: str | None = None,
) -> tuple[str, ParticipantType]:
    """Return ``(participant_key, participant_type)`` for a result row.

    Registered users win over linked manual participants, which win over
    free-text names. *class_name* overrides the class typed on the row.
    """
    if class_name is None:
        class_name = result.class_name or ""
    if result.user_id:
        return f"user_{result.user_id}_{class_name}", "registered"
    if result.manual_participant_id:
        return f"manual_{result.manual_participant_id}_{class_name}", "manual_linked"
    return f"unlinked_{result.participant_name}_{class_name}", "manual_unlinked"


def resolve_participant(result: RallyResult) -> tuple[str, str] | None:
    """Display name and class for a result row, or None if it names nobody.

    A registered user's row without a typed name falls back to the user's
    player name and the class they registered in.
    """
    name = (result.participant_name or "").strip()
    class_name = result.class_name or ""
    if name:
        return name, class_name
    if not result.user_id:
        return None
    return (
        result.player_name or UNKNOWN_PLAYER,
        class_name or result.registered_class or UNKNOWN_CLASS,
    )


def order_rounds(rounds: Iterable[ChampionshipRally]) -> list[ChampionshipRally]:
    """Active rounds sorted by round number."""
    return sorted((r for r in rounds if r.is_active), key=lambda r: r.round_number)


def build_result_rows(
    results: Iterable[RallyResult],
    rounds: Sequence[ChampionshipRally],
) -> list[ChampionshipResultRow]:
    """Turn raw ``rally_results`` rows into aggregation input.

    Results for rallies outside *rounds* are ignored, as are rows with neither
    a user nor a participant name. Any result entry counts as participation.
    """
    round_by_rally = {r.rally_id: r.round_number for r in rounds}
    rows: list[ChampionshipResultRow] = []
    for result in results:
        round_number = round_by_rally.get(result.rally_id)
        if round_number is None:
            continue
        resolved = resolve_participant(result)
        if resolved is None:
            continue
        name, class_name = resolved
        key, participant_type = participant_identity(result, class_name)
        rows.append(ChampionshipResultRow(
            participant_key=key,
            participant_name=name,
            participant_type=participant_type,
            class_name=class_name,
            rally_id=result.rally_id,
            round_number=round_number,
            rally_points=result.total_points,
            extra_points=result.extra_points,
            participated=True,
            class_position=result.class_position,
        ))
    return rows


def _row_rank(row: ChampionshipResultRow) -> tuple[bool, float]:
    return row.participated, row.overall_points


def _ranking_key(p: ChampionshipParticipantResult) -> tuple:
    return (
        -p.total_overall_points,
        -p.total_extra_points,
        -p.rounds_participated,
        p.participant_name.casefold(),
        p.participant_key,
    )


def aggregate_championship(
    rows: Iterable[ChampionshipResultRow],
    rounds: Sequence[ChampionshipRally] | None = None,
) -> list[ChampionshipParticipantResult]:
    """Roll result rows up into ranked per-participant, per-class totals.

    Several rows for the same participant, class and round keep a
    participated row over a non-participated one, then the one with the most
    overall points (first seen on ties). When *rounds* is given,
    rounds a participant has no row for appear as non-participating zero
    lines. Totals count only lines with ``participated = True``.

    Within a class, positions go by total overall points, then extra points,
    then rounds participated (all descending), then name and key.

    Returns participants grouped by class name, each class in position order.
    """
    groups: dict[tuple[str, str], dict[int, ChampionshipResultRow]] = {}
    first_row: dict[tuple[str, str], ChampionshipResultRow] = {}
    for row in rows:
        group_key = (row.participant_key, row.class_name)
        first_row.setdefault(group_key, row)
        by_round = groups.setdefault(group_key, {})
        best = by_round.get(row.round_number)
        if best is None or _row_rank(row) > _row_rank(best):
            by_round[row.round_number] = row

    unranked: list[ChampionshipParticipantResult] = []
    for group_key, by_round in groups.items():
        lines = [
            RallyScoreLine(
                rally_id=row.rally_id,
                round_number=row.round_number,
                rally_points=row.rally_points,
                extra_points=row.extra_points,
                overall_points=row.overall_points,
                participated=row.participated,
                class_position=row.class_position,
            )
            for row in by_round.values()
        ]
        for rnd in rounds or ():
            if rnd.round_number not in by_round:
                lines.append(RallyScoreLine(
                    rally_id=rnd.rally_id,
                    round_number=rnd.round_number,
                    rally_points=0,
                    extra_points=0,
                    overall_points=0,
                    participated=False,
                ))
        lines.sort(key=lambda line: line.round_number)

        counted = [line for line in lines if line.participated]
        head = first_row[group_key]
        unranked.append(ChampionshipParticipantResult(
            participant_key=head.participant_key,
            participant_name=head.participant_name,
            participant_type=head.participant_type,
            class_name=head.class_name,
            rally_scores=tuple(lines),
            total_rally_points=sum(line.rally_points for line in counted),
            total_extra_points=sum(line.extra_points for line in counted),
            total_overall_points=sum(line.overall_points for line in counted),
            rounds_participated=len(counted),
            championship_position=0,
        ))

    by_class: dict[str, list[ChampionshipParticipantResult]] = {}
    for participant in unranked:
        by_class.setdefault(participant.class_name, []).append(participant)

    ranked: list[ChampionshipParticipantResult] = []
    for class_name in sorted(by_class):
        ordered = sorted(by_class[class_name], key=_ranking_key)
        ranked.extend(
            _with_position(participant, position)
            for position, participant in enumerate(ordered, start=1)
        )
    return ranked


def _with_position(
    participant: ChampionshipParticipantResult, position: int,
) -> ChampionshipParticipantResult:
    return replace(participant, championship_position=position)


def compute_standings(
    championship: Championship,
    rounds: Sequence[ChampionshipRally],
    results: Iterable[RallyResult],
) -> ChampionshipStandings:
    """Full standings for *championship* from its rounds and raw results."""
    ordered = order_rounds(rounds)
    participants = aggregate_championship(build_result_rows(results, ordered), ordered)

    linked = sum(1 for p in participants if p.is_linked)
    unlinked = len(participants) - linked
    warnings: list[str] = []
    if not ordered:
        warnings.append("No rallies found in championship")
    if unlinked:
        warnings.append(f"{unlinked} unlinked participants found")

    return ChampionshipStandings(
        championship_id=championship.id,
        championship_name=championship.name,
        participants=tuple(participants),
        total_rounds=len(ordered),
        linked_participants=linked,
        unlinked_participants=unlinked,
        warnings=tuple(warnings),
    )
