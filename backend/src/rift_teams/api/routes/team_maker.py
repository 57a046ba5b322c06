"""REST endpoints for building custom-game teams and reporting results."""

from typing import Annotated, Literal, Optional

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from rift_teams.config import settings
from rift_teams.exceptions import (
    GenerationFailure,
    InfeasibleConstraints,
    PersistenceError,
    SelectionCountError,
    StructuralConflict,
)
from rift_teams.models.match import MatchRecord
from rift_teams.models.participant import Participant, SessionSelection, WishPriority
from rift_teams.models.team import Side, TeamPair, TeamSlot
from rift_teams.services.team_adjuster import ExclusionViolation, reassign_role, swap
from rift_teams.services.team_builder import GenerationResult
from rift_teams.services.team_evaluator import TeamEvaluator
from rift_teams.services.team_maker_service import TeamMakerService
from rift_teams.utils.role_normalizer import normalize_role_strict, normalize_roles, sort_roles

router = APIRouter(prefix="/api/team-maker", tags=["team-maker"])


def _get_service(request: Request) -> TeamMakerService:
    """Get or create the team maker service from app state."""
    if not hasattr(request.app.state, "team_maker"):
        request.app.state.team_maker = TeamMakerService.from_settings(
            request.app.state.repository, settings
        )
    return request.app.state.team_maker


class SelectionBody(BaseModel):
    participant_id: str
    excluded_roles: Optional[list[str]] = None  # None = use the stored exclusions
    wanted_roles: list[str] = Field(default_factory=list)
    role_wish: Optional[str] = None
    wish_priority: Optional[Literal["HIGH", "MEDIUM", "LOW"]] = None


class GenerateTeamsRequest(BaseModel):
    selections: list[SelectionBody]
    relaxed: bool = False


class SlotBody(BaseModel):
    participant_id: str
    role: str


class TeamPairBody(BaseModel):
    blue: list[SlotBody]
    red: list[SlotBody]


class SwapRequest(BaseModel):
    team_pair: TeamPairBody
    side_x: Side
    index_x: int
    side_y: Side
    index_y: int
    # participant id -> session exclusions, for the advisory violation check
    session_exclusions: Optional[dict[str, list[str]]] = None


class ReassignRequest(BaseModel):
    team_pair: TeamPairBody
    side: Side
    index: int
    role: str
    session_exclusions: Optional[dict[str, list[str]]] = None


class RematchRequest(BaseModel):
    team_pair: TeamPairBody


class ReportResultRequest(BaseModel):
    team_pair: TeamPairBody
    winner: Side


def _roster(service: TeamMakerService) -> dict[str, Participant]:
    try:
        return {p.id: p for p in service.list_participants()}
    except PersistenceError as e:
        raise HTTPException(status_code=502, detail=str(e))


def _participant(roster: dict[str, Participant], participant_id: str) -> Participant:
    participant = roster.get(participant_id)
    if participant is None:
        raise HTTPException(status_code=404, detail=f"Participant not found: {participant_id}")
    return participant


def _parse_roles(values: Optional[list[str]]):
    try:
        return normalize_roles(values)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _parse_role(value: str):
    try:
        return normalize_role_strict(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _to_selection(roster: dict[str, Participant], body: SelectionBody) -> SessionSelection:
    return SessionSelection.from_participant(
        _participant(roster, body.participant_id),
        excluded_roles=None if body.excluded_roles is None else _parse_roles(body.excluded_roles),
        wanted_roles=_parse_roles(body.wanted_roles),
        role_wish=_parse_role(body.role_wish) if body.role_wish else None,
        wish_priority=WishPriority(body.wish_priority) if body.wish_priority else None,
    )


def _to_team_pair(roster: dict[str, Participant], body: TeamPairBody) -> TeamPair:
    """Rebuild a team pair from ids, using current roster data."""
    def slots(items: list[SlotBody]) -> tuple[TeamSlot, ...]:
        return tuple(
            TeamSlot(participant=_participant(roster, s.participant_id), role=_parse_role(s.role))
            for s in items
        )

    return TeamPair(blue=slots(body.blue), red=slots(body.red))


def _session_selections(
    roster: dict[str, Participant],
    team_pair: TeamPair,
    session_exclusions: Optional[dict[str, list[str]]],
) -> list[SessionSelection]:
    session_exclusions = session_exclusions or {}
    selections = []
    for slot, _ in team_pair.entries():
        excluded = session_exclusions.get(slot.participant.id)
        selections.append(SessionSelection.from_participant(
            slot.participant,
            excluded_roles=None if excluded is None else _parse_roles(excluded),
        ))
    return selections


def _serialize_participant(participant: Participant) -> dict:
    return {
        "id": participant.id,
        "name": participant.name,
        "primary_role": participant.primary_role.value,
        "primary_rating": participant.primary_rating,
        "secondary_rating": participant.secondary_rating,
        "wins": participant.wins,
        "losses": participant.losses,
        "win_rate": participant.win_rate,
        "labels": list(participant.labels),
        "excluded_roles": [r.value for r in sort_roles(participant.excluded_roles)],
    }


def _serialize_side(slots: tuple[TeamSlot, ...]) -> list[dict]:
    return [
        {
            "participant_id": slot.participant.id,
            "name": slot.participant.name,
            "role": slot.role.value,
            "rating": slot.rating,
            "on_primary_role": slot.on_primary_role,
        }
        for slot in slots
    ]


def _serialize_team_pair(team_pair: TeamPair) -> dict:
    return {
        "blue": _serialize_side(team_pair.blue),
        "red": _serialize_side(team_pair.red),
        "blue_rating": TeamEvaluator.calculate_side_rating(team_pair.blue),
        "red_rating": TeamEvaluator.calculate_side_rating(team_pair.red),
    }


def _edit_response(
    service: TeamMakerService,
    roster: dict[str, Participant],
    edited: TeamPair,
    session_exclusions: Optional[dict[str, list[str]]],
) -> dict:
    selections = _session_selections(roster, edited, session_exclusions)
    return {
        "team_pair": _serialize_team_pair(edited),
        "structural_problems": edited.structural_problems(),
        "exclusion_violations": _serialize_violations(service.exclusion_violations(edited, selections)),
    }


def _serialize_violations(violations: list[ExclusionViolation]) -> list[dict]:
    return [
        {"participant_id": v.participant_id, "name": v.participant_name, "role": v.role.value, "side": v.side.value}
        for v in violations
    ]


def _serialize_generation(result: GenerationResult) -> dict:
    evaluation = result.evaluation
    return {
        "team_pair": _serialize_team_pair(result.team_pair),
        "evaluation": {
            "blue_rating": evaluation.blue_rating,
            "red_rating": evaluation.red_rating,
            "blue_average": evaluation.blue_average,
            "red_average": evaluation.red_average,
            "rating_gap": evaluation.rating_gap,
            "primary_count": evaluation.primary_count,
            "main_role_count": evaluation.main_role_count,
        },
        "trials_run": result.trials_run,
        "trials_completed": result.trials_completed,
        "relaxed_roles": [r.value for r in result.relaxed_roles],
    }


def _serialize_match(record: MatchRecord) -> dict:
    return {
        "id": record.id,
        "played_at": record.played_at.isoformat(),
        "winner": record.winner.value,
        "entries": [
            {"participant_id": e.participant_id, "role": e.role.value, "side": e.side.value}
            for e in record.entries
        ],
    }


@router.get("/participants")
def list_participants(request: Request):
    """Roster snapshot used to populate a selection."""
    service = _get_service(request)
    return {"participants": [_serialize_participant(p) for p in _roster(service).values()]}


@router.post("/teams")
def generate_teams(request: Request, body: GenerateTeamsRequest):
    """Validate ten selections and build the best team pair found."""
    service = _get_service(request)
    roster = _roster(service)
    selections = [_to_selection(roster, s) for s in body.selections]

    try:
        result = service.validate_and_generate(selections, relaxed=body.relaxed)
    except SelectionCountError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InfeasibleConstraints as e:
        raise HTTPException(
            status_code=409,
            detail={"message": str(e), "roles": [r.value for r in e.roles], "threshold": e.threshold},
        )
    except GenerationFailure as e:
        raise HTTPException(
            status_code=503,
            detail={"message": str(e), "trial_count": e.trial_count},
        )

    return _serialize_generation(result)


@router.post("/teams/swap")
def swap_slots(request: Request, body: SwapRequest):
    """Exchange the participants in two slots.

    The edited pair comes back with its structural problems and exclusion
    violations listed; neither blocks the edit.
    """
    service = _get_service(request)
    roster = _roster(service)
    team_pair = _to_team_pair(roster, body.team_pair)

    try:
        edited = swap(team_pair, body.side_x, body.index_x, body.side_y, body.index_y)
    except StructuralConflict as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _edit_response(service, roster, edited, body.session_exclusions)


@router.post("/teams/reassign")
def reassign_slot_role(request: Request, body: ReassignRequest):
    """Change the role of one slot."""
    service = _get_service(request)
    roster = _roster(service)
    team_pair = _to_team_pair(roster, body.team_pair)

    try:
        edited = reassign_role(team_pair, body.side, body.index, _parse_role(body.role))
    except StructuralConflict as e:
        raise HTTPException(status_code=409, detail=str(e))

    return _edit_response(service, roster, edited, body.session_exclusions)


@router.post("/teams/rematch")
def rematch(request: Request, body: RematchRequest):
    """Selections for replaying with the same ten participants."""
    service = _get_service(request)
    team_pair = _to_team_pair(_roster(service), body.team_pair)
    return {
        "selections": [
            {
                "participant_id": s.participant_id,
                "excluded_roles": [r.value for r in sort_roles(s.excluded_roles)],
            }
            for s in service.rematch_selections(team_pair)
        ]
    }


@router.post("/matches", status_code=201)
def report_match(request: Request, body: ReportResultRequest):
    """Record the winner and update every participant's rating and record.

    Returns 207 when the match was stored but some participant updates failed.
    """
    service = _get_service(request)
    team_pair = _to_team_pair(_roster(service), body.team_pair)

    try:
        result = service.report_result(team_pair, body.winner)
    except StructuralConflict as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=502, detail=str(e))

    payload = {
        "match_id": result.match_id,
        "winner": result.winner.value,
        "updated": result.updated,
        "failed": result.failed,
    }
    if not result.success:
        return JSONResponse(status_code=207, content=payload)
    return payload


@router.get("/matches")
def list_matches(
    request: Request,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
):
    """Match history, newest first."""
    service = _get_service(request)
    try:
        records = service.match_history(limit)
    except PersistenceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"matches": [_serialize_match(r) for r in records]}
