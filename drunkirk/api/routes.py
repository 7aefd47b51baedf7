from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status
from pydantic import TypeAdapter, ValidationError

from drunkirk.actions import UserAction
from drunkirk.api.deps import get_controller
from drunkirk.api.models import (
    AddPlayerRequest,
    CatalogItem,
    CatalogResponse,
    CatalogSection,
    GameState,
    StandingsResponse,
    TotalRoundsRequest,
)
from drunkirk.assets.registry import catalog_sections, challenge_title
from drunkirk.controller import GameController
from drunkirk.core.standings import standings, winner_label
from drunkirk.websocket_hub import hub

router = APIRouter()

_user_action = TypeAdapter(UserAction)


async def _broadcast_if_changed(before: GameState, after: GameState) -> None:
    if after is before:
        return
    await hub.broadcast(
        {
            "type": "game_updated",
            "phase": after.phase.value,
            "round": after.round,
            "turn_in_round": after.turn_in_round,
        }
    )


@router.websocket("/ws/game")
async def game_updates_ws(websocket: WebSocket) -> None:
    await hub.connect(websocket)

    try:
        # Keep the socket open; client can optionally send pings.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await hub.disconnect(websocket)
    except Exception:
        await hub.disconnect(websocket)
        raise


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/game", response_model=GameState)
async def get_game_route(controller: GameController = Depends(get_controller)) -> GameState:
    return controller.state


@router.post("/game/actions", response_model=GameState)
async def action_route(body: dict[str, Any], controller: GameController = Depends(get_controller)) -> GameState:
    try:
        action = _user_action.validate_python(body)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e

    before = controller.state
    after = controller.dispatch(action)
    await _broadcast_if_changed(before, after)
    return after


@router.post("/game/players", response_model=GameState)
async def add_player_route(payload: AddPlayerRequest, controller: GameController = Depends(get_controller)) -> GameState:
    before = controller.state
    after = controller.add_player(payload.name)
    await _broadcast_if_changed(before, after)
    return after


@router.delete("/game/players/{player_id}", response_model=GameState)
async def remove_player_route(player_id: str, controller: GameController = Depends(get_controller)) -> GameState:
    if controller.state.player_by_id(player_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Player not found")

    before = controller.state
    after = controller.remove_player(player_id)
    await _broadcast_if_changed(before, after)
    return after


@router.put("/game/rounds", response_model=GameState)
async def set_rounds_route(payload: TotalRoundsRequest, controller: GameController = Depends(get_controller)) -> GameState:
    before = controller.state
    after = controller.set_total_rounds(payload.total_rounds)
    await _broadcast_if_changed(before, after)
    return after


@router.post("/game/start", response_model=GameState)
async def start_game_route(controller: GameController = Depends(get_controller)) -> GameState:
    before = controller.state
    after = controller.start_game()
    await _broadcast_if_changed(before, after)
    return after


@router.post("/game/next", response_model=GameState)
async def next_turn_route(controller: GameController = Depends(get_controller)) -> GameState:
    before = controller.state
    after = controller.next_turn()
    await _broadcast_if_changed(before, after)
    return after


@router.post("/game/skip", response_model=GameState)
async def skip_turn_route(controller: GameController = Depends(get_controller)) -> GameState:
    before = controller.state
    after = controller.skip_turn()
    await _broadcast_if_changed(before, after)
    return after


@router.post("/game/reset", response_model=GameState)
async def reset_game_route(controller: GameController = Depends(get_controller)) -> GameState:
    before = controller.state
    after = controller.reset_game()
    await _broadcast_if_changed(before, after)
    return after


@router.get("/game/standings", response_model=StandingsResponse)
async def standings_route(controller: GameController = Depends(get_controller)) -> StandingsResponse:
    state = controller.state
    return StandingsResponse(rows=standings(state), winner_label=winner_label(state), game_over=state.is_game_over)


@router.get("/challenges", response_model=CatalogResponse)
async def challenges_route(controller: GameController = Depends(get_controller)) -> CatalogResponse:
    state = controller.state
    advanced = state.advanced
    sections = [
        CatalogSection(
            title=cat,
            enabled=advanced.is_category_enabled(cat),
            data=[
                CatalogItem(
                    id=c.id,
                    title=challenge_title(c),
                    favorite=advanced.is_favorite(c.id),
                    disabled=advanced.is_disabled(c.id),
                )
                for c in items
            ],
        )
        for cat, items in catalog_sections([*controller.builtin_challenges, *state.custom_challenges])
    ]
    return CatalogResponse(sections=sections)


@router.post("/settings/reset", response_model=GameState)
async def reset_all_saved_route(controller: GameController = Depends(get_controller)) -> GameState:
    before = controller.state
    after = controller.reset_all_saved()
    await _broadcast_if_changed(before, after)
    return after
