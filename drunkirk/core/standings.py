from __future__ import annotations

from drunkirk.api.models import GameState, StandingRow


def standings(state: GameState) -> list[StandingRow]:
    rows = [StandingRow(player_id=p.id, name=p.name, score=state.scores.get(p.id, 0)) for p in state.players]
    # sorted() is stable, so ties keep turn order.
    return sorted(rows, key=lambda r: r.score, reverse=True)


def winners(state: GameState) -> list[StandingRow]:
    rows = standings(state)
    if not rows:
        return []
    top = rows[0].score
    return [r for r in rows if r.score == top]


def winner_label(state: GameState) -> str:
    top = winners(state)
    if not top:
        return ""
    if len(top) == 1:
        return top[0].name
    return "Tie: " + ", ".join(r.name for r in top)
