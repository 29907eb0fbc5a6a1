"""
Ranking Service

Derives the leaderboard from the player states of a round. Nothing here
mutates a PlayerSessionState; the leaderboard is rebuilt from scratch every
time it is needed.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from ..models.game import LeaderboardEntry, PlayerSessionState, PlayerStatus

_STATUS_ORDER = {
    PlayerStatus.SOLVED: 0,
    PlayerStatus.FAILED: 1,
    PlayerStatus.ACTIVE: 2,
}


def format_time(ms: Optional[int]) -> Optional[str]:
    """Render milliseconds as ``m:ss``, the format the client displays."""
    if ms is None:
        return None
    seconds = int(ms) // 1000
    return f"{seconds // 60}:{seconds % 60:02d}"


def _sort_key(state: PlayerSessionState) -> Tuple:
    group = _STATUS_ORDER[state.status]
    if state.status is PlayerStatus.SOLVED:
        return (group, state.solve_attempts, state.solve_time_ms, state.join_order)
    if state.status is PlayerStatus.FAILED:
        return (group, state.fail_sequence, state.join_order, 0)
    return (group, state.join_order, 0, 0)


def _tie_key(state: PlayerSessionState) -> Optional[Tuple]:
    # Only solvers with identical attempts and time share a rank
    if state.status is PlayerStatus.SOLVED:
        return (state.solve_attempts, state.solve_time_ms)
    return None


def _elapsed_ms(state: PlayerSessionState) -> Optional[int]:
    if state.status is PlayerStatus.SOLVED:
        return state.solve_time_ms
    if state.status is PlayerStatus.FAILED:
        return state.failed_at_ms
    return None


def rank_states(states: Iterable[PlayerSessionState]) -> List[PlayerSessionState]:
    return sorted(states, key=_sort_key)


def build_leaderboard(states: Iterable[PlayerSessionState]) -> List[LeaderboardEntry]:
    """
    Order players: solved before failed before still active.

    Solvers rank by fewer attempts, then faster time. Failed players rank by
    the order in which they failed, then join order. Active players keep join
    order.
    """
    entries: List[LeaderboardEntry] = []
    previous_tie = None
    rank = 0

    for index, state in enumerate(rank_states(states)):
        tie = _tie_key(state)
        if tie is None or tie != previous_tie:
            rank = index + 1
        previous_tie = tie

        entries.append(LeaderboardEntry(
            rank=rank,
            player_id=state.player_id,
            username=state.username,
            status=state.status,
            attempts=state.attempts,
            solve_attempts=state.solve_attempts,
            solve_time_ms=state.solve_time_ms,
            time_formatted=format_time(_elapsed_ms(state)),
        ))

    return entries


def player_statuses(states: Iterable[PlayerSessionState]) -> List[Dict]:
    """Per-player progress for the sidebar, in join order."""
    return [
        {
            'playerId': state.player_id,
            'username': state.username,
            'status': state.status.value,
            'guesses': state.attempts,
            'isSolved': state.status is PlayerStatus.SOLVED,
            'solveAttempts': state.solve_attempts,
            'timeFormatted': format_time(_elapsed_ms(state)),
        }
        for state in sorted(states, key=lambda s: s.join_order)
    ]


def leaderboard_payload(states: Iterable[PlayerSessionState]) -> Dict:
    states = list(states)
    return {
        'leaderboard': [entry.to_dict() for entry in build_leaderboard(states)],
        'playerStatuses': player_statuses(states),
    }
