from __future__ import annotations

import hashlib

from .state import GameState, PlayerState


def _player_key(player: PlayerState) -> tuple:
    return (
        player.player_id,
        player.resources.as_tuple(),
        player.adults,
        player.children,
        player.people_placed,
        player.begging_tokens,
        player.house.value,
        tuple(sorted(card.value for card in player.majors)),
        tuple(sorted(occupation.value for occupation in player.occupations)),
        player.harvest_paid,
        player.before_round_start,
        tuple(sorted((card.value, uses) for card, uses in player.oven_uses.items() if uses)),
        tuple(sorted(card.value for card in player.harvest_exchanges_used)),
        player.farm.key(),
    )


def state_key(state: GameState) -> tuple:
    """Order-normalised view of everything that affects future play.

    Revealed spaces, the contents of each hidden stage, occupied spaces and the
    accumulation pools are unordered, so they are sorted before hashing. The
    next round card is a chance node (see ``action_outcome_spectrum``): states
    that differ only in which card of the current stage comes up next share a
    key. The event log, RNG and last action are not part of the key.
    """
    return (
        state.player_count,
        state.phase.value,
        state.round_number,
        state.current_player,
        state.starting_player,
        state.workers_placed,
        state.harvest_pending,
        tuple(sorted(space.value for space in state.open_spaces)),
        tuple(tuple(sorted(space.value for space in stage)) for stage in state.hidden_stages),
        tuple(sorted(space.value for space in state.occupied)),
        tuple(sorted((space.value, amount.as_tuple()) for space, amount in state.accumulated.items())),
        tuple(sorted(state.scheduled_food)),
        state.context.key() if state.context is not None else None,
        tuple(_player_key(player) for player in state.players),
    )


def get_hash(state: GameState) -> int:
    payload = repr(state_key(state)).encode("utf-8")
    return int.from_bytes(hashlib.blake2b(payload, digest_size=8).digest(), "big")
