#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Player Lifecycle Module

Lifecycle of the interactive video embed. The transition table is rendered
into the embed script, so the browser enforces the same rules that are
tested here.

    uninitialized -> loading-api -> player-created -> ready -> playing <-> paused
                                                               playing -> ended
    stop:  ready | playing | paused -> player-created
    error: reachable from every non-terminal state
"""

import json
from enum import Enum
from typing import Dict, FrozenSet


class PlayerState(Enum):
    UNINITIALIZED = 'uninitialized'
    LOADING_API = 'loading-api'
    PLAYER_CREATED = 'player-created'
    READY = 'ready'
    PLAYING = 'playing'
    PAUSED = 'paused'
    ENDED = 'ended'
    ERROR = 'error'


TERMINAL_STATES: FrozenSet[PlayerState] = frozenset([PlayerState.ENDED, PlayerState.ERROR])

_FORWARD = {
    PlayerState.UNINITIALIZED: {PlayerState.LOADING_API},
    PlayerState.LOADING_API: {PlayerState.PLAYER_CREATED},
    PlayerState.PLAYER_CREATED: {PlayerState.READY},
    PlayerState.READY: {PlayerState.PLAYING, PlayerState.PLAYER_CREATED},
    PlayerState.PLAYING: {PlayerState.PAUSED, PlayerState.ENDED, PlayerState.PLAYER_CREATED},
    PlayerState.PAUSED: {PlayerState.PLAYING, PlayerState.PLAYER_CREATED},
    PlayerState.ENDED: set(),
    PlayerState.ERROR: set(),
}

TRANSITIONS: Dict[PlayerState, FrozenSet[PlayerState]] = {
    state: frozenset(targets | ({PlayerState.ERROR} if state not in TERMINAL_STATES else set()))
    for state, targets in _FORWARD.items()
}


def can_transition(current: PlayerState, target: PlayerState) -> bool:
    return target in TRANSITIONS[current]


def transitions_as_json() -> str:
    """Serialize the table as ``{state: [targets]}`` for the embed script."""
    table = {
        state.value: sorted(target.value for target in targets)
        for state, targets in TRANSITIONS.items()
    }
    return json.dumps(table, sort_keys=True)
