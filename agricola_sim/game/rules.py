from __future__ import annotations

from agricola_sim.domain.board import (
    ACCUMULATION_YIELDS,
    FIXED_YIELDS,
    LESSONS_SPACES,
    ActionSpace,
    is_accumulation_space,
)
from agricola_sim.domain.cards import (
    COOKING_HEARTHS,
    FIREPLACES,
    OCCUPATION_DESCRIPTIONS,
    OVEN_RATES,
    WELL_FOOD_ROUNDS,
    MajorImprovement,
    Occupation,
    anytime_exchanges,
    bake_rates,
    can_bake,
    cooking_rate,
    harvest_exchanges,
    major_cost,
    occupation_cost,
)
from agricola_sim.domain.fencing import PastureConfig, fencing_options
from agricola_sim.domain.quantities import ANIMALS, CROPS, Quantities, Resource, ResourceExchange

from .actions import (
    ACTION_BAKE_BREAD,
    ACTION_BUILD_CARD,
    ACTION_BUILD_MAJOR,
    ACTION_BUILD_ROOM,
    ACTION_BUILD_STABLE,
    ACTION_CHILDLESS_BONUS,
    ACTION_CONVERT,
    ACTION_END_GAME,
    ACTION_END_TURN,
    ACTION_FENCE,
    ACTION_GROW_FAMILY,
    ACTION_HARVEST,
    ACTION_PAY_FOOD_OR_BEG,
    ACTION_PLACE_WORKER,
    ACTION_PLAY_OCCUPATION,
    ACTION_PLOW,
    ACTION_PRE_HARVEST,
    ACTION_RENOVATE,
    ACTION_SOW,
    ACTION_START_ROUND,
    ACTION_USE_SPACE,
    GameAction,
    TurnContext,
    bake_bread,
    build_card,
    build_major,
    build_room,
    build_stable,
    childless_bonus,
    convert,
    end_game,
    end_turn,
    fence,
    grow_family,
    harvest,
    pay_food_or_beg,
    place_worker,
    play_occupation,
    plow,
    pre_harvest,
    renovate,
    sow,
    start_round,
    use_space,
)
from .state import (
    EVENT_LOG_LIMIT,
    HOUSE_RESOURCES,
    MAX_FAMILY_SIZE,
    RENOVATION_TARGET,
    GamePhase,
    GameState,
    PlayerState,
    next_player_index,
)

ROOM_MATERIAL_COST = 5
ROOM_REED_COST = 2
RENOVATION_REED_COST = 1
STABLE_COST = {Resource.WOOD: 2}
CHILDLESS_FAMILY_SIZE = 2
CHILDLESS_MIN_ROOMS = 3
MIN_NEW_PASTURE_WOOD = 4

PHASE_TRANSITIONS: dict[GamePhase, tuple[str, ...]] = {
    GamePhase.START_GAME: (ACTION_START_ROUND,),
    GamePhase.WORKER_TURN: (ACTION_PLACE_WORKER,),
    GamePhase.PLACE_WORKER: (ACTION_CHILDLESS_BONUS, ACTION_USE_SPACE, ACTION_END_TURN),
    GamePhase.FARMLAND: (ACTION_PLOW,),
    GamePhase.FARM_EXPANSION: (ACTION_BUILD_ROOM, ACTION_BUILD_STABLE, ACTION_END_TURN),
    GamePhase.FENCING: (ACTION_FENCE, ACTION_END_TURN),
    GamePhase.GRAIN_UTILIZATION: (ACTION_SOW, ACTION_BAKE_BREAD, ACTION_END_TURN),
    GamePhase.IMPROVEMENTS: (ACTION_BUILD_MAJOR, ACTION_END_TURN),
    GamePhase.MAJOR_SELECTION: (ACTION_BUILD_CARD,),
    GamePhase.BAKING: (ACTION_BAKE_BREAD, ACTION_END_TURN),
    GamePhase.RENOVATION: (ACTION_RENOVATE,),
    GamePhase.FAMILY_GROWTH: (ACTION_GROW_FAMILY,),
    GamePhase.CULTIVATION: (ACTION_SOW, ACTION_PLOW, ACTION_END_TURN),
    GamePhase.LESSONS: (ACTION_PLAY_OCCUPATION, ACTION_CONVERT),
    GamePhase.DAY_LABORER: (ACTION_PLOW, ACTION_END_TURN),
    GamePhase.TURN_END: (ACTION_END_TURN,),
    GamePhase.ROUND_END: (ACTION_START_ROUND,),
    GamePhase.HARVEST: (ACTION_HARVEST,),
    GamePhase.HARVEST_STEP: (ACTION_PRE_HARVEST, ACTION_START_ROUND, ACTION_END_GAME),
    GamePhase.FEEDING: (ACTION_CONVERT, ACTION_PAY_FOOD_OR_BEG),
    GamePhase.GAME_OVER: (),
}

SPACE_PHASES: dict[ActionSpace, GamePhase] = {
    ActionSpace.FARMLAND: GamePhase.FARMLAND,
    ActionSpace.FARM_EXPANSION: GamePhase.FARM_EXPANSION,
    ActionSpace.FENCING: GamePhase.FENCING,
    ActionSpace.GRAIN_UTILIZATION: GamePhase.GRAIN_UTILIZATION,
    ActionSpace.IMPROVEMENTS: GamePhase.IMPROVEMENTS,
    ActionSpace.HOUSE_REDEVELOPMENT: GamePhase.RENOVATION,
    ActionSpace.FARM_REDEVELOPMENT: GamePhase.RENOVATION,
    ActionSpace.WISH_FOR_CHILDREN: GamePhase.FAMILY_GROWTH,
    ActionSpace.URGENT_WISH_FOR_CHILDREN: GamePhase.FAMILY_GROWTH,
    ActionSpace.CULTIVATION: GamePhase.CULTIVATION,
    ActionSpace.LESSONS_1: GamePhase.LESSONS,
    ActionSpace.LESSONS_2: GamePhase.LESSONS,
    ActionSpace.DAY_LABORER: GamePhase.DAY_LABORER,
}


class IllegalActionError(ValueError):
    """Raised when an action is applied in a state that does not offer it."""


def _record_event(state: GameState, text: str) -> None:
    state.event_log.append(text)
    if len(state.event_log) > EVENT_LOG_LIMIT:
        state.event_log = state.event_log[-EVENT_LOG_LIMIT:]


def room_cost(player: PlayerState) -> dict[Resource, int]:
    return {
        HOUSE_RESOURCES[player.house]: ROOM_MATERIAL_COST,
        Resource.REED: ROOM_REED_COST,
    }


def renovation_cost(player: PlayerState) -> dict[Resource, int] | None:
    target = RENOVATION_TARGET.get(player.house)
    if target is None:
        return None
    return {
        HOUSE_RESOURCES[target]: player.farm.room_count,
        Resource.REED: RENOVATION_REED_COST,
    }


def _can_renovate(player: PlayerState) -> bool:
    cost = renovation_cost(player)
    return cost is not None and player.resources.can_pay(cost)


def _source_count(player: PlayerState, resource: Resource) -> int:
    if resource in ANIMALS:
        return player.animal_count(resource)
    return player.resources[resource]


def _potential_food(player: PlayerState) -> int:
    food = player.resources[Resource.FOOD]
    for exchange in anytime_exchanges(player.majors):
        if exchange.target is not Resource.FOOD:
            continue
        food += _source_count(player, exchange.source) // exchange.num_from * exchange.num_to
    return food


def _accommodate_animals(state: GameState, player: PlayerState, *, breed: bool) -> None:
    player.farm.reorg_animals(player.resources, breed=breed, strategy=state.reorg_strategy)
    for animal in ANIMALS:
        extra = player.resources[animal]
        if extra <= 0:
            continue
        player.resources[animal] = 0
        rate = cooking_rate(player.majors, animal)
        if rate > 0:
            player.resources[Resource.FOOD] += extra * rate
            _record_event(state, f"P{player.player_id} cooked {extra} {animal.label} for {extra * rate} food.")
        else:
            _record_event(state, f"P{player.player_id} released {extra} {animal.label}.")


def _plow_choices(player: PlayerState) -> list[GameAction]:
    return [plow(idx) for idx in player.farm.best_field_positions()]


def _sow_choices(player: PlayerState) -> list[GameAction]:
    if not player.farm.can_sow():
        return []
    return [sow(crop) for crop in CROPS if player.resources[crop] > 0]


def _bakeable_grain(player: PlayerState) -> int:
    grain = player.resources[Resource.GRAIN]
    if grain <= 0 or not can_bake(player.majors):
        return 0
    return len(bake_rates(player.majors, player.oven_uses, grain))


def _bake_choices(player: PlayerState) -> list[GameAction]:
    return [bake_bread(amount) for amount in range(1, _bakeable_grain(player) + 1)]


def _farm_expansion_choices(player: PlayerState) -> list[GameAction]:
    choices: list[GameAction] = []
    if player.resources.can_pay(room_cost(player)):
        choices.extend(build_room(idx) for idx in player.farm.best_room_positions())
    if player.resources.can_pay(STABLE_COST) and player.farm.can_build_stable():
        choices.extend(build_stable(idx) for idx in player.farm.best_stable_positions())
    return choices


def _fence_choices(player: PlayerState) -> list[PastureConfig]:
    wood = player.resources[Resource.WOOD]
    if wood <= 0:
        return []
    if wood < MIN_NEW_PASTURE_WOOD and player.farm.fences_used == 0:
        return []
    return fencing_options(player.farm, wood)


def _major_choices(state: GameState, player: PlayerState) -> list[GameAction]:
    choices: list[GameAction] = []
    for card in state.available_majors():
        if player.resources.can_pay(major_cost(card)):
            choices.append(build_card(card))
        if card in COOKING_HEARTHS:
            for fireplace in FIREPLACES:
                if fireplace in player.majors:
                    choices.append(build_card(card, return_fireplace=fireplace))
    return choices


def _conversion_choices(player: PlayerState, *, include_harvest: bool) -> list[GameAction]:
    choices = [
        convert(exchange)
        for exchange in anytime_exchanges(player.majors)
        if _source_count(player, exchange.source) >= exchange.num_from
    ]
    if include_harvest:
        for card, exchange in harvest_exchanges(player.majors):
            if card in player.harvest_exchanges_used:
                continue
            if player.resources[exchange.source] >= exchange.num_from:
                choices.append(convert(exchange, card=card))
    return choices


def _unplayed_occupations(player: PlayerState) -> list[Occupation]:
    return [occupation for occupation in Occupation if occupation not in player.occupations]


def _occupation_choices(state: GameState, player: PlayerState) -> list[GameAction]:
    space = state.context.space if state.context is not None else None
    if space not in LESSONS_SPACES:
        return []
    cost = occupation_cost(space, len(player.occupations))
    if player.resources[Resource.FOOD] < cost:
        return _conversion_choices(player, include_harvest=False)
    return [play_occupation(occupation, cost) for occupation in _unplayed_occupations(player)]


def _childless_applies(player: PlayerState) -> bool:
    return (
        Occupation.CHILDLESS in player.occupations
        and player.before_round_start
        and player.family_size == CHILDLESS_FAMILY_SIZE
        and player.farm.room_count >= CHILDLESS_MIN_ROOMS
    )


def space_available(state: GameState, player: PlayerState, space: ActionSpace) -> bool:
    if space not in state.open_spaces or space in state.occupied:
        return False
    if space is ActionSpace.FARMLAND:
        return bool(player.farm.best_field_positions())
    if space is ActionSpace.FARM_EXPANSION:
        return bool(_farm_expansion_choices(player))
    if space is ActionSpace.FENCING:
        return bool(_fence_choices(player))
    if space is ActionSpace.GRAIN_UTILIZATION:
        return bool(_sow_choices(player)) or _bakeable_grain(player) > 0
    if space is ActionSpace.IMPROVEMENTS:
        return bool(_major_choices(state, player))
    if space in (ActionSpace.HOUSE_REDEVELOPMENT, ActionSpace.FARM_REDEVELOPMENT):
        return _can_renovate(player)
    if space is ActionSpace.WISH_FOR_CHILDREN:
        return player.family_size < MAX_FAMILY_SIZE and player.farm.room_count > player.family_size
    if space is ActionSpace.URGENT_WISH_FOR_CHILDREN:
        return player.family_size < MAX_FAMILY_SIZE
    if space is ActionSpace.CULTIVATION:
        return bool(_plow_choices(player)) or bool(_sow_choices(player))
    if space in LESSONS_SPACES:
        if not _unplayed_occupations(player):
            return False
        return _potential_food(player) >= occupation_cost(space, len(player.occupations))
    return True


def _placement_choices(state: GameState) -> list[GameAction]:
    player = state.current
    if _childless_applies(player):
        return [childless_bonus(crop) for crop in CROPS]
    choices = [
        use_space(space)
        for space in state.open_spaces
        if space_available(state, player, space)
    ]
    # Every usable space is taken: the worker passes.
    return _with_end_turn(choices, allowed=False)


def _with_end_turn(choices: list[GameAction], allowed: bool = True) -> list[GameAction]:
    if allowed or not choices:
        choices.append(end_turn())
    return choices


def next_choices(state: GameState) -> list[GameAction]:
    phase = state.phase
    if phase is GamePhase.GAME_OVER:
        return []

    player = state.current
    context = state.context or TurnContext()

    if phase in (GamePhase.START_GAME, GamePhase.ROUND_END):
        return [start_round()]
    if phase is GamePhase.WORKER_TURN:
        return [place_worker()]
    if phase is GamePhase.PLACE_WORKER:
        return _placement_choices(state)
    if phase is GamePhase.FARMLAND:
        return _with_end_turn(_plow_choices(player), allowed=False)
    if phase is GamePhase.FARM_EXPANSION:
        return _with_end_turn(_farm_expansion_choices(player), allowed=context.built)
    if phase is GamePhase.FENCING:
        return _with_end_turn([fence(config) for config in _fence_choices(player)])
    if phase is GamePhase.GRAIN_UTILIZATION:
        choices = _sow_choices(player)
        if not context.baked:
            choices.extend(_bake_choices(player))
        return _with_end_turn(choices, allowed=context.sowed or context.baked)
    if phase is GamePhase.IMPROVEMENTS:
        choices = [build_major()] if _major_choices(state, player) else []
        return _with_end_turn(choices, allowed=context.renovated)
    if phase is GamePhase.MAJOR_SELECTION:
        return _major_choices(state, player)
    if phase is GamePhase.BAKING:
        return _with_end_turn(_bake_choices(player))
    if phase is GamePhase.RENOVATION:
        return [renovate()]
    if phase is GamePhase.FAMILY_GROWTH:
        return [grow_family(with_room=context.space is ActionSpace.WISH_FOR_CHILDREN)]
    if phase is GamePhase.CULTIVATION:
        choices = _sow_choices(player)
        plow_options = [] if context.plowed else _plow_choices(player)
        choices.extend(plow_options)
        return _with_end_turn(choices, allowed=context.plowed or context.sowed or not plow_options)
    if phase is GamePhase.LESSONS:
        return _occupation_choices(state, player)
    if phase is GamePhase.DAY_LABORER:
        return _with_end_turn(_plow_choices(player))
    if phase is GamePhase.TURN_END:
        return [end_turn()]
    if phase is GamePhase.HARVEST:
        return [harvest()]
    if phase is GamePhase.HARVEST_STEP:
        if not player.harvest_paid:
            return [pre_harvest()]
        if state.hidden_stages:
            return [start_round()]
        return [end_game()]
    if phase is GamePhase.FEEDING:
        choices = _conversion_choices(player, include_harvest=True)
        if not choices or player.resources[Resource.FOOD] >= player.food_required():
            choices.append(pay_food_or_beg())
        return choices
    raise IllegalActionError(f"Unknown phase: {phase}.")


list_legal_actions = next_choices


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise IllegalActionError(message)


def _start_round(state: GameState) -> None:
    _require(bool(state.hidden_stages), "No rounds left to play.")
    state.round_number += 1
    stage = state.hidden_stages[0]
    revealed = stage.pop(0)
    state.open_spaces.append(revealed)
    if not stage:
        state.hidden_stages.pop(0)
        state.harvest_pending = True

    for player in state.players:
        player.reset_for_round()
    state.occupied.clear()
    state.workers_placed = 0
    for space in state.open_spaces:
        if is_accumulation_space(space):
            state.accumulated[space].take(ACCUMULATION_YIELDS[space])

    due = [entry for entry in state.scheduled_food if entry[0] == state.round_number]
    state.scheduled_food = [entry for entry in state.scheduled_food if entry[0] != state.round_number]
    for _, player_id in due:
        state.players[player_id].resources[Resource.FOOD] += 1

    state.current_player = state.starting_player
    state.context = None
    state.phase = GamePhase.WORKER_TURN
    _record_event(state, f"Round {state.round_number} start: revealed {revealed.value}.")


def _use_space(state: GameState, space: ActionSpace) -> None:
    player = state.current
    _require(space_available(state, player, space), f"Action space {space.value} is not available.")
    player.before_round_start = False
    state.occupied.add(space)
    state.context = TurnContext(space=space)

    if is_accumulation_space(space):
        collected = state.accumulated[space]
        state.accumulated[space] = Quantities()
        player.resources.take({resource: collected[resource] for resource in Resource})
        if collected.total_animals() > 0:
            _accommodate_animals(state, player, breed=False)
        _record_event(state, f"P{player.player_id} took {collected!r} from {space.value}.")
    elif space in FIXED_YIELDS:
        player.resources.take(FIXED_YIELDS[space])
        _record_event(state, f"P{player.player_id} used {space.value}.")
    else:
        _record_event(state, f"P{player.player_id} used {space.value}.")

    if space is ActionSpace.MEETING_PLACE:
        state.starting_player = player.player_id

    next_phase = SPACE_PHASES.get(space, GamePhase.TURN_END)
    if next_phase is GamePhase.DAY_LABORER and (
        Occupation.ASSISTANT_TILLER not in player.occupations or not _plow_choices(player)
    ):
        next_phase = GamePhase.TURN_END
    state.phase = next_phase


def _plow(state: GameState, idx: int) -> None:
    player = state.current
    context = state.context or TurnContext()
    _require(not (state.phase is GamePhase.CULTIVATION and context.plowed), "A field was already plowed this turn.")
    _require(idx in player.farm.possible_field_positions(), f"Cannot plow cell {idx}.")
    player.farm.build_field(idx)
    state.context = _context_with(state, plowed=True)
    if state.phase is not GamePhase.CULTIVATION:
        state.phase = GamePhase.TURN_END
    _record_event(state, f"P{player.player_id} plowed cell {idx}.")


def _build_room(state: GameState, idx: int) -> None:
    player = state.current
    _require(idx in player.farm.possible_room_positions(), f"Cannot build a room on cell {idx}.")
    player.resources.pay(room_cost(player))
    player.farm.build_room(idx)
    state.context = _context_with(state, built=True)
    _record_event(state, f"P{player.player_id} built a {player.house.value} room on cell {idx}.")


def _build_stable(state: GameState, idx: int) -> None:
    player = state.current
    player.resources.pay(STABLE_COST)
    player.farm.build_stable(idx)
    _accommodate_animals(state, player, breed=False)
    state.context = _context_with(state, built=True)
    _record_event(state, f"P{player.player_id} built a stable on cell {idx}.")


def _fence(state: GameState, config: PastureConfig) -> None:
    player = state.current
    cost = config.wood - player.farm.fences_used
    _require(0 < cost <= player.resources[Resource.WOOD], f"Cannot afford fences costing {cost} wood.")
    placed = player.farm.fence_spaces(config)
    player.resources.pay({Resource.WOOD: placed})
    _accommodate_animals(state, player, breed=False)
    state.phase = GamePhase.TURN_END
    _record_event(state, f"P{player.player_id} fenced {config.describe()}.")


def _sow(state: GameState, crop: Resource) -> None:
    player = state.current
    _require(crop in CROPS, f"Cannot sow {crop.label}.")
    player.resources.pay({crop: 1})
    player.farm.sow_field(crop)
    state.context = _context_with(state, sowed=True)
    _record_event(state, f"P{player.player_id} sowed {crop.label}.")


def _bake_bread(state: GameState, grain: int) -> None:
    player = state.current
    context = state.context or TurnContext()
    _require(not (state.phase is GamePhase.GRAIN_UTILIZATION and context.baked), "Bread was already baked this turn.")
    rates = bake_rates(player.majors, player.oven_uses, player.resources[Resource.GRAIN])
    _require(0 < grain <= len(rates), f"Cannot bake {grain} grain.")
    capped = {card for card, _, _ in OVEN_RATES}
    food = 0
    for card, rate in rates[:grain]:
        player.resources.pay({Resource.GRAIN: 1})
        food += rate
        if card in capped:
            player.oven_uses[card] = player.oven_uses.get(card, 0) + 1
    player.resources[Resource.FOOD] += food
    if state.phase is GamePhase.GRAIN_UTILIZATION:
        state.context = _context_with(state, baked=True)
    else:
        state.phase = GamePhase.TURN_END
    _record_event(state, f"P{player.player_id} baked {grain} grain into {food} food.")


def _build_card(
    state: GameState,
    card: MajorImprovement,
    return_fireplace: MajorImprovement | None,
) -> None:
    player = state.current
    _require(card in state.available_majors(), f"{card.value} is not available.")
    if return_fireplace is not None:
        _require(
            card in COOKING_HEARTHS and return_fireplace in player.majors and return_fireplace in FIREPLACES,
            f"Cannot trade {return_fireplace.value} for {card.value}.",
        )
        player.majors.remove(return_fireplace)
    else:
        player.resources.pay(major_cost(card))
    player.majors.add(card)

    if card is MajorImprovement.WELL:
        for offset in range(1, WELL_FOOD_ROUNDS + 1):
            state.scheduled_food.append((state.round_number + offset, player.player_id))
    if card in (MajorImprovement.CLAY_OVEN, MajorImprovement.STONE_OVEN):
        state.phase = GamePhase.BAKING
    else:
        state.phase = GamePhase.TURN_END
    _record_event(state, f"P{player.player_id} built {card.value}.")


def _renovate(state: GameState) -> None:
    player = state.current
    cost = renovation_cost(player)
    _require(cost is not None and player.resources.can_pay(cost), "Cannot renovate.")
    player.resources.pay(cost)
    player.house = RENOVATION_TARGET[player.house]
    state.context = _context_with(state, renovated=True)
    if state.context.space is ActionSpace.FARM_REDEVELOPMENT:
        state.phase = GamePhase.FENCING
    else:
        state.phase = GamePhase.IMPROVEMENTS
    _record_event(state, f"P{player.player_id} renovated to {player.house.value}.")


def _grow_family(state: GameState, with_room: bool) -> None:
    player = state.current
    _require(player.family_size < MAX_FAMILY_SIZE, "Family is already complete.")
    if with_room:
        _require(player.farm.room_count > player.family_size, "No room for a new family member.")
    player.children += 1
    state.phase = GamePhase.TURN_END
    _record_event(state, f"P{player.player_id} grew their family to {player.family_size}.")


def _play_occupation(state: GameState, occupation: Occupation, food_cost: int) -> None:
    player = state.current
    space = state.context.space if state.context is not None else None
    _require(space in LESSONS_SPACES, "Occupations are only played from a lessons space.")
    _require(occupation not in player.occupations, f"{occupation.value} is already played.")
    _require(food_cost == occupation_cost(space, len(player.occupations)), "Occupation cost mismatch.")
    player.resources.pay({Resource.FOOD: food_cost})
    player.occupations.add(occupation)
    state.phase = GamePhase.TURN_END
    _record_event(state, f"P{player.player_id} played {occupation.value}: {OCCUPATION_DESCRIPTIONS[occupation]}")


def _convert(state: GameState, exchange: ResourceExchange, card: MajorImprovement | None) -> None:
    player = state.current
    offered = _conversion_choices(player, include_harvest=state.phase is GamePhase.FEEDING)
    _require(
        any(option.data.get("exchange") == exchange and option.data.get("card") == card for option in offered),
        f"Conversion {exchange.describe()} is not available.",
    )
    if exchange.source in ANIMALS:
        for _ in range(exchange.num_from):
            if player.resources[exchange.source] > 0:
                player.resources[exchange.source] -= 1
            elif not player.farm.remove_animal(exchange.source):
                raise IllegalActionError(f"No {exchange.source.label} to convert.")
        player.resources[exchange.target] += exchange.num_to
    else:
        player.resources.exchange(exchange)
    if card is not None:
        player.harvest_exchanges_used.add(card)
    _record_event(state, f"P{player.player_id} converted {exchange.describe()}.")


def _end_turn(state: GameState) -> None:
    player = state.current
    player.people_placed += 1
    state.workers_placed += 1
    state.context = None
    if state.all_people_placed():
        state.current_player = state.starting_player
        state.phase = GamePhase.HARVEST if state.harvest_pending else GamePhase.ROUND_END
        return
    state.current_player = next_player_index(state.current_player, state.player_count)
    while state.current.all_people_placed():
        state.current_player = next_player_index(state.current_player, state.player_count)
    state.phase = GamePhase.WORKER_TURN


def _pre_harvest(state: GameState) -> None:
    player = state.current
    _require(not player.harvest_paid, f"P{player.player_id} already harvested.")
    crops = player.farm.harvest_fields()
    for crop in crops:
        player.resources[crop] += 1
    state.phase = GamePhase.FEEDING
    _record_event(state, f"P{player.player_id} harvested {len(crops)} crops.")


def _pay_food_or_beg(state: GameState) -> None:
    player = state.current
    required = player.food_required()
    food = player.resources[Resource.FOOD]
    if food >= required:
        player.resources[Resource.FOOD] = food - required
    else:
        player.resources[Resource.FOOD] = 0
        player.begging_tokens += required - food
        _record_event(state, f"P{player.player_id} begged for {required - food} food.")
    _accommodate_animals(state, player, breed=True)
    player.harvest_paid = True
    state.current_player = next_player_index(state.current_player, state.player_count)
    if state.all_harvest_paid():
        state.harvest_pending = False
    state.phase = GamePhase.HARVEST


def _context_with(state: GameState, **flags: bool) -> TurnContext:
    current = state.context or TurnContext()
    values = {
        "space": current.space,
        "sowed": current.sowed,
        "baked": current.baked,
        "plowed": current.plowed,
        "built": current.built,
        "renovated": current.renovated,
    }
    values.update(flags)
    return TurnContext(**values)


def apply_choice(state: GameState, action: GameAction) -> None:
    """Apply ``action`` to ``state`` in place."""
    kind = action.kind
    data = action.data
    if kind not in PHASE_TRANSITIONS[state.phase]:
        raise IllegalActionError(f"{kind} is not valid in phase {state.phase.value}.")

    if kind == ACTION_START_ROUND:
        if state.phase is GamePhase.HARVEST_STEP:
            _require(state.all_harvest_paid(), "Harvest is still in progress.")
        _start_round(state)
    elif kind == ACTION_PLACE_WORKER:
        state.phase = GamePhase.PLACE_WORKER
    elif kind == ACTION_CHILDLESS_BONUS:
        player = state.current
        crop = data["crop"]
        _require(_childless_applies(player) and crop in CROPS, "Childless bonus is not available.")
        player.before_round_start = False
        player.resources.take({Resource.FOOD: 1, crop: 1})
        state.phase = GamePhase.WORKER_TURN
        _record_event(state, f"P{player.player_id} took the childless bonus ({crop.label}).")
    elif kind == ACTION_USE_SPACE:
        _use_space(state, data["space"])
    elif kind == ACTION_PLOW:
        _plow(state, int(data["idx"]))
    elif kind == ACTION_BUILD_ROOM:
        _build_room(state, int(data["idx"]))
    elif kind == ACTION_BUILD_STABLE:
        _build_stable(state, int(data["idx"]))
    elif kind == ACTION_FENCE:
        _fence(state, data["config"])
    elif kind == ACTION_SOW:
        _sow(state, data["crop"])
    elif kind == ACTION_BAKE_BREAD:
        _bake_bread(state, int(data["grain"]))
    elif kind == ACTION_BUILD_MAJOR:
        _require(bool(_major_choices(state, state.current)), "No major improvement can be built.")
        state.phase = GamePhase.MAJOR_SELECTION
    elif kind == ACTION_BUILD_CARD:
        _build_card(state, data["card"], data.get("return_fireplace"))
    elif kind == ACTION_RENOVATE:
        _renovate(state)
    elif kind == ACTION_GROW_FAMILY:
        _grow_family(state, bool(data["with_room"]))
    elif kind == ACTION_PLAY_OCCUPATION:
        _play_occupation(state, data["occupation"], int(data["food_cost"]))
    elif kind == ACTION_CONVERT:
        _convert(state, data["exchange"], data.get("card"))
    elif kind == ACTION_END_TURN:
        _require(end_turn() in next_choices(state), "The turn cannot end yet.")
        _end_turn(state)
    elif kind == ACTION_HARVEST:
        state.phase = GamePhase.HARVEST_STEP
    elif kind == ACTION_PRE_HARVEST:
        _pre_harvest(state)
    elif kind == ACTION_PAY_FOOD_OR_BEG:
        _pay_food_or_beg(state)
    elif kind == ACTION_END_GAME:
        _require(not state.hidden_stages and state.all_harvest_paid(), "The game is not finished yet.")
        state.phase = GamePhase.GAME_OVER
        _record_event(state, "Game over.")
    else:
        raise IllegalActionError(f"Unsupported action kind: {kind}")

    state.last_action = action


def apply_action(state: GameState, action: GameAction) -> GameState:
    next_state = state.clone()
    apply_choice(next_state, action)
    return next_state


def run_forced_action(state: GameState, action_kind: str) -> GameState:
    legal = next_choices(state)
    matches = [action for action in legal if action.kind == action_kind]
    if not matches:
        raise IllegalActionError(f"No legal action of kind {action_kind} available in phase {state.phase.value}.")
    return apply_action(state, matches[0])
