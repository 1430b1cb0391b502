"""GET /api/v1/state — full game snapshot and event feed (polled by UI)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from idlerpg.api.dependencies import get_session
from idlerpg.api.schemas import (
    ActiveQuestSchema,
    CharacterSchema,
    CoordSchema,
    EncounterSchema,
    EventSchema,
    GameStateResponse,
    GeneralInfoSchema,
    ItemRefSchema,
    MacroSchema,
    ProficiencySchema,
    QuestSchema,
    StatusInfoSchema,
    VictoryRewardsSchema,
)
from idlerpg.core.enums import EquipSlot, ProficiencyTrack
from idlerpg.core.inventory import ItemRef
from idlerpg.core.models import Character
from idlerpg.core.progression import calculate_cp, get_max_pt_for_level
from idlerpg.core.quests import CollectQuest, Quest
from idlerpg.engine.combat import EncounterView
from idlerpg.engine.session import GameSession

router = APIRouter()


def _ref(ref: ItemRef | None) -> ItemRefSchema | None:
    return ItemRefSchema(item_id=ref.item_id, quantity=ref.quantity) if ref else None


def serialize_character(c: Character) -> CharacterSchema:
    s = c.status_info
    max_pt = get_max_pt_for_level(c.level)
    return CharacterSchema(
        general_info=GeneralInfoSchema(
            name=c.general_info.name, char_class=c.general_info.char_class, race=c.general_info.race,
        ),
        level=c.level,
        gold=c.gold,
        cp=calculate_cp(s, c.ability_info),
        status_info=StatusInfoSchema(
            hp=s.hp, max_hp=s.max_hp, fp=s.fp, max_fp=s.max_fp, sp=s.sp, max_sp=s.max_sp,
            def_gauge=s.def_gauge, max_def_gauge=s.max_def_gauge, exp_points=s.exp_points,
            gen_attack=s.gen_attack, force_attack=s.force_attack, avg_def_pwr=s.avg_def_pwr,
            avg_def_range=s.avg_def_range, avg_def_rate=s.avg_def_rate,
            attack_speed=s.attack_speed, accuracy=s.accuracy, dodge=s.dodge,
        ),
        ability_info={
            t.value: ProficiencySchema(
                pt=c.ability_info.track(t).pt, pt_exp=c.ability_info.track(t).pt_exp, max_pt=max_pt,
            )
            for t in ProficiencyTrack
        },
        element_resist_info={
            "fire": c.element_resist_info.fire,
            "water": c.element_resist_info.water,
            "earth": c.element_resist_info.earth,
            "wind": c.element_resist_info.wind,
        },
    )


def serialize_quest(q: Quest) -> QuestSchema:
    return QuestSchema(
        quest_id=q.quest_id,
        quest_type=q.quest_type.value,
        title=q.title,
        description=q.description,
        level=q.level,
        target_monster=getattr(q, "target_monster", ""),
        target_material=q.target_material if isinstance(q, CollectQuest) else None,
        target_amount=q.target_amount,
        gold_reward=q.rewards.gold,
        exp_reward=q.rewards.exp,
        item_reward=q.rewards.item_id,
    )


def serialize_encounter(view: EncounterView) -> EncounterSchema:
    r = view.rewards
    return EncounterSchema(
        encounter_id=view.encounter_id,
        monster_id=view.monster_id,
        monster_name=view.monster_name,
        monster_hp=view.monster_hp,
        monster_max_hp=view.monster_max_hp,
        player_hp=view.player_hp,
        player_max_hp=view.player_max_hp,
        phase=view.phase.name.lower(),
        interval_ms=view.interval_ms,
        tick=view.tick,
        log=list(view.log),
        rewards=VictoryRewardsSchema(
            exp=r.exp, gold=r.gold, material_id=r.material_id,
            material_lost=r.material_lost, levels_gained=r.levels_gained,
        ) if r else None,
        exp_lost=view.exp_lost,
    )


@router.get("/state", response_model=GameStateResponse)
def get_state(
    events: int = Query(20, ge=0, le=200, description="How many recent events to include"),
    session: GameSession = Depends(get_session),
) -> GameStateResponse:
    state = session.snapshot()
    view = session.encounter_view()
    macro = state.macro_state
    active = state.active_quest
    return GameStateResponse(
        has_started_game=state.has_started_game,
        character=serialize_character(state.character) if state.character else None,
        inventory_grid=[[_ref(ref) for ref in row] for row in state.inventory_grid],
        equipped_items={slot.value: _ref(state.equipped_items.get(slot)) for slot in EquipSlot},
        macro_state=MacroSchema(
            enabled=macro.enabled,
            potion_slot=CoordSchema(row=macro.potion_slot.row, col=macro.potion_slot.col) if macro.potion_slot else None,
            hp_threshold=macro.hp_threshold,
        ),
        active_quest=ActiveQuestSchema(
            quest=serialize_quest(active.quest), progress=active.progress, is_complete=active.is_complete,
        ) if active else None,
        completed_quest_ids=state.completed_quest_ids,
        current_zone=state.current_zone,
        continuous_combat=state.continuous_combat,
        encounter=serialize_encounter(view) if view else None,
        events=[EventSchema(seq=e.seq, category=e.category, message=e.message)
                for e in (session.events.latest(events) if events else [])],
    )


@router.get("/events", response_model=list[EventSchema])
def get_events(
    since: int = Query(0, ge=0, description="Return events after this sequence number"),
    session: GameSession = Depends(get_session),
) -> list[EventSchema]:
    return [EventSchema(seq=e.seq, category=e.category, message=e.message) for e in session.events.since(since)]
