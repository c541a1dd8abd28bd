import json
import pytest

from delve.config import TUNING
from delve.dungeon import Dungeon, Room, TileType, carve_room, create_blank_map, is_walkable, make_cell
from delve.game import Ascend, Descend, GameState, Move, Read, WAIT, apply_intent, create_game, move_player
from delve.game.items import Potion, PotionEffect, Ring, RingEffect, Scroll, ScrollEffect
from delve.game.models import FloorItem, GoldPile, handle_death
from delve.game.monsters import create_monster, get_template
from delve.game.player import create_player, recompute_stats
from delve.rng import Mulberry32


def snapshot(state):
    return json.dumps(state.to_dict(), sort_keys=True)


def test_new_game_starts_on_stairs_up():
    state = create_game(seed=42)
    player = state.player
    assert player.pos == state.dungeon.stairs_up
    assert state.turn == 0
    assert state.dungeon_level == 1
    cell = state.dungeon.cell(player.x, player.y)
    assert cell.visible and cell.visited
    assert state.messages == ["Welcome to the Dungeons of Doom", "Good luck Adventurer!"]
    assert not state.dead


def test_new_game_is_reproducible():
    assert snapshot(create_game(seed=42)) == snapshot(create_game(seed=42))
    assert snapshot(create_game(seed=42)) != snapshot(create_game(seed=43))


def test_unseeded_game_records_its_seed():
    state = create_game()
    assert isinstance(state.seed, int)
    assert state.dungeon.to_dict() == create_game(seed=state.seed).dungeon.to_dict()


def test_first_room_is_lit_on_level_one():
    state = create_game(seed=42, player_name="Rodney")
    x, y = state.player.pos
    assert state.dungeon.cell(x - 1, y - 1).always_visible
    assert state.messages[1] == "Good luck Rodney!"


def test_same_inputs_replay_identically():
    a = create_game(seed=7)
    b = create_game(seed=7)
    for dx, dy in [(1, 0), (0, 1), (-1, 0), (0, 0), (1, 1)] * 6:
        apply_intent(a, Move(dx, dy))
        apply_intent(b, Move(dx, dy))
    assert snapshot(a) == snapshot(b)


def test_bump_kills_and_removes_monster_same_turn(make_state, seq):
    state = make_state(rng=seq(0.99))
    emu = create_monster(get_template("Emu"), 6, 5)
    state.monsters.append(emu)
    assert move_player(state, 1, 0)
    assert state.player.pos == (5, 5)
    assert state.monsters == []
    assert state.messages[:2] == ["You clobbered the emu", "You have defeated the emu"]
    assert state.player.xp == 2
    assert state.turn == 1


def test_bump_miss_provokes(make_state, seq):
    state = make_state(rng=seq(0.1))
    trap = create_monster(get_template("Venus Flytrap"), 6, 5)
    state.monsters.append(trap)
    move_player(state, 1, 0)
    assert state.messages[0] == "You miss the venus flytrap"
    assert trap.provoked
    assert trap.hp == trap.max_hp


def test_kill_can_promote(make_state, seq):
    state = make_state(rng=seq(0.99))
    state.player.xp = 9
    state.monsters.append(create_monster(get_template("Emu"), 6, 5))
    move_player(state, 1, 0)
    assert state.player.rank == "Brawler"
    assert "You have earned the rank of Brawler" in state.messages
    assert state.player.max_hp == 17
    assert state.player.hp == 17


def test_blocked_move_changes_nothing(make_state):
    state = make_state(player_pos=(1, 5))
    state.messages = ["before"]
    before = snapshot(state)
    assert not move_player(state, -1, 0)
    assert snapshot(state) == before


def test_wait_spends_a_turn(make_state):
    state = make_state()
    assert apply_intent(state, WAIT)
    assert state.turn == 1
    assert state.player.pos == (5, 5)
    assert state.player.food == TUNING.food_start - 1


def test_confused_player_always_spends_the_turn(make_state, seq):
    state = make_state(player_pos=(1, 5), rng=seq(0.0))
    state.player.status.confusion = 5
    # first draw picks (-1, -1): the wall
    assert move_player(state, 1, 0)
    assert state.player.pos == (1, 5)
    assert state.turn == 1
    assert state.player.status.confusion == 4


def test_paralysed_player_loses_the_turn(make_state):
    state = make_state()
    state.player.status.paralysis = 1
    assert move_player(state, 1, 0)
    assert state.player.pos == (5, 5)
    assert state.player.status.paralysis == 0
    assert "You can move again" in state.messages


def test_gold_and_items_are_picked_up(make_state):
    state = make_state()
    state.gold_items.append(GoldPile(6, 5, 10))
    potion = Potion(PotionEffect.HEALING)
    state.dungeon_items.append(FloorItem(7, 5, potion))
    move_player(state, 1, 0)
    assert state.player.gold == 10
    assert state.gold_items == []
    assert "You pick up 10 gold pieces" in state.messages
    move_player(state, 1, 0)
    assert state.player.inventory[-1] is potion
    assert state.dungeon_items == []
    assert "You pick up a potion of healing" in state.messages


def test_waiting_does_not_pick_up(make_state):
    state = make_state()
    state.gold_items.append(GoldPile(5, 5, 3))
    apply_intent(state, WAIT)
    assert state.player.gold == 0
    assert len(state.gold_items) == 1


def test_door_lights_the_room_beyond():
    grid = create_blank_map(16, 7)
    room = Room(8, 1, 5, 5, illuminated=True)
    carve_room(grid, room)
    for x in range(2, 7):
        grid[3][x] = make_cell(TileType.CORRIDOR)
    grid[3][7] = make_cell(TileType.DOOR)
    dungeon = Dungeon(16, 7, grid, rooms=[room], stairs_up=(2, 3), stairs_down=(10, 3))
    rng = Mulberry32(4)
    state = GameState(dungeon=dungeon, player=create_player(5, 3, rng), rng=rng)

    move_player(state, 1, 0)
    assert not grid[3][10].always_visible
    move_player(state, 1, 0)
    assert state.player.pos == (7, 3)
    assert grid[3][10].always_visible
    assert grid[5][12].visible


def test_descend_builds_a_new_level():
    state = create_game(seed=42)
    old = state.dungeon
    state.player.x, state.player.y = old.stairs_down
    apply_intent(state, Descend())
    assert state.dungeon_level == 2
    assert state.dungeon is not old
    assert state.player.pos == state.dungeon.stairs_up
    assert state.dungeon.tile_at(*state.player.pos) == TileType.STAIRS_UP
    assert state.messages == ["You descend to dungeon level 2"]


def test_ascend_returns_to_down_stairs():
    state = create_game(seed=42)
    state.player.x, state.player.y = state.dungeon.stairs_down
    apply_intent(state, Descend())
    apply_intent(state, Ascend())
    assert state.dungeon_level == 1
    assert state.player.pos == state.dungeon.stairs_down
    assert not state.dead


def test_stairs_must_match(make_state):
    state = make_state()
    apply_intent(state, Descend())
    assert state.messages == ["You see no down staircase here"]
    apply_intent(state, Ascend())
    assert state.messages == ["You see no up staircase here"]
    assert state.dungeon_level == 1


def test_ascending_from_level_one_escapes():
    state = create_game(seed=42)
    apply_intent(state, Ascend())
    assert state.dead
    assert state.escaped
    assert state.cause_of_death == "escaped the dungeon"
    turn = state.turn
    assert not apply_intent(state, WAIT)
    assert state.turn == turn


def test_teleport_scroll_moves_and_confuses():
    for seed in range(5):
        state = create_game(seed=seed)
        start = state.player.pos
        state.player.inventory.append(Scroll(ScrollEffect.TELEPORTATION))
        assert apply_intent(state, Read(len(state.player.inventory) - 1))
        assert state.player.pos != start
        assert is_walkable(state.dungeon.tile_at(*state.player.pos))
        assert state.player.status.confusion > 0


def test_hunger_threshold_message(make_state):
    state = make_state()
    state.player.food = TUNING.hungry_at + 1
    apply_intent(state, WAIT)
    assert state.player.food == TUNING.hungry_at
    assert "You are starting to get hungry" in state.messages


def test_starvation_hurts_then_kills(make_state):
    state = make_state()
    state.player.food = 0
    state.player.hp = 2
    apply_intent(state, WAIT)
    assert state.player.hp == 1
    assert not state.dead
    apply_intent(state, WAIT)
    assert state.dead
    assert state.cause_of_death == "starvation"
    assert state.messages.count("You have died") == 1


def test_slow_digestion_halves_consumption(make_state):
    state = make_state()
    ring = Ring(RingEffect.SLOW_DIGESTION)
    state.player.inventory.append(ring)
    state.player.equipped_rings[0] = ring
    food = state.player.food
    apply_intent(state, WAIT)
    apply_intent(state, WAIT)
    assert state.player.food == food - 1


def test_regeneration_on_rank_modulus(make_state):
    state = make_state()
    state.player.hp = 5
    state.turn = 19
    apply_intent(state, WAIT)
    assert state.player.hp == 6
    apply_intent(state, WAIT)
    assert state.player.hp == 6


def test_regeneration_ring_adds_one(make_state):
    state = make_state()
    ring = Ring(RingEffect.REGENERATION)
    state.player.inventory.append(ring)
    state.player.equipped_rings[0] = ring
    recompute_stats(state.player)
    state.player.hp = 5
    apply_intent(state, WAIT)
    assert state.player.hp == 6


def test_death_is_recorded_once(make_state):
    state = make_state()
    state.player.hp = 0
    handle_death(state, "an orc")
    handle_death(state, "a bat")
    assert state.dead
    assert state.cause_of_death == "an orc"
    assert state.messages.count("You have died") == 1


def test_killed_by_monster_sets_cause(make_state, seq):
    state = make_state(rng=seq(0.99))
    state.player.hp = 1
    state.monsters.append(create_monster(get_template("Orc"), 6, 5))
    apply_intent(state, WAIT)
    assert state.dead
    assert state.cause_of_death == "an orc"
    assert state.messages[-1] == "You have died"


def test_moves_longer_than_one_tile_raise(make_state):
    state = make_state()
    with pytest.raises(ValueError):
        move_player(state, 3, 0)
    with pytest.raises(ValueError):
        apply_intent(state, Move(0, -2))
    assert state.player.pos == (5, 5)
    assert state.turn == 0
