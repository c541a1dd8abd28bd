from delve.dungeon import generate
from delve.game.ai import spawn_monsters, step_monsters
from delve.game.items import Ring, RingEffect
from delve.game.monsters import create_monster, get_template
from delve.game.player import recompute_stats


def place(state, name, x, y, **attrs):
    monster = create_monster(get_template(name), x, y)
    for key, value in attrs.items():
        setattr(monster, key, value)
    state.monsters.append(monster)
    return monster


def test_unprovoked_passive_monster_never_attacks(make_state, seq):
    state = make_state()
    trap = place(state, "Venus Flytrap", 6, 5)
    for _ in range(5):
        step_monsters(state, seq(0.99))
    assert state.player.hp == 12
    assert trap.pos == (6, 5)
    assert state.messages == []


def test_provoked_passive_monster_attacks(make_state, seq):
    state = make_state()
    place(state, "Venus Flytrap", 6, 5, provoked=True)
    step_monsters(state, seq(0.99, 0.99))
    # raw 8 against defense 3
    assert state.player.hp == 7
    assert state.messages == ["The venus flytrap hits you"]


def test_pursuer_steps_horizontally_first(make_state, seq):
    state = make_state()
    orc = place(state, "Orc", 9, 8)
    step_monsters(state, seq(0.5))
    assert orc.pos == (8, 8)


def test_paralysed_monster_waits_and_counts_down(make_state, seq):
    state = make_state()
    orc = place(state, "Orc", 6, 5)
    orc.status.paralysis = 2
    step_monsters(state, seq(0.99))
    assert orc.pos == (6, 5)
    assert orc.status.paralysis == 1
    assert state.player.hp == 12
    step_monsters(state, seq(0.99))
    assert orc.status.paralysis == 0


def test_monster_beyond_sight_is_idle(make_state, seq):
    state = make_state(width=30, player_pos=(2, 5))
    emu = place(state, "Emu", 12, 5)
    step_monsters(state, seq(0.5))
    assert emu.pos == (12, 5)


def test_always_active_monster_hunts_from_afar(make_state, seq):
    state = make_state(width=30, player_pos=(2, 5))
    dragon = place(state, "Dragon", 20, 5)
    step_monsters(state, seq(0.5))
    assert dragon.pos == (19, 5)


def test_roaming_monster_wanders_outside_pursuit_range(make_state, seq):
    state = make_state(width=30, player_pos=(2, 5))
    bat = place(state, "Bat", 8, 5)
    step_monsters(state, seq(0.3, 0.8, 0.1))
    dx, dy = bat.x - 8, bat.y - 5
    assert abs(dx) + abs(dy) == 1


def test_leprechaun_steals_and_vanishes(make_state, seq):
    state = make_state()
    state.player.gold = 100
    place(state, "Leprechaun", 6, 5, provoked=True)
    step_monsters(state, seq(0.99))
    # floor(100 * (0.1 + 0.99 * 0.2)) = 29
    assert state.player.gold == 71
    assert state.monsters == []
    assert state.messages == ["The leprechaun steals 29 gold and vanishes!"]


def test_leprechaun_vanishes_even_with_nothing_to_steal(make_state, seq):
    state = make_state()
    place(state, "Leprechaun", 6, 5, provoked=True)
    step_monsters(state, seq(0.99))
    assert state.player.gold == 0
    assert state.monsters == []
    assert "finds nothing to steal" in state.messages[0]


def test_gold_theft_is_capped(make_state, seq):
    state = make_state()
    state.player.gold = 10000
    place(state, "Leprechaun", 6, 5, provoked=True)
    step_monsters(state, seq(0.99))
    assert state.player.gold == 10000 - 640


def test_thief_miss_roll(make_state, seq):
    state = make_state()
    state.player.gold = 100
    place(state, "Leprechaun", 6, 5, provoked=True)
    step_monsters(state, seq(0.1))
    assert state.player.gold == 100
    assert len(state.monsters) == 1


def test_nymph_steals_wielded_weapon_and_stats_follow(make_state, seq):
    state = make_state()
    sword = state.player.equipped_weapon
    count = len(state.player.inventory)
    place(state, "Nymph", 6, 5, provoked=True)
    step_monsters(state, seq(0.99, 0.0))
    assert sword not in state.player.inventory
    assert len(state.player.inventory) == count - 1
    assert state.player.equipped_weapon is None
    assert state.player.hit_bonus == 0
    assert state.monsters == []


def test_aquator_corrodes_armor(make_state, seq):
    state = make_state()
    place(state, "Aquator", 6, 5)
    step_monsters(state, seq(0.99))
    assert state.player.equipped_armor.ac == 2
    assert state.player.defense == 2
    assert state.player.hp == 12


def test_maintain_armor_ring_blocks_rust(make_state, seq):
    state = make_state()
    ring = Ring(RingEffect.MAINTAIN_ARMOR)
    state.player.inventory.append(ring)
    state.player.equipped_rings[0] = ring
    recompute_stats(state.player)
    place(state, "Aquator", 6, 5)
    step_monsters(state, seq(0.99))
    assert state.player.defense == 3


def test_ice_monster_freezes_without_damage(make_state, seq):
    state = make_state()
    place(state, "Ice monster", 6, 5)
    step_monsters(state, seq(0.99))
    assert state.player.status.paralysis == 2
    assert state.player.hp == 12


def test_vampire_drains_max_hp(make_state, seq):
    state = make_state()
    place(state, "Vampire", 6, 5)
    step_monsters(state, seq(0.99, 0.0))
    assert state.player.max_hp == 11
    assert state.player.hp <= 11


def test_rattlesnake_weakens_unless_sustained(make_state, seq):
    state = make_state()
    place(state, "Rattlesnake", 6, 5)
    step_monsters(state, seq(0.99, 0.0))
    assert state.player.attack == 2


def test_scared_monster_backs_off(make_state, seq):
    state = make_state()
    orc = place(state, "Orc", 6, 5)
    orc.status.scared = 3
    step_monsters(state, seq(0.5))
    assert max(abs(orc.x - 5), abs(orc.y - 5)) == 2
    assert orc.status.scared == 2


def test_aggravation_ring_provokes_everyone(make_state, seq):
    state = make_state()
    ring = Ring(RingEffect.AGGRAVATE_MONSTER)
    state.player.inventory.append(ring)
    state.player.equipped_rings[1] = ring
    trap = place(state, "Venus Flytrap", 12, 8)
    step_monsters(state, seq(0.5))
    assert trap.provoked


def test_stealth_hides_from_unprovoked_medium_monsters(make_state, seq):
    state = make_state()
    ring = Ring(RingEffect.STEALTH)
    state.player.inventory.append(ring)
    state.player.equipped_rings[0] = ring
    orc = place(state, "Orc", 9, 5)
    step_monsters(state, seq(0.5))
    assert orc.pos == (9, 5)


def test_monsters_do_not_stack(make_state, seq):
    state = make_state()
    first = place(state, "Orc", 7, 5)
    second = place(state, "Orc", 8, 5)
    first.status.paralysis = 5
    step_monsters(state, seq(0.5))
    assert first.pos == (7, 5)
    assert second.pos == (8, 5)


def test_spawn_skips_the_arrival_room():
    dungeon = generate(seed=13)
    monsters = spawn_monsters(dungeon, lambda: 0.0, 1)
    assert len(monsters) == 8
    assert all(m.pos != dungeon.stairs_up for m in monsters)
    assert all(m.pos in [r.center() for r in dungeon.rooms] for m in monsters)


def test_hasted_player_outpaces_monsters_on_odd_turns(make_state, seq):
    state = make_state()
    state.player.status.haste = 3
    orc = place(state, "Orc", 9, 5)
    state.turn = 1
    step_monsters(state, seq(0.5))
    assert orc.pos == (9, 5)
    state.turn = 2
    step_monsters(state, seq(0.5))
    assert orc.pos == (8, 5)


def test_confused_monster_stumbles_instead_of_attacking(make_state, seq):
    state = make_state()
    orc = place(state, "Orc", 6, 5)
    orc.status.confusion = 2
    # 0.9 wanders; the shuffle keeps the order, west is the player so it goes east
    step_monsters(state, seq(0.9))
    assert orc.pos == (7, 5)
    assert orc.status.confusion == 1
    assert state.player.hp == 12
    assert state.messages == []
    step_monsters(state, seq(0.1))
    assert orc.pos == (7, 5)
    assert orc.status.confusion == 0
    assert state.player.hp == 12
    assert state.messages == []


def test_dead_monster_does_not_block_the_way(make_state, seq):
    state = make_state()
    place(state, "Orc", 8, 5, hp=0)
    orc = place(state, "Orc", 9, 5)
    step_monsters(state, seq(0.5))
    assert orc.pos == (8, 5)
    assert len(state.monsters) == 1
