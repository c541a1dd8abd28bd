import string

import pytest

from delve.errors import DataValidationError
from delve.game.monsters import (
    MONSTER_TABLE,
    SpecialKind,
    create_monster,
    get_template,
    load_monster_table,
    monsters_for_level,
)


def test_one_template_per_letter():
    assert len(MONSTER_TABLE) == 26
    assert sorted(t.glyph for t in MONSTER_TABLE) == list(string.ascii_uppercase)


def test_level_one_pool_is_tier_one_only():
    pool = monsters_for_level(1)
    assert pool
    assert all(t.level == 1 for t in pool)


@pytest.mark.parametrize("level,tiers", [(2, {1, 2}), (3, {2, 3}), (5, {4, 5}), (26, {4, 5})])
def test_spawn_pool_spans_two_tiers(level, tiers):
    assert {t.level for t in monsters_for_level(level)} == tiers


def test_special_only_monsters():
    special_only = {t.name for t in MONSTER_TABLE if t.special_only}
    assert special_only == {"Aquator", "Ice monster", "Nymph"}
    assert get_template("ice monster").special.kind == SpecialKind.FREEZE


def test_create_monster_clones_template():
    template = get_template("Orc")
    orc = create_monster(template, 4, 6)
    assert orc.name == "orc"
    assert orc.pos == (4, 6)
    assert orc.hp == orc.max_hp == template.hp
    assert not orc.provoked
    assert orc.alive
    orc.hp = 0
    assert not orc.alive
    assert create_monster(template, 0, 0).hp == template.hp


def test_unknown_template_raises_key_error():
    with pytest.raises(KeyError):
        get_template("Balrog")


def _entry(**overrides):
    entry = {
        "name": "Grue",
        "glyph": "g",
        "level": 1,
        "hp": 4,
        "attack": 1,
        "defense": 0,
        "xp": 1,
        "aggression": 1,
    }
    entry.update(overrides)
    return entry


@pytest.mark.parametrize(
    "data",
    [
        {},
        {"monsters": []},
        {"monsters": [_entry(aggression=7)]},
        {"monsters": [_entry(level=9)]},
        {"monsters": [_entry(attack=0)]},
        {"monsters": [_entry(special={"kind": "explode"})]},
        {"monsters": [{"name": "Grue"}]},
        {"monsters": [_entry(), _entry()]},
    ],
)
def test_malformed_tables_fail_fast(data):
    with pytest.raises(DataValidationError):
        load_monster_table(data)


def test_custom_table_parses():
    table = load_monster_table({"monsters": [_entry(special={"kind": "venom", "amount": 2})]})
    assert table[0].special.kind == SpecialKind.VENOM
    assert table[0].special.amount == 2
