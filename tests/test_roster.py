"""Tests for the persona roster."""

import pytest

from grok_mind.roster import GROK_PERSONA, Roster, VirtualPersona, grok_persona, load_roster


def _persona(persona_id, name="P"):
    return VirtualPersona(persona_id, {"ja": name, "en": name}, f"user{persona_id}", "#000000")


def test_default_roster_has_five_personas(roster):
    assert len(roster) == 5
    assert roster.ids() == [1, 2, 3, 4, 5]


def test_default_roster_names(roster):
    assert roster.get(5).display_name("ja") == "リサーチャー"
    assert roster.get(5).display_name("en") == "Deep Researcher"


def test_roster_lookup(roster):
    assert 3 in roster
    assert 0 not in roster
    assert roster.get(42) is None


def test_roster_preserves_order():
    roster = Roster([_persona(7), _persona(2)])
    assert [p.id for p in roster] == [7, 2]


def test_duplicate_ids_rejected():
    with pytest.raises(ValueError, match="Duplicate persona id"):
        Roster([_persona(1), _persona(1)])


def test_load_roster_from_file(tmp_path):
    path = tmp_path / "personas.yaml"
    path.write_text(
        "personas:\n"
        "  - id: 1\n    name: Solo\n    handle: solo\n"
        "  - id: 2\n    name: {ja: ニ, en: Two}\n    handle: two\n    avatar_color: '#fff'\n",
        encoding="utf-8",
    )
    roster = load_roster(path)
    assert roster.get(1).display_name("ja") == "Solo"
    assert roster.get(1).avatar_color == "#9ca3af"
    assert roster.get(2).display_name(True) == "ニ"


def test_load_roster_missing_field(tmp_path):
    path = tmp_path / "personas.yaml"
    path.write_text("personas:\n  - id: 1\n    handle: x\n", encoding="utf-8")
    with pytest.raises(ValueError, match="'name'"):
        load_roster(path)


def test_load_roster_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_roster(tmp_path / "nope.yaml")


def test_grok_persona():
    view = grok_persona("en")
    assert view.name == "Grok"
    assert view.handle == "grok"
    assert view.id == GROK_PERSONA.id
