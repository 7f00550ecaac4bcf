"""Tests for opening_classifier.py"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from eco_table import ECO_OPENINGS, OPENING_FAMILIES
from opening_classifier import (
    ClassifiedOpening,
    base_opening_name,
    classify_opening,
    family_before_colon,
    family_exact,
    family_known_prefix,
    name_from_eco_code,
    name_from_moves,
    name_from_opening_tag,
)

CHESSCOM_PGN = """[Event "Live Chess"]
[Site "Chess.com"]
[White "alice"]
[Black "bob"]
[Result "1-0"]
[ECO "B01"]
[ECOUrl "https://www.chess.com/openings/Scandinavian-Defense"]

1. e4 {[%clk 0:02:59.9]} 1... d5 {[%clk 0:02:59]} 2. exd5 Qxd5 1-0
"""


def test_eco_tag_resolves_to_table_name():
    assert classify_opening('[ECO "B01"]\n1.e4 d5') == ClassifiedOpening(
        name="Scandinavian Defense", code="B01"
    )


def test_chesscom_game_pgn():
    opening = classify_opening(CHESSCOM_PGN)
    assert opening.name == "Scandinavian Defense"
    assert opening.code == "B01"


def test_opening_tag_takes_precedence_over_eco_code():
    pgn = '[ECO "B01"]\n[Opening "Caro-Kann Defense"]\n1.e4 c6'
    opening = classify_opening(pgn)
    assert opening.name == "Caro-Kann Defense"
    assert opening.code == "B01"


def test_variation_appended_when_different():
    pgn = '[Opening "Sicilian Defense"]\n[Variation "Najdorf Variation"]\n1.e4 c5'
    assert classify_opening(pgn).name == "Sicilian Defense: Najdorf Variation"


def test_variation_ignored_when_same_as_opening():
    pgn = '[Opening "Sicilian Defense"]\n[Variation "Sicilian Defense"]\n1.e4 c5'
    assert classify_opening(pgn).name == "Sicilian Defense"


def test_unknown_eco_code_gets_generic_name():
    assert classify_opening('[ECO "Z42"]\n1.e4').name == "ECO Z42"


def test_fallback_to_first_moves():
    pgn = '[Event "Casual"]\n\n1. e4 e5 2. Nf3 Nc6 3. Bb5 a6 4. Ba4 Nf6'
    opening = classify_opening(pgn)
    # eight tokens, move numbers included, before they are stripped
    assert opening.name == "Opening: e4 e5 Nf3 Nc6 Bb5"
    assert opening.code is None


def test_explicit_eco_used_when_pgn_has_no_tag():
    opening = classify_opening("1. e4 d5", eco="B01")
    assert opening.name == "Scandinavian Defense"
    assert opening.code == "B01"


def test_eco_tag_wins_over_explicit_eco():
    assert classify_opening('[ECO "C50"]\n1.e4 e5', eco="B01").code == "C50"


def test_unclassifiable_inputs():
    assert classify_opening(None) is None
    assert classify_opening("") is None
    assert classify_opening('[Event "Live Chess"]\n[Site "Chess.com"]\n') is None


def test_individual_name_resolvers():
    pgn = '[Opening "French Defense"]\n1.e4 e6'
    assert name_from_opening_tag(pgn, None) == "French Defense"
    assert name_from_opening_tag("1.e4 e6", None) is None
    assert name_from_eco_code("", "C00") == "French Defense"
    assert name_from_eco_code("", None) is None
    assert name_from_moves("1.e4 e6", None) == "Opening: e4 e6"


def test_family_exact_member():
    assert base_opening_name("Sicilian Defense: Najdorf Variation") == "Sicilian Defense"
    assert family_exact("French Defense: Winawer Variation") == "French Defense"
    assert family_exact("Vienna Game: Frankenstein-Dracula Variation") is None


def test_family_known_prefix_for_unlisted_variation():
    assert family_known_prefix("Caro-Kann Defense: Hillbilly Attack") == "Caro-Kann Defense"
    assert base_opening_name("Caro-Kann Defense: Hillbilly Attack") == "Caro-Kann Defense"


def test_family_before_colon():
    assert family_before_colon("Englund Gambit: Mosquito Gambit") == "Englund Gambit"
    assert family_before_colon("Englund Gambit") is None
    assert base_opening_name("Englund Gambit: Mosquito Gambit") == "Englund Gambit"


def test_family_of_move_fallback_name():
    assert base_opening_name("Opening: e4 e5 Nf3") == "Opening"


def test_unknown_name_without_colon_is_its_own_family():
    assert base_opening_name("Englund Gambit") == "Englund Gambit"


def test_family_collapse_is_idempotent():
    names = set(OPENING_FAMILIES) | set(OPENING_FAMILIES.values())
    names |= {record.name for record in ECO_OPENINGS.values()}
    names |= {
        "Caro-Kann Defense: Hillbilly Attack",
        "Englund Gambit: Mosquito Gambit",
        "Opening: e4 e5 Nf3",
        "ECO Z42",
        "",
    }
    for name in names:
        once = base_opening_name(name)
        assert base_opening_name(once) == once, name
