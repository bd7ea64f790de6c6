import pytest

from src.domain.value_objects.enums import Side, SkipReason
from src.domain.value_objects.ids import MatchId
from src.domain.value_objects.score import Score
from src.domain.value_objects.team_name import display_team_name, normalize_team_name


@pytest.mark.parametrize(
    "raw",
    ["Foo  Bar.", "Foo Bar", "Foo Bar ", "  Foo Bar...", "Foo\tBar"],
)
def test_team_name_variants_normalize_identically(raw: str) -> None:
    assert normalize_team_name(raw) == "Foo Bar"


def test_normalize_team_name_empty_inputs() -> None:
    assert normalize_team_name(None) == ""
    assert normalize_team_name("   ") == ""
    assert normalize_team_name("...") == ""


def test_normalize_keeps_inner_periods() -> None:
    assert normalize_team_name("K.S. Arkonia.") == "K.S. Arkonia"


def test_display_name_only_trims() -> None:
    assert display_team_name("  Foo  Bar. ") == "Foo  Bar."
    assert display_team_name(None) == ""


def test_score_parse_accepts_two_integers() -> None:
    s = Score.parse(" 10 : 9 ")
    assert s == Score(home=10, away=9)
    assert s is not None and s.winner is Side.HOME
    assert str(s) == "10:9"


@pytest.mark.parametrize("raw", [None, "", "10", "10:9:8", "a:b", "1.5:2", "1_0:2", "nan:1", ":3"])
def test_score_parse_rejects_malformed(raw: str | None) -> None:
    assert Score.parse(raw) is None


def test_score_winner_on_tie() -> None:
    assert Score(home=4, away=4).winner is None
    assert Score(home=3, away=4).winner is Side.AWAY


def test_enums_and_ids() -> None:
    match_id: MatchId = MatchId("m1")
    assert isinstance(match_id, str)
    assert SkipReason.UNPARSABLE_RESULT.value == "UNPARSABLE_RESULT"
