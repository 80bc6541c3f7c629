from app.schemas.lineup import LineupPlayer, RosterPlayer, TeamLineupFeed
from app.services.player_reconciler import find_roster_match, reconcile_lineup, reconcile_player


def _roster() -> list[RosterPlayer]:
    return [
        RosterPlayer(id=1, name="Alan Smith", number=9, position="Attacker", photo="p1.jpg"),
        RosterPlayer(id=2, name="Bukayo Saka", number=7, position="Attacker", photo="p2.jpg"),
        RosterPlayer(id=3, name="David Raya", number=22, position="Goalkeeper", photo="p3.jpg"),
    ]


class TestFindRosterMatch:
    def test_id_match_wins_over_everything(self):
        target = LineupPlayer(id=3, name="Bukayo Saka", number=7)
        assert find_roster_match(target, _roster()).id == 3

    def test_exact_normalized_name(self):
        target = LineupPlayer(id=0, name="  bukayo  SAKA ")
        assert find_roster_match(target, _roster()).id == 2

    def test_jersey_number_corroboration(self):
        target = LineupPlayer(id=0, name="A. Smith", number=9)
        assert find_roster_match(target, _roster()).photo == "p1.jpg"

    def test_substring_overlap_above_threshold(self):
        target = LineupPlayer(id=0, name="Alan Smithson")
        assert find_roster_match(target, _roster()).id == 1

    def test_substring_overlap_below_threshold_is_rejected(self):
        roster = [RosterPlayer(id=5, name="Smith", photo="p5.jpg")]
        target = LineupPlayer(id=0, name="Jonathan Smith")
        assert find_roster_match(target, roster) is None

    def test_unknown_name_is_rejected(self):
        target = LineupPlayer(id=0, name="Xyz Unknown")
        assert find_roster_match(target, _roster()) is None

    def test_empty_target_name_does_not_crash(self):
        target = LineupPlayer(id=0, name="", number=0)
        assert find_roster_match(target, _roster()) is None

    def test_unknown_id_falls_back_to_name(self):
        target = LineupPlayer(id=999, name="David Raya")
        assert find_roster_match(target, _roster()).id == 3

    def test_custom_threshold(self):
        roster = [RosterPlayer(id=5, name="Smith", photo="p5.jpg")]
        target = LineupPlayer(id=0, name="Jonathan Smith")
        assert find_roster_match(target, roster, threshold=0.3).id == 5


class TestReconcilePlayer:
    def test_lineup_fields_are_kept_verbatim(self):
        target = LineupPlayer(id=0, name="A. Smith", number=9, pos="F", grid="4:1")
        record = reconcile_player(target, _roster())

        assert record.id == 0
        assert record.name == "A. Smith"
        assert record.number == 9
        assert record.pos == "F"
        assert record.grid == "4:1"
        assert record.photo == "p1.jpg"

    def test_no_match_leaves_photo_empty(self):
        record = reconcile_player(LineupPlayer(name="Xyz Unknown", pos="M"), _roster())
        assert record.photo == ""
        assert record.pos == "M"


def test_reconcile_lineup_merges_starters_and_substitutes():
    feed = TeamLineupFeed(
        team_id=42,
        team_name="Arsenal",
        formation="4-3-3",
        starters=[LineupPlayer(id=3, name="Raya", number=22, pos="G", grid="1:1")],
        substitutes=[LineupPlayer(id=0, name="Bukayo Saka", number=7, pos="F")],
    )

    lineup = reconcile_lineup(feed, _roster())

    assert lineup.team_id == 42
    assert lineup.formation == "4-3-3"
    assert lineup.starters[0].photo == "p3.jpg"
    assert lineup.starters[0].grid == "1:1"
    assert lineup.substitutes[0].photo == "p2.jpg"
    assert lineup.substitutes[0].grid is None
