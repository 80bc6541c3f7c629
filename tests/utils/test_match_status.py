import pytest

from app.utils.match_status import MatchPhase, classify_match_status


@pytest.mark.parametrize("status", ["NS", "TBD", "ns", " NS "])
def test_not_started_codes(status):
    assert classify_match_status(status) == MatchPhase.not_started


@pytest.mark.parametrize("status", ["1H", "HT", "2H", "ET", "BT", "P", "SUSP", "INT", "LIVE"])
def test_in_progress_codes(status):
    assert classify_match_status(status) == MatchPhase.in_progress


@pytest.mark.parametrize("status", ["FT", "AET", "PEN", "ft"])
def test_finished_codes(status):
    assert classify_match_status(status) == MatchPhase.finished


@pytest.mark.parametrize("status", ["PST", "CANC", "ABD", "AWD", "WO", "canc"])
def test_called_off_codes(status):
    assert classify_match_status(status) == MatchPhase.called_off


@pytest.mark.parametrize("status", [None, "", "XYZ", "Match Finished"])
def test_unrecognized_codes_are_unknown(status):
    assert classify_match_status(status) == MatchPhase.unknown
