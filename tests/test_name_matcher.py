"""Unit tests for fuzzy name matching."""

import pytest

from coachbot.constants import PLAYER_MATCH_THRESHOLD, TEAM_MATCH_THRESHOLD
from coachbot.name_matcher import normalize_for_matching, resolve, similarity

PLAYERS = [
    ('Patrick Mahomes', 1),
    ('Josh Allen', 2),
    ('Travis Kelce', 3),
]


class TestSimilarity:
    """Tests for the edit-distance similarity score."""

    def test_identical_names(self):
        assert similarity('Josh Allen', 'Josh Allen') == 1.0

    def test_case_insensitive(self):
        """Test that case differences do not count as edits."""
        assert similarity('JOSH ALLEN', 'josh allen') == 1.0
        assert normalize_for_matching('Josh Allen') == 'josh allen'

    def test_known_distance(self):
        """Test kitten/sitting: 3 edits over 7 characters."""
        assert similarity('kitten', 'sitting') == pytest.approx(1 - 3 / 7)

    def test_nothing_in_common(self):
        assert similarity('abc', '') == 0.0
        assert similarity('abc', 'xyz') == 0.0

    def test_both_empty(self):
        assert similarity('', '') == 1.0

    def test_symmetric(self):
        assert similarity('Mahomes', 'Mahommes') == similarity('Mahommes', 'Mahomes')


class TestResolve:
    """Tests for picking the best candidate."""

    def test_exact_match(self):
        match = resolve('Josh Allen', PLAYERS, PLAYER_MATCH_THRESHOLD)
        assert match.payload == 2
        assert match.name == 'Josh Allen'
        assert match.similarity == 1.0

    def test_typo_still_matches(self):
        """Test a one-letter typo is within the player threshold."""
        match = resolve('patrik mahomes', PLAYERS, PLAYER_MATCH_THRESHOLD)
        assert match is not None
        assert match.payload == 1

    def test_no_candidate_close_enough(self):
        assert resolve('Tom Brady', PLAYERS, PLAYER_MATCH_THRESHOLD) is None

    def test_threshold_is_exclusive(self):
        """Test a candidate scoring exactly the threshold is rejected."""
        assert similarity('ab', 'ac') == 0.5
        assert resolve('ab', [('ac', 1)], 0.5) is None
        assert resolve('ab', [('ac', 1)], 0.49).payload == 1

    def test_best_candidate_wins(self):
        match = resolve('Josh Alen', [('Josh Allen', 1), ('Josh Allan', 2), ('Josh Alen', 3)], 0.5)
        assert match.payload == 3

    def test_tie_keeps_first_candidate(self):
        match = resolve('ab', [('ac', 'first'), ('ad', 'second')], 0.4)
        assert match.payload == 'first'

    def test_empty_query_and_candidates(self):
        """Test the empty boundary returns not found without raising."""
        assert resolve('', [], PLAYER_MATCH_THRESHOLD) is None

    def test_empty_query(self):
        assert resolve('', PLAYERS, PLAYER_MATCH_THRESHOLD) is None

    def test_empty_candidates(self):
        assert resolve('Josh Allen', [], PLAYER_MATCH_THRESHOLD) is None

    def test_accepts_generator(self):
        match = resolve('Travis Kelce', ((name, pid) for name, pid in PLAYERS), PLAYER_MATCH_THRESHOLD)
        assert match.payload == 3

    def test_team_lookup(self):
        """Test team names with the looser team threshold."""
        teams = [('Coach Dad', 2), ('UGF Pandas', 4), ('Beyond Cursed', 5)]
        assert resolve('coach dadd', teams, TEAM_MATCH_THRESHOLD).payload == 2
        assert resolve('ugf panda', teams, TEAM_MATCH_THRESHOLD).payload == 4
        assert resolve('Stairway', teams, TEAM_MATCH_THRESHOLD) is None
