"""
Unit tests for the composite room score.
"""
import itertools

import pytest

from harmony.core.errors import InvalidInputError
from harmony.services.room_score import (
    RoomMetrics,
    composite_score,
    is_room_completed,
    overall_organization_score,
    validate_metrics,
)
from tests.conftest import make_metrics


class TestCompositeScore:
    def test_all_fives(self):
        # (6 + 5 + 5 + 5 + 5) / 5 = 5.2 → 5
        assert composite_score(make_metrics()) == 5

    def test_best_room(self):
        assert composite_score(make_metrics(1, 10, 10, 10, 10)) == 10

    def test_worst_room(self):
        # (1 + 1 + 1 + 1 + 1) / 5 = 1
        assert composite_score(make_metrics(10, 1, 1, 1, 1)) == 1

    def test_rounds_to_nearest(self):
        # 37 / 5 = 7.4 → 7 ; 38 / 5 = 7.6 → 8
        assert composite_score(make_metrics(4, 8, 8, 8, 6)) == 7
        assert composite_score(make_metrics(4, 8, 8, 8, 7)) == 8

    def test_clutter_is_inverted(self):
        tidy = composite_score(make_metrics(clutter=1))
        messy = composite_score(make_metrics(clutter=10))
        assert tidy > messy

    def test_out_of_range_does_not_crash(self):
        assert isinstance(composite_score(make_metrics(0, 11, 11, 11, 11)), int)


class TestCompositeScoreProperties:
    """Exhaustive over a coarse grid of valid metrics."""

    _VALUES = (1, 3, 5, 8, 10)

    def _grid(self):
        for combo in itertools.product(self._VALUES, repeat=5):
            yield RoomMetrics(*combo)

    def test_always_between_0_and_10(self):
        for m in self._grid():
            assert 0 <= composite_score(m) <= 10

    @pytest.mark.parametrize(
        "field", ["functionality_score", "joy_factor", "energy_flow", "accessibility_score"]
    )
    def test_positive_metrics_never_decrease_score(self, field):
        for m in self._grid():
            value = getattr(m, field)
            if value == 10:
                continue
            bumped = RoomMetrics(**{**vars(m), field: value + 1})
            assert composite_score(bumped) >= composite_score(m)

    def test_more_clutter_never_increases_score(self):
        for m in self._grid():
            if m.clutter_level == 10:
                continue
            bumped = RoomMetrics(**{**vars(m), "clutter_level": m.clutter_level + 1})
            assert composite_score(bumped) <= composite_score(m)


class TestValidateMetrics:
    def test_valid_metrics_pass(self):
        validate_metrics(make_metrics(1, 10, 1, 10, 5))

    @pytest.mark.parametrize("bad", [0, 11, -3])
    def test_out_of_range_rejected(self, bad):
        with pytest.raises(InvalidInputError) as exc:
            validate_metrics(make_metrics(joy=bad))
        assert exc.value.details["field"] == "joy_factor"

    def test_non_integer_rejected(self):
        with pytest.raises(InvalidInputError):
            validate_metrics(make_metrics(energy=5.5))

    def test_bool_rejected(self):
        with pytest.raises(InvalidInputError):
            validate_metrics(make_metrics(accessibility=True))


class TestAggregates:
    def test_overall_score_empty(self):
        assert overall_organization_score([]) == 0

    def test_overall_score_is_rounded_mean_of_composites(self):
        rooms = [make_metrics(1, 10, 10, 10, 10), make_metrics(10, 1, 1, 1, 1)]
        # composites 10 and 1 → 5.5 → 6
        assert overall_organization_score(rooms) == 6

    def test_completed_room(self):
        assert is_room_completed(make_metrics(clutter=3, functionality=8))
        assert not is_room_completed(make_metrics(clutter=4, functionality=10))
        assert not is_room_completed(make_metrics(clutter=1, functionality=7))
