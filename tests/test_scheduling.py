"""Tests for appointment conflict detection."""

from dataclasses import dataclass
from datetime import datetime

import pytest

from fieldservice.services.scheduling import find_conflicts, has_conflict, intervals_overlap

from conftest import at


@dataclass
class Slot:
    technician_id: int
    start_time: datetime
    end_time: datetime


TECH = 1
OTHER_TECH = 2


class TestIntervalsOverlap:
    def test_partial_overlap(self):
        assert intervals_overlap(at(9), at(11), at(10), at(12))
        assert intervals_overlap(at(10), at(12), at(9), at(11))

    def test_containment(self):
        assert intervals_overlap(at(9), at(17), at(10), at(11))
        assert intervals_overlap(at(10), at(11), at(9), at(17))

    def test_identical_windows(self):
        assert intervals_overlap(at(9), at(11), at(9), at(11))

    def test_back_to_back_does_not_overlap(self):
        assert not intervals_overlap(at(9), at(11), at(11), at(13))
        assert not intervals_overlap(at(11), at(13), at(9), at(11))

    def test_disjoint(self):
        assert not intervals_overlap(at(8), at(9), at(14), at(15))


class TestHasConflict:
    def test_no_existing_appointments(self):
        assert not has_conflict(TECH, at(9), at(11), [])

    def test_overlapping_appointment_conflicts(self):
        existing = [Slot(TECH, at(9), at(11))]
        assert has_conflict(TECH, at(10), at(12), existing)

    def test_touching_endpoints_are_allowed(self):
        existing = [Slot(TECH, at(9), at(11))]
        assert not has_conflict(TECH, at(11), at(13), existing)
        assert not has_conflict(TECH, at(7), at(9), existing)

    def test_other_technicians_are_ignored(self):
        existing = [Slot(OTHER_TECH, at(9), at(11))]
        assert not has_conflict(TECH, at(9), at(11), existing)

    def test_gap_between_appointments(self):
        existing = [Slot(TECH, at(8), at(10)), Slot(TECH, at(12), at(14))]
        assert not has_conflict(TECH, at(10), at(12), existing)
        assert has_conflict(TECH, at(10), at(12, 1), existing)

    def test_overlap_across_midnight(self):
        existing = [Slot(TECH, at(22), at(2, day=16))]
        assert has_conflict(TECH, at(1, day=16), at(3, day=16), existing)

    def test_matches_pairwise_definition(self):
        hours = range(8, 14)
        existing = [Slot(TECH, at(10), at(12))]
        for start in hours:
            for end in hours:
                if end <= start:
                    continue
                expected = start < 12 and 10 < end
                assert has_conflict(TECH, at(start), at(end), existing) is expected

    def test_rejects_inverted_window(self):
        with pytest.raises(ValueError):
            has_conflict(TECH, at(11), at(9), [])

    def test_rejects_empty_window(self):
        with pytest.raises(ValueError):
            has_conflict(TECH, at(9), at(9), [])


class TestFindConflicts:
    def test_returns_every_overlapping_appointment(self):
        first = Slot(TECH, at(8), at(10))
        second = Slot(TECH, at(11), at(12))
        clear = Slot(TECH, at(13), at(14))
        conflicts = find_conflicts(TECH, at(9), at(13), [first, second, clear])
        assert conflicts == [first, second]
