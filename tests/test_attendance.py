"""Tests for core attendance logic."""

import pytest

from studydesk.core.attendance import (
    attendance_level,
    build_report,
    edit_subject,
    is_below_threshold,
    new_subject,
    overall_ratio,
    percent,
    ratio,
    record_attend,
    record_miss,
    set_counts,
    sort_subjects,
)
from studydesk.core.errors import ValidationError
from studydesk.core.records import Subject


def make_subject(attended=0, total=0, min_attendance=75, name="Math 101", id="s1"):
    return Subject(id=id, name=name, attended=attended, total=total, min_attendance=min_attendance)


@pytest.fixture
def fresh():
    return make_subject()


class TestRatio:
    def test_zero_total_is_zero(self, fresh):
        assert ratio(fresh) == 0

    def test_full_attendance(self):
        assert ratio(make_subject(10, 10)) == 100

    def test_rounds_to_nearest(self):
        assert ratio(make_subject(2, 3)) == 67
        assert ratio(make_subject(1, 3)) == 33

    def test_half_rounds_up(self):
        # 12.5% and 62.5%
        assert ratio(make_subject(1, 8)) == 13
        assert ratio(make_subject(5, 8)) == 63

    @pytest.mark.parametrize("attended,total", [(0, 1), (1, 1), (3, 7), (99, 100), (0, 0), (7, 9)])
    def test_bounds(self, attended, total):
        assert 0 <= ratio(make_subject(attended, total)) <= 100

    def test_percent_negative_whole_is_zero(self):
        assert percent(1, -1) == 0


class TestThreshold:
    def test_below(self):
        assert is_below_threshold(make_subject(2, 4, min_attendance=75)) is True

    def test_at_threshold_is_not_below(self):
        assert is_below_threshold(make_subject(3, 4, min_attendance=75)) is False

    def test_fresh_subject_is_below_nonzero_minimum(self, fresh):
        assert is_below_threshold(fresh) is True

    def test_zero_minimum_never_below(self, fresh):
        assert is_below_threshold(make_subject(0, 5, min_attendance=0)) is False


class TestCounters:
    def test_attend_then_miss(self, fresh):
        s = record_miss(record_attend(fresh))
        assert (s.attended, s.total) == (1, 2)
        assert ratio(s) == 50

    def test_updates_return_new_values(self, fresh):
        record_attend(fresh)
        record_miss(fresh)
        assert (fresh.attended, fresh.total) == (0, 0)

    def test_set_counts(self, fresh):
        s = set_counts(fresh, 3, 4)
        assert (s.attended, s.total) == (3, 4)

    def test_set_counts_attended_exceeds_total(self, fresh):
        with pytest.raises(ValidationError) as exc:
            set_counts(fresh, 5, 3)
        assert exc.value.field == "attended"

    @pytest.mark.parametrize("attended,total,field", [(-1, 3, "attended"), (0, -1, "total")])
    def test_set_counts_negative(self, fresh, attended, total, field):
        with pytest.raises(ValidationError) as exc:
            set_counts(fresh, attended, total)
        assert exc.value.field == field

    def test_failed_set_counts_leaves_subject_untouched(self):
        s = make_subject(2, 4)
        with pytest.raises(ValidationError):
            set_counts(s, 5, 3)
        assert (s.attended, s.total) == (2, 4)

    def test_set_counts_zero_zero(self):
        s = set_counts(make_subject(2, 4), 0, 0)
        assert ratio(s) == 0


class TestOverall:
    def test_sums_counts_across_subjects(self):
        subjects = [make_subject(3, 4, id="a"), make_subject(1, 4, id="b")]
        assert overall_ratio(subjects) == 50

    def test_weights_by_total_not_average(self):
        # Per-subject 100% and 0% would average to 50; summed counts give 91%
        subjects = [make_subject(10, 10, id="a"), make_subject(0, 1, id="b")]
        assert overall_ratio(subjects) == 91

    def test_empty(self):
        assert overall_ratio([]) == 0

    def test_no_classes_yet(self):
        assert overall_ratio([make_subject(id="a"), make_subject(id="b")]) == 0


class TestLevels:
    @pytest.mark.parametrize("value,level", [(100, "good"), (75, "good"), (74, "warning"), (60, "warning"), (59, "low"), (0, "low")])
    def test_bands(self, value, level):
        assert attendance_level(value) == level


class TestSubjectLifecycle:
    def test_new_subject_defaults(self):
        s = new_subject("s1", "  Physics ", "user1")
        assert s.name == "Physics"
        assert (s.attended, s.total) == (0, 0)
        assert s.min_attendance == 75
        assert s.owner_id == "user1"

    def test_new_subject_requires_name(self):
        with pytest.raises(ValidationError) as exc:
            new_subject("s1", "   ", "user1")
        assert exc.value.field == "name"

    def test_new_subject_min_attendance_range(self):
        with pytest.raises(ValidationError) as exc:
            new_subject("s1", "Physics", "user1", min_attendance=101)
        assert exc.value.field == "minAttendance"

    def test_edit_keeps_counts(self):
        s = edit_subject(make_subject(3, 4), name="Math 102", min_attendance=80)
        assert s.name == "Math 102"
        assert s.min_attendance == 80
        assert (s.attended, s.total) == (3, 4)

    def test_sort_subjects_alphabetical(self):
        subjects = [make_subject(name="physics", id="p"), make_subject(name="Chemistry", id="c"), make_subject(name="biology", id="b")]
        assert [s.id for s in sort_subjects(subjects)] == ["b", "c", "p"]


class TestReport:
    def test_build_report(self):
        subjects = [make_subject(1, 4, name="Physics", id="p"), make_subject(4, 4, name="Art", id="a")]
        report = build_report(subjects)

        assert [row.subject.id for row in report.subjects] == ["a", "p"]
        assert [row.ratio for row in report.subjects] == [100, 25]
        assert report.overall == 63
        assert report.level == "warning"
        assert [s.id for s in report.below_threshold] == ["p"]
