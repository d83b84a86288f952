"""
Unit Tests for the Competency Progress Calculator
"""

from eduportal.progress.calculator import (
    compute_course_progress,
    compute_progress,
    count_validated,
)


class TestComputeProgress:
    """Percentage of a course's competencies validated by a student."""

    def test_no_competencies_is_zero(self, records):
        assert compute_progress([], records.validations([1, 2])) == 0

    def test_no_validations_is_zero(self, records):
        assert compute_progress(records.competencies([1, 2, 3]), []) == 0

    def test_all_validated_is_hundred(self, records):
        competencies = records.competencies([1, 2, 3])
        assert compute_progress(competencies, records.validations([1, 2, 3])) == 100

    def test_one_of_four(self, records):
        competencies = records.competencies([1, 2, 3, 4])
        assert compute_progress(competencies, records.validations([1])) == 25

    def test_rounds_to_nearest(self, records):
        competencies = records.competencies([1, 2, 3])
        assert compute_progress(competencies, records.validations([1])) == 33
        assert compute_progress(competencies, records.validations([1, 2])) == 67

    def test_half_rounds_up(self, records):
        # 1/8 = 12.5%
        competencies = records.competencies(range(1, 9))
        assert compute_progress(competencies, records.validations([1])) == 13

    def test_ignores_validations_for_other_courses(self, records):
        competencies = records.competencies([1, 2])
        validations = records.validations([1, 50, 51])
        assert compute_progress(competencies, validations) == 50

    def test_ignores_validations_of_deleted_competency(self, records):
        # Competency 4 was deleted; its validation must no longer count
        competencies = records.competencies([1, 2, 3])
        validations = records.validations([1, 2, 4])
        assert compute_progress(competencies, validations) == 67

    def test_repeated_validation_counts_once(self, records):
        competencies = records.competencies([1, 2])
        validations = records.validations([1, 1])
        assert compute_progress(competencies, validations) == 50

    def test_result_always_in_range(self, records):
        for total in range(1, 12):
            competencies = records.competencies(range(1, total + 1))
            for validated in range(total + 1):
                result = compute_progress(
                    competencies, records.validations(range(1, validated + 1))
                )
                assert 0 <= result <= 100


class TestCountValidated:
    def test_counts_intersection(self, records):
        assert count_validated(records.competencies([1, 2, 3]), records.validations([2, 9])) == (
            1,
            3,
        )


class TestComputeCourseProgress:
    """Progress packaged with counts for one student and course."""

    def test_filters_by_course_and_student(self, records):
        competencies = records.competencies([1, 2], course_id=1) + records.competencies(
            [3, 4], course_id=2
        )
        validations = records.validations([1, 3]) + records.validations(
            [2], student_id="student-ama"
        )

        progress = compute_course_progress("student-kofi", 1, competencies, validations)

        assert progress.student_id == "student-kofi"
        assert progress.course_id == 1
        assert progress.validated == 1
        assert progress.total == 2
        assert progress.percentage == 50

    def test_empty_course(self, records):
        progress = compute_course_progress("student-kofi", 7, [], records.validations([1]))

        assert progress.total == 0
        assert progress.percentage == 0
