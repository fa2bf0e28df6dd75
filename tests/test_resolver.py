"""Tests for the reverse-link resolver."""

import pytest

from schema_mirror.errors import ConstraintConsistencyError, UnresolvedReferenceError
from schema_mirror.models import ConstraintPart, ForeignKeyConstraint, TableInfo
from schema_mirror.resolver import resolve_reverse_links, validate_and_reverse


def make_tables(*tables):
    return {t.table_name: t for t in tables}


@pytest.fixture
def university_tables():
    """Tables with simple, composite and self-referencing foreign keys."""
    student = TableInfo(table_name="student")
    student.add_foreign_key_part("fk_mentor", "mentor_id", "student", "id")

    course = TableInfo(table_name="course")

    offering = TableInfo(table_name="course_offering")
    offering.add_foreign_key_part("fk_course", "course_id", "course", "id")

    enrollment = TableInfo(table_name="enrollment")
    enrollment.add_foreign_key_part("fk_student", "student_id", "student", "id")
    enrollment.add_foreign_key_part("fk_offering", "course_id", "course_offering", "course_id")
    enrollment.add_foreign_key_part("fk_offering", "term_id", "course_offering", "term_id")

    waitlist = TableInfo(table_name="waitlist")
    waitlist.add_foreign_key_part("fk_waitlist_student", "student_id", "student", "id")

    return make_tables(student, course, offering, enrollment, waitlist)


class TestValidateAndReverse:
    """Tests for validate_and_reverse."""

    def test_reverse_of_composite_constraint(self):
        constraint = ForeignKeyConstraint(
            name="fk_offering",
            parts=[
                ConstraintPart("enrollment", "course_id", "course_offering", "course_id"),
                ConstraintPart("enrollment", "term_id", "course_offering", "term_id"),
            ],
        )

        remote, reverse = validate_and_reverse("enrollment", constraint)

        assert remote == "course_offering"
        assert reverse.name == "fk_offering"
        assert reverse.parts == [
            ConstraintPart("course_offering", "course_id", "enrollment", "course_id"),
            ConstraintPart("course_offering", "term_id", "enrollment", "term_id"),
        ]

    def test_mixed_remote_tables_rejected(self):
        constraint = ForeignKeyConstraint(
            name="fk_bad",
            parts=[
                ConstraintPart("registration", "student_id", "student", "id"),
                ConstraintPart("registration", "course_id", "course", "id"),
            ],
        )

        with pytest.raises(ConstraintConsistencyError) as exc_info:
            validate_and_reverse("registration", constraint)

        assert exc_info.value.constraint_name == "fk_bad"
        assert exc_info.value.remote_tables == ["course", "student"]
        assert isinstance(exc_info.value, AssertionError)

    def test_empty_constraint_rejected(self):
        with pytest.raises(ConstraintConsistencyError):
            validate_and_reverse("registration", ForeignKeyConstraint(name="fk_empty"))


class TestResolveReverseLinks:
    """Tests for resolve_reverse_links."""

    def test_every_constraint_reversed_onto_remote_table(self, university_tables):
        resolve_reverse_links(university_tables)

        for table in university_tables.values():
            for constraint in table.foreign_key_constraints.values():
                (remote,) = constraint.remote_table_names
                inbound = [
                    c for c in university_tables[remote].constraint_sources
                    if c.name == constraint.name
                ]
                assert len(inbound) == 1

                reverse = inbound[0]
                assert {p.remote_table_name for p in reverse.parts} == {table.table_name}
                # Reversing again yields the original column pairs
                _, twice = validate_and_reverse(remote, reverse)
                assert twice.column_pairs == constraint.column_pairs

    def test_inbound_grouped_by_constraint(self, university_tables):
        resolve_reverse_links(university_tables)

        inbound = university_tables["course_offering"].constraint_sources
        assert len(inbound) == 1
        assert len(inbound[0].parts) == 2

    def test_inbound_order_is_deterministic(self, university_tables):
        resolve_reverse_links(university_tables)

        names = [c.name for c in university_tables["student"].constraint_sources]
        # enrollment, student, waitlist
        assert names == ["fk_student", "fk_mentor", "fk_waitlist_student"]

    def test_self_reference(self, university_tables):
        resolve_reverse_links(university_tables)

        mentor = [
            c for c in university_tables["student"].constraint_sources if c.name == "fk_mentor"
        ][0]
        assert mentor.parts == [ConstraintPart("student", "id", "student", "mentor_id")]

    def test_outbound_constraints_unchanged(self, university_tables):
        before = {
            name: dict(t.foreign_key_constraints) for name, t in university_tables.items()
        }

        resolve_reverse_links(university_tables)

        for name, table in university_tables.items():
            assert table.foreign_key_constraints == before[name]

    def test_unresolved_reference(self):
        registration = TableInfo(table_name="registration")
        registration.add_foreign_key_part("fk1", "student_id", "student", "id")

        with pytest.raises(UnresolvedReferenceError) as exc_info:
            resolve_reverse_links(make_tables(registration))

        assert exc_info.value.remote_table_name == "student"
        assert exc_info.value.table_name == "registration"

    def test_failure_leaves_tables_untouched(self):
        student = TableInfo(table_name="student")
        course = TableInfo(table_name="course")

        # "a_registration" sorts first, so its valid link would be appended first
        registration = TableInfo(table_name="a_registration")
        registration.add_foreign_key_part("fk1", "student_id", "student", "id")
        broken = TableInfo(table_name="z_broken")
        broken.foreign_key_constraints["fk_bad"] = ForeignKeyConstraint(
            name="fk_bad",
            parts=[
                ConstraintPart("z_broken", "student_id", "student", "id"),
                ConstraintPart("z_broken", "course_id", "course", "id"),
            ],
        )
        tables = make_tables(student, course, registration, broken)

        with pytest.raises(ConstraintConsistencyError):
            resolve_reverse_links(tables)

        assert student.constraint_sources == []
        assert course.constraint_sources == []

    def test_running_twice_duplicates_without_model_guard(self, university_tables):
        resolve_reverse_links(university_tables)
        resolve_reverse_links(university_tables)

        assert len(university_tables["course"].constraint_sources) == 2

    def test_legacy_table_name(self):
        student = TableInfo(table_name="student")
        registration = TableInfo(table_name="registration")
        registration.add_foreign_key_part("fk1", "student_id", "student", "id")

        resolve_reverse_links(make_tables(student, registration), legacy_table_name=True)

        assert student.constraint_sources[0].parts == [
            ConstraintPart("id", "id", "registration", "student_id")
        ]
