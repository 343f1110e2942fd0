"""Tests for request models."""

import pytest
from pydantic import ValidationError

from course_service.models import MAX_LIMIT, MAX_PAGE, CourseCreate, CourseListQuery, CourseUpdate, SortOption


class TestCourseListQuery:
    def test_defaults(self):
        params = CourseListQuery()
        assert params.page == 1
        assert params.limit == 9
        assert params.sort == SortOption.NEWEST

    def test_numeric_strings_are_parsed(self):
        params = CourseListQuery(page="3", limit="12")
        assert (params.page, params.limit) == (3, 12)

    @pytest.mark.parametrize("value", ["abc", "", None, "0", "-2", "1.5"])
    def test_invalid_page_and_limit_fall_back_to_defaults(self, value):
        params = CourseListQuery(page=value, limit=value)
        assert (params.page, params.limit) == (1, 9)

    def test_unknown_sort_falls_back_to_newest(self):
        assert CourseListQuery(sort="cheapest").sort == SortOption.NEWEST
        assert CourseListQuery(sort=None).sort == SortOption.NEWEST

    def test_known_sort(self):
        assert CourseListQuery(sort="price_high").sort == SortOption.PRICE_HIGH

    def test_huge_page_and_limit_are_capped(self):
        params = CourseListQuery(page=str(2**70), limit="99999999999999999999999")
        assert params.page == MAX_PAGE
        assert params.limit == MAX_LIMIT
        assert params.skip < 2**63


class TestCourseCreate:
    def test_missing_syllabus_is_rejected(self, course_payload):
        del course_payload["syllabus"]
        with pytest.raises(ValidationError):
            CourseCreate(**course_payload)

    def test_blank_title_is_rejected(self, course_payload):
        course_payload["title"] = "   "
        with pytest.raises(ValidationError):
            CourseCreate(**course_payload)

    def test_negative_price_is_rejected(self, course_payload):
        course_payload["price"] = -1
        with pytest.raises(ValidationError):
            CourseCreate(**course_payload)

    def test_free_course_is_allowed(self, course_payload):
        course_payload["price"] = 0
        assert CourseCreate(**course_payload).price == 0

    def test_defaults_and_trimming(self):
        course = CourseCreate(
            title="  Statistics ",
            instructor="Dr. Bayes",
            price=10,
            category="Math",
            syllabus="Probability",
            batches=[{"name": "Fall"}],
        )
        assert course.title == "Statistics"
        assert course.level == "Beginner"
        assert course.batches[0].currentStudents == 0
        assert course.model_dump()["level"] == "Beginner"


class TestCourseUpdate:
    def test_only_present_fields_are_updated(self):
        assert CourseUpdate(price=50).to_update() == {"price": 50}

    def test_falsy_values_are_kept(self):
        update = CourseUpdate(description="", price=0, isPublished=False).to_update()
        assert update == {"description": "", "price": 0, "isPublished": False}

    def test_optional_field_can_be_cleared(self):
        assert CourseUpdate(thumbnail=None).to_update() == {"thumbnail": None}

    def test_required_field_cannot_be_cleared(self):
        with pytest.raises(ValidationError):
            CourseUpdate(title=None)

    def test_batches_keep_defaults(self):
        update = CourseUpdate(batches=[{"name": "Summer"}]).to_update()
        assert update["batches"][0]["currentStudents"] == 0
        assert update["batches"][0]["name"] == "Summer"

    def test_batch_id_is_read_from_underscore_id(self):
        update = CourseUpdate(batches=[{"_id": "65f000000000000000008650", "name": "Summer"}]).to_update()
        assert update["batches"][0]["id"] == "65f000000000000000008650"


class TestCourseCreateBatches:
    def test_null_batches_are_accepted(self, course_payload):
        course_payload["batches"] = None
        assert CourseCreate(**course_payload).batches is None
