# course_service/data_service.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from course_service.errors import NotFoundError, StoreError
from course_service.models import CourseCreate, CourseListQuery, CourseListResponse, CourseUpdate, FiltersResponse
from course_service.query import CourseQuery, resolve_sort, total_pages, total_students

logger = logging.getLogger("course_service.data_service")

OWNER_FIELDS = {"fullName": 1, "email": 1}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_object_id(value: Any) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


def serialize(value: Any) -> Any:
    """Convert ObjectIds in a stored document to strings for JSON output."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {key: serialize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [serialize(item) for item in value]
    return value


class CourseDataService:
    def __init__(self, db):
        self.courses = db["courses"]
        self.users = db["users"]

    # ─────────────────────────────────────────────
    # Reads
    # ─────────────────────────────────────────────
    async def get_all_courses(self) -> List[Dict[str, Any]]:
        try:
            courses = await self.courses.find({}, sort=[("createdAt", DESCENDING)]).to_list(length=None)
            courses = await self._populate_owners(courses)
        except PyMongoError as e:
            raise StoreError(error=str(e)) from e
        return [serialize(course) for course in courses]

    async def get_course_by_id(self, course_id: str) -> Dict[str, Any]:
        oid = to_object_id(course_id)
        if oid is None:
            raise NotFoundError()
        try:
            course = await self.courses.find_one({"_id": oid})
            if course is None:
                raise NotFoundError()
            [course] = await self._populate_owners([course])
        except PyMongoError as e:
            raise StoreError(error=str(e)) from e
        return serialize(course)

    async def get_filters(self) -> FiltersResponse:
        try:
            categories = await self.courses.distinct("category")
            instructors = await self.courses.distinct("instructor")
        except PyMongoError as e:
            raise StoreError(error=str(e)) from e
        return FiltersResponse(
            categories=[c for c in categories if c],
            instructors=[i for i in instructors if i],
        )

    async def list_courses(self, params: CourseListQuery) -> CourseListResponse:
        query = CourseQuery().search(params.search).category(params.category).build()
        sort = resolve_sort(params.sort)
        logger.debug(f"Listing courses | query={query} sort={sort} skip={params.skip} limit={params.limit}")

        try:
            total_count = await self.courses.count_documents(query)
            courses = await self.courses.find(
                query, sort=sort, skip=params.skip, limit=params.limit
            ).to_list(length=params.limit)
            courses = await self._populate_owners(courses)
        except PyMongoError as e:
            raise StoreError(error=str(e)) from e

        return CourseListResponse(
            courses=[{**serialize(course), "totalStudents": total_students(course)} for course in courses],
            currentPage=params.page,
            totalPages=total_pages(total_count, params.limit),
            totalCount=total_count,
            itemsPerPage=params.limit,
        )

    # ─────────────────────────────────────────────
    # Writes
    # ─────────────────────────────────────────────
    async def add_course(self, course_data: CourseCreate, user_id: str) -> Dict[str, Any]:
        now = utcnow()
        document = course_data.model_dump(exclude_none=True)
        document["batches"] = [self._with_batch_id(batch) for batch in document.get("batches") or []]
        document.update(
            isPublished=False,
            createdBy=to_object_id(user_id) or user_id,
            createdAt=now,
            updatedAt=now,
        )
        try:
            result = await self.courses.insert_one(document)
            document["_id"] = result.inserted_id
            [document] = await self._populate_owners([document])
        except PyMongoError as e:
            raise StoreError(error=str(e)) from e
        logger.info(f"Course created | id={document['_id']} by={user_id}")
        return serialize(document)

    async def update_course(self, course_id: str, course_data: CourseUpdate) -> Dict[str, Any]:
        oid = to_object_id(course_id)
        if oid is None:
            raise NotFoundError()
        update_data = course_data.to_update()
        if "batches" in update_data:
            update_data["batches"] = [self._with_batch_id(batch) for batch in update_data["batches"]]
        update_data["updatedAt"] = utcnow()
        try:
            course = await self.courses.find_one_and_update(
                {"_id": oid},
                {"$set": update_data},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise StoreError(error=str(e)) from e
        if course is None:
            raise NotFoundError()
        logger.info(f"Course updated | id={course_id} fields={sorted(update_data)}")
        return serialize(course)

    async def delete_course(self, course_id: str) -> None:
        oid = to_object_id(course_id)
        if oid is None:
            raise NotFoundError()
        try:
            result = await self.courses.delete_one({"_id": oid})
        except PyMongoError as e:
            raise StoreError(error=str(e)) from e
        if result.deleted_count == 0:
            raise NotFoundError()
        logger.info(f"Course deleted | id={course_id}")

    # ─────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────
    @staticmethod
    def _with_batch_id(batch: Dict[str, Any]) -> Dict[str, Any]:
        """Store a batch under its own ``_id``, keeping a valid id the client sent back."""
        batch = dict(batch)
        batch_id = to_object_id(batch.pop("id", None)) or ObjectId()
        return {"_id": batch_id, **batch}

    async def _populate_owners(self, courses: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Replace each createdBy reference with the owner's name and email.

        Owners that no longer exist resolve to None. Returns new dicts.
        """
        owner_ids = {course["createdBy"] for course in courses if isinstance(course.get("createdBy"), ObjectId)}
        owners = {}
        if owner_ids:
            cursor = self.users.find({"_id": {"$in": list(owner_ids)}}, OWNER_FIELDS)
            owners = {user["_id"]: user for user in await cursor.to_list(length=None)}

        populated = []
        for course in courses:
            owner = course.get("createdBy")
            if owner is not None:
                owner = owners.get(owner)
            populated.append({**course, "createdBy": owner})
        return populated
