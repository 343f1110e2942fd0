# course_service/models.py
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 9
MAX_PAGE = 1_000_000
MAX_LIMIT = 100


class Level(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class SortOption(str, Enum):
    NEWEST = "newest"
    PRICE_LOW = "price_low"
    PRICE_HIGH = "price_high"
    POPULAR = "popular"


class Batch(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    id: Optional[str] = Field(None, alias="_id")
    name: Optional[str] = None
    startDate: Optional[datetime] = None
    endDate: Optional[datetime] = None
    maxStudents: Optional[int] = None
    currentStudents: int = 0


class CourseCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True)

    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    instructor: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    category: str = Field(..., min_length=1)
    syllabus: str = Field(..., min_length=1)
    duration: Optional[str] = None
    level: Level = Field(Level.BEGINNER, validate_default=True)
    batches: Optional[List[Batch]] = None
    thumbnail: Optional[str] = None


# Fields a course must always carry; an update may change them but not clear them.
REQUIRED_FIELDS = ("title", "instructor", "price", "category", "syllabus", "level", "batches", "isPublished")


class CourseUpdate(BaseModel):
    """Partial update.

    Only the fields present in the request body end up in ``fields_set``;
    ``to_update()`` returns exactly those, so ``""``, ``0`` and ``False`` are
    written while absent fields are left alone.
    """

    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True)

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    instructor: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    category: Optional[str] = Field(None, min_length=1)
    syllabus: Optional[str] = Field(None, min_length=1)
    duration: Optional[str] = None
    level: Optional[Level] = None
    batches: Optional[List[Batch]] = None
    thumbnail: Optional[str] = None
    isPublished: Optional[bool] = None

    @model_validator(mode="after")
    def check_required_not_cleared(self) -> "CourseUpdate":
        cleared = [name for name in REQUIRED_FIELDS if name in self.model_fields_set and getattr(self, name) is None]
        if cleared:
            raise ValueError(f"Fields cannot be null: {', '.join(cleared)}")
        return self

    def to_update(self) -> Dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        if "batches" in data:
            # Batch defaults are part of the stored document even when unset.
            data["batches"] = [batch.model_dump() for batch in self.batches]
        return data


class CourseListQuery(BaseModel):
    """Search, filter, sort and pagination parameters of the listing endpoint."""

    search: Optional[str] = None
    category: Optional[str] = None
    sort: SortOption = SortOption.NEWEST
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @field_validator("sort", mode="before")
    @classmethod
    def fallback_sort(cls, value: Any) -> Any:
        if isinstance(value, SortOption):
            return value
        if isinstance(value, str) and value in {option.value for option in SortOption}:
            return value
        return SortOption.NEWEST

    @field_validator("page", "limit", mode="before")
    @classmethod
    def lenient_positive_int(cls, value: Any, info: ValidationInfo) -> int:
        if info.field_name == "page":
            default, maximum = DEFAULT_PAGE, MAX_PAGE
        else:
            default, maximum = DEFAULT_LIMIT, MAX_LIMIT
        try:
            number = int(str(value).strip())
        except (TypeError, ValueError):
            return default
        if number < 1:
            return default
        return min(number, maximum)

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


class CourseListResponse(BaseModel):
    courses: List[Dict[str, Any]]
    currentPage: int
    totalPages: int
    totalCount: int
    itemsPerPage: int


class FiltersResponse(BaseModel):
    categories: List[str]
    instructors: List[str]
