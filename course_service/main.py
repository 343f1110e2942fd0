# course_service/main.py
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware

from course_service import __version__, config
from course_service.auth import verify_token
from course_service.data_service import CourseDataService
from course_service.database import database
from course_service.errors import register_exception_handlers
from course_service.models import CourseCreate, CourseListQuery, CourseListResponse, CourseUpdate, FiltersResponse

# ─────────────────────────────────────────────
# Logging Setup
# ─────────────────────────────────────────────
handlers = [logging.StreamHandler()]
if config.LOG_FILE:
    handlers.append(logging.FileHandler(config.LOG_FILE))

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(message)s",
    handlers=handlers,
)
logger = logging.getLogger("course_service")


# ─────────────────────────────────────────────
# App Setup
# ─────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    database.connect()
    yield
    database.close()


app = FastAPI(title="Course Service", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Cookie"],
)

register_exception_handlers(app)


def get_data_service() -> CourseDataService:
    return CourseDataService(database.get_db())


# ─────────────────────────────────────────────
# Request Logging Middleware
# ─────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    client = request.client.host if request.client else "-"

    logger.info(f"REQUEST  | {request.method} {request.url.path} | Client: {client}")

    try:
        response = await call_next(request)
        process_time = round((time.time() - start_time) * 1000, 2)

        logger.info(f"RESPONSE | {request.method} {request.url.path} | Status: {response.status_code} | Time: {process_time}ms")

        response.headers["X-Process-Time"] = f"{process_time}ms"
        return response

    except Exception as e:
        process_time = round((time.time() - start_time) * 1000, 2)
        logger.error(f"ERROR    | {request.method} {request.url.path} | Error: {str(e)} | Time: {process_time}ms")
        raise


# ─────────────────────────────────────────────
# Root Routes
# ─────────────────────────────────────────────
@app.get("/")
def read_root():
    return {
        "message": "Course Service is running",
        "version": __version__,
        "endpoints": {
            "list_courses": "GET /api/courses/list",
            "get_filters": "GET /api/courses/filters/all",
            "get_course": "GET /api/courses/{course_id}",
            "create_course": "POST /api/courses",
            "update_course": "PUT /api/courses/{course_id}",
            "delete_course": "DELETE /api/courses/{course_id}",
        },
    }


@app.get("/api/health")
def health_check():
    return {
        "status": "healthy",
        "mongodb": "connected" if database.is_connected else "disconnected",
    }


# ─────────────────────────────────────────────
# Course Routes
# ─────────────────────────────────────────────
router = APIRouter(prefix="/api/courses", tags=["Courses"])


@router.get("/")
async def get_all_courses(service: CourseDataService = Depends(get_data_service)):
    """Get all courses, newest first"""
    return await service.get_all_courses()


@router.get("/filters/all", response_model=FiltersResponse)
async def get_filters(service: CourseDataService = Depends(get_data_service)):
    """Distinct categories and instructors"""
    return await service.get_filters()


@router.get("/list", response_model=CourseListResponse)
async def list_courses(
    search: Optional[str] = None,
    category: Optional[str] = None,
    sort: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    service: CourseDataService = Depends(get_data_service),
):
    """Server-side pagination, search, filtering and sorting"""
    params = CourseListQuery(search=search, category=category, sort=sort, page=page, limit=limit)
    return await service.list_courses(params)


@router.get("/{course_id}")
async def get_course(course_id: str, service: CourseDataService = Depends(get_data_service)):
    return await service.get_course_by_id(course_id)


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_course(
    course: CourseCreate,
    current_user: str = Depends(verify_token),
    service: CourseDataService = Depends(get_data_service),
):
    """Create a new course (requires authentication)"""
    created = await service.add_course(course, current_user)
    return {"message": "Course created successfully", "course": created}


@router.put("/{course_id}")
async def update_course(
    course_id: str,
    course: CourseUpdate,
    current_user: str = Depends(verify_token),
    service: CourseDataService = Depends(get_data_service),
):
    """Update a course (requires authentication)"""
    updated = await service.update_course(course_id, course)
    return {"message": "Course updated successfully", "course": updated}


@router.delete("/{course_id}")
async def delete_course(
    course_id: str,
    current_user: str = Depends(verify_token),
    service: CourseDataService = Depends(get_data_service),
):
    """Delete a course (requires authentication)"""
    await service.delete_course(course_id)
    return {"message": "Course deleted successfully"}


app.include_router(router)


def run():
    import uvicorn

    uvicorn.run("course_service.main:app", host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()
