"""Bilingual course and institution reads/writes over an injected query executor."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from tec_lms.bilingual import is_valid_bilingual_record, localize_record, to_localized_view
from tec_lms.language import Language

logger = logging.getLogger("tec_lms.courses")


@dataclass
class QueryResult:
    rows: list[dict[str, Any]] = field(default_factory=list)
    row_count: int = 0


QueryExecutor = Callable[[str, list[Any]], Awaitable[QueryResult]]

COURSE_COLUMNS = (
    "id, code, name, name_en, name_km, description, description_en, description_km, "
    "institution_id, created_at, updated_at"
)

UPDATABLE_COURSE_FIELDS = ("code", "name_en", "name_km", "description_en", "description_km")


class CourseService:
    def __init__(self, query: QueryExecutor) -> None:
        self._query = query

    async def _run(self, action: str, sql: str, params: list[Any]) -> QueryResult:
        try:
            return await self._query(sql, params)
        except Exception:
            logger.exception("Error %s", action)
            raise

    async def list_courses(self, language: Language | str = Language.KM) -> list[dict[str, Any]]:
        result = await self._run(
            "fetching localized courses",
            f"SELECT {COURSE_COLUMNS} FROM courses ORDER BY created_at DESC",
            [],
        )
        return to_localized_view(result.rows, language)

    async def get_course(self, course_id: str, language: Language | str = Language.KM) -> dict[str, Any] | None:
        result = await self._run(
            "fetching localized course",
            f"SELECT {COURSE_COLUMNS} FROM courses WHERE id = $1",
            [course_id],
        )
        if not result.rows:
            return None
        return localize_record(result.rows[0], language)

    async def list_institutions(self, language: Language | str = Language.KM) -> list[dict[str, Any]]:
        result = await self._run(
            "fetching localized institutions",
            "SELECT id, name, name_en, name_km, code, description, description_en, description_km, "
            "created_at, updated_at FROM institutions ORDER BY created_at DESC",
            [],
        )
        return to_localized_view(result.rows, language)

    async def create_course(self, data: dict[str, Any]) -> dict[str, Any]:
        if not is_valid_bilingual_record(data):
            raise ValueError("A course needs a name in at least one language.")
        result = await self._run(
            "creating bilingual course",
            "INSERT INTO courses (code, name, name_en, name_km, description, description_en, "
            "description_km, institution_id) VALUES ($1, $2, $3, $4, $5, $6, $7, $8) "
            f"RETURNING {COURSE_COLUMNS}",
            [
                data.get("code"),
                # Plain columns take whichever language is available.
                data.get("name_en") or data.get("name_km"),
                data.get("name_en"),
                data.get("name_km"),
                data.get("description_en") or data.get("description_km") or None,
                data.get("description_en") or None,
                data.get("description_km") or None,
                data.get("institution_id") or None,
            ],
        )
        return result.rows[0]

    async def update_course(self, course_id: str, data: dict[str, Any]) -> dict[str, Any] | None:
        assignments: list[str] = []
        values: list[Any] = []
        for column in UPDATABLE_COURSE_FIELDS:
            if column in data:
                values.append(data[column])
                assignments.append(f"{column} = ${len(values)}")

        if not assignments:
            return None

        assignments.append("updated_at = NOW()")
        values.append(course_id)
        result = await self._run(
            "updating bilingual course",
            f"UPDATE courses SET {', '.join(assignments)} WHERE id = ${len(values)} "
            f"RETURNING {COURSE_COLUMNS}",
            values,
        )
        return result.rows[0] if result.rows else None

    async def student_courses(self, student_id: str, language: Language | str = Language.KM) -> list[dict[str, Any]]:
        result = await self._run(
            "fetching student enrolled courses",
            "SELECT DISTINCT c.id, c.code, c.name, c.name_en, c.name_km, c.description, "
            "c.description_en, c.description_km, c.institution_id, e.enrollment_date, e.status, "
            "c.created_at, c.updated_at FROM courses c JOIN enrollments e ON c.id = e.course_id "
            "WHERE e.student_id = $1 ORDER BY e.enrollment_date DESC",
            [student_id],
        )
        return [localize_record(row, language) for row in result.rows]

    async def teacher_courses(self, teacher_id: str, language: Language | str = Language.KM) -> list[dict[str, Any]]:
        result = await self._run(
            "fetching teacher courses",
            "SELECT DISTINCT c.id, c.code, c.name, c.name_en, c.name_km, c.description, "
            "c.description_en, c.description_km, c.institution_id, tc.created_at, c.updated_at "
            "FROM courses c JOIN teacher_courses tc ON c.id = tc.course_id "
            "WHERE tc.teacher_id = $1 ORDER BY tc.created_at DESC",
            [teacher_id],
        )
        return [localize_record(row, language) for row in result.rows]
