"""HTTP client for the exercise catalog (ExerciseDB on RapidAPI).

Public methods never raise: on any failure they return an empty list and set
``error_message``. An empty result therefore means "no data", not
necessarily "no such exercises".
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from app.core.constants import EQUIPMENT_TYPES
from app.core.errors import CatalogError
from app.schemas.exercise import CatalogExercise, Exercise

logger = logging.getLogger(__name__)

_body_parts_adapter = TypeAdapter(list[str])
_exercises_adapter = TypeAdapter(list[CatalogExercise])


class ExerciseCatalogClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        host: str,
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Args:
            base_url: Catalog root, e.g. "https://exercisedb.p.rapidapi.com"
            api_key: RapidAPI key
            host: RapidAPI host header value
            timeout: Request timeout in seconds
            client: Shared client (tests pass one with a mock transport)
        """
        self._base_url = base_url.rstrip("/")
        self._headers = {"X-RapidAPI-Key": api_key, "X-RapidAPI-Host": host}
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None
        self.is_loading = False
        self.error_message: str | None = None

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def _get_json(self, path: str) -> Any:
        url = f"{self._base_url}{path}"
        try:
            response = await self._get_client().get(url, headers=self._headers)
        except httpx.TimeoutException as e:
            raise CatalogError(f"Catalog request timed out: {url}") from e
        except httpx.RequestError as e:
            raise CatalogError(f"Catalog unavailable: {e}") from e
        if response.status_code != 200:
            raise CatalogError(
                f"Invalid response from server ({response.status_code})",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise CatalogError("Failed to decode response") from e

    async def _fetch(self, path: str, adapter: TypeAdapter, what: str) -> list:
        self.is_loading = True
        self.error_message = None
        try:
            return adapter.validate_python(await self._get_json(path))
        except ValidationError as e:
            self.error_message = f"Failed to {what}: Failed to decode response"
            logger.warning("Catalog payload for %s did not validate: %s", path, e)
        except CatalogError as e:
            self.error_message = f"Failed to {what}: {e}"
            logger.warning("Catalog request %s failed: %s", path, e)
        finally:
            self.is_loading = False
        return []

    # ── Raw catalog records ─────────────────────────────────────────────

    async def list_body_parts(self) -> list[str]:
        return await self._fetch("/exercises/bodyPartList", _body_parts_adapter, "fetch body parts")

    async def list_exercises_by_body_part(self, body_part: str) -> list[CatalogExercise]:
        return await self._fetch(
            f"/exercises/bodyPart/{quote(body_part)}", _exercises_adapter, "fetch exercises"
        )

    async def search_exercises_by_name(self, query: str) -> list[CatalogExercise]:
        return await self._fetch(
            f"/exercises/name/{quote(query)}", _exercises_adapter, "search exercises"
        )

    async def list_all_exercises(self) -> list[CatalogExercise]:
        return await self._fetch("/exercises", _exercises_adapter, "fetch all exercises")

    def list_equipment(self) -> list[str]:
        return list(EQUIPMENT_TYPES)

    # ── App exercises ───────────────────────────────────────────────────

    async def search(
        self,
        query: str = "",
        body_part: str | None = None,
        equipment: str | None = None,
    ) -> list[Exercise]:
        """Fetch by body part when given (else by name), then filter locally.

        The text filter matches title or category, case-insensitively. The
        catalog Exercise has no equipment field, so equipment filters on the
        category too.
        """
        if body_part:
            records = await self.list_exercises_by_body_part(body_part)
        else:
            records = await self.search_exercises_by_name(query)
        exercises = [r.to_exercise() for r in records]

        if query:
            q = query.lower()
            exercises = [e for e in exercises if q in e.title.lower() or q in e.category.lower()]
        if equipment:
            eq = equipment.lower()
            exercises = [e for e in exercises if eq in e.category.lower()]
        return exercises
