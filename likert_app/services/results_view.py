# likert_app/services/results_view.py
"""
Modelo cliente de la pantalla de resultados (encuesta + respuestas + selección).
Lo usa un front o un script que consume el store; la API HTTP no lo monta.

Los borrados son comandos: primero se llama al backend y solo si responde bien
se quita la fila del estado local. Si falla, el estado no cambia y queda el
mensaje en ``error``.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional
from uuid import UUID

from sqlalchemy.orm import Session, sessionmaker

from likert_app.core.errors import DomainError
from likert_app.schemas.responses import BulkDeleteOut, ResponseOut
from likert_app.schemas.results import SurveyResultsOut
from likert_app.schemas.surveys import SurveyOut
from likert_app.services import surveys as survey_service
from likert_app.services.aggregation import survey_results
from likert_app.services.storage import SurveyStore

logger = logging.getLogger(__name__)


@dataclass
class Snapshot:
    survey: SurveyOut
    responses: list[ResponseOut]


class ResultsSource:
    """Lo que la vista necesita del backend."""

    async def fetch(self, survey_id: UUID) -> Snapshot:
        raise NotImplementedError

    async def delete_response(self, response_id: UUID) -> None:
        raise NotImplementedError

    async def delete_responses(self, response_ids: list[UUID]) -> BulkDeleteOut:
        raise NotImplementedError


class StoreResultsSource(ResultsSource):
    """Fuente contra la BD: una sesión por llamada, ejecutada en un hilo."""

    def __init__(self, session_factory: Callable[[], Session] | sessionmaker):
        self.session_factory = session_factory

    def _call(self, fn: Callable[[SurveyStore], object]):
        db = self.session_factory()
        try:
            return fn(SurveyStore(db))
        finally:
            db.close()

    async def fetch(self, survey_id: UUID) -> Snapshot:
        def _load(store: SurveyStore) -> Snapshot:
            return Snapshot(
                survey=survey_service.load_definition(store, survey_id),
                responses=survey_service.list_responses(store, survey_id),
            )
        return await asyncio.to_thread(self._call, _load)

    async def delete_response(self, response_id: UUID) -> None:
        await asyncio.to_thread(self._call, lambda store: survey_service.delete_response(store, response_id))

    async def delete_responses(self, response_ids: list[UUID]) -> BulkDeleteOut:
        return await asyncio.to_thread(
            self._call, lambda store: survey_service.delete_responses(store, response_ids)
        )


class ResultsView:
    def __init__(self, survey_id: UUID, source: ResultsSource):
        self.survey_id = survey_id
        self.source = source
        self.survey: Optional[SurveyOut] = None
        self.responses: list[ResponseOut] = []
        self.selected: set[UUID] = set()
        self.error: Optional[str] = None

    # ---- carga ----

    async def refresh(self) -> bool:
        try:
            snap = await self.source.fetch(self.survey_id)
        except DomainError as e:
            logger.warning("No se pudieron cargar resultados de %s: %s", self.survey_id, e.detail)
            self.error = e.detail
            return False
        self.survey = snap.survey
        self.responses = list(snap.responses)
        self.selected &= {r.id for r in self.responses}
        self.error = None
        return True

    @property
    def results(self) -> Optional[SurveyResultsOut]:
        if self.survey is None:
            return None
        return survey_results(self.survey, self.responses)

    # ---- selección ----

    def toggle(self, response_id: UUID) -> None:
        if response_id in self.selected:
            self.selected.discard(response_id)
        else:
            self.selected.add(response_id)

    def toggle_all(self) -> None:
        if self.responses and len(self.selected) == len(self.responses):
            self.selected = set()
        else:
            self.selected = {r.id for r in self.responses}

    # ---- borrados ----

    def _drop_local(self, ids: set[UUID]) -> None:
        self.responses = [r for r in self.responses if r.id not in ids]
        self.selected -= ids

    async def delete_one(self, response_id: UUID) -> bool:
        try:
            await self.source.delete_response(response_id)
        except DomainError as e:
            self.error = e.detail
            return False
        self._drop_local({response_id})
        self.error = None
        return True

    async def delete_selected(self) -> BulkDeleteOut:
        ids = [r.id for r in self.responses if r.id in self.selected]
        if not ids:
            return BulkDeleteOut()
        try:
            result = await self.source.delete_responses(ids)
        except DomainError as e:
            self.error = e.detail
            return BulkDeleteOut()
        self._drop_local(set(result.deleted))
        if result.failed:
            self.error = f"No se pudieron eliminar {len(result.failed)} de {len(ids)} respuestas."
        else:
            self.error = None
        return result
