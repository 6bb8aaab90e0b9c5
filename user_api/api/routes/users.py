"""User Routes — the five CRUD operations, declared once in a route table.

Invariants:
    - Every handler is one repository call; no business logic here
    - USER_ROUTES is the single declaration of method, path, models and docs;
      build_router() registers exactly those routes, so the OpenAPI document
      is generated from the same table that dispatches requests
    - Get-by-id raises UserNotFoundError on a miss; the error handler decides
      whether that is a 404 or a 200 null
    - Delete and update report zero counts for a missing record, never raise
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from fastapi import APIRouter, Depends, status

from user_api.core.domain_types import UserId
from user_api.core.errors import UserNotFoundError
from user_api.core.repository_protocols import UserRepository
from user_api.infrastructure.database import get_user_repository
from user_api.schemas.user import (
    DeleteSummary,
    UpdateSummary,
    UserCreate,
    UserRecord,
    UserUpdate,
)

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"description": "Solicitud incorrecta, datos del usuario incompletos"},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"description": "Error del servidor"},
}
NOT_FOUND_RESPONSE = {
    status.HTTP_404_NOT_FOUND: {"description": "Solicitud incorrecta, no se encontro un usuario"},
}


# ─── Handlers ────────────────────────────────────────────────────

async def create_user(
    body: UserCreate, repo: UserRepository = Depends(get_user_repository),
):
    return await repo.insert(body.model_dump())


async def list_users(repo: UserRepository = Depends(get_user_repository)):
    return await repo.find_all()


async def get_user(
    user_id: str, repo: UserRepository = Depends(get_user_repository),
):
    user = await repo.find_by_id(UserId(user_id))
    if user is None:
        raise UserNotFoundError(user_id)
    return user


async def delete_user(
    user_id: str, repo: UserRepository = Depends(get_user_repository),
):
    return await repo.delete_by_id(UserId(user_id))


async def update_user(
    user_id: str,
    body: UserUpdate,
    repo: UserRepository = Depends(get_user_repository),
):
    return await repo.update_by_id(UserId(user_id), body.to_set_fields())


# ─── Route table ─────────────────────────────────────────────────

@dataclass(frozen=True)
class RouteSpec:
    """One HTTP method + path mapped to a handler, with its documentation."""
    method: str
    path: str
    endpoint: Callable[..., Any]
    summary: str
    description: str
    response_model: Any = None
    responses: dict[int, dict] = field(default_factory=lambda: dict(ERROR_RESPONSES))
    success_description: str = "Successful Response"


USER_ROUTES: tuple[RouteSpec, ...] = (
    RouteSpec(
        "POST", "/users", create_user,
        summary="Crea un nuevo usuario",
        description="Endpoint para crear un nuevo usuario.",
        response_model=UserRecord,
        success_description="Usuario creado exitosamente",
    ),
    RouteSpec(
        "GET", "/users", list_users,
        summary="Devuelve todos los usuarios",
        description="Endpoint para devolver todos los usuarios registrados en el sistema.",
        response_model=list[UserRecord],
        success_description="Todos los usuarios",
    ),
    RouteSpec(
        "GET", "/users/{user_id}", get_user,
        summary="Devuelve un usuario especifico",
        description="Endpoint para devolver un usuario especifico por el id registrado en el sistema.",
        response_model=UserRecord | None,
        responses={**ERROR_RESPONSES, **NOT_FOUND_RESPONSE},
        success_description="El usuario solicitado",
    ),
    RouteSpec(
        "DELETE", "/users/{user_id}", delete_user,
        summary="Elimina un usuario especifico",
        description="Endpoint para eliminar un usuario especifico por el id registrado en el sistema.",
        response_model=DeleteSummary,
        success_description="El usuario se eliminó correctamente",
    ),
    RouteSpec(
        "PUT", "/users/{user_id}", update_user,
        summary="Actualiza/edita un usuario especifico",
        description="Endpoint para actualizar un usuario especifico por el id registrado en el sistema.",
        response_model=UpdateSummary,
        success_description="El usuario se actualizó correctamente",
    ),
)


def build_router(
    prefix: str = "", routes: tuple[RouteSpec, ...] = USER_ROUTES,
) -> APIRouter:
    """Register every route of the table on a fresh router."""
    router = APIRouter(prefix=prefix, tags=["User"])
    for route in routes:
        router.add_api_route(
            route.path,
            route.endpoint,
            methods=[route.method],
            summary=route.summary,
            description=route.description,
            response_model=route.response_model,
            response_description=route.success_description,
            responses=route.responses,
            name=route.endpoint.__name__,
        )
    return router
