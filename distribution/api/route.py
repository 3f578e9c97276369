from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.orm.session import Session
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field

from distribution.src.db import Route, sessionMaker
from distribution.src import exceptions, getters
from distribution.src.codes import generateCode
from distribution.src.constants import ROUTE_PREFIX
from distribution.src.enums import EntityStatus
from distribution.src.loggers import logEvent
from distribution.src.redis import acquireCodeLock, releaseLock
from distribution.src.store import EntityStore
from distribution.src.functions import (
    changeStatus,
    fuseExceptionResponses,
    getOr404,
    overwrite,
)
from distribution.src.urls import (
    URL_ROUTE,
    URL_ROUTE_ID,
    URL_ROUTE_ACTIVE,
    URL_ROUTE_INACTIVE,
    URL_ROUTE_ACTIVATE,
    URL_ROUTE_DEACTIVATE,
)

route_distribution = APIRouter()


## Output Schema
class ZoneSchema(BaseModel):
    zone_id: Optional[str]
    order: Optional[int]
    estimated_duration: Optional[int]


class RouteSchema(BaseModel):
    id: str
    organization_id: Optional[str]
    route_code: str
    route_name: Optional[str]
    zones: List[ZoneSchema]
    total_estimated_duration: Optional[int]
    responsible_user_id: Optional[str]
    status: str
    created_at: datetime


## Input Forms
class ZoneEntry(BaseModel):
    zone_id: str = Field(min_length=1, max_length=64)
    order: int = Field(gt=0)
    estimated_duration: int = Field(gt=0, description="Duration in hours")


class CreateForm(BaseModel):
    organization_id: str = Field(min_length=1, max_length=64)
    route_name: str = Field(min_length=1, max_length=256)
    zones: List[ZoneEntry] = Field(min_length=1)
    total_estimated_duration: int | None = Field(
        default=None, gt=0, description="Duration in hours"
    )
    responsible_user_id: str = Field(min_length=1, max_length=64)


class UpdateZoneEntry(BaseModel):
    zone_id: str | None = Field(default=None, max_length=64)
    order: int | None = Field(default=None)
    estimated_duration: int | None = Field(default=None)


class UpdateForm(BaseModel):
    route_name: str = Field(min_length=1, max_length=256)
    zones: List[UpdateZoneEntry]
    total_estimated_duration: int | None = Field(default=None)
    responsible_user_id: str | None = Field(default=None, max_length=64)


## Function
def routeStore(session: Session) -> EntityStore:
    return EntityStore(session, Route, Route.route_code)


def zoneDocuments(zones: List[ZoneEntry] | List[UpdateZoneEntry]) -> List[dict]:
    return [zone.model_dump() for zone in zones]


def createRoute(store: EntityStore, fParam: CreateForm) -> Route:
    route = Route(
        route_code=generateCode(store, ROUTE_PREFIX),
        organization_id=fParam.organization_id,
        route_name=fParam.route_name,
        zones=zoneDocuments(fParam.zones),
        total_estimated_duration=fParam.total_estimated_duration,
        responsible_user_id=fParam.responsible_user_id,
        status=EntityStatus.ACTIVE.value,
    )
    return store.save(route)


def updateRoute(store: EntityStore, id: str, fParam: UpdateForm) -> Route:
    route = getOr404(store, id)
    overwrite(
        route,
        fParam,
        [
            Route.route_name.key,
            Route.total_estimated_duration.key,
            Route.responsible_user_id.key,
        ],
    )
    route.zones = zoneDocuments(fParam.zones)
    return store.save(route)


def deleteRoute(store: EntityStore, id: str) -> Route:
    route = getOr404(store, id)
    store.delete(route)
    return route


## API endpoints
@route_distribution.get(
    URL_ROUTE,
    tags=["Route"],
    response_model=List[RouteSchema],
    description="""
    Fetches every distribution route, whatever its status.
    """,
)
async def fetch_route():
    try:
        session = sessionMaker()
        return jsonable_encoder(list(routeStore(session).findAll()))
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_distribution.get(
    URL_ROUTE_ACTIVE,
    tags=["Route"],
    response_model=List[RouteSchema],
    description="""
    Fetches the distribution routes in ACTIVE status.
    """,
)
async def fetch_active_route():
    try:
        session = sessionMaker()
        store = routeStore(session)
        return jsonable_encoder(list(store.findAllByStatus(EntityStatus.ACTIVE.value)))
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_distribution.get(
    URL_ROUTE_INACTIVE,
    tags=["Route"],
    response_model=List[RouteSchema],
    description="""
    Fetches the distribution routes in INACTIVE status.
    """,
)
async def fetch_inactive_route():
    try:
        session = sessionMaker()
        store = routeStore(session)
        return jsonable_encoder(
            list(store.findAllByStatus(EntityStatus.INACTIVE.value))
        )
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_distribution.get(
    URL_ROUTE_ID,
    tags=["Route"],
    response_model=RouteSchema,
    responses=fuseExceptionResponses([exceptions.NotFound(Route, "{id}")]),
    description="""
    Fetches a single distribution route by its identifier.
    """,
)
async def fetch_route_by_id(id: str):
    try:
        session = sessionMaker()
        return jsonable_encoder(getOr404(routeStore(session), id))
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_distribution.post(
    URL_ROUTE,
    tags=["Route"],
    response_model=RouteSchema,
    status_code=status.HTTP_201_CREATED,
    responses=fuseExceptionResponses([exceptions.LockAcquireTimeout()]),
    description="""
    Creates a new distribution route through an ordered list of zones.
    The route_code is derived from the last issued code (RUT001, RUT002, ...), not user input.
    The route is created in ACTIVE status.
    Logs the route creation activity.
    """,
)
def create_route(
    fParam: CreateForm = Body(),
    request_info=Depends(getters.requestInfo),
):
    codeLock = None
    try:
        session = sessionMaker()
        codeLock = acquireCodeLock(Route.__tablename__)
        route = createRoute(routeStore(session), fParam)

        routeData = jsonable_encoder(route)
        logEvent(request_info, routeData)
        return routeData
    except Exception as e:
        exceptions.handle(e)
    finally:
        releaseLock(codeLock)
        session.close()


@route_distribution.put(
    URL_ROUTE_ID,
    tags=["Route"],
    response_model=RouteSchema,
    responses=fuseExceptionResponses([exceptions.NotFound(Route, "{id}")]),
    description="""
    Updates an existing distribution route.
    The route_name, zones, total_estimated_duration and responsible_user_id are overwritten.
    The route_code and status are never modified here.
    Logs the route updating activity.
    """,
)
async def update_route(
    id: str,
    fParam: UpdateForm = Body(),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        route = updateRoute(routeStore(session), id, fParam)

        routeData = jsonable_encoder(route)
        logEvent(request_info, routeData)
        return routeData
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_distribution.delete(
    URL_ROUTE_ID,
    tags=["Route"],
    status_code=status.HTTP_204_NO_CONTENT,
    responses=fuseExceptionResponses([exceptions.NotFound(Route, "{id}")]),
    description="""
    Permanently deletes a distribution route.
    Logs the deletion activity.
    """,
)
async def delete_route(id: str, request_info=Depends(getters.requestInfo)):
    try:
        session = sessionMaker()
        route = deleteRoute(routeStore(session), id)
        logEvent(request_info, jsonable_encoder(route))
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


async def _change_status(id: str, newStatus: str, request_info) -> dict:
    try:
        session = sessionMaker()
        route = changeStatus(routeStore(session), id, newStatus)

        routeData = jsonable_encoder(route)
        logEvent(request_info, routeData)
        return routeData
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_distribution.patch(
    URL_ROUTE_ACTIVATE,
    tags=["Route"],
    response_model=RouteSchema,
    responses=fuseExceptionResponses([exceptions.NotFound(Route, "{id}")]),
    description="""
    Sets the route status to ACTIVE. The route is written even if already active.
    """,
)
async def activate_route(id: str, request_info=Depends(getters.requestInfo)):
    return await _change_status(id, EntityStatus.ACTIVE.value, request_info)


@route_distribution.patch(
    URL_ROUTE_DEACTIVATE,
    tags=["Route"],
    response_model=RouteSchema,
    responses=fuseExceptionResponses([exceptions.NotFound(Route, "{id}")]),
    description="""
    Sets the route status to INACTIVE. The route is written even if already inactive.
    """,
)
async def deactivate_route(id: str, request_info=Depends(getters.requestInfo)):
    return await _change_status(id, EntityStatus.INACTIVE.value, request_info)
