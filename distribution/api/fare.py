from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.orm.session import Session
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field

from distribution.src.db import Fare, sessionMaker
from distribution.src import exceptions, validators, getters
from distribution.src.codes import generateCode
from distribution.src.constants import FARE_PREFIX
from distribution.src.enums import EntityStatus
from distribution.src.loggers import logEvent
from distribution.src.redis import acquireCodeLock, releaseLock
from distribution.src.store import EntityStore
from distribution.src.functions import (
    changeStatus,
    fuseExceptionResponses,
    getOr404,
    updateIfChanged,
)
from distribution.src.urls import (
    URL_FARE,
    URL_FARE_ID,
    URL_FARE_ACTIVE,
    URL_FARE_INACTIVE,
    URL_FARE_ACTIVATE,
    URL_FARE_DEACTIVATE,
)

route_distribution = APIRouter()


## Output Schema
class FareSchema(BaseModel):
    id: str
    organization_id: str
    fare_code: str
    fare_name: str
    fare_type: Optional[str]
    fare_amount: float
    status: str
    created_at: datetime


## Input Forms
class CreateForm(BaseModel):
    organization_id: str | None = Field(default=None, max_length=64)
    fare_name: str | None = Field(default=None, max_length=128)
    fare_type: str | None = Field(default=None, max_length=64)
    fare_amount: Decimal | None = Field(default=None)


class UpdateForm(BaseModel):
    fare_code: str | None = Field(default=None, max_length=32)
    price: float | None = Field(default=None)
    # Accepted for compatibility, never persisted
    description: str | None = Field(default=None)


## Function
def fareStore(session: Session) -> EntityStore:
    return EntityStore(session, Fare, Fare.fare_code)


def validateCreateForm(fParam: Optional[CreateForm]) -> None:
    if fParam is None:
        raise exceptions.EmptyRequest()
    validators.notBlank(fParam.organization_id, Fare.organization_id)
    validators.notBlank(fParam.fare_name, Fare.fare_name)
    validators.positiveAmount(fParam.fare_amount, Fare.fare_amount)


def createFare(store: EntityStore, fParam: CreateForm) -> Fare:
    validateCreateForm(fParam)
    fareCode = generateCode(store, FARE_PREFIX)
    validators.uniqueCode(store, fareCode)
    fare = Fare(
        fare_code=fareCode,
        organization_id=fParam.organization_id,
        fare_name=fParam.fare_name,
        fare_type=fParam.fare_type,
        fare_amount=fParam.fare_amount,
        status=EntityStatus.ACTIVE.value,
    )
    return store.save(fare)


def updateFare(store: EntityStore, id: str, fParam: Optional[UpdateForm]) -> Fare:
    """
    Apply a fare update.

    The fare_code and the price (stored as fare_amount) overwrite the stored
    values when provided. A provided fare_code must not be blank and a
    provided price must be positive; both are checked before the lookup.
    The description is accepted but never stored, fares have no description.
    """
    validators.notBlank(id, Fare.id)
    if fParam is None:
        raise exceptions.EmptyRequest()

    if fParam.fare_code is not None:
        validators.notBlank(fParam.fare_code, Fare.fare_code)
    if fParam.price is not None:
        validators.positiveAmount(fParam.price, Fare.fare_amount)

    fare = getOr404(store, id)
    updateIfChanged(fare, fParam, [Fare.fare_code.key])
    if fParam.price is not None:
        fare.fare_amount = Decimal(str(fParam.price))
    return store.save(fare)


def deleteFare(store: EntityStore, id: str) -> Fare:
    validators.notBlank(id, Fare.id)
    fare = getOr404(store, id)
    store.delete(fare)
    return fare


def changeFareStatus(store: EntityStore, id: str, newStatus: str) -> Fare:
    validators.notBlank(id, Fare.id)
    return changeStatus(store, id, newStatus, skipUnchanged=True)


## API endpoints
@route_distribution.get(
    URL_FARE,
    tags=["Fare"],
    response_model=List[FareSchema],
    description="""
    Fetches every fare, whatever its status.
    """,
)
async def fetch_fare():
    try:
        session = sessionMaker()
        return jsonable_encoder(list(fareStore(session).findAll()))
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_distribution.get(
    URL_FARE_ACTIVE,
    tags=["Fare"],
    response_model=List[FareSchema],
    description="""
    Fetches the fares in ACTIVE status.
    """,
)
async def fetch_active_fare():
    try:
        session = sessionMaker()
        store = fareStore(session)
        return jsonable_encoder(list(store.findAllByStatus(EntityStatus.ACTIVE.value)))
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_distribution.get(
    URL_FARE_INACTIVE,
    tags=["Fare"],
    response_model=List[FareSchema],
    description="""
    Fetches the fares in INACTIVE status.
    """,
)
async def fetch_inactive_fare():
    try:
        session = sessionMaker()
        store = fareStore(session)
        return jsonable_encoder(
            list(store.findAllByStatus(EntityStatus.INACTIVE.value))
        )
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_distribution.get(
    URL_FARE_ID,
    tags=["Fare"],
    response_model=FareSchema,
    responses=fuseExceptionResponses(
        [exceptions.NotFound(Fare, "{id}"), exceptions.MissingParameter(Fare.id)]
    ),
    description="""
    Fetches a single fare by its identifier.
    """,
)
async def fetch_fare_by_id(id: str):
    try:
        session = sessionMaker()
        validators.notBlank(id, Fare.id)
        return jsonable_encoder(getOr404(fareStore(session), id))
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_distribution.post(
    URL_FARE,
    tags=["Fare"],
    response_model=FareSchema,
    status_code=status.HTTP_201_CREATED,
    responses=fuseExceptionResponses(
        [
            exceptions.MissingParameter(Fare.organization_id),
            exceptions.MissingParameter(Fare.fare_name),
            exceptions.InvalidValue(Fare.fare_amount),
            exceptions.CodeAlreadyExists(Fare, "TAR001"),
            exceptions.LockAcquireTimeout(),
        ]
    ),
    description="""
    Creates a new fare.
    The organization_id and fare_name must not be blank and the fare_amount must be greater than zero.
    The fare_code is derived from the last issued code (TAR001, TAR002, ...), not user input.
    The creation is rejected if the derived code is already registered.
    The fare is created in ACTIVE status.
    Logs the fare creation activity.
    """,
)
def create_fare(
    fParam: CreateForm = Body(),
    request_info=Depends(getters.requestInfo),
):
    codeLock = None
    try:
        session = sessionMaker()
        validateCreateForm(fParam)
        codeLock = acquireCodeLock(Fare.__tablename__)
        fare = createFare(fareStore(session), fParam)

        fareData = jsonable_encoder(fare)
        logEvent(request_info, fareData)
        return fareData
    except Exception as e:
        exceptions.handle(e)
    finally:
        releaseLock(codeLock)
        session.close()


@route_distribution.put(
    URL_FARE_ID,
    tags=["Fare"],
    response_model=FareSchema,
    responses=fuseExceptionResponses(
        [
            exceptions.NotFound(Fare, "{id}"),
            exceptions.EmptyRequest(),
            exceptions.MissingParameter(Fare.fare_code),
            exceptions.InvalidValue(Fare.fare_amount),
        ]
    ),
    description="""
    Updates an existing fare.
    The fare_code and price overwrite the stored values when provided.
    A provided fare_code must not be blank and a provided price must be greater than zero.
    The description is accepted but not stored.
    Logs the fare updating activity.
    """,
)
async def update_fare(
    id: str,
    fParam: UpdateForm = Body(),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        fare = updateFare(fareStore(session), id, fParam)

        fareData = jsonable_encoder(fare)
        logEvent(request_info, fareData)
        return fareData
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_distribution.delete(
    URL_FARE_ID,
    tags=["Fare"],
    status_code=status.HTTP_204_NO_CONTENT,
    responses=fuseExceptionResponses([exceptions.NotFound(Fare, "{id}")]),
    description="""
    Permanently deletes a fare.
    Logs the deletion activity.
    """,
)
async def delete_fare(id: str, request_info=Depends(getters.requestInfo)):
    try:
        session = sessionMaker()
        fare = deleteFare(fareStore(session), id)
        logEvent(request_info, jsonable_encoder(fare))
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


async def _change_status(id: str, newStatus: str, request_info) -> dict:
    try:
        session = sessionMaker()
        store = fareStore(session)
        fare = changeFareStatus(store, id, newStatus)

        fareData = jsonable_encoder(fare)
        logEvent(request_info, fareData)
        return fareData
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_distribution.patch(
    URL_FARE_ACTIVATE,
    tags=["Fare"],
    response_model=FareSchema,
    responses=fuseExceptionResponses([exceptions.NotFound(Fare, "{id}")]),
    description="""
    Sets the fare status to ACTIVE.
    Nothing is written if the fare is already active.
    """,
)
async def activate_fare(id: str, request_info=Depends(getters.requestInfo)):
    return await _change_status(id, EntityStatus.ACTIVE.value, request_info)


@route_distribution.patch(
    URL_FARE_DEACTIVATE,
    tags=["Fare"],
    response_model=FareSchema,
    responses=fuseExceptionResponses([exceptions.NotFound(Fare, "{id}")]),
    description="""
    Sets the fare status to INACTIVE.
    Nothing is written if the fare is already inactive.
    """,
)
async def deactivate_fare(id: str, request_info=Depends(getters.requestInfo)):
    return await _change_status(id, EntityStatus.INACTIVE.value, request_info)
