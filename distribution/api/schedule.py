from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.orm.session import Session
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field

from distribution.src.db import Schedule, sessionMaker
from distribution.src import exceptions, validators, getters
from distribution.src.codes import generateCode
from distribution.src.constants import SCHEDULE_PREFIX
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
    URL_SCHEDULE,
    URL_SCHEDULE_ID,
    URL_SCHEDULE_ACTIVE,
    URL_SCHEDULE_INACTIVE,
    URL_SCHEDULE_ACTIVATE,
    URL_SCHEDULE_DEACTIVATE,
)

route_distribution = APIRouter()


## Output Schema
class ScheduleSchema(BaseModel):
    id: str
    organization_id: Optional[str]
    schedule_code: str
    route_id: Optional[str]
    zone_id: Optional[str]
    schedule_name: Optional[str]
    days_of_week: List[str]
    day_of_week: Optional[str]
    start_time: Optional[str]
    end_time: Optional[str]
    duration_hours: int
    estimated_duration: Optional[int]
    status: str
    created_at: datetime
    updated_at: Optional[datetime]


## Input Forms
class CreateForm(BaseModel):
    organization_id: str = Field(min_length=1, max_length=64)
    route_id: str | None = Field(default=None, max_length=64)
    zone_id: str = Field(min_length=1, max_length=64)
    schedule_name: str = Field(min_length=1, max_length=256)
    days_of_week: List[str] = Field(min_length=1)
    start_time: str = Field(max_length=8, description="HH:MM")
    end_time: str = Field(max_length=8, description="HH:MM")
    duration_hours: int = Field(gt=0, description="Duration in hours")


class UpdateForm(BaseModel):
    route_id: str = Field(min_length=1, max_length=64)
    day_of_week: str = Field(min_length=1, max_length=16)
    start_time: str = Field(max_length=8, description="HH:MM")
    end_time: str = Field(max_length=8, description="HH:MM")
    estimated_duration: int | None = Field(
        default=None, gt=0, description="Duration in minutes"
    )


## Function
def scheduleStore(session: Session) -> EntityStore:
    return EntityStore(session, Schedule, Schedule.schedule_code)


def createSchedule(store: EntityStore, fParam: CreateForm) -> Schedule:
    scheduleCode = generateCode(store, SCHEDULE_PREFIX)
    validators.uniqueCode(store, scheduleCode)
    schedule = Schedule(
        schedule_code=scheduleCode,
        organization_id=fParam.organization_id,
        route_id=fParam.route_id,
        zone_id=fParam.zone_id,
        schedule_name=fParam.schedule_name,
        days_of_week=list(fParam.days_of_week),
        start_time=fParam.start_time,
        end_time=fParam.end_time,
        duration_hours=fParam.duration_hours,
        status=EntityStatus.ACTIVE.value,
    )
    return store.save(schedule)


def updateSchedule(store: EntityStore, id: str, fParam: UpdateForm) -> Schedule:
    schedule = getOr404(store, id)
    overwrite(
        schedule,
        fParam,
        [
            Schedule.route_id.key,
            Schedule.day_of_week.key,
            Schedule.start_time.key,
            Schedule.end_time.key,
            Schedule.estimated_duration.key,
        ],
    )
    return store.save(schedule)


def deleteSchedule(store: EntityStore, id: str) -> Schedule:
    schedule = getOr404(store, id)
    store.delete(schedule)
    return schedule


## API endpoints
@route_distribution.get(
    URL_SCHEDULE,
    tags=["Schedule"],
    response_model=List[ScheduleSchema],
    description="""
    Fetches every distribution schedule, whatever its status.
    """,
)
async def fetch_schedule():
    try:
        session = sessionMaker()
        return jsonable_encoder(list(scheduleStore(session).findAll()))
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_distribution.get(
    URL_SCHEDULE_ACTIVE,
    tags=["Schedule"],
    response_model=List[ScheduleSchema],
    description="""
    Fetches the distribution schedules in ACTIVE status.
    """,
)
async def fetch_active_schedule():
    try:
        session = sessionMaker()
        store = scheduleStore(session)
        return jsonable_encoder(list(store.findAllByStatus(EntityStatus.ACTIVE.value)))
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_distribution.get(
    URL_SCHEDULE_INACTIVE,
    tags=["Schedule"],
    response_model=List[ScheduleSchema],
    description="""
    Fetches the distribution schedules in INACTIVE status.
    """,
)
async def fetch_inactive_schedule():
    try:
        session = sessionMaker()
        store = scheduleStore(session)
        return jsonable_encoder(
            list(store.findAllByStatus(EntityStatus.INACTIVE.value))
        )
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_distribution.get(
    URL_SCHEDULE_ID,
    tags=["Schedule"],
    response_model=ScheduleSchema,
    responses=fuseExceptionResponses([exceptions.NotFound(Schedule, "{id}")]),
    description="""
    Fetches a single distribution schedule by its identifier.
    """,
)
async def fetch_schedule_by_id(id: str):
    try:
        session = sessionMaker()
        return jsonable_encoder(getOr404(scheduleStore(session), id))
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_distribution.post(
    URL_SCHEDULE,
    tags=["Schedule"],
    response_model=ScheduleSchema,
    status_code=status.HTTP_201_CREATED,
    responses=fuseExceptionResponses(
        [
            exceptions.CodeAlreadyExists(Schedule, "HOR001"),
            exceptions.LockAcquireTimeout(),
        ]
    ),
    description="""
    Creates a new distribution schedule running on a list of weekdays.
    The schedule_code is derived from the last issued code (HOR001, HOR002, ...), not user input.
    The creation is rejected if the derived code is already registered.
    The duration_hours is expressed in hours.
    The schedule is created in ACTIVE status.
    Logs the schedule creation activity.
    """,
)
def create_schedule(
    fParam: CreateForm = Body(),
    request_info=Depends(getters.requestInfo),
):
    codeLock = None
    try:
        session = sessionMaker()
        codeLock = acquireCodeLock(Schedule.__tablename__)
        schedule = createSchedule(scheduleStore(session), fParam)

        scheduleData = jsonable_encoder(schedule)
        logEvent(request_info, scheduleData)
        return scheduleData
    except Exception as e:
        exceptions.handle(e)
    finally:
        releaseLock(codeLock)
        session.close()


@route_distribution.put(
    URL_SCHEDULE_ID,
    tags=["Schedule"],
    response_model=ScheduleSchema,
    responses=fuseExceptionResponses([exceptions.NotFound(Schedule, "{id}")]),
    description="""
    Updates an existing distribution schedule.
    The update takes a single day_of_week and an estimated_duration in minutes,
    stored next to the creation time days_of_week and duration_hours.
    The route_id, start_time and end_time are overwritten.
    Logs the schedule updating activity.
    """,
)
async def update_schedule(
    id: str,
    fParam: UpdateForm = Body(),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        schedule = updateSchedule(scheduleStore(session), id, fParam)

        scheduleData = jsonable_encoder(schedule)
        logEvent(request_info, scheduleData)
        return scheduleData
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_distribution.delete(
    URL_SCHEDULE_ID,
    tags=["Schedule"],
    status_code=status.HTTP_204_NO_CONTENT,
    responses=fuseExceptionResponses([exceptions.NotFound(Schedule, "{id}")]),
    description="""
    Permanently deletes a distribution schedule.
    Logs the deletion activity.
    """,
)
async def delete_schedule(id: str, request_info=Depends(getters.requestInfo)):
    try:
        session = sessionMaker()
        schedule = deleteSchedule(scheduleStore(session), id)
        logEvent(request_info, jsonable_encoder(schedule))
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


async def _change_status(id: str, newStatus: str, request_info) -> dict:
    try:
        session = sessionMaker()
        schedule = changeStatus(scheduleStore(session), id, newStatus)

        scheduleData = jsonable_encoder(schedule)
        logEvent(request_info, scheduleData)
        return scheduleData
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_distribution.patch(
    URL_SCHEDULE_ACTIVATE,
    tags=["Schedule"],
    response_model=ScheduleSchema,
    responses=fuseExceptionResponses([exceptions.NotFound(Schedule, "{id}")]),
)
async def activate_schedule(id: str, request_info=Depends(getters.requestInfo)):
    return await _change_status(id, EntityStatus.ACTIVE.value, request_info)


@route_distribution.patch(
    URL_SCHEDULE_DEACTIVATE,
    tags=["Schedule"],
    response_model=ScheduleSchema,
    responses=fuseExceptionResponses([exceptions.NotFound(Schedule, "{id}")]),
)
async def deactivate_schedule(id: str, request_info=Depends(getters.requestInfo)):
    return await _change_status(id, EntityStatus.INACTIVE.value, request_info)
