from typing import List, Optional
from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.orm.session import Session
from pydantic import BaseModel, Field

from distribution.src.db import Program, sessionMaker
from distribution.src import exceptions, validators, getters
from distribution.src.codes import generateCode
from distribution.src.constants import DATE_FORMAT, PROGRAM_PREFIX
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
    URL_PROGRAM,
    URL_PROGRAM_ID,
    URL_PROGRAM_STATUS,
    URL_PROGRAM_ACTIVATE,
    URL_PROGRAM_DEACTIVATE,
)

route_distribution = APIRouter()


## Output Schema
class ProgramSchema(BaseModel):
    id: str
    organization_id: Optional[str]
    program_code: str
    schedule_id: Optional[str]
    route_id: Optional[str]
    zone_id: Optional[str]
    street_id: Optional[str]
    program_date: Optional[str]
    planned_start_time: Optional[str]
    planned_end_time: Optional[str]
    actual_start_time: Optional[str]
    actual_end_time: Optional[str]
    status: Optional[str]
    responsible_user_id: Optional[str]
    observations: Optional[str]
    created_at: Optional[str]


## Input Forms
class CreateForm(BaseModel):
    organization_id: str | None = Field(default=None, max_length=64)
    schedule_id: str | None = Field(default=None, max_length=64)
    route_id: str | None = Field(default=None, max_length=64)
    zone_id: str | None = Field(default=None, max_length=64)
    street_id: str | None = Field(default=None, max_length=64)
    program_date: str | None = Field(default=None, description="YYYY-MM-DD")
    planned_start_time: str | None = Field(default=None, max_length=8)
    planned_end_time: str | None = Field(default=None, max_length=8)
    actual_start_time: str | None = Field(default=None, max_length=8)
    actual_end_time: str | None = Field(default=None, max_length=8)
    status: str | None = Field(default=None, max_length=32)
    responsible_user_id: str | None = Field(default=None, max_length=64)
    observations: str | None = Field(default=None)


class UpdateForm(CreateForm):
    pass


class StatusForm(BaseModel):
    status: str = Field(max_length=32)


## Function
def programStore(session: Session) -> EntityStore:
    return EntityStore(session, Program, Program.program_code)


def programData(program: Program) -> dict:
    """Shape a program for the wire, date as YYYY-MM-DD and created_at as an ISO-8601 string."""
    return {
        "id": program.id,
        "organization_id": program.organization_id,
        "program_code": program.program_code,
        "schedule_id": program.schedule_id,
        "route_id": program.route_id,
        "zone_id": program.zone_id,
        "street_id": program.street_id,
        "program_date": (
            program.program_date.strftime(DATE_FORMAT)
            if program.program_date is not None
            else None
        ),
        "planned_start_time": program.planned_start_time,
        "planned_end_time": program.planned_end_time,
        "actual_start_time": program.actual_start_time,
        "actual_end_time": program.actual_end_time,
        "status": program.status,
        "responsible_user_id": program.responsible_user_id,
        "observations": program.observations,
        "created_at": (
            program.created_at.isoformat() if program.created_at is not None else None
        ),
    }


def createProgram(store: EntityStore, fParam: CreateForm) -> Program:
    programDate = validators.strictDate(fParam.program_date, Program.program_date)
    program = Program(
        program_code=generateCode(store, PROGRAM_PREFIX),
        organization_id=fParam.organization_id,
        schedule_id=fParam.schedule_id,
        route_id=fParam.route_id,
        zone_id=fParam.zone_id,
        street_id=fParam.street_id,
        program_date=programDate,
        planned_start_time=fParam.planned_start_time,
        planned_end_time=fParam.planned_end_time,
        actual_start_time=fParam.actual_start_time,
        actual_end_time=fParam.actual_end_time,
        status=fParam.status,
        responsible_user_id=fParam.responsible_user_id,
        observations=fParam.observations,
    )
    return store.save(program)


def updateProgram(store: EntityStore, id: str, fParam: UpdateForm) -> Program:
    program = getOr404(store, id)
    overwrite(
        program,
        fParam,
        [
            Program.organization_id.key,
            Program.zone_id.key,
            Program.street_id.key,
            Program.planned_start_time.key,
            Program.planned_end_time.key,
            Program.actual_start_time.key,
            Program.actual_end_time.key,
            Program.status.key,
            Program.observations.key,
            Program.responsible_user_id.key,
        ],
    )
    return store.save(program)


def deleteProgram(store: EntityStore, id: str) -> Program:
    program = getOr404(store, id)
    store.delete(program)
    return program


## API endpoints
@route_distribution.get(
    URL_PROGRAM,
    tags=["Program"],
    response_model=List[ProgramSchema],
    description="""
    Fetches every distribution program.
    """,
)
async def fetch_program():
    try:
        session = sessionMaker()
        return [programData(program) for program in programStore(session).findAll()]
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_distribution.get(
    URL_PROGRAM_ID,
    tags=["Program"],
    response_model=ProgramSchema,
    responses=fuseExceptionResponses([exceptions.NotFound(Program, "{id}")]),
    description="""
    Fetches a single distribution program by its identifier.
    """,
)
async def fetch_program_by_id(id: str):
    try:
        session = sessionMaker()
        return programData(getOr404(programStore(session), id))
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_distribution.post(
    URL_PROGRAM,
    tags=["Program"],
    response_model=ProgramSchema,
    status_code=status.HTTP_201_CREATED,
    responses=fuseExceptionResponses(
        [
            exceptions.InvalidDateFormat(Program.program_date, "2024-1-2"),
            exceptions.LockAcquireTimeout(),
        ]
    ),
    description="""
    Creates a new distribution program.
    The program_code is derived from the last issued code (PROG001, PROG002, ...), not user input.
    A missing or malformed last code restarts the sequence at PROG001.
    The program_date must be a strict YYYY-MM-DD date.
    Logs the program creation activity.
    """,
)
def create_program(
    fParam: CreateForm = Body(),
    request_info=Depends(getters.requestInfo),
):
    codeLock = None
    try:
        session = sessionMaker()
        codeLock = acquireCodeLock(Program.__tablename__)
        program = createProgram(programStore(session), fParam)

        programLogData = programData(program)
        logEvent(request_info, programLogData)
        return programLogData
    except Exception as e:
        exceptions.handle(e)
    finally:
        releaseLock(codeLock)
        session.close()


@route_distribution.put(
    URL_PROGRAM_ID,
    tags=["Program"],
    response_model=ProgramSchema,
    responses=fuseExceptionResponses([exceptions.NotFound(Program, "{id}")]),
    description="""
    Updates an existing distribution program.
    Every field except program_code, program_date, schedule_id and route_id is overwritten.
    Logs the program updating activity.
    """,
)
async def update_program(
    id: str,
    fParam: UpdateForm = Body(),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        program = updateProgram(programStore(session), id, fParam)

        programLogData = programData(program)
        logEvent(request_info, programLogData)
        return programLogData
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_distribution.delete(
    URL_PROGRAM_ID,
    tags=["Program"],
    status_code=status.HTTP_204_NO_CONTENT,
    responses=fuseExceptionResponses([exceptions.NotFound(Program, "{id}")]),
    description="""
    Permanently deletes a distribution program.
    Logs the deletion activity.
    """,
)
async def delete_program(id: str, request_info=Depends(getters.requestInfo)):
    try:
        session = sessionMaker()
        program = deleteProgram(programStore(session), id)
        logEvent(request_info, programData(program))
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


async def _change_status(id: str, newStatus: str, request_info) -> dict:
    try:
        session = sessionMaker()
        program = changeStatus(programStore(session), id, newStatus)

        programLogData = programData(program)
        logEvent(request_info, programLogData)
        return programLogData
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_distribution.patch(
    URL_PROGRAM_STATUS,
    tags=["Program"],
    response_model=ProgramSchema,
    responses=fuseExceptionResponses([exceptions.NotFound(Program, "{id}")]),
    description="""
    Sets the status of a distribution program to any value.
    The program is written even when the status does not change.
    """,
)
async def change_program_status(
    id: str,
    fParam: StatusForm = Body(),
    request_info=Depends(getters.requestInfo),
):
    return await _change_status(id, fParam.status, request_info)


@route_distribution.patch(
    URL_PROGRAM_ACTIVATE,
    tags=["Program"],
    response_model=ProgramSchema,
    responses=fuseExceptionResponses([exceptions.NotFound(Program, "{id}")]),
)
async def activate_program(id: str, request_info=Depends(getters.requestInfo)):
    return await _change_status(id, EntityStatus.ACTIVE.value, request_info)


@route_distribution.patch(
    URL_PROGRAM_DEACTIVATE,
    tags=["Program"],
    response_model=ProgramSchema,
    responses=fuseExceptionResponses([exceptions.NotFound(Program, "{id}")]),
)
async def deactivate_program(id: str, request_info=Depends(getters.requestInfo)):
    return await _change_status(id, EntityStatus.INACTIVE.value, request_info)
