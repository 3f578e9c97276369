from secrets import token_hex
from sqlalchemy import (
    JSON,
    TEXT,
    Column,
    Date,
    DateTime,
    Integer,
    Numeric,
    String,
    create_engine,
    func,
)
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker
from sqlalchemy.dialects.postgresql import JSONB

from distribution.src.constants import (
    ID_BYTES,
    PSQL_DB_DRIVER,
    PSQL_DB_HOST,
    PSQL_DB_PASSWORD,
    PSQL_DB_NAME,
    PSQL_DB_PORT,
    PSQL_DB_USERNAME,
)
from distribution.src.enums import EntityStatus


# Global DBMS variables
dbURL = f"{PSQL_DB_DRIVER}://{PSQL_DB_USERNAME}:{PSQL_DB_PASSWORD}@{PSQL_DB_HOST}:{PSQL_DB_PORT}/{PSQL_DB_NAME}"
engine = create_engine(url=dbURL, echo=False)
sessionMaker = sessionmaker(bind=engine, expire_on_commit=False)
ORMbase = declarative_base()

# Stored as binary JSON on PostgreSQL, plain JSON elsewhere
Document = JSON().with_variant(JSONB(), "postgresql")


def newIdentifier() -> str:
    return token_hex(ID_BYTES)


# ----------------------------------- Distribution DB Models ----------------------------------#
class Program(ORMbase):
    """
    Represents a distribution program, a single planned delivery run on a calendar date.

    A program ties together a schedule, a route, a zone and a street of an organization.
    Every reference is stored as an opaque string, no referential integrity is enforced.

    Columns:
        id (String(24)):
            Primary key. Opaque identifier generated on insert.

        organization_id (String(64)):
            Reference to the organization owning the program.

        program_code (String(32)):
            Human-readable sequential code (PROG001, PROG002, ...).
            Generated by the server, never modified by an update.
            Indexed to support fetching the last issued code.

        schedule_id (String(64)):
            Reference to the schedule the program was planned from.

        route_id (String(64)):
            Reference to the route followed by the program.

        zone_id (String(64)):
            Reference to the zone served.

        street_id (String(64)):
            Reference to the street served.

        program_date (Date):
            Calendar date of the program. Set on creation only.

        planned_start_time, planned_end_time (String(8)):
            Planned time of day, formatted as HH:MM.

        actual_start_time, actual_end_time (String(8)):
            Actual time of day, formatted as HH:MM.

        status (String(32)):
            Free-form lifecycle marker, not restricted to ACTIVE/INACTIVE.

        responsible_user_id (String(64)):
            Reference to the user responsible for the program.

        observations (TEXT):
            Free text notes.

        created_at (DateTime):
            Timestamp indicating when the program was created.
    """

    __tablename__ = "program"

    id = Column(String(24), primary_key=True, default=newIdentifier)
    organization_id = Column(String(64))
    program_code = Column(String(32), nullable=False, index=True)
    schedule_id = Column(String(64))
    route_id = Column(String(64))
    zone_id = Column(String(64))
    street_id = Column(String(64))
    program_date = Column(Date)
    planned_start_time = Column(String(8))
    planned_end_time = Column(String(8))
    actual_start_time = Column(String(8))
    actual_end_time = Column(String(8))
    status = Column(String(32))
    responsible_user_id = Column(String(64))
    observations = Column(TEXT)
    # Metadata
    created_at = Column(DateTime(timezone=True), nullable=False, default=func.now())


class Route(ORMbase):
    """
    Represents a distribution route, an ordered walk through a set of zones.

    Columns:
        id (String(24)):
            Primary key. Opaque identifier generated on insert.

        organization_id (String(64)):
            Reference to the organization owning the route.

        route_code (String(32)):
            Human-readable sequential code (RUT001, RUT002, ...).

        route_name (String(256)):
            Descriptive name of the route.

        zones (JSON):
            Ordered list of documents with the keys `zone_id`, `order`
            and `estimated_duration` (in hours).

        total_estimated_duration (Integer):
            Total duration of the route in hours.

        responsible_user_id (String(64)):
            Reference to the user responsible for the route.

        status (String(16)):
            ACTIVE or INACTIVE. Doubles as the soft-delete flag.

        created_at (DateTime):
            Timestamp indicating when the route was created.
    """

    __tablename__ = "route"

    id = Column(String(24), primary_key=True, default=newIdentifier)
    organization_id = Column(String(64))
    route_code = Column(String(32), nullable=False, index=True)
    route_name = Column(String(256))
    zones = Column(Document, nullable=False, default=list)
    total_estimated_duration = Column(Integer)
    responsible_user_id = Column(String(64))
    status = Column(String(16), nullable=False, default=EntityStatus.ACTIVE.value)
    # Metadata
    created_at = Column(DateTime(timezone=True), nullable=False, default=func.now())


class Schedule(ORMbase):
    """
    Represents a recurring distribution schedule for a zone along a route.

    The creation and update requests carry different shapes, so both
    shapes have their own columns:
    creation stores a list of weekdays and a duration in hours,
    update stores a single weekday and a duration in minutes.

    Columns:
        id (String(24)):
            Primary key. Opaque identifier generated on insert.

        organization_id (String(64)):
            Reference to the organization owning the schedule.

        schedule_code (String(32)):
            Human-readable sequential code (HOR001, HOR002, ...).

        route_id (String(64)):
            Reference to the route served by the schedule.

        zone_id (String(64)):
            Reference to the zone served by the schedule.

        schedule_name (String(256)):
            Human-readable name of the schedule.

        days_of_week (JSON):
            Weekday names given on creation.

        day_of_week (String(16)):
            Single weekday given on update.

        start_time, end_time (String(8)):
            Time of day, formatted as HH:MM.

        duration_hours (Integer):
            Duration given on creation, in hours.

        estimated_duration (Integer):
            Duration given on update, in minutes.

        status (String(16)):
            ACTIVE or INACTIVE.

        created_at (DateTime):
            Timestamp indicating when the schedule was created.

        updated_at (DateTime):
            Timestamp automatically updated whenever the schedule is modified.
    """

    __tablename__ = "schedule"

    id = Column(String(24), primary_key=True, default=newIdentifier)
    organization_id = Column(String(64))
    schedule_code = Column(String(32), nullable=False, index=True)
    route_id = Column(String(64))
    zone_id = Column(String(64))
    schedule_name = Column(String(256))
    days_of_week = Column(Document, nullable=False, default=list)
    day_of_week = Column(String(16))
    start_time = Column(String(8))
    end_time = Column(String(8))
    duration_hours = Column(Integer, nullable=False, default=0)
    estimated_duration = Column(Integer)
    status = Column(String(16), nullable=False, default=EntityStatus.ACTIVE.value)
    # Metadata
    created_at = Column(DateTime(timezone=True), nullable=False, default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class Fare(ORMbase):
    """
    Represents a fare charged for a distribution service.

    Columns:
        id (String(24)):
            Primary key. Opaque identifier generated on insert.

        organization_id (String(64)):
            Reference to the organization owning the fare. Required.

        fare_code (String(32)):
            Human-readable sequential code (TAR001, TAR002, ...).
            Checked for existence before a new fare is inserted.

        fare_name (String(128)):
            Human-readable name of the fare. Required.

        fare_type (String(64)):
            Free-form fare category (e.g. DIARIO, SEMANAL, MENSUAL).

        fare_amount (Numeric(12, 2)):
            Fixed-point monetary amount. Must be greater than zero.

        status (String(16)):
            ACTIVE or INACTIVE.

        created_at (DateTime):
            Timestamp indicating when the fare was created.
    """

    __tablename__ = "fare"

    id = Column(String(24), primary_key=True, default=newIdentifier)
    organization_id = Column(String(64), nullable=False)
    fare_code = Column(String(32), nullable=False, index=True)
    fare_name = Column(String(128), nullable=False)
    fare_type = Column(String(64))
    fare_amount = Column(Numeric(12, 2), nullable=False)
    status = Column(String(16), nullable=False, default=EntityStatus.ACTIVE.value)
    # Metadata
    created_at = Column(DateTime(timezone=True), nullable=False, default=func.now())
