import argparse
from http import HTTPStatus
from requests import post

from distribution.src.urls import URL_PROGRAM, URL_ROUTE, URL_SCHEDULE, URL_FARE
from distribution.src.db import sessionMaker, engine, ORMbase


# ----------------------------------- Project Setup -------------------------------------------#
def removeTables():
    session = sessionMaker()
    ORMbase.metadata.drop_all(engine)
    session.commit()
    print("* All tables deleted")
    session.close()


def createTables():
    session = sessionMaker()
    ORMbase.metadata.create_all(engine)
    session.commit()
    print("* All tables created")
    session.close()


def POST(URL: str, status_code: int = HTTPStatus.CREATED, **kwargs):
    response = post(URL, **kwargs)
    if response.status_code != status_code:
        assert response.status_code == status_code
    else:
        return response


def testDB():
    # Base URL
    BASE_URL = "http://127.0.0.1:8080/distribution"
    organizationId = "6896b2ecf3e398570ffd99d3"
    responsibleUserId = "6896b2ecf3e398570ffd99d4"

    # Create Routes
    routeData = {
        "organization_id": organizationId,
        "route_name": "Ruta Centro",
        "zones": [
            {"zone_id": "zone-centro", "order": 1, "estimated_duration": 2},
            {"zone_id": "zone-norte", "order": 2, "estimated_duration": 3},
        ],
        "total_estimated_duration": 5,
        "responsible_user_id": responsibleUserId,
    }
    route = POST((BASE_URL + URL_ROUTE), json=routeData)
    print("* Created route", route.json()["route_code"])

    # Create Schedules
    scheduleData = {
        "organization_id": organizationId,
        "route_id": route.json()["id"],
        "zone_id": "zone-centro",
        "schedule_name": "Horario Zona Centro",
        "days_of_week": ["LUNES", "MIERCOLES", "VIERNES"],
        "start_time": "06:00",
        "end_time": "12:00",
        "duration_hours": 6,
    }
    schedule = POST((BASE_URL + URL_SCHEDULE), json=scheduleData)
    print("* Created schedule", schedule.json()["schedule_code"])

    # Create Programs
    programData = {
        "organization_id": organizationId,
        "schedule_id": schedule.json()["id"],
        "route_id": route.json()["id"],
        "zone_id": "zone-centro",
        "street_id": "street-principal",
        "program_date": "2024-01-02",
        "planned_start_time": "06:00",
        "planned_end_time": "12:00",
        "status": "PLANNED",
        "responsible_user_id": responsibleUserId,
        "observations": "Primer programa de distribucion",
    }
    program = POST((BASE_URL + URL_PROGRAM), json=programData)
    print("* Created program", program.json()["program_code"])

    # Create Fares
    for fareName, fareType, fareAmount in [
        ("Tarifa diaria", "DIARIO", "5.00"),
        ("Tarifa semanal", "SEMANAL", "30.00"),
        ("Tarifa mensual", "MENSUAL", "100.00"),
    ]:
        fareData = {
            "organization_id": organizationId,
            "fare_name": fareName,
            "fare_type": fareType,
            "fare_amount": fareAmount,
        }
        fare = POST((BASE_URL + URL_FARE), json=fareData)
        print("* Created fare", fare.json()["fare_code"])


# Setup database
if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    # remove tables
    parser.add_argument("-rm", action="store_true", help="remove tables")
    parser.add_argument("-cr", action="store_true", help="create tables")
    parser.add_argument("-test", action="store_true", help="add test data")
    args = parser.parse_args()

    if args.cr:
        createTables()
    if args.test:
        testDB()
    if args.rm:
        removeTables()
