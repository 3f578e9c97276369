from fastapi import FastAPI
from distribution.api import program, route, schedule, fare


# ------------------------------------------------------
# Distribution app, one router per entity kind
# ------------------------------------------------------
app_distribution = FastAPI(title="Distribution APP")

app_distribution.include_router(program.route_distribution)
app_distribution.include_router(route.route_distribution)
app_distribution.include_router(schedule.route_distribution)
app_distribution.include_router(fare.route_distribution)
