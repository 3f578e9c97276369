"""
API Endpoint URL Constants

This module defines the URL paths used throughout the application
for accessing the distribution resources.

These URLs are relative to the mount point of the distribution app.
"""

# -------------------------------
# Program
# -------------------------------
URL_PROGRAM = "/program"
URL_PROGRAM_ID = "/program/{id}"
URL_PROGRAM_STATUS = "/program/{id}/status"
URL_PROGRAM_ACTIVATE = "/program/{id}/activate"
URL_PROGRAM_DEACTIVATE = "/program/{id}/deactivate"

# -------------------------------
# Route
# -------------------------------
URL_ROUTE = "/route"
URL_ROUTE_ID = "/route/{id}"
URL_ROUTE_ACTIVE = "/route/active"
URL_ROUTE_INACTIVE = "/route/inactive"
URL_ROUTE_ACTIVATE = "/route/{id}/activate"
URL_ROUTE_DEACTIVATE = "/route/{id}/deactivate"

# -------------------------------
# Schedule
# -------------------------------
URL_SCHEDULE = "/schedule"
URL_SCHEDULE_ID = "/schedule/{id}"
URL_SCHEDULE_ACTIVE = "/schedule/active"
URL_SCHEDULE_INACTIVE = "/schedule/inactive"
URL_SCHEDULE_ACTIVATE = "/schedule/{id}/activate"
URL_SCHEDULE_DEACTIVATE = "/schedule/{id}/deactivate"

# -------------------------------
# Fare
# -------------------------------
URL_FARE = "/fare"
URL_FARE_ID = "/fare/{id}"
URL_FARE_ACTIVE = "/fare/active"
URL_FARE_INACTIVE = "/fare/inactive"
URL_FARE_ACTIVATE = "/fare/{id}/activate"
URL_FARE_DEACTIVATE = "/fare/{id}/deactivate"
