# Package initializer for the Loft signage service.

"""
The `loft_signage` package contains all modules for the room reservation signage display.

Modules:

- ``config``: application settings loaded from environment variables.
- ``models``: Pydantic data models for reservations and rendered timeline geometry.
- ``timeline``: time positioning and timeline rendering.
- ``calendar_client``: helpers for fetching and normalising events from the church calendar API.
- ``sample``: demo reservations for running without network access.
- ``scheduler``: the clock and data refresh cadences.
- ``main``: the FastAPI application definition.

"""
