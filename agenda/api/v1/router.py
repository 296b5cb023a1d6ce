"""
API v1 router setup
"""
from fastapi import APIRouter

from agenda.api.v1 import appointments, catalog, clients, reminders, templates

api_v1_router = APIRouter()

api_v1_router.include_router(appointments.router)
api_v1_router.include_router(clients.router)
api_v1_router.include_router(catalog.router)
api_v1_router.include_router(templates.router)
api_v1_router.include_router(reminders.router)
