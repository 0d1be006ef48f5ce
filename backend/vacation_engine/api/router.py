from fastapi import APIRouter

from vacation_engine.api.balances import employee_vacation_router
from vacation_engine.api.vacation import company_vacation_router

api_router = APIRouter()
api_router.include_router(employee_vacation_router)
api_router.include_router(company_vacation_router)
