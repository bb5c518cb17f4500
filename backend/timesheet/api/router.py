from fastapi import APIRouter

from timesheet.api.assignments import company_assignments_router, employee_assignments_router
from timesheet.api.holidays import holidays_router
from timesheet.api.policies import policies_router
from timesheet.api.records import records_router

api_router = APIRouter()
api_router.include_router(policies_router)
api_router.include_router(company_assignments_router)
api_router.include_router(employee_assignments_router)
api_router.include_router(holidays_router)
api_router.include_router(records_router)
