from fastapi import FastAPI

from .api import drives

app = FastAPI(title="drivetemp")

app.include_router(drives.router, prefix="/drives", tags=["drives"])
