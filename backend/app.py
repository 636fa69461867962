from fastapi import FastAPI

from backend.routers import export, models

app = FastAPI(
    title="PLY Export API",
    description="Convert point clouds and meshes to ASCII PLY",
    version="0.1.0",
)

app.include_router(export.router)
app.include_router(models.router)


@app.get("/")
async def root():
    return {"status": "ok", "service": "PLY Export API"}
