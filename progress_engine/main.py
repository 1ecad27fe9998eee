import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from motor.motor_asyncio import AsyncIOMotorClient

from progress_engine import config
from progress_engine.app import setup_engine_routes, startup_engine

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

app = FastAPI(title="Lumetrics Progress & Certification Engine")

# MongoDB Configuration
client = AsyncIOMotorClient(config.MONGO_URL, serverSelectionTimeoutMS=config.MONGO_TIMEOUT_MS)
db = client[config.MONGO_DB_NAME]


@app.on_event("startup")
async def startup_event():
    await startup_engine(db)


@app.on_event("shutdown")
async def shutdown_event():
    client.close()


app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_engine_routes(app)


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
