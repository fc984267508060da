# backend/main.py

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.v1 import session, history
from core.config import AppConfig

logging.basicConfig(
    level=AppConfig.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create an instance of the FastAPI class
app = FastAPI(
    title="Vertex Architect API",
    description="Turns rough ideas into structured super prompts and runs them against Gemini.",
    version="0.1.0",
)

# --- Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=AppConfig.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- API Routers ---
app.include_router(session.router, prefix="/api/v1", tags=["session"])
app.include_router(history.router, prefix="/api/v1", tags=["history"])


# --- API Endpoints ---
@app.get("/")
def read_root():
    """
    A simple welcome endpoint for our API.
    """
    return {"message": "Welcome to Vertex Architect! Bring an idea, leave with a super prompt."}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="127.0.0.1", port=8000)
