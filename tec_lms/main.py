"""TEC LMS app: bilingual content REST routes and the /ws endpoint.

Run with:
    poetry run uvicorn tec_lms.main:app --host 0.0.0.0 --port 8070 --reload
"""

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tec_lms.config import settings
from tec_lms.middleware import LanguageMiddleware
from tec_lms.routes import router
from tec_lms.session import registry
from tec_lms.ws import ws_endpoint


@asynccontextmanager
async def lifespan(_: FastAPI):
    load_dotenv()
    level_name = (settings.get("TEC_LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO))
    registry.start_cleanup()
    yield
    registry.stop_cleanup()


app = FastAPI(title="TEC LMS", lifespan=lifespan)

app.add_middleware(LanguageMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
app.add_api_websocket_route("/ws", ws_endpoint)
