# Copyright 2026 Dell Inc. or its subsidiaries. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""Image Composer API server.

Usage:
    uvicorn main:app --host 127.0.0.1 --port 8000
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from api.router import api_router
from container import container

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):  # pylint: disable=unused-argument
    """Build the image type registry before the first request."""
    registry = container.registry()
    logger.info(
        "Serving distributions %s with %s",
        ", ".join(registry.list_distros()),
        container.__class__.__name__,
    )
    yield


app = FastAPI(
    title="Image Composer API",
    description="Generates image build manifests from blueprints",
    version="1.0.0",
    lifespan=lifespan,
)
app.container = container
app.include_router(api_router)


@app.get("/health", status_code=status.HTTP_200_OK, summary="Health check")
async def health_check() -> dict:
    """Report liveness and the number of served distributions."""
    return {
        "status": "healthy",
        "distributions": len(container.registry().list_distros()),
    }


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):  # pylint: disable=unused-argument
    """Turn unexpected failures into a 500 without leaking details."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"status": "error", "message": "An internal server error occurred"},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "8000")))
