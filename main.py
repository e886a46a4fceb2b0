"""Process entry point: serve the fulfillment webhook with uvicorn."""

import uvicorn

from psychic_engine.apps.api.app import create_app
from psychic_engine.bootstrap import build_default_service_container
from psychic_engine.core.config import settings

app = create_app(build_default_service_container())


if __name__ == "__main__":
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
