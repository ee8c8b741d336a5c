"""FastAPI backend application entry point.

Initializes the application using the factory pattern; uvicorn serves the
module-level ``app``.
"""

import os

import uvicorn

from backend.app_factory import create_app
from core.config.server import DEFAULT_API_PORT

app = create_app()


def main() -> None:
    """Run the application using uvicorn when executed directly."""
    port = int(os.getenv("BUGFIGHTS_API_PORT", str(DEFAULT_API_PORT)))
    is_production = os.getenv("PRODUCTION", "false").lower() == "true"

    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=port,
        reload=not is_production,
        log_level="info",
    )


if __name__ == "__main__":
    main()
