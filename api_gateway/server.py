"""API server entry point (console script: creator-pipeline-api)."""
import os

import uvicorn


def run() -> None:
    """Serve the API with uvicorn."""
    uvicorn.run(
        "api_gateway.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=False,
    )


if __name__ == "__main__":
    run()
