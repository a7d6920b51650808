"""Run the FastAPI app via `python -m node_assistant`."""
from __future__ import annotations

import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "node_assistant.app:app",
        host=os.getenv("NODE_ASSISTANT_HOST", "0.0.0.0"),
        port=int(os.getenv("NODE_ASSISTANT_PORT", "8000")),
    )


if __name__ == "__main__":
    main()
