#!/usr/bin/env python3
"""
Start the CompoundVerse API with uvicorn.

    python -m backend.start_backend
"""
import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "backend.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=False,
        log_level="info",
    )


if __name__ == "__main__":
    main()
