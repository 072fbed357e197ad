#!/usr/bin/env python3
"""
Task Manager - Development Server Runner

Sets up the Python path and starts uvicorn with the configured host/port.
"""

import os
import sys

project_root = os.path.dirname(os.path.abspath(__file__))
src_path = os.path.join(project_root, "src")

if src_path not in sys.path:
    sys.path.insert(0, src_path)


if __name__ == "__main__":
    import uvicorn

    from config.settings import get_settings

    settings = get_settings()
    print(f"Starting {settings.name} on http://{settings.api_host}:{settings.api_port}")

    uvicorn.run(
        "web.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        reload_dirs=[src_path],
        log_level=settings.log_level.lower(),
    )
