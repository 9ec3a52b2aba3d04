#!/usr/bin/env python3
"""
Run script for the Syntra backend
"""
import uvicorn

from syntra.config.settings import settings
from syntra.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, reload=settings.debug)
