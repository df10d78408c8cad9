"""
Entry point for the formcraft API service.

Run with:
    uvicorn formcraft.api.main:app --reload --port 8001
    python main.py
"""
import uvicorn

from config import get_settings

settings = get_settings()

if __name__ == "__main__":
    uvicorn.run(
        "formcraft.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
        log_level=settings.log_level.lower(),
    )
