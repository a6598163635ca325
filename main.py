# main.py
import uvicorn

from shopsmart.config.settings import get_settings

settings = get_settings()

if __name__ == "__main__":
    uvicorn.run("shopsmart.main:app", host=settings.host, port=settings.port, reload=settings.reload)
