import uvicorn

from headshot.config import settings
from headshot.logger import logger
from headshot.server import app

if __name__ == "__main__":
    logger.info(f"Server running on http://localhost:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
