import os
from dotenv import load_dotenv

# -------------------- Load Environment --------------------
load_dotenv()


class Settings:
    PROJECT_NAME = "Headshot Studio"
    MODEL_NAME = os.getenv("GEMINI_MODEL", "gemini-2.5-flash-image-preview")
    MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_MB", "10")) * 1024 * 1024
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "3000"))
    STATIC_DIR = os.getenv("STATIC_DIR", "public")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    @property
    def gemini_api_key(self):
        # Read per request so a key added to the environment later is picked up
        return os.getenv("GEMINI_API_KEY")


settings = Settings()
