import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    NETHEALTH_CONFIG: str = os.getenv("NETHEALTH_CONFIG", "nethealth.yml")
    NETHEALTH_COLOR: str = os.getenv("NETHEALTH_COLOR", "auto").strip().lower()
    NETHEALTH_HTTP_CLIENT: str = (
        os.getenv("NETHEALTH_HTTP_CLIENT", "requests").strip().lower()
    )
    NETHEALTH_LOG_LEVEL: str = os.getenv("NETHEALTH_LOG_LEVEL", "WARNING").upper()


settings = Settings()
