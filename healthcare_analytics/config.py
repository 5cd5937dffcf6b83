import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./healthcare.db")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    # Optional bulk-load file applied on startup when the admissions table is empty
    PATIENT_CSV_PATH: str = os.getenv("PATIENT_CSV_PATH", "")


settings = Settings()
