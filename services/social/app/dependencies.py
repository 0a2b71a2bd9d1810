from app.config import Settings


def get_settings() -> Settings:
    return Settings()
