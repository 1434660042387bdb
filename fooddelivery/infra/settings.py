import os

class Settings:
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./fooddelivery.db")
    DATA_FILE = os.getenv("DATA_FILE", "data/fooddelivery.json")
    # Optioneel eigen seed-bestand (JSON) i.p.v. de ingebouwde demo-data
    SEED_FILE = os.getenv("SEED_FILE", "")

    TZ = os.getenv("APP_TZ", "Asia/Ho_Chi_Minh")
    CURRENCY = os.getenv("CURRENCY", "VND")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Annuleren mag alleen binnen dit venster na het plaatsen
    CANCEL_WINDOW_SEC = int(os.getenv("CANCEL_WINDOW_SEC", "60"))
    # Minimale lengte van het korte order-id in lijsten
    SHORT_ID_LEN = int(os.getenv("SHORT_ID_LEN", "6"))

    RATING_MIN = 0
    RATING_MAX = 5

    # MODE: 'dev' (demo-data bij lege opslag) of 'prod'
    APP_MODE = os.getenv("APP_MODE", "dev")

settings = Settings()

def is_dev() -> bool:
    """Geeft True als de applicatie in demo/testmodus draait."""
    return (settings.APP_MODE or "dev").lower() == "dev"
