import os
from decimal import Decimal
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./cart.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    API_RELOAD = bool(data.get("API_RELOAD", 0))
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))

    # Backend gateways (inventory, accounts, orders)
    BACKEND_API_URL = data.get("BACKEND_API_URL", "http://localhost:5000/api")
    BACKEND_API_TOKEN = data.get("BACKEND_API_TOKEN", "")
    GATEWAY_TIMEOUT_SECONDS = float(data.get("GATEWAY_TIMEOUT_SECONDS", 10.0))

    # Line item store
    CART_SLOT_NAME = data.get("CART_SLOT_NAME", "shoppingCart")
    CART_CHANGE_WEBHOOK = data.get("CART_CHANGE_WEBHOOK", None)

    # Pricing
    DELIVERY_FEE = Decimal(str(data.get("DELIVERY_FEE", 2)))  # Flat fee below threshold
    DELIVERY_FREE_THRESHOLD = Decimal(str(data.get("DELIVERY_FREE_THRESHOLD", 50)))
    CURRENCY = data.get("CURRENCY", "BD")
    SHIPPING_COUNTRY = data.get("SHIPPING_COUNTRY", "Bahrain")
