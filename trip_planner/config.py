import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseModel):
    ENV: str = os.getenv("ENV", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Mongo
    MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    MONGO_DB: str = os.getenv("MONGO_DB", "tripPlanner")

    # Collections
    COLL_TRIPS: str = os.getenv("COLL_TRIPS", "trips")

    # Identity service (GoTrue-compatible)
    AUTH_URL: str = os.getenv("AUTH_URL", "")
    AUTH_ANON_KEY: str = os.getenv("AUTH_ANON_KEY", "")

    # AI gateway (OpenAI-compatible chat completions)
    AI_GATEWAY_URL: str = os.getenv("AI_GATEWAY_URL", "https://ai.gateway.lovable.dev/v1/chat/completions")
    AI_GATEWAY_API_KEY: str = os.getenv("AI_GATEWAY_API_KEY", "")
    AI_MODEL: str = os.getenv("AI_MODEL", "google/gemini-2.5-flash")
    AI_MAX_TOKENS: int = int(os.getenv("AI_MAX_TOKENS", "8000"))
    AI_TEMPERATURE: float = float(os.getenv("AI_TEMPERATURE", "0.2"))
    AI_TIMEOUT_SECONDS: float = float(os.getenv("AI_TIMEOUT_SECONDS", "60"))

    # Money in prompts
    CURRENCY_CODE: str = os.getenv("CURRENCY_CODE", "INR")
    CURRENCY_SYMBOL: str = os.getenv("CURRENCY_SYMBOL", "₹")

    # Allow extra .env variables without throwing validation errors
    model_config = {"extra": "allow"}

settings = Settings()
