from dotenv import load_dotenv
import os

load_dotenv()

# search / extraction provider
TAVILY_API_KEY = os.getenv("TAVILY_API_KEY", "")
TAVILY_BASE_URL = os.getenv("TAVILY_BASE_URL", "https://api.tavily.com")
SEARCH_MAX_RESULTS = int(os.getenv("SEARCH_MAX_RESULTS", "10"))
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "30"))

# generation provider (any OpenAI-compatible endpoint; Gemini by default)
GENERATION_API_KEY = (
    os.getenv("GENERATION_API_KEY")
    or os.getenv("GEMINI_API_KEY")
    or os.getenv("OPENAI_API_KEY", "")
)
GENERATION_BASE_URL = os.getenv(
    "GENERATION_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai/"
)
GENERATION_MODEL = os.getenv("GENERATION_MODEL", "gemini-2.0-flash")

DATA_DIR = os.getenv("DATA_DIR", "data")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
