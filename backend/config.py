"""Configuration management for the codedoc prompt pipeline."""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Remote endpoint overrides for the primary model
POST_URL = os.getenv("POSTURL", "http://localhost:8080/query")
MODEL_NAME = os.getenv("MODELNAME", "gemini-1.5-pro")
MAX_TOKENS = int(os.getenv("MAXTOKENS", "0"))  # 0 keeps the model's own budget
UNKNOWN_MODEL_MAX_TOKENS = 32000
FALLBACK_MODEL_NAME = os.getenv("FALLBACK_MODELNAME", "gemini-1.5-flash")

# Request Configuration
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "120"))  # seconds
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Token accounting
PROMPT_MARGIN = 1.2  # token counts may be estimates, so the bare prompt overhead is padded by 20%
LONG_PROMPT_THRESHOLD = 128000  # sent tokens above this use the long prompt price tier
LOCAL_ENCODING = "o200k_base"
CHARS_PER_TOKEN_ESTIMATE = 4

# Confidence pass
DEFAULT_CONFIDENCE = 5

# Model catalogue: name -> settings. Prices are USD per million tokens.
DEFAULT_MODELS = [
    {
        "name": "gemini-1.5-pro",
        "description": "Gemini 1.5 Pro, large context and best quality",
        "max_tokens": 2000000,
        "usd_per_million_input_short": 1.25,
        "usd_per_million_input_long": 2.50,
        "usd_per_million_output_short": 5.00,
        "usd_per_million_output_long": 10.00,
    },
    {
        "name": "gemini-1.5-flash",
        "description": "Gemini 1.5 Flash, fast and cheap",
        "max_tokens": 1000000,
        "usd_per_million_input_short": 0.075,
        "usd_per_million_input_long": 0.15,
        "usd_per_million_output_short": 0.30,
        "usd_per_million_output_long": 0.60,
    },
    {
        "name": "gemini-1.0-pro",
        "description": "Gemini 1.0 Pro, small context",
        "max_tokens": 32000,
        "usd_per_million_input_short": 0.50,
        "usd_per_million_input_long": 0.50,
        "usd_per_million_output_short": 1.50,
        "usd_per_million_output_long": 1.50,
    },
]
