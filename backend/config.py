"""Configuration management for the Louisiana Business Assistant relay."""
import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Provider selection
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "anthropic").lower()

# API Keys
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
GROQ_API_KEY = os.getenv("GROQ_API_KEY")
PROVIDER_API_KEY = GROQ_API_KEY if LLM_PROVIDER == "groq" else ANTHROPIC_API_KEY

# Server Configuration
PORT = int(os.getenv("PORT", "3001"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")

# CORS Configuration
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,OPTIONS,PATCH,DELETE,POST,PUT",
    "Access-Control-Allow-Headers": (
        "X-CSRF-Token, X-Requested-With, Accept, Accept-Version, Content-Length, "
        "Content-MD5, Content-Type, Date, X-Api-Version"
    ),
}

# Model Configuration
ANTHROPIC_MODEL = os.getenv("ANTHROPIC_MODEL", "claude-3-haiku-20240307")
GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.1-8b-instant")
MAX_OUTPUT_TOKENS = 2048
PROVIDER_TIMEOUT = float(os.getenv("PROVIDER_TIMEOUT", "60"))

# Client Dispatcher Configuration
RELAY_URL = os.getenv("RELAY_URL", f"http://localhost:{PORT}/api/chat")
RELAY_TIMEOUT = float(os.getenv("RELAY_TIMEOUT", "30"))

# Logging Configuration
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
