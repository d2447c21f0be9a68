"""
Configuration management for the WhatsApp students relay.

Loads environment variables from .env file and provides typed access to configuration.
Store and forwarder settings live in infra.config (read per call).
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)


class Config:
    """Application-level configuration."""

    SERVICE_NAME = os.getenv("SERVICE_NAME", "whatsapp-students-webhook")

    # HTTP server
    PORT = int(os.getenv("PORT", "8000"))
    PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "")

    # Environment
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Global secret for the webhook handshake (and edit fallback)
    WEBHOOK_VERIFY_TOKEN = os.getenv("WEBHOOK_VERIFY_TOKEN", "")

    @classmethod
    def validate(cls) -> bool:
        """Validate that required configuration is set."""
        required = ["WEBHOOK_VERIFY_TOKEN"]
        missing = [key for key in required if not getattr(cls, key)]

        if missing:
            print(f"⚠️  Missing required environment variables: {', '.join(missing)}")
            print(f"   Please set them in .env file")
            return False

        return True


if __name__ == "__main__":
    # Test configuration loading
    print("Configuration loaded:")
    print(f"  Service: {Config.SERVICE_NAME}")
    print(f"  Webhook Verify Token: {'✓ Set' if Config.WEBHOOK_VERIFY_TOKEN else '✗ Missing'}")
    print(f"  Port: {Config.PORT}")
    print(f"  Public base URL: {Config.PUBLIC_BASE_URL or '(request base URL)'}")
    print(f"  Environment: {Config.ENVIRONMENT}")
    print(f"\n  Validation: {'✓ PASSED' if Config.validate() else '✗ FAILED'}")
