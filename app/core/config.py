"""Configuration settings for the storefront functions API.

This module manages environment variables and application settings.
"""
import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings.

    Attributes:
        API_V1_STR: Path prefix shared by all storefront functions
        PROJECT_NAME: Name of the project
        DEBUG: Debug mode flag
        LOG_LEVEL: Root log level name
        RESEND_API_KEY: API key for the Resend transactional email API
        TURNSTILE_SECRET_KEY: Secret key for Cloudflare Turnstile verification
        AI_GATEWAY_API_KEY: API key for the AI gateway used for image generation
        ELEVENLABS_API_KEY: API key for ElevenLabs music generation
    """
    def __init__(self):
        self.API_V1_STR = os.getenv("API_V1_STR", "/functions/v1")
        self.PROJECT_NAME = os.getenv("PROJECT_NAME", "Blacklabspots Functions API")
        self.DEBUG = os.getenv("DEBUG", "False").lower() == "true"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "info")

        # Outbound HTTP
        self.OUTBOUND_TIMEOUT_SECONDS = float(os.getenv("OUTBOUND_TIMEOUT_SECONDS", 10))

        # Email Settings
        self.RESEND_API_KEY = os.getenv("RESEND_API_KEY")
        self.RESEND_API_URL = os.getenv("RESEND_API_URL", "https://api.resend.com/emails")
        self.CONTACT_SENDER = os.getenv("CONTACT_SENDER", "Blacklabspotsshop <onboarding@resend.dev>")
        self.CONTACT_RECIPIENT = os.getenv("CONTACT_RECIPIENT", "hitlijsten_demping_7b@icloud.com")
        self.CONTACT_SUBJECT_PREFIX = "[Contact Form]"

        # Turnstile Settings
        self.TURNSTILE_SECRET_KEY = os.getenv("TURNSTILE_SECRET_KEY")
        self.TURNSTILE_VERIFY_URL = os.getenv(
            "TURNSTILE_VERIFY_URL",
            "https://challenges.cloudflare.com/turnstile/v0/siteverify",
        )

        # Rate Limit Settings
        self.RATE_LIMIT_WINDOW_SECONDS = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", 60 * 60))
        self.RATE_LIMIT_IP_MAX = int(os.getenv("RATE_LIMIT_IP_MAX", 5))
        self.RATE_LIMIT_EMAIL_MAX = int(os.getenv("RATE_LIMIT_EMAIL_MAX", 3))
        self.RATE_LIMIT_BACKEND = os.getenv("RATE_LIMIT_BACKEND", "memory").lower()
        self.RATE_LIMIT_SWEEP_MINUTES = int(os.getenv("RATE_LIMIT_SWEEP_MINUTES", 10))

        # Redis Settings
        self.REDIS_HOST = os.getenv("REDIS_HOST", "redis")
        self.REDIS_PORT = int(os.getenv("REDIS_PORT", 6379))

        # AI Gateway Settings
        self.AI_GATEWAY_API_KEY = os.getenv("AI_GATEWAY_API_KEY") or os.getenv("LOVABLE_API_KEY")
        self.AI_GATEWAY_URL = os.getenv("AI_GATEWAY_URL", "https://ai.gateway.lovable.dev/v1")
        self.IMAGE_MODEL_NAME = os.getenv("IMAGE_MODEL_NAME", "google/gemini-2.5-flash-image-preview")
        self.AI_GATEWAY_TIMEOUT_SECONDS = float(os.getenv("AI_GATEWAY_TIMEOUT_SECONDS", 60))

        # ElevenLabs Settings
        self.ELEVENLABS_API_KEY = os.getenv("ELEVENLABS_API_KEY")
        self.ELEVENLABS_MUSIC_URL = os.getenv("ELEVENLABS_MUSIC_URL", "https://api.elevenlabs.io/v1/music")
        self.ELEVENLABS_TIMEOUT_SECONDS = float(os.getenv("ELEVENLABS_TIMEOUT_SECONDS", 120))

        # Slack Settings
        self.SLACK_BOT_TOKEN = os.getenv("SLACK_BOT_TOKEN")
        self.SLACK_ALERT_CHANNEL = os.getenv("SLACK_ALERT_CHANNEL", "#blacklabspots-alerts")

        # CORS
        self.CORS_ALLOW_HEADERS = [
            "authorization",
            "x-client-info",
            "apikey",
            "content-type",
            "x-supabase-client-platform",
            "x-supabase-client-platform-version",
            "x-supabase-client-runtime",
            "x-supabase-client-runtime-version",
        ]


settings = Settings()
