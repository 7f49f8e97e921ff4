import os

DEFAULT_SHARE_MESSAGE = (
    "📋 *Invoice #{{invoice_number}}*\n\n"
    "🏢 *Client:* {{client_name}}\n"
    "💰 *Total Amount:* ₹{{total_amount}}\n\n"
    "🔗 *View PDF:* {{invoice_link}}\n\n"
    "Please check the invoice details in the attached PDF link."
)


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(f"QUOTEDESK_{name}", default)


class Settings:
    def __init__(self):
        self.app_name = "QuoteDesk"
        self.api_version = "1.0.0"
        self.environment = _env("ENVIRONMENT", "development")
        self.database_url = _env("DATABASE_URL", "sqlite:///./quotedesk.db")
        self.log_level = _env("LOG_LEVEL", "INFO")

        self.default_tax_rate = int(_env("TAX_RATE", "18"))

        self.gemini_api_key = _env("GEMINI_API_KEY", "")
        self.gemini_model = _env("GEMINI_MODEL", "gemini-1.5-flash")
        self.gemini_base_url = _env("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/models")
        self.translation_timeout_seconds = float(_env("TRANSLATION_TIMEOUT", "30"))

        self.storage_dir = _env("STORAGE_DIR", "./storage/invoice_pdfs")
        self.storage_public_base_url = _env("STORAGE_PUBLIC_URL", "http://localhost:8000/files/invoice_pdfs")
        self.logo_storage_dir = _env("LOGO_STORAGE_DIR", "./storage/template_assets")
        self.logo_public_base_url = _env("LOGO_PUBLIC_URL", "http://localhost:8000/files/template_assets")

        self.render_font_path = _env("RENDER_FONT_PATH")
        self.render_scale = int(_env("RENDER_SCALE", "2"))
        self.share_message_template = DEFAULT_SHARE_MESSAGE


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
