import os
from typing import List

from dotenv import load_dotenv

load_dotenv()  # Load .env automatically


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() == "true"


class Settings:
    SUPABASE_URL: str = (
        os.getenv("SUPABASE_URL")
        or os.getenv("NEXT_PUBLIC_SUPABASE_URL")
        or ""
    ).strip()
    # Prefer explicit service role envs; fall back to generic SUPABASE_KEY
    SUPABASE_SERVICE_KEY: str = (
        os.getenv("SUPABASE_SERVICE_KEY")
        or os.getenv("SUPABASE_SERVICE_ROLE_KEY")
        or os.getenv("SUPABASE_KEY")
        or ""
    ).strip()

    JWT_SECRET: str = os.getenv("JWT_SECRET", "change-me")
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_MINUTES: int = int(os.getenv("ACCESS_TOKEN_MINUTES", "10"))
    REFRESH_TOKEN_DAYS: int = int(os.getenv("REFRESH_TOKEN_DAYS", "7"))
    REFRESH_COOKIE_NAME: str = "refreshToken"
    RESET_TOKEN_MINUTES: int = int(os.getenv("RESET_TOKEN_MINUTES", "60"))

    FRONTEND_ORIGIN: str = os.getenv("FRONTEND_ORIGIN", "").strip()
    RESET_PASSWORD_URL: str = os.getenv(
        "RESET_PASSWORD_URL", "https://pi-unicap.vercel.app/reset-password"
    ).rstrip("/")

    SMTP_HOST: str = os.getenv("SMTP_HOST", "")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USER: str = os.getenv("SMTP_USER", "")
    SMTP_PASSWORD: str = os.getenv("SMTP_PASSWORD", "")
    SMTP_FROM: str = os.getenv("SMTP_FROM", "") or os.getenv("SMTP_USER", "")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    DEBUG: bool = _env_bool("DEBUG")

    def allowed_origins(self) -> List[str]:
        origins = [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost",
        ]
        for origin in self.FRONTEND_ORIGIN.split(","):
            origin = origin.strip()
            if origin:
                origins.append(origin)
        return origins

    def supabase_credentials(self) -> tuple[str, str]:
        """
        Supabase URL and a **service** key (not anon).
        Raises when either is missing so startup fails loudly.
        """
        if not self.SUPABASE_URL or not self.SUPABASE_SERVICE_KEY:
            raise RuntimeError(
                "Missing Supabase credentials. Ensure SUPABASE_URL and a service key "
                "(e.g., SUPABASE_SERVICE_KEY) are set in the environment."
            )
        return self.SUPABASE_URL, self.SUPABASE_SERVICE_KEY


settings = Settings()
