from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


def choose_env_file() -> str:
    return ".env.local" if Path(".env.local").exists() else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=choose_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # tolerate unrelated env vars
    )

    # Prismic
    PRISMIC_API_ENDPOINT: str = "https://spacetraveling.cdn.prismic.io/api/v2"
    PRISMIC_ACCESS_TOKEN: str = ""
    HTTP_TIMEOUT_SECONDS: float = 10.0
    PRISMIC_REF_TTL_SECONDS: float = 5.0

    # Blog
    POSTS_DOCUMENT_TYPE: str = "posts"
    POSTS_PAGE_SIZE: int = 1
    DATE_LOCALE: str = "pt_BR"
    SITE_NAME: str = "spacetraveling"

    # Detail page regeneration
    REVALIDATE_SECONDS: int = 60 * 30
    PRERENDER_ON_STARTUP: bool = False

    # Preview session
    PREVIEW_REF_COOKIE: str = "spacetraveling.preview"
    PREVIEW_DOCUMENT_COOKIE: str = "spacetraveling.preview.document"

    # Comments
    UTTERANCES_REPO: str = ""
    UTTERANCES_THEME: str = "github-dark"

    # Logging
    LOG_LEVEL: str = "INFO"


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
