from typing import Literal, List
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Core
    log_level: str = "INFO"
    service_env: str = "dev"  # dev|prod
    server_public_url: str = "http://localhost:8000"

    # CORS
    cors_allow_origins: str = "*"
    cors_allow_credentials: bool = True
    cors_allow_methods: str = "*"
    cors_allow_headers: str = "*"

    # DB ("sqlite://" = memoria, una sola conexión compartida)
    db_url: str = "sqlite:///./recipebox.db"

    # Auth
    admin_email: str = ""  # único admin; vacío = nadie
    jwt_secret: str = "change-me-dev"
    jwt_expire_minutes: int = 120
    magic_link_expire_minutes: int = 15
    magic_link_echo: bool = True  # devuelve el enlace en la respuesta (solo dev)

    # Catálogo
    tag_match_policy: Literal["all", "any"] = "all"
    custom_recipe_tag: str = "Perso"
    default_prep_time: str = "10 min"
    default_cook_time: str = "15 min"
    default_servings: int = 2

    # Rate limiting
    rate_limit_rpm: int = 60
    rate_limit_burst: int = 60

    # Size limit
    max_body_bytes: int = 262144  # 256KB

    def parsed_cors(self, raw: str) -> List[str]:
        if raw == "*":
            return ["*"]
        return [o.strip() for o in raw.split(",") if o.strip()]

    @model_validator(mode="after")
    def _validate_security(self) -> "Settings":
        if self.service_env != "dev":
            if self.jwt_secret == "change-me-dev":
                raise ValueError("jwt_secret must be set via environment variable in non-dev environments")
            if self.magic_link_echo:
                raise ValueError("magic_link_echo is only allowed in development")
        return self

settings = Settings()
