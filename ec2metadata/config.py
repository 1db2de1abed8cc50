from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENDPOINT = "http://169.254.169.254/latest"


class ClientConfig(BaseSettings):
    """Settings for `EC2MetadataClient`, read from `AWS_EC2_METADATA_*` variables."""

    service_endpoint: str = DEFAULT_ENDPOINT
    timeout: float = Field(1.0, gt=0)
    disabled: bool = False
    use_token: bool = False
    token_ttl: int = Field(21600, ge=1, le=21600)

    model_config = SettingsConfigDict(env_prefix="AWS_EC2_METADATA_")

    @field_validator("service_endpoint")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")
