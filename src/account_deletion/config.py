from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ASSOCIATED_ACCOUNT_INDEX = "associated_account-is_first_email-index"


class AppConfig(BaseSettings):
    """
    Application configuration settings loaded from environment variables.
    Constructing it fails when COGNITO_USER_POOL_ID is not set.
    """

    service_name: str = Field(default="account-deletion", alias="SERVICE_NAME")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    json_logs: bool = Field(default=False, alias="JSON_LOGS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    aws_region: str = Field(default="us-east-2", alias="AWS_REGION")
    user_pool_id: str = Field(..., min_length=1, alias="COGNITO_USER_POOL_ID")

    users_table: str = Field(default="Users", alias="USERS_TABLE")
    users_key_attribute: str = Field(default="id", alias="USERS_KEY_ATTRIBUTE")

    conversations_table: str = Field(
        default="Conversations", alias="CONVERSATIONS_TABLE"
    )
    associated_account_attribute: str = Field(
        default="associated_account", alias="ASSOCIATED_ACCOUNT_ATTRIBUTE"
    )
    # Key schema of the conversations table; an empty sort key means the
    # table only has a partition key.
    conversation_partition_key: str = Field(
        default="conversation_id", alias="CONVERSATION_PARTITION_KEY"
    )
    conversation_sort_key: str | None = Field(
        default="response_id", alias="CONVERSATION_SORT_KEY"
    )

    cors_function_name: str = Field(default="Allow-Cors", alias="CORS_FUNCTION_NAME")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def associated_account_index(self) -> str:
        return ASSOCIATED_ACCOUNT_INDEX
