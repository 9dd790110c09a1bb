"""Service configuration.

Settings are read from the environment once at process start and passed into
the components that need them.
"""

import os
from dataclasses import dataclass, field


@dataclass(frozen=True)
class TableNames:
    """DynamoDB table names for each entity."""

    menu_items: str = "jumjum-menu-items"
    billing: str = "jumjum-bar-billing"
    users: str = "jamjam-users"
    kitchen_inventory: str = "jumjum-kitchen-inventory"


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the POS service.

    Attributes:
        environment: Deployment environment name ("test" disables exporters)
        aws_region: Region for the DynamoDB resource
        dynamodb_endpoint: Local DynamoDB endpoint, None for AWS
        aws_access_key_id: Credentials used only with a local endpoint
        aws_secret_access_key: Credentials used only with a local endpoint
        tables: Table names
        log_level: Root logging level
        host: Bind address for the development server
        port: Bind port for the development server
        cors_origins: Allowed CORS origins
    """

    environment: str = "development"
    aws_region: str = "ap-south-1"
    dynamodb_endpoint: str | None = None
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    tables: TableNames = field(default_factory=TableNames)
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables.

        Returns:
            Settings populated from the environment, with defaults for anything unset
        """
        defaults = TableNames()
        tables = TableNames(
            menu_items=os.getenv("DYNAMODB_MENU_TABLE", defaults.menu_items),
            billing=os.getenv("DYNAMODB_BILLING_TABLE", defaults.billing),
            users=os.getenv("DYNAMODB_USERS_TABLE", defaults.users),
            kitchen_inventory=os.getenv("DYNAMODB_INVENTORY_TABLE", defaults.kitchen_inventory),
        )

        origins_str = os.getenv("CORS_ORIGINS", "*")
        cors_origins = [origin.strip() for origin in origins_str.split(",") if origin.strip()]

        return cls(
            environment=os.getenv("ENVIRONMENT", "development"),
            aws_region=os.getenv("AWS_REGION", "ap-south-1"),
            dynamodb_endpoint=os.getenv("DYNAMODB_ENDPOINT") or None,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
            tables=tables,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "5000")),
            cors_origins=cors_origins or ["*"],
        )
