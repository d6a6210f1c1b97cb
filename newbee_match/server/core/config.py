"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class SalesforceConfig(BaseModel):
    """Salesforce connected app and REST API configuration."""

    login_url: str = Field(
        default="https://login.salesforce.com",
        alias="SALESFORCE_LOGIN_URL",
        description="OAuth domain (login.salesforce.com, test.salesforce.com or a My Domain URL)",
    )
    consumer_key: Optional[str] = Field(
        default=None, alias="SALESFORCE_CONSUMER_KEY", description="Connected app consumer key (OAuth client id)"
    )
    consumer_secret: Optional[str] = Field(
        default=None, alias="SALESFORCE_CONSUMER_SECRET", description="Connected app consumer secret"
    )
    callback_url: str = Field(
        default="http://localhost:8080/auth/callback",
        alias="SALESFORCE_CALLBACK_URL",
        description="OAuth redirect URI registered on the connected app",
    )
    api_version: str = Field(default="58.0", alias="SALESFORCE_API_VERSION", description="Salesforce REST API version")
    timeout_seconds: float = Field(
        default=10.0, alias="CRM_TIMEOUT_SECONDS", description="Timeout applied to every Salesforce call"
    )

    model_config = {"populate_by_name": True}


class RecordTypeConfig(BaseModel):
    """Contact record types and the Relationship object schema."""

    newbee_record_type_id: str = Field(
        default="", alias="NEWBEE_RECORD_TYPE_ID", description="Contact RecordTypeId identifying NewBee contacts"
    )
    mentor_record_type_id: str = Field(
        default="", alias="MENTOR_RECORD_TYPE_ID", description="Contact RecordTypeId identifying Mentor contacts"
    )
    relationship_object: str = Field(
        default="npe4__Relationship__c", alias="RELATIONSHIP_OBJECT", description="Relationship SObject API name"
    )
    relationship_source_field: str = Field(
        default="npe4__Contact__c", alias="RELATIONSHIP_SOURCE_FIELD", description="Field holding the newbee id"
    )
    relationship_related_field: str = Field(
        default="npe4__RelatedContact__c",
        alias="RELATIONSHIP_RELATED_FIELD",
        description="Field holding the mentor id",
    )
    relationship_type_field: str = Field(
        default="npe4__Type__c", alias="RELATIONSHIP_TYPE_FIELD", description="Field holding the relationship type"
    )
    mentor_relationship_type: str = Field(
        default="Mentor", alias="MENTOR_RELATIONSHIP_TYPE", description="Type tag written on match relationships"
    )

    model_config = {"populate_by_name": True}


class SessionConfig(BaseModel):
    """Server-side session and cookie configuration."""

    cookie_name: str = Field(
        default="newbee_match_session", alias="SESSION_COOKIE_NAME", description="Name of the session cookie"
    )
    cookie_secure: bool = Field(
        default=False, alias="SESSION_COOKIE_SECURE", description="Send the session cookie over HTTPS only"
    )
    ttl_seconds: int = Field(
        default=8 * 60 * 60, alias="SESSION_TTL_SECONDS", description="Sliding session lifetime in seconds"
    )
    app_redirect_url: str = Field(
        default="http://localhost:8080/index.html",
        alias="APP_REDIRECT_URL",
        description="Front end page to redirect to after login and logout",
    )

    model_config = {"populate_by_name": True}


class CORSConfig(BaseModel):
    """CORS configuration."""

    origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS", description="Allowed CORS origins (use * for all)")
    allow_credentials: bool = Field(
        default=True, alias="CORS_ALLOW_CREDENTIALS", description="Allow credentials in CORS requests"
    )
    allow_methods: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_METHODS", description="Allowed HTTP methods (use * for all)"
    )
    allow_headers: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_HEADERS", description="Allowed HTTP headers (use * for all)"
    )

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Server Configuration
    # =====================================================================
    server_host: str = Field(
        default="0.0.0.0",
        description="Server host address to bind to",
        alias="NEWBEE_MATCH_SERVER_HOST",
    )
    server_port: int = Field(
        default=8080,
        description="Server port number",
        alias="NEWBEE_MATCH_SERVER_PORT",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="NEWBEE_MATCH_LOG_LEVEL",
    )
    log_format: str = Field(default="detailed", description="Log format (simple, detailed, json)", alias="LOG_FORMAT")
    log_file_dir: str = Field(default="logs", description="Directory for the log file", alias="LOG_FILE_DIR")
    enable_file_logging: bool = Field(
        default=False, description="Also write logs to a file", alias="ENABLE_FILE_LOGGING"
    )

    # =====================================================================
    # Salesforce Configuration
    # =====================================================================
    salesforce_login_url: str = Field(default="https://login.salesforce.com", alias="SALESFORCE_LOGIN_URL")
    salesforce_consumer_key: Optional[str] = Field(default=None, alias="SALESFORCE_CONSUMER_KEY")
    salesforce_consumer_secret: Optional[str] = Field(default=None, alias="SALESFORCE_CONSUMER_SECRET")
    salesforce_callback_url: str = Field(
        default="http://localhost:8080/auth/callback", alias="SALESFORCE_CALLBACK_URL"
    )
    salesforce_api_version: str = Field(default="58.0", alias="SALESFORCE_API_VERSION")
    crm_timeout_seconds: float = Field(default=10.0, alias="CRM_TIMEOUT_SECONDS")

    # =====================================================================
    # Record Types and Relationship Schema
    # =====================================================================
    newbee_record_type_id: str = Field(default="", alias="NEWBEE_RECORD_TYPE_ID")
    mentor_record_type_id: str = Field(default="", alias="MENTOR_RECORD_TYPE_ID")
    relationship_object: str = Field(default="npe4__Relationship__c", alias="RELATIONSHIP_OBJECT")
    relationship_source_field: str = Field(default="npe4__Contact__c", alias="RELATIONSHIP_SOURCE_FIELD")
    relationship_related_field: str = Field(default="npe4__RelatedContact__c", alias="RELATIONSHIP_RELATED_FIELD")
    relationship_type_field: str = Field(default="npe4__Type__c", alias="RELATIONSHIP_TYPE_FIELD")
    mentor_relationship_type: str = Field(default="Mentor", alias="MENTOR_RELATIONSHIP_TYPE")

    # =====================================================================
    # Session Configuration
    # =====================================================================
    session_cookie_name: str = Field(default="newbee_match_session", alias="SESSION_COOKIE_NAME")
    session_cookie_secure: bool = Field(default=False, alias="SESSION_COOKIE_SECURE")
    session_ttl_seconds: int = Field(default=8 * 60 * 60, alias="SESSION_TTL_SECONDS")
    app_redirect_url: str = Field(default="http://localhost:8080/index.html", alias="APP_REDIRECT_URL")

    # =====================================================================
    # CORS Configuration
    # =====================================================================
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(default=["*"], alias="CORS_ALLOW_METHODS")
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def salesforce(self) -> SalesforceConfig:
        """Get Salesforce configuration from environment variables."""
        return SalesforceConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def record_types(self) -> RecordTypeConfig:
        """Get record type and relationship schema configuration."""
        return RecordTypeConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def session(self) -> SessionConfig:
        """Get session and cookie configuration."""
        return SessionConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def cors(self) -> CORSConfig:
        """Get CORS configuration from environment variables."""
        return CORSConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()
