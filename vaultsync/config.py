# vaultsync/config.py
"""
Configuration management using Pydantic Settings.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"
    ALERT_WEBHOOK_URL: Optional[str] = None
    # Microsoft Graph / OneDrive configuration
    ONEDRIVE_BASE_URL: str = "https://graph.microsoft.com/v1.0/me"
    ONEDRIVE_ROOT_PREFIX: str = "/drive/root:/"
    VAULT_FILE_EXTENSION: str = ".kdbx"
    # OAuth app registration; the defaults are used when no client id/secret is configured
    ONEDRIVE_CLIENT_ID: Optional[str] = None
    ONEDRIVE_CLIENT_SECRET: Optional[str] = None
    ONEDRIVE_DEFAULT_CLIENT_ID: Optional[str] = None
    ONEDRIVE_DEFAULT_CLIENT_SECRET: Optional[str] = None
    ONEDRIVE_AUTHORIZE_URL: str = "https://login.microsoftonline.com/common/oauth2/v2.0/authorize"
    ONEDRIVE_TOKEN_URL: str = "https://login.microsoftonline.com/common/oauth2/v2.0/token"
    ONEDRIVE_SCOPE: str = "files.readwrite offline_access"
    ONEDRIVE_LOGOUT_URL: str = "https://login.microsoftonline.com/common/oauth2/v2.0/logout?post_logout_redirect_uri={url}"
    OAUTH_REDIRECT_URL: str = "http://localhost:8085/oauth-result"
    MS_ACCESS_TOKEN: Optional[str] = None  # Test token only; do NOT hardcode in code

settings = Settings()
