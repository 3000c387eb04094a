"""Configuration package for runtime settings and startup validation."""

from .settings import (
	AppSettings,
	SettingsLoadError,
	config_load_settings,
	config_require_etherscan_api_key,
	config_require_remote_publish_settings,
)

__all__ = [
	"AppSettings",
	"SettingsLoadError",
	"config_load_settings",
	"config_require_etherscan_api_key",
	"config_require_remote_publish_settings",
]
