from .settings_identity_validator import SettingsIdentityValidator

__all__ = ["SettingsIdentityValidator"]
