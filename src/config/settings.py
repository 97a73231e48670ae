# src/config/settings.py
# Loads environment variables and defines the application configuration.

from dataclasses import dataclass, field
from typing import List, Optional
from dotenv import load_dotenv
import os
import logging
import sys

# Determine the project root directory dynamically
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
dotenv_path = os.path.join(PROJECT_ROOT, '.env')
load_dotenv(dotenv_path=dotenv_path)

def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ('1', 'true', 'yes', 'on')

@dataclass
class Config:
    """
    Application configuration loaded from environment variables.
    Provides type hints and default values.
    """
    # Flask Settings
    SECRET_KEY: str = field(default_factory=lambda: os.environ.get('SECRET_KEY', 'default_secret_key_change_me_in_env'))
    APP_HOST: str = field(default_factory=lambda: os.environ.get('APP_HOST', '0.0.0.0'))
    APP_PORT: int = field(default_factory=lambda: int(os.environ.get('APP_PORT', 5004)))
    APP_DEBUG: bool = field(default_factory=lambda: _env_bool('APP_DEBUG', 'True'))
    LOG_LEVEL: str = field(default_factory=lambda: os.environ.get('LOG_LEVEL', 'DEBUG').upper())

    # Odoo ERP connection (XML-RPC)
    ODOO_URL: str = field(default_factory=lambda: os.environ.get('ODOO_URL', ''))
    ODOO_DB: str = field(default_factory=lambda: os.environ.get('ODOO_DB', ''))
    ODOO_USERNAME: str = field(default_factory=lambda: os.environ.get('ODOO_USERNAME', ''))
    ODOO_PASSWORD: str = field(default_factory=lambda: os.environ.get('ODOO_PASSWORD', '')) # API key
    ODOO_TIMEOUT: int = field(default_factory=lambda: int(os.environ.get('ODOO_TIMEOUT', 30)))

    # Customer whose sales are reported (res.partner.ref)
    ODOO_CUSTOMER_REF: str = field(default_factory=lambda: os.environ.get('ODOO_CUSTOMER_REF', ''))

    # Invoice fetch window
    INVOICE_DATE_FROM: str = field(default_factory=lambda: os.environ.get('INVOICE_DATE_FROM', '2026-01-01'))
    INVOICE_FETCH_LIMIT: int = field(default_factory=lambda: int(os.environ.get('INVOICE_FETCH_LIMIT', 1000)))

    # Dashboard presentation
    FISCAL_YEAR_START_MONTH: int = field(default_factory=lambda: int(os.environ.get('FISCAL_YEAR_START_MONTH', 1)))
    ADDRESS_LABEL_WIDTH: int = field(default_factory=lambda: int(os.environ.get('ADDRESS_LABEL_WIDTH', 35)))
    REFUNDS_REDUCE_REVENUE: bool = field(default_factory=lambda: _env_bool('REFUNDS_REDUCE_REVENUE', 'False'))
    CURRENCY_SYMBOL: str = field(default_factory=lambda: os.environ.get('CURRENCY_SYMBOL', '£'))

    def __post_init__(self):
        # Validate log level
        valid_levels = list(logging._nameToLevel.keys())
        if self.LOG_LEVEL not in valid_levels:
            print(f"Warning: Invalid LOG_LEVEL '{self.LOG_LEVEL}'. Valid levels: {valid_levels}. Defaulting to DEBUG.", file=sys.stderr)
            self.LOG_LEVEL = 'DEBUG'

        if not 1 <= self.FISCAL_YEAR_START_MONTH <= 12:
            print(f"Warning: FISCAL_YEAR_START_MONTH ({self.FISCAL_YEAR_START_MONTH}) is invalid. Setting to 1 (January).", file=sys.stderr)
            self.FISCAL_YEAR_START_MONTH = 1

        if self.INVOICE_FETCH_LIMIT < 1:
            print(f"Warning: INVOICE_FETCH_LIMIT ({self.INVOICE_FETCH_LIMIT}) is invalid. Setting to default 1000.", file=sys.stderr)
            self.INVOICE_FETCH_LIMIT = 1000

        if self.ADDRESS_LABEL_WIDTH < 4:
            print(f"Warning: ADDRESS_LABEL_WIDTH ({self.ADDRESS_LABEL_WIDTH}) is too small. Setting to default 35.", file=sys.stderr)
            self.ADDRESS_LABEL_WIDTH = 35

    def missing_odoo_settings(self) -> List[str]:
        """Names of the required ERP connection settings that are not set."""
        required = {
            'ODOO_URL': self.ODOO_URL,
            'ODOO_DB': self.ODOO_DB,
            'ODOO_USERNAME': self.ODOO_USERNAME,
            'ODOO_PASSWORD': self.ODOO_PASSWORD,
        }
        return [name for name, value in required.items() if not value]

# Singleton instance, created by load_config
_config_instance: Optional[Config] = None

def load_config() -> Config:
    """Loads or returns the singleton Config instance."""
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
        # Log loaded config values (mask sensitive ones)
        print("--- Configuration Loaded ---")
        print(f"  APP_HOST: {_config_instance.APP_HOST}")
        print(f"  APP_PORT: {_config_instance.APP_PORT}")
        print(f"  APP_DEBUG: {_config_instance.APP_DEBUG}")
        print(f"  LOG_LEVEL: {_config_instance.LOG_LEVEL}")
        print(f"  ODOO_URL: {_config_instance.ODOO_URL or 'Not Set'}")
        print(f"  ODOO_DB: {_config_instance.ODOO_DB or 'Not Set'}")
        print(f"  ODOO_USERNAME: {_config_instance.ODOO_USERNAME or 'Not Set'}")
        print(f"  ODOO_PASSWORD: {'********' if _config_instance.ODOO_PASSWORD else 'Not Set'}")
        print(f"  ODOO_CUSTOMER_REF: {_config_instance.ODOO_CUSTOMER_REF or 'Not Set'}")
        print(f"  INVOICE_DATE_FROM: {_config_instance.INVOICE_DATE_FROM}")
        print(f"  FISCAL_YEAR_START_MONTH: {_config_instance.FISCAL_YEAR_START_MONTH}")
        print("--------------------------")
    return _config_instance

# Expose the singleton instance directly
config = load_config()
