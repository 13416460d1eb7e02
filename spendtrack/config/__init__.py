"""Configuration management."""
from .settings import *
from .bank_config_loader import BankConfig, BankConfigLoader, get_bank_config_loader
from .region_config import RegionConfig, RegionConfigLoader, get_region_config
from .category_config import CategoryConfig, get_category_config

__all__ = [
    'BankConfig',
    'BankConfigLoader',
    'get_bank_config_loader',
    'RegionConfig',
    'RegionConfigLoader',
    'get_region_config',
    'CategoryConfig',
    'get_category_config',
]
