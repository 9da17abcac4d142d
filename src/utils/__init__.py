"""
Utility modules for the deposit service
"""
from .config_loader import ConfigError, PesapalConfig, load_pesapal_config

__all__ = [
    'ConfigError',
    'PesapalConfig',
    'load_pesapal_config',
]
