"""
Shared fixtures for config module tests.
"""
import pytest


@pytest.fixture
def valid_config():
    """Complete valid configuration."""
    return {
        'paths': {
            'data_dir': './data',
            'export_dir': './export',
        },
        'sources': {
            'mame': './data/MAME 0.262.dat',
            'catver': './data/catver.ini',
        },
        'filters': ['non_game_categories', 'clones'],
        'export': {
            'formats': ['csv', 'json', 'sqlite'],
            'batch_size': 5000,
        },
        'logging': {
            'level': 'INFO',
            'console': True,
            'file': None,
        },
    }
