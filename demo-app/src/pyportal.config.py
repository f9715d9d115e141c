"""pyportal configuration for demo app."""
from pathlib import Path

# Templates directory
TEMPLATES_DIR = Path(__file__).parent / 'templates'
LAYOUT = '_layout.html'

# Static files, referenced from templates as ~/static/...
STATIC_DIR = Path(__file__).parent / 'static'
STATIC_PATH = '/static'

# Development settings
DEBUG = True
HOST = '127.0.0.1'
PORT = 3000
