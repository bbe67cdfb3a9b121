"""
Pytest configuration and fixtures for pwapi tests
"""

import os
import sys

import pytest

# Make the root-level config module importable without installing
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from pwapi import create_app


@pytest.fixture
def app():
    """Flask application built from the testing config"""
    return create_app('config.TestingConfig')


@pytest.fixture
def client(app):
    """Flask test client"""
    return app.test_client()
