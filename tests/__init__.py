"""
Test suite for the NauriCare patient services API.

Contains unit tests for the scoring, search and invite logic and
integration tests for the HTTP endpoints.
"""
import os

# Set environment for testing
os.environ["TESTING"] = "1"
