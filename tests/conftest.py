"""
Shared pytest fixtures and utilities for testing the apatite models.

This module provides:
- Fixtures for overriding Settings through the environment
- Utilities for testing Pydantic validation of Vector and Matrix
- Common helpers for serialization round trips
"""

import logging

import pytest
from typing import Any, Type, TypeVar
from pydantic import BaseModel, ValidationError

from apatite.core.config import get_settings
from apatite.core.logging import LIBRARY_LOGGER


T = TypeVar('T', bound=BaseModel)


@pytest.fixture
def override_settings(monkeypatch):
    """Set APATITE_* environment variables and reload the cached settings."""
    def _override(**values: Any):
        for key, value in values.items():
            monkeypatch.setenv(f"APATITE_{key}", str(value))
        get_settings.cache_clear()
        return get_settings()

    yield _override
    get_settings.cache_clear()


@pytest.fixture
def library_logger():
    """Library logger with propagation enabled so caplog sees its records."""
    logger = logging.getLogger(LIBRARY_LOGGER)
    saved = (logger.level, logger.propagate, list(logger.handlers))
    logger.setLevel(logging.DEBUG)
    logger.propagate = True
    yield logger
    logger.setLevel(saved[0])
    logger.propagate = saved[1]
    logger.handlers = saved[2]


@pytest.fixture
def assert_validation_error():
    """Helper to assert that validating raw data raises ValidationError."""
    def _assert_validation(
        model_class: Type[BaseModel],
        data: Any,
        expected_message: str | None = None,
    ) -> ValidationError:
        """
        Assert that validating ``data`` into a model raises ValidationError.

        Args:
            model_class: The Pydantic model class
            data: Invalid data to validate
            expected_message: Text expected in one of the error messages (optional)

        Returns:
            The ValidationError that was raised
        """
        with pytest.raises(ValidationError) as exc_info:
            model_class.model_validate(data)

        error = exc_info.value
        if expected_message:
            assert any(
                expected_message in e['msg'] for e in error.errors()
            ), f"Expected error message containing '{expected_message}' not found"

        return error

    return _assert_validation


@pytest.fixture
def assert_serializable():
    """Helper to assert that a model survives a JSON round trip."""
    def _assert_serialization(model: BaseModel, model_class: Type[T]) -> T:
        """
        Assert that a model can be serialized to JSON and reconstructed.

        Args:
            model: The model instance to test
            model_class: The model class for reconstruction

        Returns:
            The reconstructed model
        """
        payload = model.model_dump_json()
        reconstructed = model_class.model_validate_json(payload)

        assert reconstructed == model
        assert reconstructed.model_dump_json() == payload

        return reconstructed

    return _assert_serialization
