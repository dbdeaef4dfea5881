"""
Tests for the canonical error taxonomy.
"""

from __future__ import annotations

import pytest

from iamkit.errors import (
    ConfigurationError,
    ErrorKind,
    IamError,
    InvalidArgumentError,
    ResourceNotFoundError,
    UnknownError,
    error_for_kind,
    is_canonical,
)


class TestErrorKinds:
    """Tests for error kinds and their exception classes."""

    @pytest.mark.parametrize("kind", list(ErrorKind))
    def test_every_kind_has_a_class(self, kind):
        """Test each kind resolves to a class carrying that kind."""
        error_class = error_for_kind(kind)

        assert issubclass(error_class, IamError)
        assert error_class is not IamError
        assert error_class.kind is kind

    def test_configuration_error_kind(self):
        """Test ConfigurationError reports invalid argument."""
        assert ConfigurationError.kind is ErrorKind.INVALID_ARGUMENT

    def test_message_is_preserved(self):
        """Test the message is available through str()."""
        assert str(ResourceNotFoundError("Role x not found")) == "Role x not found"


class TestIsCanonical:
    """Tests for is_canonical."""

    def test_subclass_is_canonical(self):
        """Test IamError subclasses are canonical."""
        assert is_canonical(InvalidArgumentError("x")) is True
        assert is_canonical(UnknownError("x")) is True

    def test_base_is_not_canonical(self):
        """Test the bare base class is not canonical."""
        assert is_canonical(IamError("x")) is False

    def test_foreign_exception_is_not_canonical(self):
        """Test exceptions from outside the package are not canonical."""
        assert is_canonical(RuntimeError("x")) is False
