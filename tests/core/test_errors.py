"""Tests for courier.core.errors - typed error hierarchy."""

import pytest

from courier.core.errors import (
    ArtifactError,
    CleanupError,
    ConfigError,
    CourierError,
    PermanentError,
    TransientError,
)


class TestCourierError:

    def test_subclass_is_base_instance(self):
        err = TransientError("test")
        assert isinstance(err, CourierError)

    def test_abstract_properties_overridden(self):
        assert TransientError("t").is_retryable is True
        assert PermanentError("p").is_retryable is False

    def test_subclasses_are_exceptions(self):
        for cls in (TransientError, PermanentError):
            assert issubclass(cls, CourierError)
            assert issubclass(cls, Exception)

    def test_str_is_message(self):
        assert str(TransientError("temp failure")) == "temp failure"


class TestTransientError:

    def test_is_retryable(self):
        assert TransientError("temp failure").is_retryable is True

    def test_default_code(self):
        assert TransientError("temp failure").code == "TRANSIENT"

    def test_custom_code(self):
        assert TransientError("temp failure", code="CUSTOM_T").code == "CUSTOM_T"


class TestPermanentError:

    def test_not_retryable(self):
        assert PermanentError("fatal").is_retryable is False

    def test_default_code(self):
        assert PermanentError("fatal").code == "PERMANENT"


class TestConfigError:

    def test_permanent(self):
        err = ConfigError("max_length must be positive", field="max_length")
        assert isinstance(err, PermanentError)
        assert err.is_retryable is False
        assert err.code == "CONFIG"
        assert err.field == "max_length"

    def test_field_optional(self):
        assert ConfigError("bad").field is None


class TestArtifactError:

    def test_transient(self):
        err = ArtifactError("disk full", language="python")
        assert isinstance(err, TransientError)
        assert err.code == "ARTIFACT"
        assert err.language == "python"


class TestCleanupError:

    def test_path_required(self):
        with pytest.raises(TypeError):
            CleanupError("busy")

    def test_to_dict_includes_path(self):
        err = CleanupError("busy", path="/tmp/code_1.py")
        data = err.to_dict()
        assert data["code"] == "CLEANUP"
        assert data["message"] == "busy"
        assert data["is_retryable"] is True
        assert data["path"] == "/tmp/code_1.py"
        assert isinstance(data["timestamp"], float)
