"""Tests for error classification."""

from uplift.domain.exceptions import (
    BuildError,
    ConfigurationError,
    DependencyResolutionError,
    EnvironmentCheckError,
    ErrorClassification,
    TestFailureError,
    UnknownHandlerError,
    classify_error,
    is_recoverable,
)


class TestClassifyError:
    """Every observed error maps to one classification and a recoverable flag."""

    def test_unknown_errors_default_to_unclassified_recoverable(self) -> None:
        assert classify_error(ValueError("boom")) == (
            ErrorClassification.UNCLASSIFIED_RUNTIME_CHANGE,
            True,
        )

    def test_environment_is_fatal(self) -> None:
        error = EnvironmentCheckError("node missing")

        assert classify_error(error) == (ErrorClassification.ENVIRONMENT, False)

    def test_build_and_test_failures_are_recoverable(self) -> None:
        assert classify_error(BuildError("tsc failed")) == (
            ErrorClassification.COMPILER_INCOMPATIBILITY,
            True,
        )
        assert classify_error(TestFailureError("2 failed")) == (
            ErrorClassification.TEST_FAILURE,
            True,
        )

    def test_dependency_resolution_recoverability_is_configurable(self) -> None:
        assert is_recoverable(DependencyResolutionError("conflict"))
        assert not is_recoverable(
            DependencyResolutionError("conflict", recoverable=False)
        )

    def test_unknown_handler_is_configuration_error(self) -> None:
        error = UnknownHandlerError("MagicAgent", ["BuildAgent"])

        assert isinstance(error, ConfigurationError)
        assert classify_error(error) == (
            ErrorClassification.CONFIGURATION_ERROR,
            False,
        )
        assert "BuildAgent" in error.message

    def test_details_default_to_empty_dict(self) -> None:
        assert BuildError("x").details == {}
        assert EnvironmentCheckError("x", {"required": "^18"}).details == {
            "required": "^18"
        }
