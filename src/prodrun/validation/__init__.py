"""
Validation and error handling for the prodrun package.

This module provides the run pipeline's error taxonomy, input validation
and consistent error reporting across the application.
"""

from .exceptions import (
    CompanionFailure,
    ConfigurationError,
    ErrorSeverity,
    ExecutionEnvironmentError,
    LaunchError,
    ProcessExitError,
    ProdRunError,
    TeardownError,
    UnsupportedOperationError,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    handle_subprocess_error,
)

from .validators import (
    validate_enum_choice,
    validate_non_empty_string,
    validate_optional_bool,
    validate_positive_integer,
    validate_profile_name,
    validate_string_list,
)

__all__ = [
    # Error taxonomy
    "ProdRunError",
    "ConfigurationError",
    "ExecutionEnvironmentError",
    "UnsupportedOperationError",
    "LaunchError",
    "CompanionFailure",
    "TeardownError",
    "ProcessExitError",
    "ValidationError",
    # Handling helpers
    "ErrorSeverity",
    "handle_error",
    "handle_config_error",
    "handle_subprocess_error",
    "handle_cli_error",
    # Validators
    "validate_enum_choice",
    "validate_non_empty_string",
    "validate_optional_bool",
    "validate_positive_integer",
    "validate_profile_name",
    "validate_string_list",
]
