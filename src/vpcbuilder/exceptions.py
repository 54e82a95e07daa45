from typing import List, Optional


class VpcBuilderError(Exception):
    """Base exception for all application-specific errors."""

    pass


# --- 1. Errors related to loading, parsing and validating the configuration ---
class ConfigurationError(VpcBuilderError):
    """Raised for malformed or contradictory input, e.g. NAT gateway and NAT instance both requested."""

    pass


class ConfigFileMissingError(ConfigurationError):
    """Raised when the main configuration file cannot be found."""

    pass


class ConfigParsingError(ConfigurationError):
    """Raised when a YAML configuration file is syntactically incorrect."""

    pass


class ConfigValidationError(ConfigurationError):
    """Raised when the configuration fails structural validation (e.g., Pydantic)."""

    pass


# --- 2. Errors related to the logical validity of the resource graph ---
class DefinitionError(VpcBuilderError):
    """Base class for errors in resource definitions and their references."""

    pass


class MissingResourceError(DefinitionError):
    """Raised when a required input or external lookup returned nothing (no image, no key pair name)."""

    pass


class UnavailableServiceError(DefinitionError):
    """Raised when requested endpoint services are not offered in the region."""

    def __init__(self, message: str, services: Optional[List[str]] = None):
        super().__init__(message)
        self.services = list(services or [])


class InvalidRouteTargetError(DefinitionError):
    """Raised when a route is built without exactly one target."""

    pass


class DuplicateResourceError(DefinitionError):
    """Raised when two different resources claim the same logical name."""

    pass


class DanglingReferenceError(DefinitionError):
    """Raised when a resource references a name the graph does not contain."""

    pass


# --- 3. Errors raised by external data providers ---
class ProviderError(VpcBuilderError):
    """Raised when a zone, image or service-catalog lookup fails."""

    pass


# --- 4. Errors that occur while writing the generated template ---
class BuildError(VpcBuilderError):
    """Base class for errors that occur during the generation of output artifacts."""

    pass
