"""Exception hierarchy for shader generation errors."""


class ShaderGenError(Exception):
    """Base exception for all shader generation errors."""
    pass


class ConfigurationError(ShaderGenError):
    """Bad invocation, incompatible options or missing input directory."""
    pass


class RegistryError(ShaderGenError):
    """Error while building the variant catalog."""
    pass


class StorageError(ShaderGenError):
    """Error preparing output locations on the filesystem."""
    pass
