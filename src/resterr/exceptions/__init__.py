from .errors import (
    ResterrError,
    RegistryConstructionError,
    DescriptorValidationError,
    DescriptorSerializationError,
    SinkError,
)

__all__ = [
    "ResterrError",
    "RegistryConstructionError",
    "DescriptorValidationError",
    "DescriptorSerializationError",
    "SinkError",
]
