"""Company registry adapters."""

from ...config import RegistryBackend, RegistryConfig
from ...ports.registry import CompanyRegistryPort
from .http import HttpCompanyRegistry
from .yaml_file import YamlCompanyRegistry

__all__ = ["HttpCompanyRegistry", "YamlCompanyRegistry", "create_registry"]


def create_registry(config: RegistryConfig) -> CompanyRegistryPort:
    """Create company registry adapter based on configuration."""
    if config.backend == RegistryBackend.HTTP:
        return HttpCompanyRegistry(base_url=config.base_url, timeout=config.timeout)
    elif config.backend == RegistryBackend.YAML:
        return YamlCompanyRegistry(config.path)
    else:
        raise ValueError(f"Unknown registry backend: {config.backend}")
