from __future__ import annotations


class DescriptorRegistryError(Exception):
    pass


class DuplicateDescriptorError(DescriptorRegistryError):
    pass


class DescriptorNotFoundError(DescriptorRegistryError):
    pass
