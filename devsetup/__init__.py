"""devsetup — interactive Linux development workstation provisioner."""

__version__ = "0.1.0"
