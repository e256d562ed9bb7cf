"""Compose and run Kubernetes scale-test scenarios as ordered workflows."""

__version__ = "0.1.0"