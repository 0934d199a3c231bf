"""REST API for famfin."""

from famfin.api.app import create_application

__all__ = ["create_application"]
