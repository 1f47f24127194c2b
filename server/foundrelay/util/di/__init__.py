from foundrelay.util.di.base import Provider
from foundrelay.util.di.scope import Scope

__all__ = ["Provider", "Scope"]
