"""Base provider for foundrelay DI components."""

from dishka import Provider as DishkaProvider

from foundrelay.util.di.scope import Scope


class Provider(DishkaProvider):
    """Base for all foundrelay providers. Defaults to application scope."""

    scope = Scope.APP
