from dataclasses import dataclass
from typing import dataclass_transform


@dataclass_transform(kw_only_default=True)
class _ServiceMeta(type):
    """Turns every Service subclass into a keyword-only dataclass.

    Collaborators are declared as annotated fields and handed in by the
    DI providers, e.g. ``ListingService(store=store, relay=relay)``.
    """

    def __new__(mcs, name: str, bases: tuple, namespace: dict):
        cls = super().__new__(mcs, name, bases, namespace)
        if not any(isinstance(base, mcs) for base in bases):
            return cls
        return dataclass(cls, kw_only=True)


class Service(metaclass=_ServiceMeta):
    """Base class for domain services."""
