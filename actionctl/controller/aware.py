"""
Application-aware capability.

Controllers implementing ``set_application`` receive the application after
the action resolver instantiates them, instead of through their constructor.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from actionctl.app import Application


@runtime_checkable
class ApplicationAware(Protocol):
    """Capability protocol: accepts the application reference."""

    def set_application(self, app: "Application") -> None:
        ...
