"""
meeting_links.py
----------------
Remote-meeting credentials handed out when a booking is confirmed.

Providers implement MeetingLinkProvider.create(booking_id) and return a
MeetingCredentials pair. Errors are raised as MeetingLinkError; the
BookingManager logs them and still confirms the booking.
"""

import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass

from django.conf import settings


@dataclass(frozen=True)
class MeetingCredentials:
    link: str
    access_code: str


class MeetingLinkError(Exception):
    """The provider could not produce meeting credentials."""


class MeetingLinkProvider(ABC):
    @abstractmethod
    def create(self, booking_id) -> MeetingCredentials:
        """Return a fresh link/access-code pair for `booking_id`."""


class JitsiMeetingProvider(MeetingLinkProvider):
    """
    Jitsi-style rooms: no API call, just an unguessable room name on the
    configured host plus a 6-character access code.
    """

    def __init__(self, base_url=None):
        self.base_url = (base_url or getattr(settings, "MEETING_BASE_URL", "https://meet.jit.si")).rstrip("/")

    def create(self, booking_id) -> MeetingCredentials:
        room = f"appointment-{booking_id}-{secrets.token_hex(4)}"
        return MeetingCredentials(
            link=f"{self.base_url}/{room}",
            access_code=secrets.token_hex(3).upper(),
        )


def get_provider(name="jitsi", **kwargs) -> MeetingLinkProvider:
    if name == "jitsi":
        return JitsiMeetingProvider(**kwargs)
    raise ValueError(f"Unsupported meeting provider: {name}")
