"""Use cases for driver invitations."""

from .driver_invitations import INVITATION_LIFETIME, get_driver_invitations, invite_driver

__all__ = ["INVITATION_LIFETIME", "get_driver_invitations", "invite_driver"]
