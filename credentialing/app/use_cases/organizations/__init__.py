"""
Organization Use Cases

Organization invites and the invite fast path.
"""

from .create_invite_use_case import CreateInviteUseCase
from .dtos import InviteApplicant, InviteListResponse, InviteResponse, RedeemInviteResponse
from .list_invites_use_case import ListInvitesUseCase
from .redeem_invite_use_case import RedeemInviteUseCase

__all__ = [
    "CreateInviteUseCase",
    "ListInvitesUseCase",
    "RedeemInviteUseCase",
    "InviteApplicant",
    "InviteListResponse",
    "InviteResponse",
    "RedeemInviteResponse",
]
