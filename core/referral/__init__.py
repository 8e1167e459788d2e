"""Referral persistence and reviewer decisions."""
from core.referral.writer import ReferralWriter
from core.referral.state_machine import ReferralStateMachine, ReferralDecision, availability_after

__all__ = ['ReferralWriter', 'ReferralStateMachine', 'ReferralDecision', 'availability_after']
