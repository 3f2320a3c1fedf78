"""
NauriCare Patient Services

FastAPI backend for a reproductive-health patient app: appointment booking
with calendar invites and email confirmations, symptom self-assessment,
partner pharmacy lookup, care plans and the learning centre.
"""

__version__ = "1.0.0"
