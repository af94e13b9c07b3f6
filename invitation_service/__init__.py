# invitation_service/__init__.py
# Wedding invitation backend: invitations, RSVP, QR check-in, messages and statistics.

__version__ = "1.0.0"
