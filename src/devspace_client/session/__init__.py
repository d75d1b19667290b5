"""
Session subsystem.

Components:
- models.py: Session / SessionPhase
- manager.py: login, registration, logout, renewal, server-confirmed check
- renewal.py: periodic renewal timer on the event loop
"""
