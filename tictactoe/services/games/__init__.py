"""Game domain services: rules, storage, session transitions and push fan-out.

This package contains the game logic imported by HTTP routes and socket
handlers, keeping transport concerns separated from the state machine.
"""
