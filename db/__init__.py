"""
db/ - Database Layer
====================
Handles the Firestore client lifecycle: credential loading, client creation and shutdown.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
