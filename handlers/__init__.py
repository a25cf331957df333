"""
handlers/ - Presentation Layer (bot)
=====================================
Telegram bot handlers. Each handler receives updates from Telegram,
delegates to the repository or a service, and sends the response back to the user.
No business logic lives here.
"""
