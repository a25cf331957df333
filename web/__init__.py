"""
web/ - Presentation Layer (HTTP)
=================================
FastAPI app serving the registration form. Routes parse the request,
delegate to IntakeService, and map pipeline errors to HTTP responses.
"""
