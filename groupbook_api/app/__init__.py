"""
Application package initializer.

The API is organised by domain: accounts (registration, login,
profile and branding), events and guests.  Each domain has schemas in
``schemas``, business rules in ``services`` and a router in
``api/v1/endpoints``.  Shared infrastructure (configuration, logging,
errors, security and the database pool) lives in ``core``.

The ASGI application is built by ``main.create_app``.
"""
