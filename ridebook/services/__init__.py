# ridebook/services/__init__.py
"""
Service packages: auth_service, driver_service, ride_service.
Each has repository, service, dependencies and routes modules.
"""
