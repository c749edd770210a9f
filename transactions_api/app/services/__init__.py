"""
Service layer abstraction.

Each service encapsulates the logic behind a group of endpoints.
Services receive the record store and settings explicitly, so API
handlers stay thin and tests can build services around a temporary
database.
"""
