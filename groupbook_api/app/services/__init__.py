"""
Service layer.

Each service encapsulates the rules for one domain: input validation,
ownership checks and the SQL that reads or writes its tables.  Route
handlers stay thin and only translate HTTP to service calls.
"""
