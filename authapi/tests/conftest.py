import os

# Cheap argon2 parameters and in-memory storage for the API tests.
os.environ.setdefault("USE_IN_MEMORY_BACKENDS", "true")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "8")
os.environ.setdefault("ARGON2_PARALLELISM", "1")
