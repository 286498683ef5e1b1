import os

# Unit tests run on in-memory SQLite; make sure a developer's shell settings
# do not point the module-level engine at a real database.
for _var in ("REGISTRY_TEST_DB", "TEST_DATABASE_URL"):
    os.environ.pop(_var, None)
