import os
import tempfile

# Configure the app before schoolhub is imported anywhere
os.environ.setdefault("ENV_FILE", os.path.join(tempfile.gettempdir(), "schoolhub-tests-missing.env"))
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="schoolhub-uploads-"))
os.environ.setdefault("JWT_ACCESS_SECRET", "test-access-secret")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret")
