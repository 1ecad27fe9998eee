"""
Progress & Certification Engine Configuration
Storage, retry and plagiarism settings
"""

import os

# MongoDB
MONGO_URL = os.getenv("MONGO_URL", "mongodb://localhost:27017")
MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "lumetrics_db")
MONGO_TIMEOUT_MS = int(os.getenv("MONGO_TIMEOUT_MS", "5000"))

# Every engine call made from a request handler is bounded by this
ENGINE_TIMEOUT_SECONDS = float(os.getenv("ENGINE_TIMEOUT_SECONDS", "10"))

# Insert races and verification code collisions
CERTIFICATE_MAX_ISSUE_ATTEMPTS = int(os.getenv("CERTIFICATE_MAX_ISSUE_ATTEMPTS", "5"))

# Plagiarism noise floor (percent) and evidence run length (words)
PLAGIARISM_MIN_SIMILARITY = int(os.getenv("PLAGIARISM_MIN_SIMILARITY", "20"))
PLAGIARISM_MIN_SNIPPET_WORDS = int(os.getenv("PLAGIARISM_MIN_SNIPPET_WORDS", "5"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Certificate policy defaults (used when a course has none stored)
DEFAULT_MIN_PERCENTAGE = 70
DEFAULT_REQUIRE_ALL_CHAPTERS = True
DEFAULT_REQUIRE_ALL_QUIZZES = True
DEFAULT_REQUIRE_ALL_ASSIGNMENTS = True
