import os

# Database Configuration
# Uses default credentials for local Docker Compose setup
DB_URL = os.getenv("DATABASE_URL", "postgres://user:password@db:5432/kiwari_pos")

# Application Metadata
PROJECT_NAME = "Kiwari POS Order Service"
VERSION = "1.0.0"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Order numbering (rendered as e.g. KWR-001)
ORDER_NUMBER_PREFIX = os.getenv("ORDER_NUMBER_PREFIX", "KWR")
ORDER_NUMBER_WIDTH = int(os.getenv("ORDER_NUMBER_WIDTH", 3)) # Zero-padding width of the sequence part

# Order list pagination
ORDER_LIST_DEFAULT_LIMIT = 20
ORDER_LIST_MAX_LIMIT = 100
