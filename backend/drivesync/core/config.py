import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables (only in development)
# In containers, environment variables are set directly
if os.getenv("ENVIRONMENT") != "production":
    load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent.parent

# File drop synchronization
FILE_DROP_ENABLED = os.getenv("FILE_DROP_ENABLED", "true").lower() == "true"
FILE_DROP_SYNC_INTERVAL_MS = int(os.getenv("FILE_DROP_SYNC_INTERVAL_MS", "10000"))
FILE_DROP_DIRECTORY = Path(os.getenv("FILE_DROP_DIRECTORY", "/upload"))
FAILED_DROP_DIRECTORY = Path(os.getenv("FAILED_DROP_DIRECTORY", str(FILE_DROP_DIRECTORY / "failed")))

# Remote storage locations per document family
ATTACHMENTS_DIR = os.getenv("ATTACHMENTS_DIR", "/crm-development/attachments")
REPORTS_DIR = os.getenv("REPORTS_DIR", "/crm-development/bezoekrapporten")
OFFERS_DIR = os.getenv("OFFERS_DIR", "/crm-development/offertes")
ORDERS_DIR = os.getenv("ORDERS_DIR", "/crm-development/bestelbonnen")
DELIVERY_NOTES_DIR = os.getenv("DELIVERY_NOTES_DIR", "/crm-development/leverbonnen")
INVOICES_DIR = os.getenv("INVOICES_DIR", "/crm-development/facturen")
PRODUCTION_TICKETS_DIR = os.getenv("PRODUCTION_TICKETS_DIR", "/crm-development/productiebonnen")
PRODUCTION_TICKET_TEMPLATES_DIR = os.getenv(
    "PRODUCTION_TICKET_TEMPLATES_DIR", "/crm-development/productiebonnen/templates"
)
ACCOUNTANCY_EXPORT_DIR = os.getenv("ACCOUNTANCY_EXPORT_DIR", "/crm-development/winbooks")

# Remote storage backend configuration
STORAGE_TYPE = os.getenv("STORAGE_TYPE", "local")  # Options: 'local', 's3', 'graph'
REMOTE_CONFLICT_BEHAVIOR = os.getenv("REMOTE_CONFLICT_BEHAVIOR", "rename")  # 'rename', 'replace', 'fail'

# Local storage configuration
LOCAL_STORAGE_DIR = os.getenv("LOCAL_STORAGE_DIR")  # Path to local storage directory

# S3 storage configuration
S3_BUCKET_NAME = os.getenv("S3_BUCKET_NAME")
AWS_ACCESS_KEY_ID = os.getenv("AWS_ACCESS_KEY_ID")
AWS_SECRET_ACCESS_KEY = os.getenv("AWS_SECRET_ACCESS_KEY")
AWS_REGION = os.getenv("AWS_REGION", "us-east-1")
S3_ENDPOINT_URL = os.getenv("S3_ENDPOINT_URL")  # For S3-compatible services (MinIO, etc.)

# MS Graph (O365 drive) configuration
MS_DRIVE_ID = os.getenv("MS_DRIVE_ID")
GRAPH_API_URL = os.getenv("GRAPH_API_URL", "https://graph.microsoft.com/v1.0")
GRAPH_REQUEST_TIMEOUT = int(os.getenv("GRAPH_REQUEST_TIMEOUT", "60"))

# Metadata store configuration
DATABASE_TYPE = os.getenv("DATABASE_TYPE", "json")  # Options: 'json', 'memory'
JSON_DB_PATH = os.getenv("JSON_DB_PATH")  # Path to JSON database directory

# Rate Limiting
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
RATE_LIMIT_PER_MINUTE = int(os.getenv("RATE_LIMIT_PER_MINUTE", "100"))

# CORS
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
