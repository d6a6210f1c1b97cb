"""Static server constants shared by the application factory and routers."""

PROJECT_NAME = "Newbee Match Backend"
API_VERSION = "1.0.0"
API_DOCS_PREFIX = "/api/v1"
LIVENESS_MESSAGE = "You have reached the Match backend!"
