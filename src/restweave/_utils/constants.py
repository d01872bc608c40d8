# Environment variables
ENV_BASE_URL = "RESTWEAVE_BASE_URL"

# Headers
HEADER_ACCEPT = "Accept"
HEADER_AUTHORIZATION = "Authorization"
HEADER_CONTENT_DISPOSITION = "Content-Disposition"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_USER_AGENT = "User-Agent"

# Content types
TEXT_PLAIN = "text/plain"
APPLICATION_OCTET_STREAM = "application/octet-stream"
MULTIPART_FORM_DATA = "multipart/form-data"

LOGGER_NAME = "restweave"
USER_AGENT = "restweave"
