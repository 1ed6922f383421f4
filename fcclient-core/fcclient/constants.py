import fcclient

# fc-client version
VERSION = fcclient.__version__

# default FC API version, embedded in every request path
DEFAULT_API_VERSION = "2016-08-15"

# default transport timeout (in seconds)
DEFAULT_HTTP_TIMEOUT = 60

# default encoding used to convert strings to byte arrays
DEFAULT_ENCODING = "utf-8"

# content type of all API requests and responses (except invocations and the HTTP proxy)
APPLICATION_JSON = "application/json"
APPLICATION_OCTET_STREAM = "application/octet-stream"

# HTTP headers produced or consumed by the FC API
HEADER_REQUEST_ID = "X-Fc-Request-Id"
HEADER_ETAG = "ETag"
HEADER_IF_MATCH = "If-Match"
HEADER_AUTHORIZATION = "Authorization"
HEADER_DATE = "Date"
HEADER_CONTENT_MD5 = "Content-MD5"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_USER_AGENT = "User-Agent"
HEADER_SECURITY_TOKEN = "x-fc-security-token"
HEADER_INVOCATION_TYPE = "x-fc-invocation-type"
HEADER_LOG_TYPE = "x-fc-log-type"
HEADER_LOG_RESULT = "x-fc-log-result"
HEADER_ERROR_TYPE = "x-fc-error-type"
HEADER_ENABLE_EVENTBRIDGE_TRIGGER = "x-fc-enable-eventbridge-trigger"

# prefix of all FC specific headers, which are part of the canonical string to sign
FC_HEADER_PREFIX = "x-fc-"

# query parameter prefix used to filter listed resources by tag
TAG_QUERY_PREFIX = "tag_"

# trigger types (discriminants of the trigger configuration)
TRIGGER_TYPE_OSS = "oss"
TRIGGER_TYPE_LOG = "log"
TRIGGER_TYPE_HTTP = "http"
TRIGGER_TYPE_EVENTBRIDGE = "eventbridge"

# value of the header that opts into EventBridge trigger operations
EVENTBRIDGE_TRIGGER_ENABLED = "enable"

# strings which are interpreted as boolean values of environment variables
TRUE_STRINGS = ("1", "true", "True")
FALSE_STRINGS = ("0", "false", "False")
# strings with valid log levels for FC_LOG
LOG_LEVELS = ("trace", "debug", "info", "warn", "error", "warning")
# trace log level, configurable via $FC_LOG
FC_LOG_TRACE = "trace"
TRACE_LOG_LEVELS = [FC_LOG_TRACE]

# name of the user configuration folder, holding the dotenv profiles
CONFIG_FOLDER_NAME = ".fcclient"
