from config.loader import get_config_loader

# Get the config loader instance
config = get_config_loader()

# Server configuration
PORT = config.get("PORT", 3000)
LOG_LEVEL = config.get("LOG_LEVEL", "info")
BIND_ADDRESS = config.get("BIND_ADDRESS", "0.0.0.0")

SERVER_NAME = "github-clickup-gateway"
SERVER_VERSION = "2.0.0"

# Public URL of this gateway, used to build the OAuth callback URLs
PUBLIC_BASE_URL = config.get("PUBLIC_BASE_URL", "http://localhost:3000").rstrip("/")
# Front end that receives ?github_auth_code= / ?clickup_auth_code= and calls /api/claim-session
FRONTEND_URL = config.get("FRONTEND_URL", "http://localhost:5173").rstrip("/")

# Timeout configuration for every outbound provider call
# Connection timeout: Time to establish TCP connection
CONNECT_TIMEOUT = config.get("CONNECT_TIMEOUT", 10.0)
# Request timeout: Total timeout for a single REST call
REQUEST_TIMEOUT = config.get("REQUEST_TIMEOUT", 30.0)

# Credential / session lifecycle
PENDING_TTL_SECONDS = config.get("PENDING_TTL_SECONDS", 600.0)
SESSION_IDLE_TIMEOUT_SECONDS = config.get("SESSION_IDLE_TIMEOUT_SECONDS", 3600.0)
SWEEP_INTERVAL_SECONDS = config.get("SWEEP_INTERVAL_SECONDS", 60.0)

# GitHub OAuth configuration
# "redirect" uses /github/login + /github/callback, "device" uses the github_login tools
GITHUB_AUTH_FLOW = config.get("GITHUB_AUTH_FLOW", "redirect").lower()
GITHUB_CLIENT_ID = config.get("GITHUB_CLIENT_ID", "")
GITHUB_CLIENT_SECRET = config.get("GITHUB_CLIENT_SECRET", "")
GITHUB_AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"
GITHUB_DEVICE_CODE_URL = "https://github.com/login/device/code"
GITHUB_API_BASE = "https://api.github.com"
GITHUB_SCOPES = "repo,user:email"

# ClickUp OAuth configuration (ClickUp only supports the redirect flow)
CLICKUP_CLIENT_ID = config.get("CLICKUP_CLIENT_ID", "")
CLICKUP_CLIENT_SECRET = config.get("CLICKUP_CLIENT_SECRET", "")
CLICKUP_AUTHORIZE_URL = "https://app.clickup.com/api"
CLICKUP_API_BASE = "https://api.clickup.com/api/v2"
CLICKUP_TOKEN_URL = f"{CLICKUP_API_BASE}/oauth/token"

GITHUB_CALLBACK_URL = f"{PUBLIC_BASE_URL}/github/callback"
CLICKUP_CALLBACK_URL = f"{PUBLIC_BASE_URL}/clickup/callback"
