"""Default endpoints, environment variable names, and model patterns."""

DEFAULT_TIMEOUT = 60.0
DEFAULT_MAX_RETRIES = 2

# Vercel AI Gateway
AI_GATEWAY_BASE_URL = "https://ai-gateway.vercel.sh/v1"
AI_GATEWAY_ENV_URL = "AI_GATEWAY_URL"
AI_GATEWAY_ENV_API_KEY = "AI_GATEWAY_API_KEY"
AI_GATEWAY_MODEL_PATTERNS = (r".+/.+",)

# OpenRouter
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
OPENROUTER_ENV_API_KEY = "OPENROUTER_API_KEY"
OPENROUTER_ENV_SITE_URL = "OPENROUTER_SITE_URL"
OPENROUTER_ENV_APP_NAME = "OPENROUTER_APP_NAME"
OPENROUTER_MODEL_PATTERNS = (r".+/.+",)

# OpenAI
OPENAI_BASE_URL = "https://api.openai.com/v1"
OPENAI_ENV_BASE_URL = "OPENAI_BASE_URL"
OPENAI_ENV_API_KEY = "OPENAI_API_KEY"
OPENAI_ENV_ORGANIZATION = "OPENAI_ORGANIZATION"
OPENAI_ENV_PROJECT = "OPENAI_PROJECT"
OPENAI_MODEL_PATTERNS = (r"^gpt-", r"^o[0-9]", r"^chatgpt-")

# xAI
XAI_BASE_URL = "https://api.x.ai/v1"
XAI_ENV_API_KEY = "XAI_API_KEY"
XAI_MODEL_PATTERNS = (r"^grok-",)

# Anthropic
ANTHROPIC_BASE_URL = "https://api.anthropic.com/v1"
ANTHROPIC_ENV_API_KEY = "ANTHROPIC_API_KEY"
ANTHROPIC_ENV_BASE_URL = "ANTHROPIC_BASE_URL"
ANTHROPIC_VERSION = "2023-06-01"
ANTHROPIC_MODEL_PATTERNS = (r"^claude-",)
DEFAULT_ANTHROPIC_MAX_TOKENS = 4096
