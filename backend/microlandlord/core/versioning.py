# Route prefixes. Routers are mounted under both: /api/v1 is canonical and
# /api stays for clients that predate versioned paths.

API_PREFIX = "/api"
API_V1_PREFIX = f"{API_PREFIX}/v1"
