import os

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 3030))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", None)

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# A room is a rendezvous for exactly two peers
ROOM_CAPACITY = 2

# Addresses never reported by address discovery, e.g. a NAT-internal interface
IPADDR_EXCLUDE = [a.strip() for a in os.getenv("IPADDR_EXCLUDE", "").split(",") if a.strip()]
