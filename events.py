# Inbound events (client -> server)
CREATE_OR_JOIN = "create-or-join"
MESSAGE = "message"
TURN_ON_VIDEO = "turn-on-video"
TURN_OFF_VIDEO = "turn-off-video"
BYE = "bye"
IPADDR = "ipaddr"

# Outbound events (server -> client)
LOG = "log"
CREATED = "created"
JOIN = "join"
JOINED = "joined"
READY = "ready"
FULL = "full"
PARTICIPANT_LEFT = "participant-left"

# Prefix of every advisory `log` event sent back to a client
LOG_PREFIX = "Message from server:"
